import logging
import re
from typing import Dict, List, Tuple

from keyword_config import SPAM_CATEGORY, ScoringConfig
from models import Classification, EvaluationResult, InboundMessage

logger = logging.getLogger(__name__)

# "From: +15551234567 - Hi, I need a chef..."
ENVELOPE_PATTERN = re.compile(r"From:\s+(\S+)\s+-\s+(.*)", re.IGNORECASE | re.DOTALL)

UNKNOWN_SENDER = "Unknown"
EMPTY_MESSAGE = "empty message"
INVALID_MESSAGE = "invalid or empty message"
BELOW_THRESHOLD = "confidence score below threshold"


def normalize_message(raw_text: str) -> Tuple[str, str]:
    """
    Split an SMS envelope into (sender, content).
    Text without an envelope is returned unchanged with an unknown sender.
    """
    match = ENVELOPE_PATTERN.search(raw_text)
    if match:
        return match.group(1), match.group(2).strip()
    return UNKNOWN_SENDER, raw_text


def match_categories(normalized_text: str, config: ScoringConfig) -> Dict[str, List[str]]:
    """
    Returns category name -> matched terms, for categories with at least one match.
    Plain substring containment, so "rate" also matches inside "rates".
    """
    matches: Dict[str, List[str]] = {}
    for category in config.categories:
        found = [term for term in category.terms if term.lower() in normalized_text]
        if found:
            matches[category.name] = found
    return matches


def classify(score: float, config: ScoringConfig) -> Classification:
    thresholds = config.thresholds
    if score >= thresholds.high:
        return Classification.HIGH
    if score >= thresholds.medium:
        return Classification.MEDIUM
    if score >= thresholds.low:
        return Classification.LOW
    return Classification.NONE


def compose_score(matches: Dict[str, List[str]], content: str, config: ScoringConfig) -> dict:
    """
    Combine category matches into the scoring fields of an EvaluationResult.
    """
    total = 0.0
    keywords: List[str] = []
    spam_terms = config.spam_terms
    categories: List[str] = []

    for category in config.categories:
        terms = matches.get(category.name)
        if not terms:
            continue
        match_factor = min(len(terms), config.match_cap) / config.match_cap
        total += category.weight * match_factor
        if category.name != SPAM_CATEGORY:
            keywords.extend(terms)
            categories.append(category.name)

    # Short filler messages only earn the length bonus alongside a strong category
    has_strong_match = any(name in matches for name in config.strong_categories)
    if len(content.split()) > config.short_message_words or has_strong_match:
        total += min(len(content), config.length_cap) / config.length_cap * config.length_bonus_weight

    for rule in config.bonus_rules:
        if all(name in matches for name in rule.required_categories):
            total += rule.bonus

    text_lower = content.lower()
    for phrase in config.intent_phrases:
        if phrase.lower() in text_lower:
            total += config.intent_bonus
            keywords.append(phrase)
            break

    score = round(max(0.0, min(1.0, total)), 4)
    should_forward = score >= config.forward_at

    return {
        "score": score,
        "matchedKeywords": tuple(term for term in keywords if term.lower() not in spam_terms),
        "matchedCategories": tuple(categories),
        "classification": classify(score, config),
        "shouldForward": should_forward,
        "filterReason": None if should_forward else BELOW_THRESHOLD,
    }


class LeadDetector:
    def __init__(self, config: ScoringConfig):
        self.config = config

    def evaluate(self, message: InboundMessage) -> EvaluationResult:
        """
        Score one inbound message. Never raises on bad message input.
        """
        raw_text = message.rawText
        if not isinstance(raw_text, str):
            logger.warning(f"Message {message.id} has no usable text ({type(raw_text).__name__})")
            return EvaluationResult(id=message.id, timestamp=message.timestamp, filterReason=INVALID_MESSAGE)

        sender, content = normalize_message(raw_text)
        if not content.strip():
            return EvaluationResult(
                id=message.id,
                timestamp=message.timestamp,
                sender=sender,
                content="",
                filterReason=EMPTY_MESSAGE,
            )

        matches = match_categories(content.lower(), self.config)
        fields = compose_score(matches, content, self.config)
        result = EvaluationResult(id=message.id, timestamp=message.timestamp, sender=sender, content=content, **fields)

        logger.info(
            f"[Analysis] {message.id} score={result.score:.2f} "
            f"classification={result.classification.value} forward={result.shouldForward} "
            f"keywords={', '.join(result.matchedKeywords) or 'none'}"
        )
        if SPAM_CATEGORY in matches:
            logger.info(f"[Analysis] {message.id} spam terms: {', '.join(matches[SPAM_CATEGORY])}")
        return result


def evaluate_message(message: InboundMessage, config: ScoringConfig) -> EvaluationResult:
    return LeadDetector(config).evaluate(message)
