import json
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

SPAM_CATEGORY = "spam"


class ConfigurationError(Exception):
    """Raised when a scoring configuration is structurally invalid."""


class KeywordCategory(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    terms: Tuple[str, ...]
    weight: float

    @field_validator("terms")
    @classmethod
    def check_terms(cls, terms: Tuple[str, ...]) -> Tuple[str, ...]:
        if not terms:
            raise ValueError("category must declare at least one term")
        if any(not term.strip() for term in terms):
            raise ValueError("category terms must be non-empty strings")
        return terms


class BonusRule(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    required_categories: Tuple[str, ...] = Field(min_length=1)
    bonus: float


class Thresholds(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    low: float = 0.2
    medium: float = 0.4
    high: float = 0.65

    @model_validator(mode="after")
    def check_ascending(self) -> "Thresholds":
        if not (0.0 <= self.low < self.medium < self.high <= 1.0):
            raise ValueError(
                f"thresholds must satisfy 0 <= low < medium < high <= 1 "
                f"(got low={self.low}, medium={self.medium}, high={self.high})"
            )
        return self


class ScoringConfig(BaseModel):
    """
    Read-only scoring configuration shared by every evaluation.

    Categories are kept in declaration order so matched terms come out in a
    reproducible order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    categories: Tuple[KeywordCategory, ...]
    bonus_rules: Tuple[BonusRule, ...] = ()
    thresholds: Thresholds = Thresholds()
    forward_threshold: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    # Diminishing returns: at most `match_cap` terms count per category
    match_cap: int = Field(default=3, ge=1)

    length_cap: int = Field(default=100, ge=1)
    length_bonus_weight: float = Field(default=0.1, ge=0.0)
    short_message_words: int = Field(default=5, ge=0)
    strong_categories: Tuple[str, ...] = ()

    intent_phrases: Tuple[str, ...] = ()
    intent_bonus: float = Field(default=0.0, ge=0.0)

    @model_validator(mode="after")
    def check_structure(self) -> "ScoringConfig":
        if not self.categories:
            raise ValueError("at least one keyword category is required")

        names = [category.name for category in self.categories]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate category names: {', '.join(duplicates)}")

        for category in self.categories:
            if category.name == SPAM_CATEGORY:
                if category.weight >= 0:
                    raise ValueError("spam category must carry a negative weight")
            elif category.weight < 0:
                raise ValueError(f"category '{category.name}' has a negative weight")

        known = set(names)
        for rule in self.bonus_rules:
            unknown = [name for name in rule.required_categories if name not in known]
            if unknown:
                raise ValueError(f"bonus rule references unknown categories: {', '.join(unknown)}")

        unknown_strong = [name for name in self.strong_categories if name not in known]
        if unknown_strong:
            raise ValueError(f"unknown strong categories: {', '.join(unknown_strong)}")

        if self.length_bonus_weight >= self.thresholds.medium:
            raise ValueError("length bonus weight must stay below the medium threshold")
        if self.length_bonus_weight >= self.forward_at:
            raise ValueError("length bonus weight must stay below the forward threshold")

        if any(not phrase.strip() for phrase in self.intent_phrases):
            raise ValueError("intent phrases must be non-empty strings")
        return self

    @property
    def forward_at(self) -> float:
        """Minimum score for a message to be treated as a lead."""
        if self.forward_threshold is None:
            return self.thresholds.medium
        return self.forward_threshold

    @property
    def spam_terms(self) -> frozenset:
        """Lowercased terms of the spam category, never reported as matched keywords."""
        return frozenset(
            term.lower()
            for category in self.categories if category.name == SPAM_CATEGORY
            for term in category.terms
        )


def build_scoring_config(data: Dict[str, Any]) -> ScoringConfig:
    """Validate a plain mapping into a ScoringConfig, raising ConfigurationError on any problem."""
    try:
        return ScoringConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid scoring configuration: {e}") from e


def load_scoring_config(path: Optional[str] = None) -> ScoringConfig:
    """Load the scoring configuration from a JSON file, or return the default one."""
    if not path:
        return DEFAULT_SCORING_CONFIG
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read scoring configuration {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Scoring configuration {path} must be a JSON object")
    return build_scoring_config(data)


DEFAULT_SCORING_CONFIG = build_scoring_config({
    "categories": [
        {
            "name": "service",
            "terms": ["chef", "cook", "cooking", "catering", "food service", "culinary",
                      "personal chef", "private chef"],
            "weight": 0.3,
        },
        {
            "name": "booking",
            "terms": ["book", "booking", "schedule", "reservation", "available",
                      "availability", "hire"],
            "weight": 0.25,
        },
        {
            "name": "inquiry",
            "terms": ["price", "pricing", "rate", "rates", "cost", "quote", "fee",
                      "charge", "how much"],
            "weight": 0.2,
        },
        {
            "name": "event",
            "terms": ["party", "event", "gathering", "dinner party", "reception",
                      "celebration", "wedding", "birthday", "anniversary"],
            "weight": 0.2,
        },
        {
            "name": "meal",
            "terms": ["dinner", "lunch", "breakfast", "brunch", "meal", "food", "menu",
                      "dish", "cuisine"],
            "weight": 0.15,
        },
        {
            "name": "guests",
            "terms": ["people", "guests", "persons", "adults", "kids", "children",
                      "family", "friends"],
            "weight": 0.15,
        },
        {
            "name": "date",
            "terms": ["tonight", "tomorrow", "weekend", "next week", "this week",
                      "saturday", "sunday", "friday"],
            "weight": 0.1,
        },
        {
            "name": "location",
            "terms": ["airbnb", "at home", "vacation", "rental", "house", "condo",
                      "cabin", "location"],
            "weight": 0.1,
        },
        {
            "name": "dietary",
            "terms": ["vegan", "vegetarian", "gluten-free", "dairy-free", "allergies",
                      "keto", "paleo", "pescatarian", "halal", "kosher"],
            "weight": 0.1,
        },
        {
            "name": SPAM_CATEGORY,
            "terms": ["unsubscribe", "spam", "offer", "discount", "promotion", "marketing",
                      "advertisement", "sale", "click here", "buy now", "limited time"],
            "weight": -0.5,
        },
    ],
    "bonus_rules": [
        {"required_categories": ["service", "booking"], "bonus": 0.2},
        {"required_categories": ["service", "inquiry"], "bonus": 0.2},
        {"required_categories": ["event", "booking"], "bonus": 0.15},
        {"required_categories": ["meal", "guests"], "bonus": 0.1},
    ],
    "thresholds": {"low": 0.2, "medium": 0.4, "high": 0.65},
    "intent_phrases": ["interested in hiring", "looking to book", "need a chef",
                       "want to hire", "chef services", "available for"],
    "intent_bonus": 0.2,
    "strong_categories": ["service"],
})
