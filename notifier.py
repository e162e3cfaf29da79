import requests
import logging
from typing import Optional
from config import Config
from models import Classification, EvaluationResult

# Discord embed colors
CONFIDENCE_COLORS = {
    Classification.HIGH: 5763719,     # green
    Classification.MEDIUM: 16776960,  # gold
    Classification.LOW: 15548997,     # red
}
DEFAULT_COLOR = 5793266

def build_lead_embed(result: EvaluationResult, lead_id: str) -> dict:
    keywords = ", ".join(result.matchedKeywords) or "None"
    categories = ", ".join(name.capitalize() for name in result.matchedCategories) or "None"

    return {
        "title": "🔔 New Chef Lead Detected",
        "description": f"From: {result.sender}\n\"{result.content}\"",
        "color": CONFIDENCE_COLORS.get(result.classification, DEFAULT_COLOR),
        "fields": [
            {"name": "Confidence", "value": f"{round(result.score * 100)}% ({result.classification.value})", "inline": True},
            {"name": "Lead ID", "value": lead_id, "inline": True},
            {"name": "Categories", "value": categories, "inline": False},
            {"name": "Keywords", "value": keywords, "inline": False},
        ],
        "footer": {"text": f"Received at {result.timestamp}"},
    }

def send_lead_notification(result: EvaluationResult,
                           lead_id: str,
                           webhook_url: Optional[str] = None) -> bool:
    """
    Posts a lead summary embed to the Discord webhook.
    Failures are logged and reported as False, never raised.
    """
    url = webhook_url or Config.DISCORD_WEBHOOK_URL
    if not url:
        logging.warning(f"DISCORD_WEBHOOK_URL not set, skipping notification for {lead_id}")
        return False

    payload = {
        "username": Config.DISCORD_USERNAME,
        "embeds": [build_lead_embed(result, lead_id)],
    }

    try:
        logging.info(f"Sending Discord notification for {lead_id}")
        response = requests.post(url, json=payload, timeout=Config.NOTIFICATION_TIMEOUT)

        # Discord answers 204 No Content unless ?wait=true
        if response.status_code in (200, 204):
            logging.info(f"Notification SUCCESS for {lead_id}")
            return True
        else:
            logging.error(f"Notification FAILED for {lead_id}: {response.status_code} {response.text}")
            return False
    except requests.RequestException as e:
        logging.error(f"Notification EXCEPTION for {lead_id}: {e}")
        return False
