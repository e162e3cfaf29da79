import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    API_KEY = os.getenv("LEAD_DETECTOR_API_KEY", "test_key_123")
    DISCORD_WEBHOOK_URL = os.getenv("DISCORD_WEBHOOK_URL")
    DISCORD_USERNAME = os.getenv("DISCORD_USERNAME", "Chef Lead Bot")
    NOTIFICATION_TIMEOUT = float(os.getenv("NOTIFICATION_TIMEOUT", "10"))

    # JSON file overriding the built-in keyword configuration
    SCORING_CONFIG_PATH = os.getenv("SCORING_CONFIG_PATH")

    # Bounded memory for retried webhook deliveries
    MAX_PROCESSED_MESSAGES = int(os.getenv("MAX_PROCESSED_MESSAGES", "1000"))

    PORT = int(os.getenv("PORT", "3005"))
