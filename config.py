# config.py - configuration and setup

import os
import logging
from dataclasses import dataclass, field

from flask_sqlalchemy import SQLAlchemy
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def _int_env(name, default):
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid integer for {name}: {raw!r}") from None


def _float_env(name, default):
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid float for {name}: {raw!r}") from None


# ==== SERVER ====
PORT = _int_env("PORT", "5000")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///powerwash.db")  # replace with Postgres URL in production
ALLOWED_ORIGIN = os.getenv("ALLOWED_ORIGIN", "*")
ADMIN_USER = os.getenv("ADMIN_USER", "")
ADMIN_PASS = os.getenv("ADMIN_PASS", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ==== RATE LIMITER ====
RATE_LIMIT = os.getenv("RATE_LIMIT", "120 per minute")
CHAT_RATE_LIMIT = os.getenv("CHAT_RATE_LIMIT", "20 per minute")
RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

# ==== MODEL ====
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
CHAT_MAX_TOKENS = _int_env("CHAT_MAX_TOKENS", "512")
CHAT_TEMPERATURE = _float_env("CHAT_TEMPERATURE", "0.7")
HISTORY_LIMIT = _int_env("HISTORY_LIMIT", "20")
MAX_MESSAGE_CHARS = _int_env("MAX_MESSAGE_CHARS", "20000")
PERSONA_FILE = os.getenv("PERSONA_FILE") or None

# ==== NOTIFICATIONS ====
DISCORD_WEBHOOK = os.getenv("DISCORD_WEBHOOK", "")
NOTIFY_EMAIL = os.getenv("NOTIFY_EMAIL", "")
FROM_EMAIL = os.getenv("FROM_EMAIL", "")
MAILCHANNELS_URL = os.getenv("MAILCHANNELS_URL", "https://api.mailchannels.net/tx/v1/send")
NOTIFY_TIMEOUT = _float_env("NOTIFY_TIMEOUT", "10")

# ==== EXTENSIONS ====
# the rate limiter is built per app in app.create_app
db = SQLAlchemy()

# ==== BUSINESS ====
SERVICE_CATALOG = {
    "residential-house": "Residential - House Exterior",
    "residential-driveway": "Residential - Driveway",
    "residential-deck": "Residential - Deck/Patio",
    "residential-pool": "Residential - Pool Cage",
    "residential-full": "Residential - Full Property",
    "commercial-storefront": "Commercial - Storefront",
    "commercial-building": "Commercial - Building",
    "commercial-parking": "Commercial - Parking Lot",
    "other": "Other",
}


def format_service(service_key):
    return SERVICE_CATALOG.get(service_key, service_key)


@dataclass(frozen=True)
class BusinessProfile:
    """Business facts rendered into the assistant persona and notifications."""

    name: str = os.getenv("BUSINESS_NAME", "Jupiter Power Wash")
    phone: str = os.getenv("BUSINESS_PHONE", "561.532.7120")
    website: str = os.getenv("BUSINESS_WEBSITE", "jupiterpowerwash.com")
    service_area: str = os.getenv(
        "SERVICE_AREA", "Jupiter, Tequesta, Juno Beach, Palm Beach Gardens and nearby Palm Beach County"
    )
    hours: str = os.getenv("BUSINESS_HOURS", "Monday to Saturday, 8am to 6pm")
    pricing_note: str = os.getenv(
        "PRICING_NOTE",
        "Pricing depends on the size and condition of the surface; every job gets a free, no-obligation quote.",
    )
    services: dict = field(default_factory=lambda: dict(SERVICE_CATALOG))

    @property
    def footer(self):
        return f"{self.name} | {self.website}"


def validate_settings(settings):
    """Reject out-of-range values before the app starts serving."""
    temperature = settings["CHAT_TEMPERATURE"]
    if not 0.0 <= temperature <= 2.0:
        raise ValueError(f"CHAT_TEMPERATURE must be between 0.0 and 2.0, got {temperature}")
    for name in ("CHAT_MAX_TOKENS", "HISTORY_LIMIT", "MAX_MESSAGE_CHARS"):
        if settings[name] < 1:
            raise ValueError(f"{name} must be >= 1, got {settings[name]}")
    if settings["NOTIFY_TIMEOUT"] <= 0:
        raise ValueError(f"NOTIFY_TIMEOUT must be > 0, got {settings['NOTIFY_TIMEOUT']}")


def configure_logging(level=LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
