# prompts.py - assistant persona and message assembly
import logging
from pathlib import Path

from extraction import BOOKING_START, BOOKING_END, BOOKING_FIELDS

logger = logging.getLogger(__name__)

FIELD_DESCRIPTIONS = {
    "name": "full name",
    "email": "email address",
    "phone": "phone number",
    "service": "service type (use one of the service keys below)",
    "date": "preferred date (YYYY-MM-DD)",
    "time": "preferred time (morning, afternoon or a specific time)",
    "address": "property address",
}


def build_system_prompt(profile):
    services = "\n".join(f"- {key}: {label}" for key, label in profile.services.items())
    fields = "\n".join(f"{i}. {FIELD_DESCRIPTIONS[f]}" for i, f in enumerate(BOOKING_FIELDS, 1))
    example = ", ".join(f'"{f}":"..."' for f in BOOKING_FIELDS)
    return (
        f"You are the friendly booking assistant for {profile.name}, a local pressure washing business "
        f"({profile.website}). Phone: {profile.phone}.\n"
        f"Service area: {profile.service_area}.\n"
        f"Hours: {profile.hours}.\n"
        f"Pricing: {profile.pricing_note}\n\n"
        f"Services we offer:\n{services}\n\n"
        "Answer questions about the business briefly and warmly. When a customer wants to book, "
        "collect every one of these details, one or two at a time, in whatever order feels natural:\n"
        f"{fields}\n\n"
        "Only when you have ALL of them and the customer has confirmed, reply with a short confirmation "
        "and include the booking data exactly once, on its own line, in this exact format:\n"
        f"{BOOKING_START} {{{example}}} {BOOKING_END}\n"
        "The JSON must be a single line with exactly those keys and string values. Never emit the markers "
        "before every detail is collected, and never mention the markers to the customer. "
        f"If you cannot help, suggest calling {profile.phone}."
    )


def load_system_prompt(profile, persona_file=None):
    """Return the persona preamble, preferring a configured persona file."""
    if persona_file:
        text = Path(persona_file).read_text(encoding="utf-8").strip()
        logger.info("Loaded assistant persona from %s", persona_file)
        return text
    return build_system_prompt(profile)


def assemble_messages(preamble, history, user_message):
    messages = [{"role": "system", "content": preamble}]
    messages.extend({"role": m["role"], "content": m["content"]} for m in history)
    messages.append({"role": "user", "content": user_message})
    return messages
