# chat.py - conversational booking flow
import logging

from bookings import commit_extracted_booking
from extraction import extract_booking
from prompts import assemble_messages
from utils import get_recent_turns, save_turns

logger = logging.getLogger(__name__)


class ChatOrchestrator:
    """Runs one chat request: history, model call, turn log, extraction, booking.

    Turns are written in a single transaction before extraction runs, so a
    booking always has its assistant turn on record; that turn's id is the
    idempotency key for the booking.
    """

    def __init__(self, chat_model, preamble, notifier=None, fallback_phone="",
                 history_limit=20, max_tokens=512, temperature=0.7, max_message_chars=20000):
        self.chat_model = chat_model
        self.preamble = preamble
        self.notifier = notifier
        self.history_limit = history_limit
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_message_chars = max_message_chars
        self.fallback_reply = (
            "I'm sorry, I'm having trouble responding right now. "
            f"Please call us at {fallback_phone} and we'll be happy to help!"
        )

    def handle(self, session_id, message):
        try:
            history = get_recent_turns(session_id, limit=self.history_limit)
            messages = assemble_messages(self.preamble, history, message)
            raw_reply = self.chat_model.complete(messages, max_tokens=self.max_tokens, temperature=self.temperature)

            _, assistant_turn = save_turns(
                session_id, [("user", message), ("assistant", raw_reply)], max_chars=self.max_message_chars
            )

            result = extract_booking(raw_reply)
            booking = None
            if result.payload is not None:
                booking = commit_extracted_booking(
                    result.payload, session_id, source_turn_id=assistant_turn.id, notifier=self.notifier
                )
            elif result.found_block:
                logger.warning("Session %s: booking block present but nothing extracted (%s)", session_id, result.error)

            reply = result.reply
            if not reply and booking:
                reply = f"Thanks, {booking['name']}! Your booking request #{booking['id']} has been received."
            elif not reply:
                reply = (
                    "Almost done! Could you confirm your name, email, phone, service, "
                    "preferred date and time, and the property address?"
                )
            return {"response": reply, "bookingCreated": booking}
        except Exception:
            logger.exception("❌ Chat failed for session %s", session_id)
            return {"response": self.fallback_reply, "bookingCreated": None}
