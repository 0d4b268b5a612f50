# bookings.py - persist-then-notify for bookings and contact messages
import logging

from sqlalchemy.exc import IntegrityError

from config import db
from extraction import BOOKING_FIELDS
from models import Booking, Contact

logger = logging.getLogger(__name__)

CONTACT_FIELDS = ("name", "email", "message")


def missing_fields(data, required=BOOKING_FIELDS):
    missing = []
    for name in required:
        value = data.get(name)
        if not isinstance(value, str) or not value.strip():
            missing.append(name)
    return missing


def create_booking(data, notes="", source_turn_id=None):
    """Insert a booking row and return ``(booking, created)``.

    With a ``source_turn_id`` the insert is idempotent: a second attempt for
    the same assistant turn returns the existing row with ``created=False``.
    """
    if source_turn_id is not None:
        existing = Booking.query.filter_by(source_turn_id=source_turn_id).first()
        if existing:
            logger.info("Booking #%s already recorded for turn %s", existing.id, source_turn_id)
            return existing, False

    booking = Booking(
        name=data["name"].strip(),
        email=data["email"].strip(),
        phone=data["phone"].strip(),
        service=data["service"].strip(),
        date=data["date"].strip(),
        time=data["time"].strip(),
        address=data["address"].strip(),
        notes=notes or "",
        source_turn_id=source_turn_id,
    )
    db.session.add(booking)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        if source_turn_id is None:
            raise
        existing = Booking.query.filter_by(source_turn_id=source_turn_id).one()
        logger.info("Booking #%s was committed concurrently for turn %s", existing.id, source_turn_id)
        return existing, False
    except Exception:
        db.session.rollback()
        raise

    logger.info("✅ Booking #%s stored (%s on %s)", booking.id, booking.service, booking.date)
    return booking, True


def commit_extracted_booking(payload, session_id, source_turn_id=None, notifier=None):
    """Turn a chat extraction into a booking; returns the booking dict or None."""
    missing = payload.missing_fields()
    if missing:
        logger.warning("Discarding chat booking for session %s; missing %s", session_id, ", ".join(missing))
        return None

    booking, created = create_booking(
        payload.as_dict(),
        notes=f"Booked via AI chat assistant (session {session_id})",
        source_turn_id=source_turn_id,
    )
    if created and notifier is not None:
        notifier.booking_created(booking, via_chat=True)
    return booking.to_dict()


def create_contact(data):
    contact = Contact(
        name=data["name"].strip(),
        email=data["email"].strip(),
        phone=str(data.get("phone") or "").strip(),
        message=data["message"].strip(),
    )
    db.session.add(contact)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("✅ Contact message #%s stored", contact.id)
    return contact


def list_bookings(limit=100):
    return Booking.query.order_by(Booking.created_at.desc(), Booking.id.desc()).limit(limit).all()


def list_contacts(limit=100):
    return Contact.query.order_by(Contact.created_at.desc(), Contact.id.desc()).limit(limit).all()
