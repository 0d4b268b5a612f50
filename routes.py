# routes.py
import logging

from flask import Blueprint, current_app, jsonify, request
from bookings import create_booking, create_contact, list_bookings, list_contacts, missing_fields, CONTACT_FIELDS
from utils import get_transcript, require_basic_auth

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)


def _json_body():
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def _phone():
    return current_app.extensions["business_profile"].phone


@api.route("/", methods=["GET"])
def home():
    name = current_app.extensions["business_profile"].name
    return jsonify({"status": "ok", "message": f"{name} API"})


@api.route("/healthz", methods=["GET"])
def healthz():
    return jsonify({"status": "ok"})


@api.route("/api/chat", methods=["POST"])
def chat():
    data = _json_body()
    message = data.get("message")
    session_id = data.get("sessionId")

    for field, value in (("message", message), ("sessionId", session_id)):
        if not isinstance(value, str) or not value.strip():
            return jsonify({"error": f"Missing required field: {field}"}), 400

    # Normalize whitespace
    message = " ".join(message.split())

    result = current_app.extensions["chat"].handle(session_id, message)
    return jsonify(result)


@api.route("/api/booking", methods=["POST"])
def booking():
    data = _json_body()
    missing = missing_fields(data)
    if missing:
        return jsonify({"error": f"Missing required field: {missing[0]}"}), 400

    try:
        record, _ = create_booking(data, notes=str(data.get("notes") or "").strip())
    except Exception:
        logger.exception("❌ Booking error:")
        return jsonify({"error": f"Failed to process booking. Please call {_phone()}"}), 500

    current_app.extensions["notifier"].booking_created(record)
    return jsonify({
        "success": True,
        "bookingId": record.id,
        "message": "Booking received! We'll contact you shortly to confirm.",
    })


@api.route("/api/contact", methods=["POST"])
def contact():
    data = _json_body()
    if missing_fields(data, CONTACT_FIELDS):
        return jsonify({"error": "Please fill in all required fields"}), 400

    try:
        record = create_contact(data)
    except Exception:
        logger.exception("❌ Contact error:")
        return jsonify({"error": f"Failed to send message. Please call {_phone()}"}), 500

    current_app.extensions["notifier"].contact_received(record)
    return jsonify({
        "success": True,
        "messageId": record.id,
        "message": "Message sent! We'll get back to you soon.",
    })


# Admin endpoints
@api.route("/api/bookings", methods=["GET"])
@require_basic_auth
def bookings():
    try:
        return jsonify({"bookings": [b.to_dict() for b in list_bookings()]})
    except Exception:
        logger.exception("❌ Failed to fetch bookings:")
        return jsonify({"error": "Failed to fetch bookings"}), 500


@api.route("/api/contacts", methods=["GET"])
@require_basic_auth
def contacts():
    try:
        return jsonify({"contacts": [c.to_dict() for c in list_contacts()]})
    except Exception:
        logger.exception("❌ Failed to fetch contacts:")
        return jsonify({"error": "Failed to fetch contacts"}), 500


@api.route("/api/conversations/<session_id>", methods=["GET"])
@require_basic_auth
def conversation(session_id):
    try:
        turns = get_transcript(session_id)
        return jsonify({"sessionId": session_id, "messages": [t.to_dict() for t in turns]})
    except Exception:
        logger.exception("❌ Failed to fetch conversation %s:", session_id)
        return jsonify({"error": "Failed to fetch conversation"}), 500
