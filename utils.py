# utils.py
import logging
from functools import wraps

from flask import current_app, request, Response
from config import db
from models import ConversationTurn

logger = logging.getLogger(__name__)

TURN_ROLES = {"user", "assistant"}


def require_basic_auth(func):
    """Guard admin views when ADMIN_USER and ADMIN_PASS are configured."""
    @wraps(func)
    def wrapped(*args, **kwargs):
        user = current_app.config.get("ADMIN_USER")
        password = current_app.config.get("ADMIN_PASS")
        if user and password:
            auth = request.authorization
            if not auth or auth.username != user or auth.password != password:
                return Response("Login required", 401, {"WWW-Authenticate": 'Basic realm="Login Required"'})
        return func(*args, **kwargs)
    return wrapped


def truncate(content, max_chars):
    if content and len(content) > max_chars:
        return content[:max_chars] + "...(truncated)"
    return content


def save_turns(session_id, turns, max_chars=20000):
    """Append (role, content) turns for a session in a single transaction.

    Either every turn is committed or none is. Returns the stored rows in
    the order given.
    """
    rows = []
    for role, content in turns:
        if role not in TURN_ROLES:
            raise ValueError(f"Unsupported turn role: {role!r}")
        rows.append(ConversationTurn(session_id=session_id, role=role, content=truncate(content, max_chars)))
    try:
        db.session.add_all(rows)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return rows


def get_recent_turns(session_id, limit=20):
    turns = (
        ConversationTurn.query.filter_by(session_id=session_id)
        .order_by(ConversationTurn.created_at.desc(), ConversationTurn.id.desc())
        .limit(limit)
        .all()
    )
    return list(reversed([{"role": t.role, "content": t.content} for t in turns]))


def get_transcript(session_id):
    return (
        ConversationTurn.query.filter_by(session_id=session_id)
        .order_by(ConversationTurn.created_at.asc(), ConversationTurn.id.asc())
        .all()
    )
