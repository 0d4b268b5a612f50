# app.py - Jupiter Power Wash booking & chat API
import logging

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

import config
from config import db, BusinessProfile
from chat import ChatOrchestrator
from llm import ChatModel
from notifications import Notifier
from prompts import load_system_prompt

logger = logging.getLogger(__name__)


def _default_settings():
    return {
        "SQLALCHEMY_DATABASE_URI": config.DATABASE_URL,
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "RATELIMIT_ENABLED": True,
        "RATE_LIMIT": config.RATE_LIMIT,
        "RATELIMIT_STORAGE_URI": config.RATELIMIT_STORAGE_URI,
        "CHAT_RATE_LIMIT": config.CHAT_RATE_LIMIT,
        "ALLOWED_ORIGIN": config.ALLOWED_ORIGIN,
        "ADMIN_USER": config.ADMIN_USER,
        "ADMIN_PASS": config.ADMIN_PASS,
        "OPENAI_API_KEY": config.OPENAI_API_KEY,
        "OPENAI_BASE_URL": config.OPENAI_BASE_URL,
        "OPENAI_MODEL": config.OPENAI_MODEL,
        "CHAT_MAX_TOKENS": config.CHAT_MAX_TOKENS,
        "CHAT_TEMPERATURE": config.CHAT_TEMPERATURE,
        "HISTORY_LIMIT": config.HISTORY_LIMIT,
        "MAX_MESSAGE_CHARS": config.MAX_MESSAGE_CHARS,
        "PERSONA_FILE": config.PERSONA_FILE,
        "DISCORD_WEBHOOK": config.DISCORD_WEBHOOK,
        "NOTIFY_EMAIL": config.NOTIFY_EMAIL,
        "FROM_EMAIL": config.FROM_EMAIL,
        "MAILCHANNELS_URL": config.MAILCHANNELS_URL,
        "NOTIFY_TIMEOUT": config.NOTIFY_TIMEOUT,
        "LOG_LEVEL": config.LOG_LEVEL,
    }


def create_app(test_config=None, chat_model=None, notifier=None, profile=None):
    """Build the Flask app; collaborators can be injected for tests."""
    app = Flask(__name__)
    app.config.from_mapping(_default_settings())
    if test_config:
        app.config.update(test_config)
    config.validate_settings(app.config)
    config.configure_logging(app.config["LOG_LEVEL"])

    # ---------- Flask + Extensions ----------
    CORS(
        app,
        resources={r"/*": {"origins": app.config["ALLOWED_ORIGIN"]}},
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    db.init_app(app)
    limiter = Limiter(
        get_remote_address,
        app=app,
        default_limits=[app.config["RATE_LIMIT"]],
        storage_uri=app.config["RATELIMIT_STORAGE_URI"],
    )

    # ---------- Collaborators ----------
    profile = profile or BusinessProfile()
    if chat_model is None:
        if not app.config["OPENAI_API_KEY"]:
            raise RuntimeError("Please set OPENAI_API_KEY in environment")
        chat_model = ChatModel(
            api_key=app.config["OPENAI_API_KEY"],
            model=app.config["OPENAI_MODEL"],
            base_url=app.config["OPENAI_BASE_URL"],
        )
    if notifier is None:
        notifier = Notifier(
            profile,
            discord_webhook=app.config["DISCORD_WEBHOOK"],
            notify_email=app.config["NOTIFY_EMAIL"],
            from_email=app.config["FROM_EMAIL"],
            email_api_url=app.config["MAILCHANNELS_URL"],
            timeout=app.config["NOTIFY_TIMEOUT"],
        )

    app.extensions["business_profile"] = profile
    app.extensions["notifier"] = notifier
    app.extensions["chat"] = ChatOrchestrator(
        chat_model,
        load_system_prompt(profile, app.config["PERSONA_FILE"]),
        notifier=notifier,
        fallback_phone=profile.phone,
        history_limit=app.config["HISTORY_LIMIT"],
        max_tokens=app.config["CHAT_MAX_TOKENS"],
        temperature=app.config["CHAT_TEMPERATURE"],
        max_message_chars=app.config["MAX_MESSAGE_CHARS"],
    )

    from routes import api
    app.register_blueprint(api)
    app.view_functions["api.chat"] = limiter.limit(lambda: app.config["CHAT_RATE_LIMIT"])(
        app.view_functions["api.chat"]
    )

    # CORS preflight for any path, known route or not
    @app.before_request
    def preflight():
        if request.method == "OPTIONS":
            return Response(status=204)

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({"error": "Too many requests. Please slow down."}), 429

    # create tables
    with app.app_context():
        db.create_all()

    logger.info("✅ %s API ready", profile.name)
    return app


# ---------- Run ----------
if __name__ == "__main__":
    # For local testing only; in production use gunicorn: `gunicorn "app:create_app()" --bind 0.0.0.0:$PORT --workers 2`
    create_app().run(host="0.0.0.0", port=config.PORT)
