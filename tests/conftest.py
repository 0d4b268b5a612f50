"""Shared test fixtures and helpers."""

import pytest
import requests

from app import create_app
from config import BusinessProfile, db
from notifications import Notifier

BOOKING_REPLY = (
    'Great, confirming! ###BOOKING_DATA### {"name":"Jane Doe","email":"jane@x.com","phone":"5551234567",'
    '"service":"residential-driveway","date":"2024-06-01","time":"morning","address":"12 Ocean Dr"}'
    " ###END_BOOKING### Thanks!"
)

BOOKING_FIELDS = {
    "name": "Jane Doe",
    "email": "jane@x.com",
    "phone": "5551234567",
    "service": "residential-driveway",
    "date": "2024-06-01",
    "time": "morning",
    "address": "12 Ocean Dr",
}


class FakeChatModel:
    """Scripted model: returns queued replies in order and records every call."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def complete(self, messages, max_tokens=512, temperature=0.7):
        self.calls.append({
            "messages": [dict(m) for m in messages],
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        reply = self.replies.pop(0) if self.replies else "How can I help you today?"
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeResponse:
    def __init__(self, status_code=200, text="ok"):
        self.status_code = status_code
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300


class FakeHTTP:
    """Stands in for requests.Session; records posts, can fail per URL."""

    def __init__(self):
        self.posts = []
        self.fail_urls = set()
        self.raise_urls = set()

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if url in self.raise_urls:
            raise requests.ConnectionError(f"cannot reach {url}")
        if url in self.fail_urls:
            return FakeResponse(500, "boom")
        return FakeResponse(200, "ok")

    def urls(self):
        return [p["url"] for p in self.posts]


DISCORD_URL = "https://discord.test/webhook"
MAIL_URL = "https://mail.test/send"


@pytest.fixture
def chat_model():
    return FakeChatModel()


@pytest.fixture
def http():
    return FakeHTTP()


@pytest.fixture
def profile():
    return BusinessProfile(name="Jupiter Power Wash", phone="561.532.7120", website="jupiterpowerwash.com")


@pytest.fixture
def notifier(profile, http):
    return Notifier(
        profile,
        discord_webhook=DISCORD_URL,
        notify_email="owner@jupiterpowerwash.test",
        from_email="noreply@jupiterpowerwash.test",
        email_api_url=MAIL_URL,
        http=http,
    )


@pytest.fixture
def make_app(chat_model, notifier, profile):
    apps = []

    def _make(**overrides):
        settings = {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "RATELIMIT_ENABLED": False,
            "ADMIN_USER": "",
            "ADMIN_PASS": "",
            "PERSONA_FILE": None,
        }
        settings.update(overrides)
        app = create_app(settings, chat_model=chat_model, notifier=notifier, profile=profile)
        apps.append(app)
        return app

    yield _make

    for app in apps:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app
