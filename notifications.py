# notifications.py - Discord and email alerts for new bookings and messages
import logging
from datetime import datetime, timezone

import requests

from config import format_service

logger = logging.getLogger(__name__)

BOOKING_COLOR = 0x00D4FF
CONTACT_COLOR = 0xF97316


class NotificationError(RuntimeError):
    """Raised when a notification channel rejects a message."""


class Notifier:
    """Best-effort delivery of internal alerts.

    ``send_discord`` and ``send_email`` raise on failure; the ``*_created`` /
    ``*_received`` helpers wrap each channel separately and only log, so a
    dead webhook never affects an already stored record.
    """

    def __init__(self, profile, discord_webhook="", notify_email="", from_email="",
                 email_api_url="https://api.mailchannels.net/tx/v1/send", timeout=10, http=None):
        self.profile = profile
        self.discord_webhook = discord_webhook
        self.notify_email = notify_email
        self.from_email = from_email
        self.email_api_url = email_api_url
        self.timeout = timeout
        self.http = http or requests.Session()

    # ---------- channels ----------

    def send_discord(self, title, color, fields, footer):
        if not self.discord_webhook:
            logger.info("DISCORD_WEBHOOK not set; skipping Discord alert %r", title)
            return False
        resp = self.http.post(
            self.discord_webhook,
            json={
                "embeds": [{
                    "title": title,
                    "color": color,
                    "fields": fields,
                    "footer": {"text": footer},
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }],
            },
            timeout=self.timeout,
        )
        if not resp.ok:
            raise NotificationError(f"Discord webhook failed: {resp.status_code} {resp.text}")
        return True

    def send_email(self, to, reply_to, subject, body):
        if not to or not self.from_email:
            logger.info("NOTIFY_EMAIL/FROM_EMAIL not set; skipping email %r", subject)
            return False
        message = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.from_email, "name": self.profile.name},
            "subject": subject,
            "content": [{"type": "text/plain", "value": body}],
        }
        if reply_to:
            message["reply_to"] = {"email": reply_to}
        resp = self.http.post(self.email_api_url, json=message, timeout=self.timeout)
        if not resp.ok:
            raise NotificationError(f"Email failed: {resp.status_code} {resp.text}")
        return True

    def _deliver(self, label, send, *args):
        try:
            return send(*args)
        except Exception:
            logger.exception("❌ %s delivery failed", label)
            return False

    # ---------- records ----------

    def booking_created(self, booking, via_chat=False):
        service = format_service(booking.service)
        notes = booking.notes or "None"
        title = "🤖 New Chat Booking" if via_chat else "🧹 New Booking Request"
        fields = [
            {"name": "🆔 Booking ID", "value": f"#{booking.id}", "inline": True},
            {"name": "👤 Customer", "value": booking.name, "inline": True},
            {"name": "📧 Email", "value": booking.email, "inline": True},
            {"name": "📱 Phone", "value": booking.phone, "inline": True},
            {"name": "🔧 Service", "value": service, "inline": True},
            {"name": "📅 Date", "value": booking.date, "inline": True},
            {"name": "⏰ Time", "value": booking.time, "inline": True},
            {"name": "📍 Address", "value": booking.address, "inline": False},
            {"name": "📝 Notes", "value": notes, "inline": False},
        ]
        source = "the AI chat assistant" if via_chat else self.profile.website
        body = "\n".join([
            f"NEW BOOKING REQUEST - {self.profile.name}",
            f"Booking ID: #{booking.id}",
            "",
            "Customer Details:",
            "-----------------",
            f"Name: {booking.name}",
            f"Email: {booking.email}",
            f"Phone: {booking.phone}",
            "",
            "Service Requested:",
            "------------------",
            f"Service: {service}",
            f"Date: {booking.date}",
            f"Time: {booking.time}",
            "",
            "Property Address:",
            "-----------------",
            booking.address,
            "",
            "Additional Notes:",
            "-----------------",
            notes,
            "",
            "---",
            f"Submitted via {source}",
            f"Reply to this email or call {booking.phone} to confirm.",
        ])
        subject = f"New Booking #{booking.id}: {service} - {booking.name}"

        sent_discord = self._deliver("Discord", self.send_discord, title, BOOKING_COLOR, fields, self.profile.footer)
        sent_email = self._deliver("Email", self.send_email, self.notify_email, booking.email, subject, body)
        return {"discord": sent_discord, "email": sent_email}

    def contact_received(self, contact):
        phone = contact.phone or "Not provided"
        fields = [
            {"name": "🆔 Message ID", "value": f"#{contact.id}", "inline": True},
            {"name": "👤 From", "value": contact.name, "inline": True},
            {"name": "📧 Email", "value": contact.email, "inline": True},
            {"name": "📱 Phone", "value": phone, "inline": True},
            {"name": "💬 Message", "value": contact.message, "inline": False},
        ]
        body = "\n".join([
            f"NEW MESSAGE - {self.profile.name} Website",
            f"Message ID: #{contact.id}",
            "",
            f"From: {contact.name}",
            f"Email: {contact.email}",
            f"Phone: {phone}",
            "",
            "Message:",
            "--------",
            contact.message,
            "",
            "---",
            f"Submitted via {self.profile.website} contact form",
        ])
        subject = f"Contact #{contact.id}: {contact.name}"

        sent_discord = self._deliver(
            "Discord", self.send_discord, "💬 New Contact Message", CONTACT_COLOR, fields, self.profile.footer
        )
        sent_email = self._deliver("Email", self.send_email, self.notify_email, contact.email, subject, body)
        return {"discord": sent_discord, "email": sent_email}
