# models.py
import datetime
from config import db


class ConversationTurn(db.Model):
    __tablename__ = "conversations"
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.String(128), nullable=False, index=True)
    role = db.Column(db.String(32), nullable=False)  # 'user' or 'assistant'
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    def to_dict(self):
        return {
            "role": self.role,
            "content": self.content,
            "time": self.created_at.isoformat() if self.created_at else None,
        }


class Booking(db.Model):
    __tablename__ = "bookings"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(256), nullable=False)
    email = db.Column(db.String(256), nullable=False)
    phone = db.Column(db.String(64), nullable=False)
    service = db.Column(db.String(128), nullable=False)
    date = db.Column(db.String(64), nullable=False, index=True)
    time = db.Column(db.String(64), nullable=False)
    address = db.Column(db.Text, nullable=False)
    notes = db.Column(db.Text, default="")
    status = db.Column(db.String(32), default="pending", index=True)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)
    # assistant turn a chat booking was extracted from; one booking per turn
    source_turn_id = db.Column(db.Integer, db.ForeignKey("conversations.id"), unique=True, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "service": self.service,
            "date": self.date,
            "time": self.time,
            "address": self.address,
            "notes": self.notes,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Contact(db.Model):
    __tablename__ = "contacts"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(256), nullable=False)
    email = db.Column(db.String(256), nullable=False)
    phone = db.Column(db.String(64), default="")
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(32), default="unread", index=True)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "message": self.message,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
