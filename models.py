"""Shared SQLAlchemy models."""

import enum

from flask_login import UserMixin

from extensions import db
from utils import iso, utcnow


class Role(str, enum.Enum):
    """Authorization roles. ``Role.parse`` is the only way strings become roles."""

    USER = "USER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class User(UserMixin, db.Model):
    """Represents an authenticated application user."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150))
    username = db.Column(db.String(150), unique=True, nullable=False)
    email = db.Column(db.String(255))
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(Role, name="user_role", native_enum=False, length=16),
                     nullable=False, default=Role.USER)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self) -> dict:
        # password never leaves the server
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "createdAt": iso(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<User {self.username}>"
