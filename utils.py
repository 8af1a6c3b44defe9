from datetime import datetime, timezone

from flask import jsonify


def utcnow() -> datetime:
    """Naive UTC timestamp, the form SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso(value):
    return value.isoformat() if value else None


def json_error(message, status):
    """Return the ``{"error": message}`` body used by every failing endpoint."""
    return jsonify(error=message), status
