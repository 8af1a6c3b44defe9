"""Refresh notifications from editors to the view that owns the data."""

import logging

logger = logging.getLogger(__name__)


class RefreshBus:
    """
    Editors publish after a successful mutation; subscribers run one after the other.

    Each subscriber is isolated: if it raises, the error is logged and the remaining
    subscribers (and the action that published) carry on.
    """

    def __init__(self):
        self._subscribers = []

    def subscribe(self, callback):
        self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def publish(self, event: str, **payload) -> int:
        """Notify everybody; returns how many subscribers failed."""
        failures = 0
        for callback in list(self._subscribers):
            try:
                callback(event, **payload)
            except Exception:  # subscribers are independent by contract
                failures += 1
                logger.exception("Refresh subscriber %r failed on %s", callback, event)
        return failures
