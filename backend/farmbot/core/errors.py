"""
Error types raised inside the bot core.

Only adapter-level failures are exceptions. Conversation outcomes
(validation failures, not-found, capacity exhaustion) are ordinary
return values and never raised.
"""

from typing import Optional


class FarmBotError(Exception):
    """Base exception for all bot errors."""


class StoreError(FarmBotError):
    """The key-value store failed or did not answer in time."""

    def __init__(self, operation: str, key: Optional[str] = None, reason: str = ""):
        self.operation = operation
        self.key = key
        self.reason = reason
        super().__init__(f"store {operation} failed for key={key!r}: {reason}")


class RecordDecodeError(FarmBotError):
    """A stored record does not match its schema."""

    def __init__(self, key: str, reason: str = ""):
        self.key = key
        self.reason = reason
        super().__init__(f"cannot decode record {key!r}: {reason}")
