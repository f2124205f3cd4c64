"""
Service interfaces for dependency inversion.
The core talks to storage and transport only through these.
"""

from .notifier import NotificationResult, Notifier
from .store import KeyValueStore, SeatReservation, TransitionOutcome, TransitionResult

__all__ = [
    'KeyValueStore', 'SeatReservation', 'TransitionOutcome', 'TransitionResult',
    'Notifier', 'NotificationResult',
]
