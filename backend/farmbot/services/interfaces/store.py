"""
Key-value store interface.

Values are JSON strings. Besides plain get/put/delete/list the store
offers one atomic primitive, ``transition``, which moves a booking record
out of its expected status and, for event bookings, takes the seats on
the event counter in the same step.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TransitionOutcome(str, Enum):
    APPLIED = "applied"
    STALE = "stale"
    INSUFFICIENT = "insufficient"
    MISSING = "missing"


@dataclass(frozen=True)
class SeatReservation:
    """Seats a transition must hold on an event counter before it applies."""
    counter_key: str
    booking_id: str
    seats: int
    capacity: int


@dataclass(frozen=True)
class TransitionResult:
    outcome: TransitionOutcome
    status: Optional[str]  # stored status after the call; None when the record is missing
    booked: int = 0
    capacity: int = 0

    @property
    def free(self) -> int:
        return max(self.capacity - self.booked, 0)


class KeyValueStore(ABC):
    """
    Interface for the persistent store.

    Implementations:
    - InMemoryStore: process-local dict, for development and tests
    - RedisStore: Redis with a Lua script for the atomic transition

    All methods raise StoreError on backend failure or timeout.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value or None when the key is absent."""
        pass

    @abstractmethod
    async def put(self, key: str, value: str, only_if_absent: bool = False) -> bool:
        """
        Store a value.

        Args:
            key: Full key
            value: JSON document
            only_if_absent: Do not overwrite an existing value

        Returns:
            True if the value was written
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass

    @abstractmethod
    async def list_by_prefix(self, prefix: str) -> list[str]:
        """Return all keys starting with prefix, sorted."""
        pass

    @abstractmethod
    async def transition(
        self,
        key: str,
        expected_status: str,
        value: str,
        reservation: Optional[SeatReservation] = None,
    ) -> TransitionResult:
        """
        Atomically replace the record at ``key`` with ``value`` if its
        ``status`` is still ``expected_status``.

        With a reservation, ``reservation.seats`` are added to the counter
        first, and nothing is written when that would exceed its capacity.
        The counter is created with ``reservation.capacity`` when absent. A
        booking id the counter already holds is not counted a second time.

        Returns:
            APPLIED when both writes happened, STALE with the current status
            when another transition got there first, INSUFFICIENT with the
            counter figures, MISSING when there is no record at ``key``.
        """
        pass

    async def close(self) -> None:
        pass
