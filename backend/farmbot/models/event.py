"""
Holiday events and their seat counters.

An Event is static catalog data. Its CapacityCounter is the only mutable
piece and lives in the store under ``event-counter:{event_id}``.
"""

from dataclasses import dataclass

from pydantic import Field

from farmbot.models.base import Record


@dataclass(frozen=True)
class Event:
    id: str
    label: str
    date: str
    title: str
    capacity: int

    def __post_init__(self):
        if self.capacity < 1:
            raise ValueError(f"event {self.id} must have capacity >= 1")


class CapacityCounter(Record):
    capacity: int = Field(..., ge=1)
    booked: int = Field(default=0, ge=0)
    # Bookings whose seats are already counted; makes reservation idempotent
    reserved_booking_ids: list[str] = Field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return self.booked >= self.capacity

    @classmethod
    def for_event(cls, event: Event) -> "CapacityCounter":
        return cls(capacity=event.capacity, booked=0)
