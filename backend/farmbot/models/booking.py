"""
Booking request record.

Created once when a flow completes, stored under ``booking:{id}`` and
afterwards only moved out of ``new`` by the operator. Never deleted.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from farmbot.models.base import CamelModel, Record


class BookingType(str, Enum):
    EXCURSION = "excursion"
    EVENT = "event"


class BookingStatus(str, Enum):
    NEW = "new"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.NEW


class BookingAnswers(CamelModel):
    name: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    people: Optional[str] = None
    contact: Optional[str] = None
    event_title: Optional[str] = None
    event_date: Optional[str] = None


class Booking(Record):
    id: str
    type: BookingType
    requester_id: int
    status: BookingStatus = BookingStatus.NEW
    event_id: Optional[str] = None
    people: int = 0
    answers: BookingAnswers = Field(default_factory=BookingAnswers)
    created_at: datetime

    @property
    def is_capacity_bound(self) -> bool:
        return self.event_id is not None
