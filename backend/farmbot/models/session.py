"""
Per-requester conversation session.

Stored under ``session:{requester_id}`` and rewritten on every step.
A session read after ``expires_at`` is treated as if it did not exist.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from farmbot.models.base import Record


class Step(str, Enum):
    # Excursion flow
    EX_NAME = "ex_name"
    EX_DATE = "ex_date"
    EX_TIME = "ex_time"
    EX_PEOPLE = "ex_people"
    EX_CONTACT = "ex_contact"

    # Holiday event flow
    EV_CHOOSE = "ev_choose"
    EV_NAME = "ev_name"
    EV_PEOPLE = "ev_people"
    EV_CONTACT = "ev_contact"

    def __str__(self) -> str:
        return self.value


class Session(Record):
    step: Step
    expires_at: datetime

    name: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    people: Optional[str] = None
    contact: Optional[str] = None

    event_id: Optional[str] = None
    event_title: Optional[str] = None
    event_date: Optional[str] = None

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
