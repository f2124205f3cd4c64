from farmbot.models.base import SCHEMA_VERSION, Record
from farmbot.models.booking import Booking, BookingAnswers, BookingStatus, BookingType
from farmbot.models.event import CapacityCounter, Event
from farmbot.models.session import Session, Step

__all__ = [
    "SCHEMA_VERSION", "Record",
    "Booking", "BookingAnswers", "BookingStatus", "BookingType",
    "CapacityCounter", "Event",
    "Session", "Step",
]
