"""
Booking store adapter: booking records and per-event seat counters.

Key layout
==========

  booking:{booking_id}      Booking record, written once at flow completion
  event-counter:{event_id}  CapacityCounter, created lazily on first read

RESERVE-ON-CONFIRM
==================

Seats are not taken when a requester finishes the event flow, only when
the operator confirms. A decision goes through the store's atomic
``transition`` primitive:

  1. Check the booking is still ``new``
  2. For an event booking: check ``booked + seats <= capacity``, add the
     seats and remember the booking id on the counter
  3. Write the counter, then the booking with its new status

all as one step inside the store (a Lua script on Redis). Concurrent
confirmations for the same event cannot overshoot the capacity, and of
two decisions racing on one booking exactly one is applied.
"""

import uuid
from datetime import datetime
from typing import Optional

from farmbot.core.errors import RecordDecodeError, StoreError
from farmbot.core.logging import get_logger
from farmbot.models.booking import Booking, BookingAnswers, BookingStatus, BookingType
from farmbot.models.event import CapacityCounter, Event
from farmbot.services.interfaces.store import KeyValueStore, SeatReservation, TransitionResult

logger = get_logger(__name__)

BOOKING_PREFIX = "booking:"
COUNTER_PREFIX = "event-counter:"


def booking_key(booking_id: str) -> str:
    return f"{BOOKING_PREFIX}{booking_id}"


def counter_key(event_id: str) -> str:
    return f"{COUNTER_PREFIX}{event_id}"


def generate_booking_id(now: datetime) -> str:
    """Date for readability plus a random part; no underscores so ids are safe in chat markup."""
    return f"bk-{now:%Y%m%d}-{uuid.uuid4().hex}"


async def create_booking(
    store: KeyValueStore,
    *,
    booking_type: BookingType,
    requester_id: int,
    people: int,
    answers: BookingAnswers,
    now: datetime,
    event_id: Optional[str] = None,
) -> Booking:
    booking = Booking(
        id=generate_booking_id(now),
        type=booking_type,
        requester_id=requester_id,
        event_id=event_id,
        people=people,
        answers=answers,
        created_at=now,
    )
    # only_if_absent: an id collision must never overwrite another request
    written = await store.put(booking_key(booking.id), booking.dump(), only_if_absent=True)
    if not written:
        logger.warning("booking_id_collision", booking_id=booking.id)
        booking.id = generate_booking_id(now)
        if not await store.put(booking_key(booking.id), booking.dump(), only_if_absent=True):
            raise StoreError("put", booking_key(booking.id), "booking id collision")

    logger.info(
        "booking_created",
        booking_id=booking.id,
        type=booking.type.value,
        requester_id=requester_id,
        event_id=event_id,
        people=people,
    )
    return booking


async def get_booking(store: KeyValueStore, booking_id: str) -> Optional[Booking]:
    key = booking_key(booking_id)
    raw = await store.get(key)
    if raw is None:
        return None
    try:
        return Booking.load(raw, key)
    except RecordDecodeError as e:
        logger.error("booking_decode_failed", booking_id=booking_id, error=e.reason)
        return None


async def list_bookings(store: KeyValueStore) -> list[Booking]:
    """All bookings ordered by creation time. Unreadable records are skipped."""
    bookings = []
    for key in await store.list_by_prefix(BOOKING_PREFIX):
        booking = await get_booking(store, key[len(BOOKING_PREFIX):])
        if booking is not None:
            bookings.append(booking)
    bookings.sort(key=lambda b: b.created_at)
    return bookings


async def list_event_bookings(store: KeyValueStore, event_id: str) -> list[Booking]:
    return [
        b for b in await list_bookings(store)
        if b.type is BookingType.EVENT and b.event_id == event_id
    ]


async def get_counter(store: KeyValueStore, event: Event, create: bool = True) -> CapacityCounter:
    """
    Read the seat counter, creating it from the catalog capacity on first read.

    With create=False an absent counter is returned unsaved, so read-only
    callers never write to the store.
    """
    key = counter_key(event.id)
    raw = await store.get(key)
    if raw is not None:
        try:
            return CapacityCounter.load(raw, key)
        except RecordDecodeError as e:
            # Never overwrite a counter we cannot read: it may hold real reservations
            logger.error("counter_decode_failed", event_id=event.id, error=e.reason)
            raise

    counter = CapacityCounter.for_event(event)
    if not create:
        return counter
    if not await store.put(key, counter.dump(), only_if_absent=True):
        # Created concurrently; the stored one wins
        raw = await store.get(key)
        if raw is not None:
            return CapacityCounter.load(raw, key)
    logger.info("counter_created", event_id=event.id, capacity=event.capacity)
    return counter


async def transition_booking(
    store: KeyValueStore,
    booking: Booking,
    status: BookingStatus,
    event: Optional[Event] = None,
) -> TransitionResult:
    """
    Move a booking from its current status to ``status`` in one store step.

    With an event, the booking's seats are held on the event counter as
    part of the same step. The passed booking object is not modified.
    """
    reservation = None
    if event is not None:
        reservation = SeatReservation(counter_key(event.id), booking.id, booking.people, event.capacity)
    updated = booking.model_copy(update={"status": status})

    result = await store.transition(
        booking_key(booking.id),
        booking.status.value,
        updated.dump(),
        reservation,
    )
    logger.info(
        "booking_transition",
        booking_id=booking.id,
        event_id=event.id if event else None,
        target=status.value,
        outcome=result.outcome.value,
        status=result.status,
        booked=result.booked if event else None,
        capacity=result.capacity if event else None,
    )
    return result
