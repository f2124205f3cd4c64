"""
Tests for the Redis store. The transition script runs for real on
fakeredis's embedded Lua interpreter; the error paths use a stub client.
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import AsyncGenerator

import fakeredis
import pytest
import pytest_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError

from conftest import ADMIN_CHAT_ID, OPERATOR_ID
from farmbot.core.errors import StoreError
from farmbot.infrastructure.redis_store import RedisStore
from farmbot.models.booking import BookingAnswers, BookingStatus, BookingType
from farmbot.models.event import CapacityCounter
from farmbot.services import booking_service
from farmbot.services.admin_service import handle_operator_action
from farmbot.services.context import BotContext
from farmbot.services.interfaces.store import SeatReservation, TransitionOutcome
from farmbot.services.outbound import SendText

NOW = datetime(2026, 12, 1, 10, 0, tzinfo=timezone.utc)
PREFIX = "farmbot:"


@pytest_asyncio.fixture(scope="function")
async def redis_store() -> AsyncGenerator[RedisStore, None]:
    client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    store = RedisStore(client, key_prefix=PREFIX)
    yield store
    await store.close()


async def _event_booking(store, event, people=1, requester_id=7):
    return await booking_service.create_booking(
        store,
        booking_type=BookingType.EVENT,
        requester_id=requester_id,
        people=people,
        answers=BookingAnswers(name="Гость", people=str(people), contact="@guest_one"),
        now=NOW,
        event_id=event.id,
    )


async def _counter(store, event):
    raw = await store.get(booking_service.counter_key(event.id))
    return CapacityCounter.load(raw) if raw is not None else None


@pytest.mark.asyncio
async def test_plain_commands_use_prefix(redis_store):
    assert await redis_store.put("booking:a", "{}", only_if_absent=True)
    assert not await redis_store.put("booking:a", "[]", only_if_absent=True)
    await redis_store.put("session:1", "{}")

    assert await redis_store.redis.get("farmbot:booking:a") == "{}"
    assert await redis_store.list_by_prefix("booking:") == ["booking:a"]
    await redis_store.delete("session:1")
    assert await redis_store.get("session:1") is None


@pytest.mark.asyncio
async def test_concurrent_confirms_never_exceed_capacity(redis_store, small_event):
    bookings = [await _event_booking(redis_store, small_event) for _ in range(5)]

    results = await asyncio.gather(*(
        booking_service.transition_booking(redis_store, b, BookingStatus.CONFIRMED, small_event)
        for b in bookings
    ))

    outcomes = [r.outcome for r in results]
    assert outcomes.count(TransitionOutcome.APPLIED) == small_event.capacity
    assert outcomes.count(TransitionOutcome.INSUFFICIENT) == 3
    counter = await _counter(redis_store, small_event)
    assert counter.booked == small_event.capacity
    confirmed = [
        b.id for b in bookings
        if (await booking_service.get_booking(redis_store, b.id)).status is BookingStatus.CONFIRMED
    ]
    assert sorted(counter.reserved_booking_ids) == sorted(confirmed)


@pytest.mark.asyncio
async def test_held_booking_id_is_not_counted_twice(redis_store, small_event):
    booking = await _event_booking(redis_store, small_event)
    held = CapacityCounter(capacity=small_event.capacity, booked=1, reserved_booking_ids=[booking.id])
    await redis_store.put(booking_service.counter_key(small_event.id), held.dump())

    result = await booking_service.transition_booking(
        redis_store, booking, BookingStatus.CONFIRMED, small_event
    )

    assert (result.outcome, result.booked) == (TransitionOutcome.APPLIED, 1)
    assert (await _counter(redis_store, small_event)).booked == 1


@pytest.mark.asyncio
async def test_insufficient_seats_leave_counter_unwritten(redis_store, small_event):
    booking = await _event_booking(redis_store, small_event, people=3)

    result = await booking_service.transition_booking(
        redis_store, booking, BookingStatus.CONFIRMED, small_event
    )

    assert (result.outcome, result.status, result.free) == (TransitionOutcome.INSUFFICIENT, "new", 2)
    assert await _counter(redis_store, small_event) is None
    assert (await booking_service.get_booking(redis_store, booking.id)).status is BookingStatus.NEW


@pytest.mark.asyncio
async def test_script_reads_counter_created_by_python(redis_store, small_event):
    """A lazily created counter stores an empty id list, which Lua decodes as an empty table."""
    await booking_service.get_counter(redis_store, small_event)
    raw = json.loads(await redis_store.get(booking_service.counter_key(small_event.id)))
    assert raw["reservedBookingIds"] == []
    booking = await _event_booking(redis_store, small_event, people=2)

    result = await booking_service.transition_booking(
        redis_store, booking, BookingStatus.CONFIRMED, small_event
    )

    assert result.outcome is TransitionOutcome.APPLIED
    counter = await _counter(redis_store, small_event)
    assert (counter.booked, counter.reserved_booking_ids) == (2, [booking.id])
    assert counter.is_full


@pytest.mark.asyncio
async def test_transition_keeps_record_bytes(redis_store, small_event):
    """The booking is stored exactly as serialized, so large ids survive the script."""
    booking = await _event_booking(redis_store, small_event, requester_id=5_000_000_000_000_001)

    await booking_service.transition_booking(redis_store, booking, BookingStatus.CANCELLED)

    stored = await booking_service.get_booking(redis_store, booking.id)
    assert stored.requester_id == 5_000_000_000_000_001
    assert stored.status is BookingStatus.CANCELLED


@pytest.mark.asyncio
async def test_transition_missing_and_stale(redis_store, small_event):
    booking = await _event_booking(redis_store, small_event)
    await booking_service.transition_booking(redis_store, booking, BookingStatus.CANCELLED)

    stale = await booking_service.transition_booking(redis_store, booking, BookingStatus.CONFIRMED, small_event)
    await redis_store.delete(booking_service.booking_key(booking.id))
    missing = await booking_service.transition_booking(redis_store, booking, BookingStatus.CONFIRMED)

    assert (stale.outcome, stale.status) == (TransitionOutcome.STALE, "cancelled")
    assert await _counter(redis_store, small_event) is None
    assert (missing.outcome, missing.status) == (TransitionOutcome.MISSING, None)


@pytest.mark.asyncio
async def test_confirm_racing_cancel_on_redis(redis_store, settings, notifier, clock, small_event):
    ctx = BotContext(settings, redis_store, notifier, clock)
    booking = await _event_booking(redis_store, small_event)

    outs = await asyncio.gather(
        handle_operator_action(ctx, OPERATOR_ID, f"confirm:{booking.id}", "cb-confirm", ADMIN_CHAT_ID, 77),
        handle_operator_action(ctx, OPERATOR_ID, f"cancel:{booking.id}", "cb-cancel", ADMIN_CHAT_ID, 77),
    )

    final = (await booking_service.get_booking(redis_store, booking.id)).status
    counter = await _counter(redis_store, small_event)
    booked = counter.booked if counter else 0
    assert booked == (1 if final is BookingStatus.CONFIRMED else 0)
    requester_messages = [i for out in outs for i in out if isinstance(i, SendText)]
    assert len(requester_messages) == 1


class _StubRedis:
    """Just enough of redis.asyncio.Redis for RedisStore."""

    def __init__(self, script_result=None, error=None):
        self.script_result = script_result
        self.error = error
        self.calls = []

    def register_script(self, source):
        async def script(keys, args):
            self.calls.append((keys, args))
            return self.script_result
        return script

    async def get(self, key):
        if self.error:
            raise self.error
        self.calls.append(("get", key))
        return None


@pytest.mark.asyncio
async def test_redis_store_wraps_errors():
    store = RedisStore(_StubRedis(error=RedisConnectionError("down")), key_prefix="t:")

    with pytest.raises(StoreError) as exc_info:
        await store.get("session:1")
    assert exc_info.value.operation == "get"
    assert exc_info.value.key == "session:1"


@pytest.mark.asyncio
async def test_redis_store_transition_arguments():
    client = _StubRedis(script_result=[1, "confirmed", 0, 0])
    store = RedisStore(client, key_prefix=PREFIX)
    value = json.dumps({"id": "bk-1", "status": "cancelled"})

    result = await store.transition(
        "booking:bk-1", "new", value, SeatReservation("event-counter:x", "bk-1", 1, 5),
    )

    assert (result.outcome, result.status) == (TransitionOutcome.STALE, "confirmed")
    assert client.calls == [(
        ["farmbot:booking:bk-1", "farmbot:event-counter:x"],
        ["new", value, "cancelled", "bk-1", 1, 5],
    )]
