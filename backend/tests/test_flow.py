"""
Tests for the conversation flows: step sequencing, validation, global
triggers and session expiry.
"""

import pytest

from conftest import ADMIN_CHAT_ID, REQUESTER_ID
from farmbot.catalog import texts
from farmbot.models.booking import BookingStatus, BookingType
from farmbot.models.event import CapacityCounter
from farmbot.models.session import Step
from farmbot.services import booking_service
from farmbot.services.flow_engine import PROMPTS, RULES
from farmbot.services.outbound import SendText
from farmbot.services.session_service import load_session, session_key


async def _bookings(store):
    return await booking_service.list_bookings(store)


def test_every_step_has_a_rule():
    """Each step except event choice is table driven, and every step can be prompted."""
    assert set(RULES) | {Step.EV_CHOOSE} == set(Step)
    assert set(PROMPTS) == set(Step)


@pytest.mark.asyncio
async def test_excursion_flow_creates_one_booking(say, ctx, store):
    """Valid answers at each step produce exactly one excursion booking and clear the session."""
    await say(texts.BTN_BOOK_EXCURSION)
    await say("Анна")
    await say("12 июля")
    await say("11:30")
    await say("6–10")
    out = await say("+7 999 123-45-67")

    bookings = await _bookings(store)
    assert len(bookings) == 1
    booking = bookings[0]
    assert booking.type is BookingType.EXCURSION
    assert booking.event_id is None
    assert booking.status is BookingStatus.NEW
    assert booking.requester_id == REQUESTER_ID
    assert booking.people == 6
    assert booking.answers.name == "Анна"
    assert booking.answers.date == "12 июля"
    assert booking.answers.time == "11:30"
    assert booking.answers.people == "6-10"
    assert booking.answers.contact == "+7 999 123-45-67"

    assert await store.get(session_key(REQUESTER_ID)) is None

    admin = [i for i in out if i.target_id == ADMIN_CHAT_ID]
    assert len(admin) == 1
    assert booking.id in admin[0].text
    buttons = admin[0].keyboard["inline_keyboard"][0]
    assert buttons[0]["callback_data"] == f"confirm:{booking.id}"
    assert buttons[1]["callback_data"] == f"cancel:{booking.id}"
    assert out[-1] == SendText(REQUESTER_ID, texts.REQUEST_SENT, out[-1].keyboard)


@pytest.mark.asyncio
async def test_people_button_normalized(say, ctx):
    """"более 11" is stored as "11+"."""
    for text in (texts.BTN_BOOK_EXCURSION, "Анна", "завтра", "12:00", "более 11"):
        await say(text)

    session = await load_session(ctx, REQUESTER_ID)
    assert session.step is Step.EX_CONTACT
    assert session.people == "11+"


@pytest.mark.asyncio
async def test_people_free_text_rejected(say, ctx):
    """A typed number that is not a button keeps the requester on the people step."""
    for text in (texts.BTN_BOOK_EXCURSION, "Анна", "завтра", "12:00"):
        await say(text)

    out = await say("7")

    session = await load_session(ctx, REQUESTER_ID)
    assert session.step is Step.EX_PEOPLE
    assert session.people is None
    assert [i.text for i in out] == [texts.ASK_PEOPLE_BUTTONS]
    assert "6–10" in str(out[0].keyboard)


@pytest.mark.asyncio
async def test_invalid_contact_reprompts(say, ctx, store):
    """A bad contact sends the format hint and the question again, nothing is booked."""
    for text in (texts.BTN_BOOK_EXCURSION, "Анна", "завтра", "12:00", "2"):
        await say(text)

    out = await say("12345")

    assert [i.text for i in out] == [texts.CONTACT_INVALID, texts.ASK_CONTACT]
    session = await load_session(ctx, REQUESTER_ID)
    assert session.step is Step.EX_CONTACT
    assert await _bookings(store) == []

    await say("@john_doe")
    assert len(await _bookings(store)) == 1


@pytest.mark.asyncio
async def test_blank_name_rejected(say, ctx):
    await say(texts.BTN_BOOK_EXCURSION)
    out = await say("   ")

    assert out[0].text == texts.ASK_NAME_AGAIN
    session = await load_session(ctx, REQUESTER_ID)
    assert session.step is Step.EX_NAME


@pytest.mark.asyncio
async def test_rejection_refreshes_expiry(say, ctx, clock):
    """Any session write, including a rejected answer, restarts the idle timer."""
    await say(texts.BTN_BOOK_EXCURSION)
    clock.advance(300)
    await say("")

    session = await load_session(ctx, REQUESTER_ID)
    assert session.expires_at == clock.now + ctx.session_ttl


@pytest.mark.asyncio
async def test_expired_session_is_absent(say, ctx, store, clock):
    """A session past its expiry is dropped on read and the requester is idle again."""
    await say(texts.BTN_BOOK_EXCURSION)
    await say("Анна")
    clock.advance(ctx.settings.SESSION_TTL_SECONDS + 1)

    out = await say("12 июля")

    assert [i.text for i in out] == [texts.FALLBACK]
    assert await store.get(session_key(REQUESTER_ID)) is None


@pytest.mark.asyncio
async def test_reset_clears_session_in_any_step(say, ctx):
    for text in (texts.BTN_BOOK_EXCURSION, "Анна", "завтра"):
        await say(text)

    out = await say(texts.BTN_RESET)

    assert out[0].text == texts.RESET_DONE
    assert await load_session(ctx, REQUESTER_ID) is None


@pytest.mark.asyncio
async def test_main_menu_clears_session(say, ctx):
    await say(texts.BTN_BOOK_EVENT)

    out = await say(texts.BTN_MAIN_MENU)

    assert out[0].text == texts.WELCOME
    assert await load_session(ctx, REQUESTER_ID) is None


@pytest.mark.asyncio
async def test_info_button_keeps_flow(say, ctx):
    """Informational buttons answer without touching an active session."""
    await say(texts.BTN_BOOK_EXCURSION)
    await say("Анна")

    out = await say(texts.BTN_SCHEDULE)

    assert out[0].text == texts.INFO_SCHEDULE
    session = await load_session(ctx, REQUESTER_ID)
    assert session.step is Step.EX_DATE


@pytest.mark.asyncio
async def test_idle_text_gets_acknowledgment(say, store):
    out = await say("привет")

    assert [i.text for i in out] == [texts.FALLBACK]
    assert await store.list_by_prefix("") == []


@pytest.mark.asyncio
async def test_event_flow_creates_event_booking(say, store, small_event):
    await say(texts.BTN_BOOK_EVENT)
    await say(small_event.label)
    await say("Иван")
    await say("2")
    await say("@ivan_petrov")

    bookings = await _bookings(store)
    assert len(bookings) == 1
    booking = bookings[0]
    assert booking.type is BookingType.EVENT
    assert booking.event_id == small_event.id
    assert booking.people == 2
    assert booking.answers.event_title == small_event.title
    assert booking.answers.event_date == small_event.date


@pytest.mark.asyncio
async def test_event_people_must_be_a_small_number(say, ctx, small_event):
    for text in (texts.BTN_BOOK_EVENT, small_event.label, "Иван"):
        await say(text)

    for bad in ("0", "много", "11", "²"):
        out = await say(bad)
        assert out[0].text == texts.ASK_EVENT_PEOPLE_AGAIN

    await say("10")
    session = await load_session(ctx, REQUESTER_ID)
    assert session.step is Step.EV_CONTACT
    assert session.people == "10"


@pytest.mark.asyncio
async def test_unknown_event_label_reprompts(say, ctx):
    await say(texts.BTN_BOOK_EVENT)

    out = await say("Новый год")

    assert out[0].text == texts.ASK_EVENT_BUTTONS
    session = await load_session(ctx, REQUESTER_ID)
    assert session.step is Step.EV_CHOOSE


@pytest.mark.asyncio
async def test_fully_booked_event_aborts_flow(say, ctx, store, small_event):
    """Choosing a full event drops the session and writes nothing else."""
    full = CapacityCounter(capacity=small_event.capacity, booked=2, reserved_booking_ids=["bk-a"])
    await store.put(f"event-counter:{small_event.id}", full.dump())
    await say(texts.BTN_BOOK_EVENT)
    before = dict(store._data)

    out = await say(small_event.label)

    assert "все места уже заняты" in out[0].text
    assert await load_session(ctx, REQUESTER_ID) is None
    after = dict(store._data)
    before.pop(session_key(REQUESTER_ID))
    assert after == before


@pytest.mark.asyncio
async def test_deep_link_enters_event_flow(say, ctx, small_event):
    """/start event-<id> behaves as if the event was already chosen."""
    out = await say(f"/start event-{small_event.id}")

    session = await load_session(ctx, REQUESTER_ID)
    assert session.step is Step.EV_NAME
    assert session.event_id == small_event.id
    assert out[-1].text == texts.ASK_NAME


@pytest.mark.asyncio
async def test_deep_link_unknown_event(say, ctx):
    out = await say("/start event-nope")

    assert out[0].text == texts.EVENT_NOT_FOUND
    assert out[-1].text == texts.WELCOME
    assert await load_session(ctx, REQUESTER_ID) is None


@pytest.mark.asyncio
async def test_plain_start_shows_menu(say, ctx):
    await say(texts.BTN_BOOK_EXCURSION)

    out = await say("/start")

    assert [i.text for i in out] == [texts.WELCOME]
    assert await load_session(ctx, REQUESTER_ID) is None


@pytest.mark.asyncio
async def test_no_admin_chat_still_books(say, ctx, store, settings):
    settings.ADMIN_USER_ID = None
    settings.ADMIN_CHAT_ID = None

    for text in (texts.BTN_BOOK_EXCURSION, "Анна", "завтра", "12:00", "1"):
        await say(text)
    out = await say("@anna_k")

    assert len(await _bookings(store)) == 1
    assert [i.text for i in out] == [texts.REQUEST_SENT]


@pytest.mark.asyncio
async def test_rapid_bookings_get_distinct_ids(say, store):
    """Two bookings by the same requester at the same instant never share an id."""
    for _ in range(2):
        for text in (texts.BTN_BOOK_EXCURSION, "Анна", "завтра", "12:00", "1", "@anna_k"):
            await say(text)

    bookings = await _bookings(store)
    assert len(bookings) == 2
    assert bookings[0].id != bookings[1].id
