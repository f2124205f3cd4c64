"""
Conversation flow engine.

Two flows are driven by a per-requester Session:

  excursion:  ex_name -> ex_date -> ex_time -> ex_people -> ex_contact -> booking
  event:      ev_choose -> ev_name -> ev_people -> ev_contact -> booking

Global triggers (reset, main menu, /start, info buttons, flow entry) are
checked before any step logic, so a requester can always leave a flow.
Without a live session only those triggers do something; any other input
gets a generic acknowledgment.

Every step either accepts the input (store value, advance, prompt next)
or rejects it (re-prompt the same step). Both paths rewrite the session,
which refreshes its expiry. The last step creates the Booking, announces
it to the operator and clears the session.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from farmbot.catalog import keyboards, texts
from farmbot.catalog.events import find_by_label, get_event
from farmbot.core.logging import get_logger
from farmbot.core.metrics import bookings_created
from farmbot.models.booking import BookingAnswers, BookingType
from farmbot.models.event import Event
from farmbot.models.session import Session, Step
from farmbot.services import booking_service, validators
from farmbot.services.admin_service import announce_booking
from farmbot.services.context import BotContext
from farmbot.services.outbound import Outbound, SendText
from farmbot.services.session_service import (
    clear_session,
    load_session,
    save_session,
    start_session,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class StepRule:
    field: str
    validate: Callable[[str], Optional[str]]
    next_step: Optional[Step]  # None: last step, emits the booking
    retry_texts: tuple[str, ...]
    retry_keyboard: Callable[[], dict]


PROMPTS: dict[Step, tuple[str, Callable[[], dict]]] = {
    Step.EX_NAME: (texts.ASK_NAME, keyboards.flow_keyboard),
    Step.EX_DATE: (texts.ASK_DATE, keyboards.flow_keyboard),
    Step.EX_TIME: (texts.ASK_TIME, keyboards.flow_keyboard),
    Step.EX_PEOPLE: (texts.ASK_PEOPLE, keyboards.excursion_people_keyboard),
    Step.EX_CONTACT: (texts.ASK_CONTACT, keyboards.flow_keyboard),
    Step.EV_CHOOSE: (texts.ASK_EVENT, keyboards.event_choice_keyboard),
    Step.EV_NAME: (texts.ASK_NAME, keyboards.flow_keyboard),
    Step.EV_PEOPLE: (texts.ASK_PEOPLE, keyboards.event_people_keyboard),
    Step.EV_CONTACT: (texts.ASK_CONTACT, keyboards.flow_keyboard),
}

# ev_choose is handled separately: it consults the catalog and the seat counter
RULES: dict[Step, StepRule] = {
    Step.EX_NAME: StepRule(
        "name", validators.non_empty, Step.EX_DATE,
        (texts.ASK_NAME_AGAIN,), keyboards.flow_keyboard,
    ),
    Step.EX_DATE: StepRule(
        "date", validators.non_empty, Step.EX_TIME,
        (texts.ASK_DATE_AGAIN,), keyboards.flow_keyboard,
    ),
    Step.EX_TIME: StepRule(
        "time", validators.non_empty, Step.EX_PEOPLE,
        (texts.ASK_TIME_AGAIN,), keyboards.flow_keyboard,
    ),
    Step.EX_PEOPLE: StepRule(
        "people", validators.excursion_people, Step.EX_CONTACT,
        (texts.ASK_PEOPLE_BUTTONS,), keyboards.excursion_people_keyboard,
    ),
    Step.EX_CONTACT: StepRule(
        "contact", validators.contact, None,
        (texts.CONTACT_INVALID, texts.ASK_CONTACT), keyboards.flow_keyboard,
    ),
    Step.EV_NAME: StepRule(
        "name", validators.non_empty, Step.EV_PEOPLE,
        (texts.ASK_NAME_AGAIN,), keyboards.flow_keyboard,
    ),
    Step.EV_PEOPLE: StepRule(
        "people", validators.event_people, Step.EV_CONTACT,
        (texts.ASK_EVENT_PEOPLE_AGAIN,), keyboards.event_people_keyboard,
    ),
    Step.EV_CONTACT: StepRule(
        "contact", validators.contact, None,
        (texts.CONTACT_INVALID, texts.ASK_CONTACT), keyboards.flow_keyboard,
    ),
}

FLOW_TYPES = {
    Step.EX_CONTACT: BookingType.EXCURSION,
    Step.EV_CONTACT: BookingType.EVENT,
}


def _prompt(requester_id: int, step: Step) -> SendText:
    text, keyboard = PROMPTS[step]
    return SendText(requester_id, text, keyboard())


def _welcome(requester_id: int) -> list[Outbound]:
    return [SendText(requester_id, texts.WELCOME, keyboards.main_keyboard())]


def _start_parameter(text: str) -> Optional[str]:
    """Return the deep-link parameter of a /start command ("" when absent), None if not /start."""
    command, _, parameter = text.strip().partition(" ")
    if command.split("@", 1)[0] != texts.START_COMMAND:
        return None
    return parameter.strip()


async def handle_user_message(
    ctx: BotContext,
    requester_id: int,
    text: Optional[str],
) -> list[Outbound]:
    """Advance the requester's conversation by one message."""
    text = text or ""

    if text == texts.BTN_RESET:
        await clear_session(ctx, requester_id)
        logger.info("flow_reset", requester_id=requester_id)
        return [SendText(requester_id, texts.RESET_DONE, keyboards.main_keyboard())]

    if text == texts.BTN_MAIN_MENU:
        await clear_session(ctx, requester_id)
        return _welcome(requester_id)

    parameter = _start_parameter(text)
    if parameter is not None:
        await clear_session(ctx, requester_id)
        if parameter.startswith(texts.DEEP_LINK_EVENT_PREFIX):
            event_id = parameter[len(texts.DEEP_LINK_EVENT_PREFIX):]
            return await _enter_event_by_id(ctx, requester_id, event_id)
        return _welcome(requester_id)

    if text in texts.INFO_BLOCKS:
        return [SendText(requester_id, texts.INFO_BLOCKS[text], keyboards.main_keyboard())]

    if text == texts.BTN_BOOK_EXCURSION:
        await start_session(ctx, requester_id, Step.EX_NAME)
        return [_prompt(requester_id, Step.EX_NAME)]

    if text == texts.BTN_BOOK_EVENT:
        await start_session(ctx, requester_id, Step.EV_CHOOSE)
        return [_prompt(requester_id, Step.EV_CHOOSE)]

    session = await load_session(ctx, requester_id)
    if session is None:
        return [SendText(requester_id, texts.FALLBACK, keyboards.main_keyboard())]

    if session.step is Step.EV_CHOOSE:
        return await _choose_event(ctx, requester_id, session, text)

    return await _advance(ctx, requester_id, session, text)


async def _advance(
    ctx: BotContext,
    requester_id: int,
    session: Session,
    text: str,
) -> list[Outbound]:
    rule = RULES[session.step]
    value = rule.validate(text)

    if value is None:
        await save_session(ctx, requester_id, session)
        logger.info("step_rejected", requester_id=requester_id, step=session.step.value)
        keyboard = rule.retry_keyboard()
        return [SendText(requester_id, retry, keyboard) for retry in rule.retry_texts]

    setattr(session, rule.field, value)

    if rule.next_step is None:
        return await _complete(ctx, requester_id, session)

    session.step = rule.next_step
    await save_session(ctx, requester_id, session)
    return [_prompt(requester_id, session.step)]


async def _enter_event(ctx: BotContext, requester_id: int, event: Event) -> list[Outbound]:
    """Start the event flow at ev_name, or abort to idle when the event is full."""
    counter = await booking_service.get_counter(ctx.store, event)
    if counter.is_full:
        await clear_session(ctx, requester_id)
        logger.info("event_fully_booked", requester_id=requester_id, event_id=event.id)
        notice = texts.EVENT_FULLY_BOOKED.format(title=event.title, date=event.date)
        return [SendText(requester_id, notice, keyboards.main_keyboard())]

    await start_session(
        ctx,
        requester_id,
        Step.EV_NAME,
        event_id=event.id,
        event_title=event.title,
        event_date=event.date,
    )
    chosen = texts.EVENT_CHOSEN.format(title=event.title, date=event.date)
    return [SendText(requester_id, chosen), _prompt(requester_id, Step.EV_NAME)]


async def _enter_event_by_id(ctx: BotContext, requester_id: int, event_id: str) -> list[Outbound]:
    event = get_event(event_id)
    if event is None:
        logger.info("deep_link_unknown_event", requester_id=requester_id, event_id=event_id)
        return [SendText(requester_id, texts.EVENT_NOT_FOUND)] + _welcome(requester_id)
    return await _enter_event(ctx, requester_id, event)


async def _choose_event(
    ctx: BotContext,
    requester_id: int,
    session: Session,
    text: str,
) -> list[Outbound]:
    event = find_by_label(text)
    if event is None:
        await save_session(ctx, requester_id, session)
        return [SendText(requester_id, texts.ASK_EVENT_BUTTONS, keyboards.event_choice_keyboard())]
    return await _enter_event(ctx, requester_id, event)


async def _complete(ctx: BotContext, requester_id: int, session: Session) -> list[Outbound]:
    booking_type = FLOW_TYPES[session.step]
    answers = BookingAnswers(
        name=session.name,
        date=session.date,
        time=session.time,
        people=session.people,
        contact=session.contact,
        event_title=session.event_title,
        event_date=session.event_date,
    )

    try:
        booking = await booking_service.create_booking(
            ctx.store,
            booking_type=booking_type,
            requester_id=requester_id,
            people=validators.people_count(session.people),
            answers=answers,
            now=ctx.clock(),
            event_id=session.event_id if booking_type is BookingType.EVENT else None,
        )
    finally:
        # A finished flow is never resumed, even when saving the booking failed
        await clear_session(ctx, requester_id)

    bookings_created.labels(type=booking_type.value).inc()

    instructions = announce_booking(ctx, booking)
    instructions.append(SendText(requester_id, texts.REQUEST_SENT, keyboards.main_keyboard()))
    return instructions
