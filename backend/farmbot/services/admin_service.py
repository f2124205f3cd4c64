"""
Operator side of the booking lifecycle.

New booking requests are announced to the operator chat with inline
"confirm" / "cancel" buttons. A tap arrives as an action payload
``confirm:<booking_id>`` or ``cancel:<booking_id>``; ``roster:<event_id>``
lists the requests of one holiday event.

Status machine per booking:

  new -> confirmed   (terminal)
  new -> cancelled   (terminal)

Repeating an action on a terminal booking is a no-op that reports the
current status back. The status change is a conditional store transition,
so when two actions race on one booking only the first is applied; the
other sees the stored decision and reports it. For event bookings the
seats are taken in that same transition.
"""

from typing import Optional

from farmbot.catalog import keyboards, texts
from farmbot.catalog.events import get_event, list_events
from farmbot.core.logging import get_logger
from farmbot.core.metrics import record_admin_action
from farmbot.models.booking import Booking, BookingStatus, BookingType
from farmbot.models.event import Event
from farmbot.services import booking_service
from farmbot.services.context import BotContext
from farmbot.services.interfaces.store import TransitionOutcome, TransitionResult
from farmbot.services.outbound import AnswerAction, EditText, Outbound, SendText

logger = get_logger(__name__)

MESSAGE_CHUNK = 3500

OPERATOR_COMMANDS = (texts.CMD_EVENTS, texts.CMD_ROSTER)


# --- Formatting ---------------------------------------------------------------

def _summary_lines(booking: Booking) -> list[str]:
    answers = booking.answers
    lines = []
    if answers.event_title:
        lines.append(f"Событие: {answers.event_title}")
    date = answers.event_date or answers.date
    if date:
        lines.append(f"Дата: {date}")
    if answers.time:
        lines.append(f"Время: {answers.time}")
    if answers.name:
        lines.append(f"Имя: {answers.name}")
    if answers.people:
        lines.append(f"Гостей: {answers.people}")
    if answers.contact:
        lines.append(f"Контакт: {answers.contact}")
    return lines


def _decision_text(booking: Booking) -> str:
    if booking.status is BookingStatus.CONFIRMED:
        header = texts.ADMIN_DECISION_CONFIRMED
        status = texts.ADMIN_STATUS_CONFIRMED
    else:
        header = texts.ADMIN_DECISION_CANCELLED
        status = texts.ADMIN_STATUS_CANCELLED
    body = "\n".join(_summary_lines(booking))
    return f"{header.format(id=booking.id)}\n\n{body}\n\n{status}"


def _requester_confirmation(booking: Booking) -> str:
    answers = booking.answers
    if booking.is_capacity_bound:
        return texts.USER_CONFIRMED_EVENT.format(
            id=booking.id,
            event_title=answers.event_title or "",
            event_date=answers.event_date or "",
            people=answers.people or booking.people,
        )
    return texts.USER_CONFIRMED_EXCURSION.format(
        id=booking.id,
        date=answers.date or "",
        time=answers.time or "",
    )


def _chunks(lines: list[str], size: int = MESSAGE_CHUNK) -> list[str]:
    """Join lines into messages that stay below the Telegram text limit."""
    chunks, current = [], ""
    for line in lines:
        if current and len(current) + len(line) + 1 > size:
            chunks.append(current)
            current = line
        else:
            current = f"{current}\n{line}" if current else line
    if current:
        chunks.append(current)
    return chunks


# --- New request announcement -------------------------------------------------

def announce_booking(ctx: BotContext, booking: Booking) -> list[Outbound]:
    """Instructions that put a fresh booking in front of the operator."""
    chat_id = ctx.admin_chat_id
    if chat_id is None:
        logger.warning("admin_chat_not_configured", booking_id=booking.id)
        return []

    answers = booking.answers
    if booking.type is BookingType.EVENT:
        text = texts.ADMIN_NEW_EVENT.format(
            id=booking.id,
            event_title=answers.event_title,
            event_date=answers.event_date,
            name=answers.name,
            people=answers.people,
            contact=answers.contact,
        )
    else:
        text = texts.ADMIN_NEW_EXCURSION.format(
            id=booking.id,
            name=answers.name,
            date=answers.date,
            time=answers.time,
            people=answers.people,
            contact=answers.contact,
        )
    return [SendText(chat_id, text, keyboards.admin_booking_keyboard(booking.id))]


# --- Inline actions -----------------------------------------------------------

async def handle_operator_action(
    ctx: BotContext,
    actor_id: Optional[int],
    payload: Optional[str],
    action_id: str,
    origin_chat_id: Optional[int] = None,
    origin_message_id: Optional[int] = None,
) -> list[Outbound]:
    """Handle a tap on an inline operator button."""
    action, _, argument = (payload or "").partition(":")

    if not ctx.is_operator(actor_id):
        record_admin_action(action or "unknown", "forbidden")
        logger.warning("admin_action_forbidden", actor_id=actor_id, payload=payload)
        return [AnswerAction(action_id, texts.ACK_FORBIDDEN, is_alert=True)]

    if action == texts.ACTION_CONFIRM and argument:
        return await confirm_booking(ctx, argument, action_id, origin_chat_id, origin_message_id)

    if action == texts.ACTION_CANCEL and argument:
        return await cancel_booking(ctx, argument, action_id, origin_chat_id, origin_message_id)

    if action == texts.ACTION_ROSTER and argument:
        target = origin_chat_id if origin_chat_id is not None else ctx.admin_chat_id
        event = get_event(argument)
        if event is None or target is None:
            return [AnswerAction(action_id, texts.ACK_EVENT_NOT_FOUND)]
        messages = await event_roster(ctx, event)
        record_admin_action(texts.ACTION_ROSTER, "ok")
        return [SendText(target, m) for m in messages] + [AnswerAction(action_id, texts.ACK_ROSTER)]

    record_admin_action("unknown", "invalid")
    logger.info("admin_action_unknown", payload=payload)
    return [AnswerAction(action_id, texts.ACK_UNKNOWN_ACTION)]


def _already_decided(booking_id: str, status: BookingStatus, action_id: str, action: str) -> list[Outbound]:
    record_admin_action(action, "noop")
    if status is BookingStatus.CONFIRMED:
        text = texts.ACK_ALREADY_CONFIRMED
    else:
        text = texts.ACK_ALREADY_CANCELLED
    logger.info("admin_action_noop", booking_id=booking_id, action=action, status=status.value)
    return [AnswerAction(action_id, text)]


def _lost_transition(
    booking: Booking,
    result: TransitionResult,
    action_id: str,
    action: str,
) -> Optional[list[Outbound]]:
    """Answer for a transition the store did not apply, None when it was applied."""
    if result.outcome is TransitionOutcome.APPLIED:
        return None
    if result.outcome is TransitionOutcome.MISSING:
        record_admin_action(action, "not_found")
        return [AnswerAction(action_id, texts.ACK_NOT_FOUND)]
    if result.outcome is TransitionOutcome.INSUFFICIENT:
        record_admin_action(action, "no_seats")
        return [AnswerAction(action_id, texts.ACK_NO_SEATS.format(free=result.free), is_alert=True)]
    return _already_decided(booking.id, BookingStatus(result.status), action_id, action)


def _operator_message_update(
    booking: Booking,
    origin_chat_id: Optional[int],
    origin_message_id: Optional[int],
) -> list[Outbound]:
    if origin_chat_id is None or origin_message_id is None:
        return []
    return [EditText(origin_chat_id, origin_message_id, _decision_text(booking))]


async def confirm_booking(
    ctx: BotContext,
    booking_id: str,
    action_id: str,
    origin_chat_id: Optional[int] = None,
    origin_message_id: Optional[int] = None,
) -> list[Outbound]:
    action = texts.ACTION_CONFIRM
    booking = await booking_service.get_booking(ctx.store, booking_id)
    if booking is None:
        record_admin_action(action, "not_found")
        return [AnswerAction(action_id, texts.ACK_NOT_FOUND)]

    if booking.status.is_terminal:
        return _already_decided(booking.id, booking.status, action_id, action)

    event = None
    if booking.is_capacity_bound:
        event = get_event(booking.event_id)
        if event is None:
            record_admin_action(action, "not_found")
            logger.error("booking_event_missing", booking_id=booking.id, event_id=booking.event_id)
            return [AnswerAction(action_id, texts.ACK_EVENT_NOT_FOUND, is_alert=True)]

        if booking.people <= 0:
            record_admin_action(action, "invalid")
            return [AnswerAction(action_id, texts.ACK_INVALID_PEOPLE, is_alert=True)]

    result = await booking_service.transition_booking(ctx.store, booking, BookingStatus.CONFIRMED, event)
    lost = _lost_transition(booking, result, action_id, action)
    if lost is not None:
        return lost

    booking.status = BookingStatus.CONFIRMED
    record_admin_action(action, "ok")
    logger.info("booking_confirmed", booking_id=booking.id, event_id=booking.event_id, people=booking.people)

    instructions = _operator_message_update(booking, origin_chat_id, origin_message_id)
    instructions.append(SendText(booking.requester_id, _requester_confirmation(booking)))
    instructions.append(AnswerAction(action_id, texts.ACK_CONFIRMED))
    return instructions


async def cancel_booking(
    ctx: BotContext,
    booking_id: str,
    action_id: str,
    origin_chat_id: Optional[int] = None,
    origin_message_id: Optional[int] = None,
) -> list[Outbound]:
    """Decline a pending booking. Seats are only taken on confirm, so the counter is left alone."""
    action = texts.ACTION_CANCEL
    booking = await booking_service.get_booking(ctx.store, booking_id)
    if booking is None:
        record_admin_action(action, "not_found")
        return [AnswerAction(action_id, texts.ACK_NOT_FOUND)]

    if booking.status.is_terminal:
        return _already_decided(booking.id, booking.status, action_id, action)

    result = await booking_service.transition_booking(ctx.store, booking, BookingStatus.CANCELLED)
    lost = _lost_transition(booking, result, action_id, action)
    if lost is not None:
        return lost

    booking.status = BookingStatus.CANCELLED
    record_admin_action(action, "ok")
    logger.info("booking_cancelled", booking_id=booking.id, event_id=booking.event_id)

    instructions = _operator_message_update(booking, origin_chat_id, origin_message_id)
    instructions.append(SendText(booking.requester_id, texts.USER_CANCELLED.format(id=booking.id)))
    instructions.append(AnswerAction(action_id, texts.ACK_CANCELLED))
    return instructions


# --- Read-only projections ----------------------------------------------------

async def events_summary(ctx: BotContext) -> str:
    lines = [texts.SUMMARY_HEADER]
    for event in list_events():
        counter = await booking_service.get_counter(ctx.store, event, create=False)
        lines.append(texts.SUMMARY_LINE.format(
            title=event.title,
            date=event.date,
            booked=counter.booked,
            capacity=counter.capacity,
            state=texts.SUMMARY_CLOSED if counter.is_full else texts.SUMMARY_OPEN,
        ))
    return "\n".join(lines)


async def event_roster(ctx: BotContext, event: Event) -> list[str]:
    counter = await booking_service.get_counter(ctx.store, event, create=False)
    bookings = await booking_service.list_event_bookings(ctx.store, event.id)

    lines = [texts.ROSTER_HEADER.format(
        title=event.title, date=event.date, booked=counter.booked, capacity=counter.capacity,
    )]
    if not bookings:
        lines.append(texts.ROSTER_EMPTY)
    for booking in bookings:
        lines.append(texts.ROSTER_LINE.format(
            id=booking.id,
            status=texts.STATUS_LABELS.get(booking.status.value, booking.status.value),
            name=booking.answers.name or "—",
            people=booking.people,
        ))
    return _chunks(lines)


def is_operator_command(text: Optional[str]) -> bool:
    command = (text or "").strip().split(" ", 1)[0].split("@", 1)[0]
    return command in OPERATOR_COMMANDS


async def handle_operator_command(ctx: BotContext, chat_id: int, text: str) -> list[Outbound]:
    """Text commands available to the operator: /events and /roster <event_id>."""
    command, _, argument = text.strip().partition(" ")
    command = command.split("@", 1)[0]
    argument = argument.strip()

    if command == texts.CMD_EVENTS:
        summary = await events_summary(ctx)
        return [SendText(chat_id, summary, keyboards.admin_roster_keyboard())]

    if not argument:
        return [SendText(chat_id, texts.ROSTER_USAGE)]
    event = get_event(argument)
    if event is None:
        return [SendText(chat_id, texts.ACK_EVENT_NOT_FOUND)]
    return [SendText(chat_id, m) for m in await event_roster(ctx, event)]
