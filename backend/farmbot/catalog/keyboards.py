"""
Telegram reply_markup definitions.

Every keyboard shown during a flow carries the reset and main menu
buttons so a requester can always leave the flow.
"""

from typing import Iterable

from farmbot.catalog import texts
from farmbot.catalog.events import list_events

_ESCAPE_ROW = [{"text": texts.BTN_RESET}, {"text": texts.BTN_MAIN_MENU}]


def _reply_keyboard(rows: list[list[dict]]) -> dict:
    return {"keyboard": rows, "resize_keyboard": True}


def _buttons(labels: Iterable[str]) -> list[dict]:
    return [{"text": label} for label in labels]


def main_keyboard() -> dict:
    return _reply_keyboard([
        _buttons([texts.BTN_BOOK_EXCURSION]),
        _buttons([texts.BTN_BOOK_EVENT]),
        _buttons([texts.BTN_EXCURSIONS, texts.BTN_SCHEDULE]),
        _buttons([texts.BTN_PRODUCTS, texts.BTN_DIRECTIONS]),
        _buttons([texts.BTN_RESET]),
        _buttons([texts.BTN_MAIN_MENU]),
    ])


def flow_keyboard() -> dict:
    return _reply_keyboard([list(_ESCAPE_ROW)])


def excursion_people_keyboard() -> dict:
    labels = list(texts.EXCURSION_PEOPLE_CHOICES)
    return _reply_keyboard([
        _buttons(labels[0:3]),
        _buttons(labels[3:6]),
        _buttons(labels[6:]),
        list(_ESCAPE_ROW),
    ])


def event_people_keyboard() -> dict:
    labels = texts.EVENT_PEOPLE_BUTTONS
    return _reply_keyboard([
        _buttons(labels[0:3]),
        _buttons(labels[3:6]),
        list(_ESCAPE_ROW),
    ])


def event_choice_keyboard() -> dict:
    rows = [_buttons([event.label]) for event in list_events()]
    rows.append(list(_ESCAPE_ROW))
    return _reply_keyboard(rows)


def admin_booking_keyboard(booking_id: str) -> dict:
    return {
        "inline_keyboard": [
            [
                {"text": texts.BTN_CONFIRM, "callback_data": f"{texts.ACTION_CONFIRM}:{booking_id}"},
                {"text": texts.BTN_CANCEL, "callback_data": f"{texts.ACTION_CANCEL}:{booking_id}"},
            ]
        ]
    }


def admin_roster_keyboard() -> dict:
    return {
        "inline_keyboard": [
            [{"text": event.label, "callback_data": f"{texts.ACTION_ROSTER}:{event.id}"}]
            for event in list_events()
        ]
    }
