"""
Compiled-in catalog of holiday events.

Order of EVENTS is the display order of the event keyboard and of the
operator summary.
"""

from typing import Optional

from farmbot.models.event import Event

EVENTS: tuple[Event, ...] = (
    Event(
        id="ny-2026-12-27",
        label="🎄 27 декабря — Новогодняя ферма",
        date="27.12.2026",
        title="Новогодняя ферма: Дед Мороз и катание на санях",
        capacity=25,
    ),
    Event(
        id="ny-2027-01-03",
        label="⛄ 3 января — Зимние каникулы",
        date="03.01.2027",
        title="Зимние каникулы: мастер-класс по сыроварению",
        capacity=15,
    ),
    Event(
        id="maslenitsa-2027-03-14",
        label="🥞 14 марта — Масленица",
        date="14.03.2027",
        title="Масленица на ферме: блины, чучело и гуляния",
        capacity=40,
    ),
)

_BY_ID = {event.id: event for event in EVENTS}
_BY_LABEL = {event.label: event for event in EVENTS}


def list_events() -> tuple[Event, ...]:
    return EVENTS


def get_event(event_id: str) -> Optional[Event]:
    return _BY_ID.get(event_id)


def find_by_label(label: str) -> Optional[Event]:
    return _BY_LABEL.get(label)
