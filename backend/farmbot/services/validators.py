"""
Input rules for the conversation steps.

Each validator returns the normalized value to store, or None when the
input must be rejected and the step re-prompted.
"""

import re
from typing import Optional

from farmbot.catalog.texts import EVENT_PEOPLE_MAX, EXCURSION_PEOPLE_CHOICES

TELEGRAM_HANDLE_RE = re.compile(r"^@[A-Za-z0-9_]{4,32}$")
PHONE_CHARS_RE = re.compile(r"^[0-9+\s()\-]+$")
PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15


def non_empty(text: str) -> Optional[str]:
    """Any text is kept verbatim as long as it is not blank."""
    if not (text or "").strip():
        return None
    return text


def excursion_people(text: str) -> Optional[str]:
    """Only the keyboard labels are accepted; "6–10" is stored as "6-10", "более 11" as "11+"."""
    return EXCURSION_PEOPLE_CHOICES.get(text)


def event_people(text: str) -> Optional[str]:
    value = (text or "").strip()
    if not re.fullmatch(r"[0-9]+", value):
        return None
    count = int(value)
    if not 1 <= count <= EVENT_PEOPLE_MAX:
        return None
    return str(count)


def is_telegram_handle(text: str) -> bool:
    return bool(TELEGRAM_HANDLE_RE.match(text))


def is_phone(text: str) -> bool:
    if not PHONE_CHARS_RE.match(text):
        return False
    digits = re.sub(r"\D", "", text)
    return PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS


def contact(text: str) -> Optional[str]:
    value = (text or "").strip()
    if is_telegram_handle(value) or is_phone(value):
        return value
    return None


def people_count(value: Optional[str]) -> int:
    """
    Party size as a number for capacity math.

    Banded values count their lower bound: "6-10" -> 6, "11+" -> 11.
    Anything unparseable counts as 0.
    """
    match = re.match(r"\s*(\d+)", value or "")
    return int(match.group(1)) if match else 0
