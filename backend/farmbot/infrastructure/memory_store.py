"""
Process-local store for development and tests.

Not shared between workers: use the Redis store whenever more than one
process serves the webhook.
"""

import asyncio
import json
from typing import Optional

from farmbot.core.errors import StoreError
from farmbot.services.interfaces.store import (
    KeyValueStore,
    SeatReservation,
    TransitionOutcome,
    TransitionResult,
)


class InMemoryStore(KeyValueStore):

    def __init__(self):
        self._data: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def put(self, key: str, value: str, only_if_absent: bool = False) -> bool:
        if only_if_absent and key in self._data:
            return False
        self._data[key] = value
        return True

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def list_by_prefix(self, prefix: str) -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    async def transition(
        self,
        key: str,
        expected_status: str,
        value: str,
        reservation: Optional[SeatReservation] = None,
    ) -> TransitionResult:
        async with self._lock:
            raw = self._data.get(key)
            if raw is None:
                return TransitionResult(TransitionOutcome.MISSING, None)
            try:
                status = json.loads(raw).get("status")
            except ValueError as e:
                raise StoreError("transition", key, "unreadable record") from e
            if status != expected_status:
                return TransitionResult(TransitionOutcome.STALE, status)

            booked = cap = 0
            if reservation is not None:
                counter_raw = self._data.get(reservation.counter_key)
                counter = json.loads(counter_raw) if counter_raw else {
                    "schemaVersion": 1, "capacity": reservation.capacity, "booked": 0,
                }
                reserved = counter.get("reservedBookingIds") or []
                cap = int(counter["capacity"])
                booked = int(counter["booked"])

                if reservation.booking_id not in reserved:
                    if booked + reservation.seats > cap:
                        return TransitionResult(TransitionOutcome.INSUFFICIENT, status, booked, cap)
                    booked += reservation.seats
                    counter["booked"] = booked
                    counter["reservedBookingIds"] = reserved + [reservation.booking_id]
                    self._data[reservation.counter_key] = json.dumps(counter)

            self._data[key] = value
            return TransitionResult(TransitionOutcome.APPLIED, json.loads(value).get("status"), booked, cap)
