"""
Redis-backed key-value store.

Every command is bounded twice: by the client socket timeout and by
asyncio.wait_for around the call. Any failure surfaces as StoreError.

A booking transition runs as a Lua script: the status check, the seat
ceiling check and both writes are one atomic step on the Redis server.
Two operator actions racing on the same booking or the same event are
serialized by Redis itself; no lock or retry loop is needed.
"""

import asyncio
import json
import os
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from farmbot.core.errors import StoreError
from farmbot.core.logging import get_logger
from farmbot.core.metrics import record_store_error
from farmbot.services.interfaces.store import (
    KeyValueStore,
    SeatReservation,
    TransitionOutcome,
    TransitionResult,
)

logger = get_logger(__name__)

# Load Lua script
SCRIPT_PATH = os.path.join(os.path.dirname(__file__), 'transition_booking.lua')
with open(SCRIPT_PATH, 'r') as f:
    TRANSITION_SCRIPT = f.read()

_OUTCOMES = {
    0: TransitionOutcome.APPLIED,
    1: TransitionOutcome.STALE,
    2: TransitionOutcome.INSUFFICIENT,
    3: TransitionOutcome.MISSING,
}


class RedisStore(KeyValueStore):

    def __init__(self, client: redis.Redis, key_prefix: str = "", timeout: float = 5.0):
        self.redis = client
        self.key_prefix = key_prefix
        self.timeout = timeout
        self.script = self.redis.register_script(TRANSITION_SCRIPT)

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "", timeout: float = 5.0) -> "RedisStore":
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
        )
        return cls(client, key_prefix=key_prefix, timeout=timeout)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def _bounded(self, operation: str, key: Optional[str], awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except (RedisError, asyncio.TimeoutError, OSError) as e:
            record_store_error(operation)
            logger.error("store_error", operation=operation, key=key, error=str(e))
            raise StoreError(operation, key, str(e)) from e

    async def get(self, key: str) -> Optional[str]:
        return await self._bounded("get", key, self.redis.get(self._key(key)))

    async def put(self, key: str, value: str, only_if_absent: bool = False) -> bool:
        result = await self._bounded(
            "put", key, self.redis.set(self._key(key), value, nx=only_if_absent)
        )
        return bool(result)

    async def delete(self, key: str) -> None:
        await self._bounded("delete", key, self.redis.delete(self._key(key)))

    async def list_by_prefix(self, prefix: str) -> list[str]:
        async def _scan() -> list[str]:
            keys = []
            async for full_key in self.redis.scan_iter(match=f"{self._key(prefix)}*", count=100):
                keys.append(full_key[len(self.key_prefix):])
            return sorted(keys)

        return await self._bounded("list", prefix, _scan())

    async def transition(
        self,
        key: str,
        expected_status: str,
        value: str,
        reservation: Optional[SeatReservation] = None,
    ) -> TransitionResult:
        keys = [self._key(key)]
        args = [expected_status, value, json.loads(value)["status"]]
        if reservation is not None:
            keys.append(self._key(reservation.counter_key))
            args.extend([reservation.booking_id, reservation.seats, reservation.capacity])

        outcome, status, booked, cap = await self._bounded(
            "transition", key, self.script(keys=keys, args=args)
        )
        outcome = _OUTCOMES[int(outcome)]
        return TransitionResult(
            outcome,
            None if outcome is TransitionOutcome.MISSING else status,
            int(booked),
            int(cap),
        )

    async def ping(self) -> bool:
        try:
            return bool(await asyncio.wait_for(self.redis.ping(), timeout=self.timeout))
        except (RedisError, asyncio.TimeoutError, OSError) as e:
            logger.error("redis_connection_failed", error=str(e))
            return False

    async def close(self) -> None:
        await self.redis.aclose()
