"""
Explicit context handed to every core operation.

Holds the injected adapters and configuration for one process. It carries
no per-delivery state, so one instance is shared by all deliveries.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from farmbot.core.config import Settings
from farmbot.services.interfaces.notifier import Notifier
from farmbot.services.interfaces.store import KeyValueStore


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class BotContext:
    settings: Settings
    store: KeyValueStore
    notifier: Notifier
    clock: Callable[[], datetime] = field(default=utcnow)

    @property
    def operator_id(self) -> Optional[int]:
        return self.settings.ADMIN_USER_ID

    @property
    def admin_chat_id(self) -> Optional[int]:
        return self.settings.admin_notify_chat_id

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(seconds=self.settings.SESSION_TTL_SECONDS)

    def is_operator(self, identity: Optional[int]) -> bool:
        if self.operator_id is None or identity is None:
            return False
        return int(identity) == int(self.operator_id)
