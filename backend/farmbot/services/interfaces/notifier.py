"""
Outbound notification interface (the chat transport).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NotificationResult:
    ok: bool
    status: int = 0
    body: str = ""


class Notifier(ABC):
    """
    Interface for sending messages back to chat users.

    Implementations never raise: a failed call is reported through
    NotificationResult.ok so that the caller can log it and move on.
    """

    @abstractmethod
    async def send_text(
        self,
        target_id: int,
        text: str,
        keyboard: Optional[dict] = None,
    ) -> NotificationResult:
        pass

    @abstractmethod
    async def edit_text(
        self,
        target_id: int,
        message_id: int,
        text: str,
        keyboard: Optional[dict] = None,
    ) -> NotificationResult:
        pass

    @abstractmethod
    async def answer_action(
        self,
        action_id: str,
        text: str,
        is_alert: bool = False,
    ) -> NotificationResult:
        pass

    async def close(self) -> None:
        pass
