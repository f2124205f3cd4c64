"""
Telegram Bot API client.

Calls are best effort: HTTP errors, timeouts and network failures are
logged with the Telegram response body and returned as a failed
NotificationResult. Nothing here raises into the caller.

Texts are sent without parse_mode so that user input (names with
underscores and the like) can never break entity parsing.
"""

from typing import Optional

import httpx

from farmbot.core.logging import get_logger
from farmbot.core.metrics import record_notification
from farmbot.services.interfaces.notifier import NotificationResult, Notifier

logger = get_logger(__name__)

MAX_TEXT_LENGTH = 4096


class TelegramNotifier(Notifier):

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = f"{api_url.rstrip('/')}/bot{token}"
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def call(self, method: str, payload: dict) -> NotificationResult:
        try:
            response = await self.client.post(f"{self.base_url}/{method}", json=payload)
        except httpx.HTTPError as e:
            record_notification(method, ok=False)
            logger.error("notification_failed", method=method, error=str(e) or type(e).__name__)
            return NotificationResult(ok=False, status=0, body=str(e))

        ok = response.is_success
        record_notification(method, ok=ok)
        if not ok:
            logger.error(
                "notification_failed",
                method=method,
                status_code=response.status_code,
                body=response.text,
                chat_id=payload.get("chat_id"),
            )
        return NotificationResult(ok=ok, status=response.status_code, body=response.text)

    async def send_text(
        self,
        target_id: int,
        text: str,
        keyboard: Optional[dict] = None,
    ) -> NotificationResult:
        payload = {"chat_id": target_id, "text": text[:MAX_TEXT_LENGTH]}
        if keyboard:
            payload["reply_markup"] = keyboard
        return await self.call("sendMessage", payload)

    async def edit_text(
        self,
        target_id: int,
        message_id: int,
        text: str,
        keyboard: Optional[dict] = None,
    ) -> NotificationResult:
        payload = {"chat_id": target_id, "message_id": message_id, "text": text[:MAX_TEXT_LENGTH]}
        if keyboard:
            payload["reply_markup"] = keyboard
        return await self.call("editMessageText", payload)

    async def answer_action(
        self,
        action_id: str,
        text: str,
        is_alert: bool = False,
    ) -> NotificationResult:
        payload = {"callback_query_id": action_id, "text": text, "show_alert": is_alert}
        return await self.call("answerCallbackQuery", payload)

    async def close(self) -> None:
        await self.client.aclose()
