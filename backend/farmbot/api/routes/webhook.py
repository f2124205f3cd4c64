"""
Telegram webhook endpoint.

Always answers 200 {"ok": true}: malformed JSON, payloads that are not a
valid Update and deliveries with a wrong secret token are logged and
dropped, never reported back to Telegram as an error.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from pydantic import ValidationError

from farmbot.api.deps import get_context
from farmbot.core.logging import get_logger
from farmbot.core.metrics import record_update, update_latency
from farmbot.schemas.telegram import Update
from farmbot.services.context import BotContext
from farmbot.services.dispatcher import dispatch_update

logger = get_logger(__name__)
router = APIRouter(tags=["Telegram"])

OK = {"ok": True}


@router.post("/webhook")
async def telegram_webhook(
    request: Request,
    ctx: BotContext = Depends(get_context),
    x_telegram_bot_api_secret_token: Optional[str] = Header(default=None),
):
    """Receive one Telegram update."""
    secret = ctx.settings.WEBHOOK_SECRET
    if secret and x_telegram_bot_api_secret_token != secret:
        record_update("forbidden")
        logger.warning("webhook_secret_mismatch")
        return OK

    try:
        payload = await request.json()
    except ValueError as e:
        record_update("malformed")
        logger.warning("webhook_malformed_json", error=str(e))
        return OK

    try:
        update = Update.model_validate(payload)
    except ValidationError as e:
        record_update("malformed")
        logger.warning("webhook_invalid_update", errors=e.error_count())
        return OK

    logger.info(
        "update_received",
        update_id=update.update_id,
        has_message=update.message is not None,
        has_callback=update.callback_query is not None,
    )
    with update_latency.time():
        await dispatch_update(ctx, update)
    return OK
