"""
Entry point of the bot core for one Telegram update.

Routes inline button taps to the operator protocol and text messages to
operator commands or the conversation flow, then delivers the resulting
instructions. This is the outermost boundary: nothing raised below is
allowed to escape, so the webhook always answers 200 and Telegram never
disables or hammers it.
"""

import structlog

from farmbot.catalog import texts
from farmbot.core.logging import get_logger
from farmbot.core.metrics import record_update, update_failures
from farmbot.schemas.telegram import Update
from farmbot.services.admin_service import (
    handle_operator_action,
    handle_operator_command,
    is_operator_command,
)
from farmbot.services.context import BotContext
from farmbot.services.flow_engine import handle_user_message
from farmbot.services.interfaces.notifier import NotificationResult
from farmbot.services.outbound import AnswerAction, Outbound, SendText, deliver

logger = get_logger(__name__)


async def route_update(ctx: BotContext, update: Update) -> list[Outbound]:
    if update.callback_query is not None:
        query = update.callback_query
        record_update("callback_query")
        origin = query.message
        return await handle_operator_action(
            ctx,
            actor_id=query.from_user.id,
            payload=query.data,
            action_id=query.id,
            origin_chat_id=origin.chat.id if origin else None,
            origin_message_id=origin.message_id if origin else None,
        )

    if update.message is not None:
        message = update.message
        record_update("message")
        from_id = message.from_user.id if message.from_user else None
        if is_operator_command(message.text) and ctx.is_operator(from_id):
            return await handle_operator_command(ctx, message.chat.id, message.text)
        return await handle_user_message(ctx, message.chat.id, message.text)

    record_update("ignored")
    return []


def _apology(update: Update) -> list[Outbound]:
    if update.callback_query is not None:
        return [AnswerAction(update.callback_query.id, texts.SOMETHING_WENT_WRONG)]
    if update.message is not None:
        return [SendText(update.message.chat.id, texts.SOMETHING_WENT_WRONG)]
    return []


async def dispatch_update(ctx: BotContext, update: Update) -> list[NotificationResult]:
    """Handle one update end to end. Never raises."""
    message = update.message or (update.callback_query.message if update.callback_query else None)
    sender = update.callback_query.from_user if update.callback_query else (
        update.message.from_user if update.message else None
    )
    structlog.contextvars.bind_contextvars(
        update_id=update.update_id,
        chat_id=message.chat.id if message else None,
        from_id=sender.id if sender else None,
    )

    try:
        instructions = await route_update(ctx, update)
    except Exception as e:
        update_failures.inc()
        logger.exception("update_failed", error=str(e))
        instructions = _apology(update)

    try:
        return await deliver(ctx.notifier, instructions)
    except Exception as e:
        update_failures.inc()
        logger.exception("delivery_failed", error=str(e))
        return []
