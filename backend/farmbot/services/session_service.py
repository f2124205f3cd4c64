"""
Conversation sessions, one per requester.

Every write refreshes ``expires_at`` to now + TTL. An expired or
unreadable session is deleted on read and reported as absent, which puts
the requester back into the idle state.
"""

from typing import Optional

from farmbot.core.errors import RecordDecodeError
from farmbot.core.logging import get_logger
from farmbot.models.session import Session, Step
from farmbot.services.context import BotContext

logger = get_logger(__name__)

SESSION_PREFIX = "session:"


def session_key(requester_id: int) -> str:
    return f"{SESSION_PREFIX}{requester_id}"


async def load_session(ctx: BotContext, requester_id: int) -> Optional[Session]:
    key = session_key(requester_id)
    raw = await ctx.store.get(key)
    if raw is None:
        return None

    try:
        session = Session.load(raw, key)
    except RecordDecodeError as e:
        logger.warning("session_decode_failed", requester_id=requester_id, error=e.reason)
        await ctx.store.delete(key)
        return None

    if session.is_expired(ctx.clock()):
        logger.info("session_expired", requester_id=requester_id, step=session.step.value)
        await ctx.store.delete(key)
        return None
    return session


async def save_session(ctx: BotContext, requester_id: int, session: Session) -> Session:
    session.expires_at = ctx.clock() + ctx.session_ttl
    await ctx.store.put(session_key(requester_id), session.dump())
    return session


async def start_session(ctx: BotContext, requester_id: int, step: Step, **answers) -> Session:
    session = Session(step=step, expires_at=ctx.clock() + ctx.session_ttl, **answers)
    await save_session(ctx, requester_id, session)
    logger.info("flow_started", requester_id=requester_id, step=step.value)
    return session


async def clear_session(ctx: BotContext, requester_id: int) -> None:
    await ctx.store.delete(session_key(requester_id))
