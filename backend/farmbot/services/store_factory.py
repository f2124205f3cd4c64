"""
Store and notifier factory.
Configures which store backend the process uses.
"""

from farmbot.core.config import Settings
from farmbot.infrastructure.memory_store import InMemoryStore
from farmbot.infrastructure.redis_store import RedisStore
from farmbot.infrastructure.telegram_client import TelegramNotifier
from farmbot.services.context import BotContext
from farmbot.services.interfaces.store import KeyValueStore


def get_store(settings: Settings) -> KeyValueStore:
    """
    Get configured store.

    - memory: single process only (development, tests)
    - redis: shared by all workers, atomic seat reservation via Lua
    """
    if settings.STORE_BACKEND == "redis":
        return RedisStore.from_url(
            settings.REDIS_URL,
            key_prefix=settings.KEY_PREFIX,
            timeout=settings.STORE_TIMEOUT,
        )
    if settings.STORE_BACKEND != "memory":
        raise ValueError(f"unknown STORE_BACKEND {settings.STORE_BACKEND!r}")
    return InMemoryStore()


def build_context(settings: Settings) -> BotContext:
    notifier = TelegramNotifier(
        settings.BOT_TOKEN,
        api_url=settings.TELEGRAM_API_URL,
        timeout=settings.TELEGRAM_TIMEOUT,
    )
    return BotContext(settings=settings, store=get_store(settings), notifier=notifier)
