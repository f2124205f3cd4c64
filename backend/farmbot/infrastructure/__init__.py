"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .memory_store import InMemoryStore
from .redis_store import RedisStore
from .telegram_client import TelegramNotifier

__all__ = ['InMemoryStore', 'RedisStore', 'TelegramNotifier']
