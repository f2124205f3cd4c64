"""
Pytest fixtures for the bot core, the in-memory store and the HTTP client.

Every test gets a fresh in-memory store, a notifier that records instead
of calling Telegram, and a clock it can move forward.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from farmbot.api.deps import get_context
from farmbot.core.config import Settings
from farmbot.infrastructure.memory_store import InMemoryStore
from farmbot.main import app
from farmbot.models.event import Event
from farmbot.services.context import BotContext
from farmbot.services.flow_engine import handle_user_message
from farmbot.services.interfaces.notifier import NotificationResult, Notifier

OPERATOR_ID = 1000
ADMIN_CHAT_ID = -500
REQUESTER_ID = 42


class RecordingNotifier(Notifier):
    """Notifier that remembers every call. Set ``fail`` to simulate Telegram errors."""

    def __init__(self):
        self.sent: list[dict] = []
        self.edited: list[dict] = []
        self.answered: list[dict] = []
        self.fail = False

    def _result(self) -> NotificationResult:
        if self.fail:
            return NotificationResult(ok=False, status=502, body="bad gateway")
        return NotificationResult(ok=True, status=200, body="{}")

    async def send_text(self, target_id, text, keyboard=None):
        self.sent.append({"target_id": target_id, "text": text, "keyboard": keyboard})
        return self._result()

    async def edit_text(self, target_id, message_id, text, keyboard=None):
        self.edited.append({"target_id": target_id, "message_id": message_id, "text": text})
        return self._result()

    async def answer_action(self, action_id, text, is_alert=False):
        self.answered.append({"action_id": action_id, "text": text, "is_alert": is_alert})
        return self._result()

    def texts_to(self, target_id: int) -> list[str]:
        return [m["text"] for m in self.sent if m["target_id"] == target_id]


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        BOT_TOKEN="test-token",
        ADMIN_USER_ID=OPERATOR_ID,
        ADMIN_CHAT_ID=ADMIN_CHAT_ID,
        STORE_BACKEND="memory",
        SESSION_TTL_SECONDS=600,
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 12, 1, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def ctx(settings, store, notifier, clock) -> BotContext:
    return BotContext(settings=settings, store=store, notifier=notifier, clock=clock)


@pytest.fixture
def say(ctx):
    """Send one text message as the requester and return the outbound instructions."""

    async def _say(text: Optional[str], requester_id: int = REQUESTER_ID):
        return await handle_user_message(ctx, requester_id, text)

    return _say


@pytest.fixture
def small_event(monkeypatch) -> Event:
    """A two-seat event patched into the catalog."""
    from farmbot.catalog import events as catalog

    event = Event(
        id="test-event",
        label="🎁 Тестовое событие",
        date="31.12.2026",
        title="Тестовое событие",
        capacity=2,
    )
    monkeypatch.setattr(catalog, "EVENTS", catalog.EVENTS + (event,))
    monkeypatch.setitem(catalog._BY_ID, event.id, event)
    monkeypatch.setitem(catalog._BY_LABEL, event.label, event)
    return event


@pytest_asyncio.fixture(scope="function")
async def client(ctx: BotContext) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the context dependency with the test context."""
    app.dependency_overrides[get_context] = lambda: ctx

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def message_update(text: str, chat_id: int = REQUESTER_ID, from_id: Optional[int] = None, update_id: int = 1) -> dict:
    return {
        "update_id": update_id,
        "message": {
            "message_id": 10,
            "chat": {"id": chat_id, "type": "private"},
            "from": {"id": from_id if from_id is not None else chat_id, "is_bot": False, "first_name": "Test"},
            "text": text,
        },
    }


def callback_update(data: str, from_id: int = OPERATOR_ID, message_id: int = 77, update_id: int = 2) -> dict:
    return {
        "update_id": update_id,
        "callback_query": {
            "id": "cb-1",
            "from": {"id": from_id, "is_bot": False, "first_name": "Operator"},
            "message": {
                "message_id": message_id,
                "chat": {"id": ADMIN_CHAT_ID, "type": "group"},
                "text": "Новая заявка",
            },
            "data": data,
        },
    }
