"""
Pydantic schemas for the subset of the Telegram Update object the bot reads.
Everything else in the payload is ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _TelegramModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TelegramUser(_TelegramModel):
    id: int
    is_bot: bool = False
    first_name: str = ""
    username: Optional[str] = None


class Chat(_TelegramModel):
    id: int
    type: str = "private"


class Message(_TelegramModel):
    message_id: int
    chat: Chat
    from_user: Optional[TelegramUser] = Field(default=None, alias="from")
    text: Optional[str] = None


class CallbackQuery(_TelegramModel):
    id: str
    from_user: TelegramUser = Field(..., alias="from")
    message: Optional[Message] = None
    data: Optional[str] = None


class Update(_TelegramModel):
    update_id: int
    message: Optional[Message] = None
    callback_query: Optional[CallbackQuery] = None
