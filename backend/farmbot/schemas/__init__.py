from farmbot.schemas.telegram import CallbackQuery, Chat, Message, TelegramUser, Update

__all__ = ["CallbackQuery", "Chat", "Message", "TelegramUser", "Update"]
