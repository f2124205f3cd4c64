"""
FastAPI dependencies.
"""

from fastapi import Request

from farmbot.services.context import BotContext


def get_context(request: Request) -> BotContext:
    """The process-wide bot context built in the application lifespan."""
    return request.app.state.context
