"""
Farm Booking Bot - Main Application Entry Point

Telegram webhook service for the farm's visitor program:
- Excursion and holiday-event booking flows driven by per-user sessions
- Operator approval with atomic, capacity-checked seat reservation
- Structured logging with request correlation
- Redis-backed state shared between workers
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from farmbot.api.deps import get_context
from farmbot.api.middleware import RequestLoggingMiddleware
from farmbot.api.router import api_router
from farmbot.core.config import get_settings
from farmbot.core.logging import get_logger, setup_logging
from farmbot.core.metrics import metrics_endpoint
from farmbot.infrastructure.redis_store import RedisStore
from farmbot.services.context import BotContext
from farmbot.services.store_factory import build_context

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        store=settings.STORE_BACKEND,
    )

    ctx = build_context(settings)
    app.state.context = ctx

    if isinstance(ctx.store, RedisStore):
        if await ctx.store.ping():
            logger.info("redis_ready")
        else:
            logger.warning("redis_unavailable", message="Store calls will fail until Redis is reachable")
    if not settings.BOT_TOKEN:
        logger.warning("bot_token_missing", message="Outbound Telegram calls will fail")
    if settings.ADMIN_USER_ID is None:
        logger.warning("admin_user_missing", message="Nobody can confirm or cancel bookings")

    yield

    # Cleanup
    await ctx.notifier.close()
    await ctx.store.close()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Telegram booking bot for farm excursions and holiday events",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check(ctx: BotContext = Depends(get_context)):
    """Health check endpoint for Docker and load balancers."""
    if isinstance(ctx.store, RedisStore):
        store = "connected" if await ctx.store.ping() else "unavailable"
    else:
        store = "memory"
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "store": store,
    }


@app.get("/metrics", tags=["Health"])
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
