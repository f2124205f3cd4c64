"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Inbound webhook traffic
telegram_updates = Counter(
    'telegram_updates_total',
    'Telegram updates received',
    ['kind']  # message, callback_query, ignored, malformed, forbidden
)

update_failures = Counter(
    'update_failures_total',
    'Updates whose handling raised and was swallowed at the boundary'
)

update_latency = Histogram(
    'update_handling_seconds',
    'Time spent handling a single update',
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# Booking lifecycle
bookings_created = Counter(
    'bookings_created_total',
    'Booking requests created by completed flows',
    ['type']  # excursion, event
)

admin_actions = Counter(
    'admin_actions_total',
    'Operator actions on bookings',
    ['action', 'result']  # confirm/cancel/roster, ok/noop/not_found/no_seats/invalid/forbidden
)

# Adapters
notifications = Counter(
    'notifications_total',
    'Outbound Telegram calls',
    ['method', 'result']  # sendMessage/editMessageText/answerCallbackQuery, ok/error
)

store_errors = Counter(
    'store_errors_total',
    'Key-value store failures',
    ['operation']
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_update(kind: str):
    """Record an inbound update. Kind: message, callback_query, ignored, malformed, forbidden"""
    telegram_updates.labels(kind=kind).inc()


def record_admin_action(action: str, result: str):
    admin_actions.labels(action=action, result=result).inc()


def record_notification(method: str, ok: bool):
    """Record an outbound Telegram call."""
    result = "ok" if ok else "error"
    notifications.labels(method=method, result=result).inc()


def record_store_error(operation: str):
    store_errors.labels(operation=operation).inc()
