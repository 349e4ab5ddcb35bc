"""Middleware registration."""

from fastapi import FastAPI

from h2c.config import Settings
from h2c.middleware.cors import setup_cors
from h2c.middleware.error_handler import setup_error_handlers
from h2c.middleware.logging import setup_logging
from h2c.middleware.rate_limit import RateLimitMiddleware
from h2c.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register middleware; the last one added is outermost, so CORS wraps 429s."""
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
