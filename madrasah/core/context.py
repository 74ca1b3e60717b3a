"""
Application context: the one place the data client and query cache live.

Constructed once in the lifespan handler at boot, closed at shutdown, and
handed to routers through the `get_context` dependency.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from fastapi import Request

from madrasah.core.cache import QueryCache
from madrasah.core.config import Settings
from madrasah.core.database import create_auth_client, create_supabase

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    db: Any
    auth_client_factory: Callable[[], Any]
    cache: QueryCache = field(default_factory=QueryCache)
    closed: bool = False

    def new_auth_client(self):
        return self.auth_client_factory()

    def close(self) -> None:
        self.cache.clear()
        self.closed = True
        logger.info("Application context closed")


def build_context(settings: Settings) -> AppContext:
    ctx = AppContext(
        settings=settings,
        db=create_supabase(settings),
        auth_client_factory=lambda: create_auth_client(settings),
        cache=QueryCache(ttl_seconds=settings.CACHE_TTL_SECONDS),
    )
    logger.info("Application context ready (auth_mode=%s)", settings.AUTH_MODE)
    return ctx


def get_context(request: Request) -> AppContext:
    return request.app.state.context
