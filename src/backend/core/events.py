"""
Application lifecycle event handlers.

Opens the database engine (creating missing tables) and precomputes the
dummy password hash on startup, and disposes of the engine on shutdown.
"""

from typing import Callable

import structlog
from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.security import dummy_password_hash
from db.session import close_db, init_db

logger = structlog.get_logger(__name__)


def create_start_app_handler(app: FastAPI) -> Callable:
    """Create startup event handler."""

    async def start_app() -> None:
        logger.info("app_starting", app=settings.APP_NAME, env=settings.APP_ENV)
        await init_db()
        # First unknown-email login must not pay for building the hash
        await run_in_threadpool(dummy_password_hash)
        logger.info("app_started")

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    """Create shutdown event handler."""

    async def stop_app() -> None:
        logger.info("app_stopping")
        await close_db()
        logger.info("app_stopped")

    return stop_app
