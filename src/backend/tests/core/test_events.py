"""
Tests for application lifecycle handlers.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI


@pytest.mark.unit
class TestStartupHandler:
    """create_start_app_handler."""

    async def test_startup_opens_database_and_warms_dummy_hash(self) -> None:
        from core.events import create_start_app_handler
        from core.security import dummy_password_hash

        dummy_password_hash.cache_clear()

        with patch("core.events.init_db", new_callable=AsyncMock) as init_db:
            await create_start_app_handler(FastAPI())()

        init_db.assert_awaited_once()
        assert dummy_password_hash.cache_info().currsize == 1

    async def test_shutdown_closes_database(self) -> None:
        from core.events import create_stop_app_handler

        with patch("core.events.close_db", new_callable=AsyncMock) as close_db:
            await create_stop_app_handler(FastAPI())()

        close_db.assert_awaited_once()
