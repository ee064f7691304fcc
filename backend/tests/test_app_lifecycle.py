"""
After School Lessons Backend — Application Lifespan Tests
===========================================================

What:  Tests for the startup/shutdown lifespan in afterschool.main.

What we test:
    ✅ An unreachable store at startup aborts startup (no retry) and
       disposes the engine
    ✅ A reachable store starts the app, creates the images directory and
       disposes the engine at shutdown
    ✅ Unusable database URLs are rejected before any connection attempt
"""

from unittest.mock import AsyncMock

import pytest

from afterschool.database import Database
from afterschool.exceptions import InvalidArgumentError, StoreUnavailableError
from afterschool.main import create_app


class TestLifespanStartup:

    @pytest.mark.asyncio
    async def test_unreachable_store_is_fatal(self, tmp_path):
        # Parent directory does not exist, so SQLite cannot open the file
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'app.db'}")
        probe = AsyncMock(wraps=database.connect)
        database.connect = probe
        real_dispose = database.dispose
        database.dispose = AsyncMock()
        images = tmp_path / "images"
        app = create_app(database=database, images_dir=str(images))

        try:
            with pytest.raises(StoreUnavailableError):
                async with app.router.lifespan_context(app):
                    pytest.fail("app started without a store")

            probe.assert_awaited_once()
            database.dispose.assert_awaited_once()
            assert not images.exists()
        finally:
            await real_dispose()

    @pytest.mark.asyncio
    async def test_reachable_store_starts_and_disposes(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")
        real_dispose = database.dispose
        database.dispose = AsyncMock()
        images = tmp_path / "public" / "images"
        app = create_app(database=database, images_dir=str(images))

        try:
            async with app.router.lifespan_context(app):
                assert images.is_dir()
                assert app.state.database is database
                database.dispose.assert_not_awaited()

            database.dispose.assert_awaited_once()
        finally:
            await real_dispose()


class TestDatabaseUrl:

    @pytest.mark.parametrize(
        "url",
        ["not a url", "nosuchdialect+driver://localhost/db"],
    )
    def test_unusable_url_is_invalid_argument(self, url):
        with pytest.raises(InvalidArgumentError, match="Invalid database URL") as exc_info:
            Database(url)

        assert exc_info.value.context["field"] == "database_url"
