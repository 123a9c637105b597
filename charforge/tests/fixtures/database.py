"""
Database fixtures.

Each test that needs persistence gets its own SQLite file with freshly
created tables.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from charforge.database import DatabaseManager, init_db

# pylint: disable=redefined-outer-name  # Reason: pytest fixture parameter names must match fixture names


@pytest.fixture
async def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[DatabaseManager, None]:
    """A DatabaseManager bound to an empty per-test SQLite database."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'charforge.db'}")
    DatabaseManager.reset_instance()
    manager = DatabaseManager.get_instance()
    await init_db()
    try:
        yield manager
    finally:
        await manager.close()
        DatabaseManager.reset_instance()
