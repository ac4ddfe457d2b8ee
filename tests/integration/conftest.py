"""Pytest configuration and fixtures for integration tests against a real SQLite file."""

import pytest

from src.core import db_client
from src.core.config import settings


@pytest.fixture
async def sqlite_db(tmp_path, monkeypatch):
    """Point the db client at a fresh temporary database and create the schema."""
    db_path = tmp_path / "skillswap-test.db"
    monkeypatch.setattr(settings, "sqlite_db_path", str(db_path))

    await db_client.init_db()
    yield db_path
    await db_client.close_connection()
