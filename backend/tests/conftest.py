"""
Shared pytest fixtures.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUGGESTION_PROVIDER", "none")
os.environ.setdefault("DEBUG", "false")

import pytest
import pytest_asyncio

from studyplan.core.config import get_settings
from studyplan.infrastructure.local.database import get_engine, get_session_factory, init_db


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file per test."""
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield get_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def test_user_id() -> str:
    return "test_user"
