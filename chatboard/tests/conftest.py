"""
Test configuration and fixtures for the ChatBoard test suite.

Environment variables are set before any chatboard module reads configuration,
so every test runs against cheap Argon2 parameters and an in-memory database
unless it asks for something else.
"""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio

os.environ.setdefault("LOGGING_ENVIRONMENT", "unit_test")
os.environ.setdefault("LOGGING_LEVEL", "WARNING")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTH_ARGON2_TIME_COST", "1")
os.environ.setdefault("AUTH_ARGON2_MEMORY_COST", "1024")

from chatboard.config import reset_config  # noqa: E402

from .fakes import FakeChatStore, RealtimeHarness  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_config() -> Generator[None, None, None]:
    """Each test reads configuration from the environment as it is during that test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_store() -> FakeChatStore:
    return FakeChatStore()


@pytest_asyncio.fixture
async def harness(fake_store: FakeChatStore) -> AsyncGenerator[RealtimeHarness, None]:
    """Realtime components over the fake store; writer tasks are stopped afterwards."""
    realtime = RealtimeHarness(fake_store)
    yield realtime
    await realtime.shutdown()
