"""
Shared pytest fixtures for the math tutor tests.

Provides:
- A file-backed SQLite database with the full schema
- Per-test sessions (one for the code under test, fresh ones for verification)
- A deterministic clock and a stub LLM gateway
"""
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence

import pytest
import pytest_asyncio

from api.features.tutor.context import ChatMessage
from api.shared.entities.registry import BaseEntity
from infra.resources import DatabaseResource


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def database(tmp_path) -> Any:
    """Initialized DatabaseResource over a temporary SQLite file."""
    db = DatabaseResource(f"sqlite+aiosqlite:///{tmp_path / 'tutor.db'}")
    await db.init()
    async with db.engine.begin() as conn:
        await conn.run_sync(BaseEntity.metadata.create_all)
    yield db
    await db.shutdown()


@pytest_asyncio.fixture
async def db_session(database) -> Any:
    """Session handed to the code under test."""
    session = database.get_session()
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def fresh_session(database):
    """Factory for independent sessions used to verify committed state."""
    return database.get_session


# ============================================================================
# Collaborator Stubs
# ============================================================================

class StepClock:
    """Clock advancing one second per call."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


class StubGateway:
    """LLM gateway returning a canned answer or raising a canned error."""

    def __init__(self, answer: str = "답: 4", error: Optional[Exception] = None):
        self.answer = answer
        self.error = error
        self.calls: List[List[ChatMessage]] = []

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def gateway_factory():
    """Factory for stub gateways with a specific answer or error."""
    return StubGateway
