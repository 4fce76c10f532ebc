"""Infrastructure resources: relational store and completion provider client.

This module is part of the infra layer and must not import from application features.
"""
from typing import Any, Dict, Optional

from openai import AsyncOpenAI
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from api.shared.exceptions import ValidationError


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseResource:
    """Database resource for dependency injection."""

    def __init__(self, database_url: str, **engine_options: Any):
        self.database_url = database_url
        self.engine_options: Dict[str, Any] = {
            "pool_pre_ping": True,
            "pool_recycle": 3600,
            **engine_options,
        }
        self.engine = None
        self.session_factory = None

    async def init(self):
        """Initialize database connection."""
        if not self.database_url:
            raise ValidationError(
                "Database URL is not configured", {"setting": "DATABASE_URL"}
            )
        self.engine = create_async_engine(
            self.database_url,
            echo=False,
            **self.engine_options,
        )
        if self.engine.dialect.name == "sqlite":
            # SQLite ignores ON DELETE CASCADE unless asked per connection
            event.listen(
                self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys
            )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        return self

    def get_session(self) -> AsyncSession:
        """Get database session (synchronous accessor)."""
        if self.session_factory is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.session_factory()

    async def shutdown(self):
        """Shutdown database connection."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None


class OpenAIResource:
    """Completion provider client resource.

    Retries are disabled on the client; callers decide whether to retry.
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.client: Optional[AsyncOpenAI] = None

    async def init(self):
        """Initialize the async OpenAI client."""
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )
        return self

    def get_client(self) -> AsyncOpenAI:
        if self.client is None:
            raise RuntimeError("OpenAI client not initialized. Call init() first.")
        return self.client

    async def shutdown(self):
        """Close the underlying HTTP client."""
        if self.client is not None:
            await self.client.close()
            self.client = None
