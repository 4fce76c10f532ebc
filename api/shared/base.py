"""Base repository pattern and store error translation."""
from abc import ABC
from functools import wraps
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from sqlalchemy import select, func, delete
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase

from api.shared.exceptions import StoreUnavailableError

T = TypeVar("T", bound=DeclarativeBase)
R = TypeVar("R")

# Errors meaning "the store could not be reached", as opposed to bad statements
STORE_CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, OSError)


def translate_store_errors(
    operation: str,
) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
    """Wrap a repository coroutine so connectivity failures surface as StoreUnavailableError."""

    def decorator(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        @wraps(func)
        async def wrapper(self, *args: Any, **kwargs: Any) -> R:
            try:
                return await func(self, *args, **kwargs)
            except STORE_CONNECTIVITY_ERRORS as e:
                model = getattr(self, "model", None)
                details = {
                    "entity": getattr(model, "__tablename__", None),
                    "arguments": [str(a) for a in args]
                    + [f"{k}={v}" for k, v in kwargs.items()],
                }
                raise StoreUnavailableError(operation, str(e), details) from e

        return wrapper

    return decorator


async def commit_session(
    session: AsyncSession, *, operation: str, entity_id: Optional[Any] = None
) -> None:
    """Commit the session; on connectivity failure roll back and raise StoreUnavailableError."""
    try:
        await session.commit()
    except STORE_CONNECTIVITY_ERRORS as e:
        await session.rollback()
        raise StoreUnavailableError(
            operation, str(e), {"entity_id": str(entity_id) if entity_id is not None else None}
        ) from e


class BaseRepository(ABC, Generic[T]):
    """Base repository with common CRUD operations."""

    model: Type[T]

    def __init__(self, session: AsyncSession):
        self.session = session

    @translate_store_errors("create")
    async def create(self, entity: T) -> T:
        """Create new entity."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    @translate_store_errors("get_by_id")
    async def get_by_id(self, entity_id: int) -> Optional[T]:
        """Get entity by ID."""
        stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @translate_store_errors("get_by_field")
    async def get_by_field(
        self, field_name: str, value: Any, limit: Optional[int] = None
    ) -> List[T]:
        """Get entities by field value."""
        field = getattr(self.model, field_name)
        stmt = select(self.model).where(field == value)

        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @translate_store_errors("delete")
    async def delete(self, entity_id: int) -> bool:
        """Delete entity by ID."""
        stmt = delete(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    @translate_store_errors("delete_by_field")
    async def delete_by_field(self, field_name: str, value: Any) -> int:
        """Delete entities by field value."""
        field = getattr(self.model, field_name)
        stmt = delete(self.model).where(field == value)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    @translate_store_errors("list")
    async def list(
        self,
        offset: int = 0,
        limit: Optional[int] = 100,
        order_by: Union[str, Sequence[str], None] = None,
        **filters: Any,
    ) -> Tuple[List[T], int]:
        """List entities with pagination and filters.

        ``order_by`` takes one field name or several; a leading ``-`` sorts
        that field descending.
        """
        count_stmt = select(func.count(self.model.id))  # type: ignore[attr-defined]
        stmt = select(self.model)

        for field_name, value in filters.items():
            if hasattr(self.model, field_name) and value is not None:
                field = getattr(self.model, field_name)
                if isinstance(value, (list, tuple)):
                    stmt = stmt.where(field.in_(value))
                    count_stmt = count_stmt.where(field.in_(value))
                else:
                    stmt = stmt.where(field == value)
                    count_stmt = count_stmt.where(field == value)

        if order_by:
            keys = [order_by] if isinstance(order_by, str) else list(order_by)
            for key in keys:
                descending = key.startswith("-")
                field_name = key[1:] if descending else key
                if hasattr(self.model, field_name):
                    field = getattr(self.model, field_name)
                    stmt = stmt.order_by(field.desc() if descending else field.asc())

        stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        count_result = await self.session.execute(count_stmt)

        total = count_result.scalar() or 0
        return list(result.scalars().all()), int(total)

    @translate_store_errors("exists")
    async def exists(self, entity_id: int) -> bool:
        """Check if entity exists."""
        stmt = select(self.model.id).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @translate_store_errors("count")
    async def count(self, **filters: Any) -> int:
        """Count entities with filters."""
        stmt = select(func.count(self.model.id))  # type: ignore[attr-defined]

        for field_name, value in filters.items():
            if hasattr(self.model, field_name) and value is not None:
                field = getattr(self.model, field_name)
                if isinstance(value, (list, tuple)):
                    stmt = stmt.where(field.in_(value))
                else:
                    stmt = stmt.where(field == value)

        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)
