"""Service layer for user records."""
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.users.models import UserRecord, UserUpdate, merge_user_record
from api.features.users.repository import UserRepository
from api.shared.base import commit_session
from api.shared.entities.base import utcnow

logger = logging.getLogger("tutor.users.service")


class UserService:
    """Upserts user records coming from the sign-in flow."""

    def __init__(
        self, owner_open_id: str = "", clock: Callable[[], datetime] = utcnow
    ):
        self.owner_open_id = owner_open_id
        self.clock = clock

    async def upsert_user(
        self, update: UserUpdate, *, db_session: AsyncSession
    ) -> UserRecord:
        repository = UserRepository(db_session)
        entity = await repository.get_by_open_id(update.open_id)
        existing = UserRecord.from_entity(entity) if entity else None

        record = merge_user_record(
            existing, update, owner_open_id=self.owner_open_id, now=self.clock()
        )
        saved = await repository.save(record)
        await commit_session(db_session, operation="upsert_user", entity_id=record.open_id)
        logger.info(f"User upserted: {record.open_id} (role={record.role.value})")
        return UserRecord.from_entity(saved)

    async def get_user_by_open_id(
        self, open_id: str, *, db_session: AsyncSession
    ) -> Optional[UserRecord]:
        entity = await UserRepository(db_session).get_by_open_id(open_id)
        return UserRecord.from_entity(entity) if entity else None
