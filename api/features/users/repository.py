"""User repository."""
from typing import Optional

from api.features.users.entities.user import User
from api.features.users.models import UserRecord
from api.shared.base import BaseRepository, translate_store_errors


class UserRepository(BaseRepository[User]):
    """Repository for user records."""

    model = User

    async def get_by_open_id(self, open_id: str) -> Optional[User]:
        entities = await self.get_by_field("open_id", open_id, limit=1)
        return entities[0] if entities else None

    @translate_store_errors("save_user")
    async def save(self, record: UserRecord) -> User:
        """Insert or overwrite the row for ``record.open_id``."""
        values = record.model_dump(exclude={"id"})
        entity = await self.get_by_open_id(record.open_id)
        if entity is None:
            return await self.create(User(**values))
        for field, value in values.items():
            setattr(entity, field, value)
        await self.session.flush()
        return entity
