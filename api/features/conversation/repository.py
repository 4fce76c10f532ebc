"""Repositories for conversation and message persistence."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update

from api.features.conversation.entities.conversation import (
    PERSISTABLE_ROLES,
    Conversation,
    Message,
    MessageRole,
)
from api.features.conversation.exceptions import MessageRoleError
from api.shared.base import BaseRepository, translate_store_errors
from api.shared.entities.base import utcnow


class ConversationRepository(BaseRepository[Conversation]):
    """Conversation store: identity, ownership, title and last activity."""

    model = Conversation

    async def create_conversation(
        self, *, user_id: int, title: str, at: Optional[datetime] = None
    ) -> Conversation:
        at = at or utcnow()
        entity = Conversation(
            user_id=user_id, title=title, created_at=at, last_activity=at
        )
        return await self.create(entity)

    async def list_for_user(self, user_id: int) -> List[Conversation]:
        """Owner's conversations, most recently active first (ties: newest id first)."""
        entities, _ = await self.list(
            limit=None, order_by=("-last_activity", "-id"), user_id=user_id
        )
        return entities

    @translate_store_errors("touch_conversation")
    async def touch(self, conversation_id: int, *, at: datetime) -> bool:
        """Advance last activity; False when the conversation no longer exists."""
        stmt = (
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(last_activity=at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0


class MessageRepository(BaseRepository[Message]):
    """Append-only message log ordered by insertion id."""

    model = Message

    async def append(
        self,
        *,
        conversation_id: int,
        role: MessageRole,
        content: str,
        at: Optional[datetime] = None,
    ) -> Message:
        if role not in PERSISTABLE_ROLES:
            raise MessageRoleError(
                MessageRole(role).value, {"conversation_id": conversation_id}
            )
        entity = Message(
            conversation_id=conversation_id,
            role=role,
            content=content,
            created_at=at or utcnow(),
        )
        return await self.create(entity)

    @translate_store_errors("list_messages")
    async def list_for_conversation(self, conversation_id: int) -> List[Message]:
        """Full log of a conversation in the order it was written."""
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_for_conversation(self, conversation_id: int) -> int:
        return await self.delete_by_field("conversation_id", conversation_id)
