"""Service layer for conversation lifecycle: create, list, fetch messages, delete."""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.exceptions import ConversationNotFoundError
from api.features.conversation.models import ConversationModel, MessageModel
from api.features.conversation.repository import (
    ConversationRepository,
    MessageRepository,
)
from api.shared.base import commit_session
from api.shared.entities.base import utcnow

logger = logging.getLogger("tutor.conversation.service")

DEFAULT_CONVERSATION_TITLE = "새 대화"


class ConversationService:
    """Conversation lifecycle operations using the repository pattern."""

    def __init__(
        self,
        default_title: str = DEFAULT_CONVERSATION_TITLE,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.default_title = default_title
        self.clock = clock

    async def create_conversation(
        self,
        user_id: int,
        title: Optional[str] = None,
        *,
        db_session: AsyncSession,
    ) -> ConversationModel:
        """Create an empty conversation owned by ``user_id``."""
        repository = ConversationRepository(db_session)
        resolved_title = title.strip() if title and title.strip() else self.default_title
        entity = await repository.create_conversation(
            user_id=user_id, title=resolved_title, at=self.clock()
        )
        await commit_session(
            db_session, operation="create_conversation", entity_id=entity.id
        )
        logger.info(f"Conversation created: {entity.id} (user={user_id})")
        return ConversationModel.from_entity(entity)

    async def list_conversations(
        self, user_id: int, *, db_session: AsyncSession
    ) -> List[ConversationModel]:
        """List the user's conversations, most recently active first."""
        repository = ConversationRepository(db_session)
        entities = await repository.list_for_user(user_id)
        return [ConversationModel.from_entity(e) for e in entities]

    async def get_conversation(
        self, conversation_id: int, *, db_session: AsyncSession
    ) -> ConversationModel:
        repository = ConversationRepository(db_session)
        entity = await repository.get_by_id(conversation_id)
        if entity is None:
            raise ConversationNotFoundError(conversation_id)
        return ConversationModel.from_entity(entity)

    async def get_messages(
        self, conversation_id: int, *, db_session: AsyncSession
    ) -> List[MessageModel]:
        """All messages of a conversation in chronological order."""
        if not await ConversationRepository(db_session).exists(conversation_id):
            raise ConversationNotFoundError(conversation_id)
        entities = await MessageRepository(db_session).list_for_conversation(
            conversation_id
        )
        return [MessageModel.from_entity(e) for e in entities]

    async def delete_conversation(
        self, conversation_id: int, *, db_session: AsyncSession
    ) -> None:
        """Delete a conversation together with its messages in one transaction."""
        conversations = ConversationRepository(db_session)
        if not await conversations.exists(conversation_id):
            raise ConversationNotFoundError(conversation_id)

        removed = await MessageRepository(db_session).delete_for_conversation(
            conversation_id
        )
        await conversations.delete(conversation_id)
        await commit_session(
            db_session, operation="delete_conversation", entity_id=conversation_id
        )
        logger.info(
            f"Conversation deleted: {conversation_id} ({removed} messages removed)"
        )
