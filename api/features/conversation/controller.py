"""Controller for the Conversation feature."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.dtos import (
    ConversationDTO,
    ConversationListResponse,
    CreateConversationRequest,
    DeleteConversationResponse,
    MessageDTO,
    MessagesResponse,
)
from api.features.conversation.service import ConversationService
from api.shared.exceptions import TutorException, to_http_exception

logger = logging.getLogger("tutor.conversation")


class ConversationController:
    """Controller handling conversation lifecycle operations."""

    def __init__(self, conversation_service: ConversationService):
        self.conversation_service = conversation_service

    async def create_conversation(
        self, request: CreateConversationRequest, *, db_session: AsyncSession
    ) -> ConversationDTO:
        try:
            conv = await self.conversation_service.create_conversation(
                request.user_id, request.title, db_session=db_session
            )
        except TutorException as e:
            logger.error(f"Create conversation failed: {e.message}")
            raise to_http_exception(e)
        return ConversationDTO.model_validate(conv.model_dump())

    async def list_conversations(
        self, user_id: int, *, db_session: AsyncSession
    ) -> ConversationListResponse:
        try:
            items = await self.conversation_service.list_conversations(
                user_id, db_session=db_session
            )
        except TutorException as e:
            logger.error(f"List conversations failed: {e.message}")
            raise to_http_exception(e)
        dtos = [ConversationDTO.model_validate(i.model_dump()) for i in items]
        return ConversationListResponse(items=dtos, total=len(dtos))

    async def get_conversation(
        self, conversation_id: int, *, db_session: AsyncSession
    ) -> ConversationDTO:
        try:
            conv = await self.conversation_service.get_conversation(
                conversation_id, db_session=db_session
            )
        except TutorException as e:
            logger.warning(f"Get conversation failed: {e.message}")
            raise to_http_exception(e)
        return ConversationDTO.model_validate(conv.model_dump())

    async def get_messages(
        self, conversation_id: int, *, db_session: AsyncSession
    ) -> MessagesResponse:
        try:
            msgs = await self.conversation_service.get_messages(
                conversation_id, db_session=db_session
            )
        except TutorException as e:
            logger.warning(f"Get messages failed: {e.message}")
            raise to_http_exception(e)
        items = [MessageDTO.model_validate(m.model_dump()) for m in msgs]
        return MessagesResponse(items=items, total=len(items))

    async def delete_conversation(
        self, conversation_id: int, *, db_session: AsyncSession
    ) -> DeleteConversationResponse:
        try:
            await self.conversation_service.delete_conversation(
                conversation_id, db_session=db_session
            )
        except TutorException as e:
            logger.warning(f"Delete conversation failed: {e.message}")
            raise to_http_exception(e)
        return DeleteConversationResponse(success=True)
