"""Tutor exchange: question in, step-by-step answer out.

One exchange runs strictly in this order:

1. validate the question and the conversation,
2. append and commit the user message,
3. read back the log and build the context window,
4. invoke the LLM gateway,
5. advance the conversation's last activity and append the assistant
   message, committed together.

If step 4 fails the InvocationError propagates unchanged; the user message
stays committed and nothing else is written.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

import structlog
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.entities.conversation import MessageRole
from api.features.conversation.exceptions import ConversationNotFoundError
from api.features.conversation.repository import (
    ConversationRepository,
    MessageRepository,
)
from api.features.tutor.context import ContextWindowBuilder
from api.features.tutor.exceptions import EmptyQuestionError
from api.features.tutor.gateway import LLMGateway
from api.shared.base import commit_session
from api.shared.entities.base import utcnow
from api.shared.exceptions import InvocationError

logger = structlog.get_logger("tutor.exchange")


class ExchangeResult(BaseModel):
    """Outcome of a completed exchange."""

    conversation_id: int
    answer: str
    user_message_id: int
    assistant_message_id: int


class TutorService:
    """Runs question/answer exchanges against a conversation."""

    def __init__(
        self,
        gateway: LLMGateway,
        context_builder: ContextWindowBuilder,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.gateway = gateway
        self.context_builder = context_builder
        self.clock = clock

    async def solve_problem(
        self,
        conversation_id: int,
        question: str,
        *,
        db_session: AsyncSession,
        user_id: Optional[int] = None,
    ) -> ExchangeResult:
        if not question or not question.strip():
            raise EmptyQuestionError(conversation_id)

        conversations = ConversationRepository(db_session)
        messages = MessageRepository(db_session)

        conversation = await conversations.get_by_id(conversation_id)
        if conversation is None or (
            user_id is not None and conversation.user_id != user_id
        ):
            raise ConversationNotFoundError(conversation_id)

        log = logger.bind(conversation_id=conversation_id)

        user_message = await messages.append(
            conversation_id=conversation_id,
            role=MessageRole.USER,
            content=question,
            at=self.clock(),
        )
        await commit_session(
            db_session, operation="append_user_message", entity_id=conversation_id
        )
        log.info("user_message_persisted", message_id=user_message.id)

        history = await messages.list_for_conversation(conversation_id)
        context = self.context_builder.build(history)

        try:
            answer = await self.gateway.complete(context)
        except InvocationError as e:
            log.warning(
                "exchange_failed",
                error_code=e.error_code,
                kind=e.kind,
                user_message_id=user_message.id,
            )
            raise

        now = self.clock()
        if not await conversations.touch(conversation_id, at=now):
            # Deleted while the answer was being generated
            await db_session.rollback()
            log.warning("exchange_orphaned", user_message_id=user_message.id)
            raise ConversationNotFoundError(conversation_id)
        assistant_message = await messages.append(
            conversation_id=conversation_id,
            role=MessageRole.ASSISTANT,
            content=answer,
            at=now,
        )
        await commit_session(
            db_session, operation="append_assistant_message", entity_id=conversation_id
        )
        log.info(
            "exchange_completed",
            user_message_id=user_message.id,
            assistant_message_id=assistant_message.id,
            context_size=len(context),
        )

        return ExchangeResult(
            conversation_id=conversation_id,
            answer=answer,
            user_message_id=user_message.id,
            assistant_message_id=assistant_message.id,
        )
