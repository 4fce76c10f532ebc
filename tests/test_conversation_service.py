"""
Tests for conversation lifecycle operations and the store contracts.

Run with: pytest tests/test_conversation_service.py -v
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from api.features.conversation.entities.conversation import Message, MessageRole
from api.features.conversation.exceptions import (
    ConversationNotFoundError,
    MessageRoleError,
)
from api.features.conversation.repository import ConversationRepository, MessageRepository
from api.features.conversation.service import ConversationService
from api.shared.base import commit_session
from api.shared.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from infra.resources import DatabaseResource


async def add_messages(session, conversation_id, contents):
    repository = MessageRepository(session)
    for i, content in enumerate(contents):
        role = MessageRole.USER if i % 2 == 0 else MessageRole.ASSISTANT
        await repository.append(conversation_id=conversation_id, role=role, content=content)
    await session.commit()


class TestCreateConversation:
    """Creation defaults"""

    @pytest.mark.asyncio
    async def test_default_title_when_missing(self, db_session, clock):
        service = ConversationService(clock=clock)

        conv = await service.create_conversation(7, db_session=db_session)

        assert conv.title == "새 대화"
        assert conv.user_id == 7

    @pytest.mark.asyncio
    async def test_blank_title_falls_back_to_default(self, db_session, clock):
        service = ConversationService(default_title="new conversation", clock=clock)

        conv = await service.create_conversation(7, "   ", db_session=db_session)

        assert conv.title == "new conversation"

    @pytest.mark.asyncio
    async def test_supplied_title_kept(self, db_session, clock):
        service = ConversationService(clock=clock)

        conv = await service.create_conversation(7, "이차방정식", db_session=db_session)

        assert conv.title == "이차방정식"

    @pytest.mark.asyncio
    async def test_new_conversation_has_no_messages(self, db_session, clock):
        service = ConversationService(clock=clock)
        conv = await service.create_conversation(7, db_session=db_session)

        assert await service.get_messages(conv.id, db_session=db_session) == []

    @pytest.mark.asyncio
    async def test_last_activity_starts_at_creation(self, db_session, fresh_session, clock):
        service = ConversationService(clock=clock)
        conv = await service.create_conversation(7, db_session=db_session)

        async with fresh_session() as session:
            stored = await service.get_conversation(conv.id, db_session=session)

        assert stored.last_activity == stored.created_at


class TestListConversations:
    """Ownership filter and recency order"""

    @pytest.mark.asyncio
    async def test_most_recently_active_first(self, db_session, clock):
        service = ConversationService(clock=clock)
        a = await service.create_conversation(1, "A", db_session=db_session)
        b = await service.create_conversation(1, "B", db_session=db_session)

        listed = await service.list_conversations(1, db_session=db_session)

        assert [c.id for c in listed] == [b.id, a.id]

    @pytest.mark.asyncio
    async def test_touch_moves_conversation_to_front(self, db_session, clock):
        service = ConversationService(clock=clock)
        a = await service.create_conversation(1, "A", db_session=db_session)
        b = await service.create_conversation(1, "B", db_session=db_session)

        await ConversationRepository(db_session).touch(a.id, at=clock())
        await db_session.commit()

        listed = await service.list_conversations(1, db_session=db_session)
        assert [c.id for c in listed] == [a.id, b.id]

    @pytest.mark.asyncio
    async def test_equal_activity_orders_by_newest_id(self, db_session):
        same_instant = datetime(2026, 5, 1, tzinfo=timezone.utc)
        frozen = ConversationService(clock=lambda: same_instant)
        a = await frozen.create_conversation(1, "A", db_session=db_session)
        b = await frozen.create_conversation(1, "B", db_session=db_session)

        listed = await frozen.list_conversations(1, db_session=db_session)
        assert [c.id for c in listed] == [b.id, a.id]

    @pytest.mark.asyncio
    async def test_only_owner_conversations_listed(self, db_session, clock):
        service = ConversationService(clock=clock)
        mine = await service.create_conversation(1, db_session=db_session)
        await service.create_conversation(2, db_session=db_session)

        listed = await service.list_conversations(1, db_session=db_session)

        assert [c.id for c in listed] == [mine.id]

    @pytest.mark.asyncio
    async def test_no_conversations_is_empty_list(self, db_session):
        assert await ConversationService().list_conversations(99, db_session=db_session) == []


class TestGetMessages:
    """Canonical chronological read"""

    @pytest.mark.asyncio
    async def test_messages_in_creation_order(self, db_session, clock):
        service = ConversationService(clock=clock)
        conv = await service.create_conversation(1, db_session=db_session)
        await add_messages(db_session, conv.id, ["q1", "a1", "q2", "a2"])

        msgs = await service.get_messages(conv.id, db_session=db_session)

        assert [m.content for m in msgs] == ["q1", "a1", "q2", "a2"]
        assert [m.role for m in msgs] == [
            MessageRole.USER,
            MessageRole.ASSISTANT,
            MessageRole.USER,
            MessageRole.ASSISTANT,
        ]

    @pytest.mark.asyncio
    async def test_identical_timestamps_keep_insert_order(self, db_session, clock):
        service = ConversationService(clock=clock)
        conv = await service.create_conversation(1, db_session=db_session)
        repository = MessageRepository(db_session)
        at = clock()
        for content in ["first", "second", "third"]:
            await repository.append(
                conversation_id=conv.id, role=MessageRole.USER, content=content, at=at
            )
        await db_session.commit()

        msgs = await service.get_messages(conv.id, db_session=db_session)

        assert [m.content for m in msgs] == ["first", "second", "third"]
        assert [m.id for m in msgs] == sorted(m.id for m in msgs)

    @pytest.mark.asyncio
    async def test_unknown_conversation_raises(self, db_session):
        with pytest.raises(ConversationNotFoundError) as exc_info:
            await ConversationService().get_messages(404, db_session=db_session)

        assert isinstance(exc_info.value, NotFoundError)
        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.status_code == 404


class TestDeleteConversation:
    """Cascading delete"""

    @pytest.mark.asyncio
    async def test_delete_removes_conversation_and_messages(
        self, db_session, fresh_session, clock
    ):
        service = ConversationService(clock=clock)
        conv = await service.create_conversation(1, db_session=db_session)
        await add_messages(db_session, conv.id, ["q", "a", "q2"])

        await service.delete_conversation(conv.id, db_session=db_session)

        async with fresh_session() as session:
            with pytest.raises(ConversationNotFoundError):
                await service.get_conversation(conv.id, db_session=session)
            orphans = await session.execute(
                select(func.count(Message.id)).where(Message.conversation_id == conv.id)
            )
            assert orphans.scalar() == 0

    @pytest.mark.asyncio
    async def test_delete_leaves_other_conversations_intact(self, db_session, clock):
        service = ConversationService(clock=clock)
        doomed = await service.create_conversation(1, db_session=db_session)
        kept = await service.create_conversation(1, db_session=db_session)
        await add_messages(db_session, doomed.id, ["x"])
        await add_messages(db_session, kept.id, ["y", "z"])

        await service.delete_conversation(doomed.id, db_session=db_session)

        msgs = await service.get_messages(kept.id, db_session=db_session)
        assert [m.content for m in msgs] == ["y", "z"]

    @pytest.mark.asyncio
    async def test_delete_unknown_conversation_raises(self, db_session):
        with pytest.raises(ConversationNotFoundError):
            await ConversationService().delete_conversation(1234, db_session=db_session)


class TestMessageStoreContract:
    """Only user and assistant rows are stored"""

    @pytest.mark.asyncio
    async def test_system_role_cannot_be_persisted(self, db_session, clock):
        conv = await ConversationService(clock=clock).create_conversation(
            1, db_session=db_session
        )

        with pytest.raises(MessageRoleError):
            await MessageRepository(db_session).append(
                conversation_id=conv.id, role=MessageRole.SYSTEM, content="framing"
            )


class TestStoreAvailability:
    """Unreachable store and configuration failures"""

    @pytest.mark.asyncio
    async def test_unreachable_store_raises_store_unavailable(self):
        unreachable = DatabaseResource("sqlite+aiosqlite:////nonexistent/dir/tutor.db")
        await unreachable.init()
        session = unreachable.get_session()
        try:
            with pytest.raises(StoreUnavailableError) as exc_info:
                await ConversationService().list_conversations(1, db_session=session)
        finally:
            await session.close()
            await unreachable.shutdown()

        assert exc_info.value.status_code == 503
        assert exc_info.value.error_code == "STORE_UNAVAILABLE"
        assert exc_info.value.operation == "list"

    @pytest.mark.asyncio
    async def test_missing_database_url_rejected(self):
        with pytest.raises(ValidationError):
            await DatabaseResource("").init()

    def test_session_before_init_raises(self):
        with pytest.raises(RuntimeError):
            DatabaseResource("sqlite+aiosqlite://").get_session()


class UnreachableCommitSession:
    """Session stand-in whose commit loses the connection."""

    def __init__(self):
        self.rolled_back = False

    async def commit(self):
        raise OperationalError("COMMIT", None, Exception("connection refused"))

    async def rollback(self):
        self.rolled_back = True


class LostCommitSession:
    """Real session whose commit loses the connection."""

    def __init__(self, session):
        self._session = session

    def __getattr__(self, name):
        return getattr(self._session, name)

    async def commit(self):
        raise OperationalError("COMMIT", None, Exception("connection refused"))


class TestCommitFailures:
    """Write path fails loudly"""

    @pytest.mark.asyncio
    async def test_commit_session_rolls_back_and_raises(self):
        session = UnreachableCommitSession()

        with pytest.raises(StoreUnavailableError) as exc_info:
            await commit_session(session, operation="append_user_message", entity_id=7)

        assert session.rolled_back is True
        assert exc_info.value.operation == "append_user_message"
        assert exc_info.value.details["operation"] == "append_user_message"
        assert exc_info.value.details["entity_id"] == "7"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    @pytest.mark.asyncio
    async def test_create_conversation_commit_failure_leaves_nothing(
        self, db_session, fresh_session, clock
    ):
        session = LostCommitSession(db_session)

        with pytest.raises(StoreUnavailableError) as exc_info:
            await ConversationService(clock=clock).create_conversation(1, db_session=session)

        assert exc_info.value.operation == "create_conversation"
        async with fresh_session() as verify:
            assert await ConversationService().list_conversations(1, db_session=verify) == []
