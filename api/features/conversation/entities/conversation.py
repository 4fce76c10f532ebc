"""Conversation and message entities.

A conversation exclusively owns its messages: the foreign key cascades on
delete and the service removes both in one transaction.
"""
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity, utcnow


class MessageRole(str, Enum):
    """Role tag on a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


# System framing is injected at invocation time and never stored
PERSISTABLE_ROLES = frozenset({MessageRole.USER, MessageRole.ASSISTANT})


class Conversation(BaseEntity):
    """Conversation owned by a single user."""

    __table_args__ = (Index("ix_conversation_user_activity", "user_id", "last_activity"),)

    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    last_activity: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class Message(BaseEntity):
    """Append-only message in a conversation."""

    __table_args__ = (
        Index("ix_message_conversation_order", "conversation_id", "id"),
    )

    conversation_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("conversation.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[MessageRole] = mapped_column(
        SQLEnum(
            MessageRole,
            name="message_role",
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
