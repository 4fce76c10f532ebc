"""Domain models for the Conversation feature."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from api.features.conversation.entities.conversation import (
    Conversation,
    Message,
    MessageRole,
)


class ConversationModel(BaseModel):
    """Read model of a conversation."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    user_id: int
    title: str
    created_at: datetime
    last_activity: datetime

    @classmethod
    def from_entity(cls, entity: Conversation) -> "ConversationModel":
        return cls.model_validate(entity)


class MessageModel(BaseModel):
    """Read model of a stored message."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    conversation_id: int
    role: MessageRole
    content: str = Field(default="")
    created_at: datetime

    @classmethod
    def from_entity(cls, entity: Message) -> "MessageModel":
        return cls.model_validate(entity)
