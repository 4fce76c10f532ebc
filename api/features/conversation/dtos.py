"""DTOs for the Conversation feature."""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from api.features.conversation.entities.conversation import MessageRole
from api.shared.dtos import BaseDTO


class CreateConversationRequest(BaseDTO):
    """Request to create a conversation."""

    user_id: int = Field(description="Owner user identifier")
    title: Optional[str] = Field(
        default=None, max_length=255, description="Conversation title"
    )


class ConversationDTO(BaseDTO):
    """Conversation DTO."""

    id: int = Field(description="Conversation identifier")
    user_id: int = Field(description="Owner user identifier")
    title: str = Field(description="Conversation title")
    created_at: datetime = Field(description="Creation timestamp")
    last_activity: datetime = Field(description="Last completed exchange timestamp")


class ConversationListResponse(BaseDTO):
    """List conversations response."""

    items: List[ConversationDTO] = Field(description="Conversations, most recently active first")
    total: int = Field(description="Total conversations returned")


class MessageDTO(BaseDTO):
    """Conversation message DTO."""

    id: int = Field(description="Message identifier")
    role: MessageRole = Field(description="Message role: user or assistant")
    content: str = Field(description="Message content")
    created_at: datetime = Field(description="Creation timestamp")


class MessagesResponse(BaseDTO):
    """Messages list response."""

    items: List[MessageDTO] = Field(description="Messages in chronological order")
    total: int = Field(description="Total messages returned")


class DeleteConversationResponse(BaseDTO):
    """Delete conversation response."""

    success: bool = Field(description="Whether the conversation was deleted")
