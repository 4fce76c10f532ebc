"""DTOs for the Tutor feature."""
from typing import Optional

from pydantic import Field, field_validator

from api.shared.dtos import BaseDTO


class SolveProblemRequest(BaseDTO):
    """Submit a math question to a conversation."""

    question: str = Field(..., min_length=1, description="Math question text")
    user_id: Optional[int] = Field(
        default=None, description="Requesting user; checked against the owner when set"
    )

    @field_validator("question")
    @classmethod
    def validate_question(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Question cannot be empty")
        return v


class SolveProblemResponse(BaseDTO):
    """Answer produced by a completed exchange."""

    conversation_id: int = Field(description="Conversation identifier")
    answer: str = Field(description="Assistant answer text")
    user_message_id: int = Field(description="Stored user message identifier")
    assistant_message_id: int = Field(description="Stored assistant message identifier")
