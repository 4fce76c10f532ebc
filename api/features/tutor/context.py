"""Context window construction for one exchange.

Turns a conversation's stored log into the role-tagged sequence handed to the
completion provider: a synthetic system entry followed by the most recent
messages in chronological order.
"""
from __future__ import annotations

from typing import Dict, List, Protocol, Sequence

from pydantic import BaseModel, ConfigDict

from api.features.conversation.entities.conversation import MessageRole
from api.features.tutor.prompts import MATH_TUTOR_SYSTEM_PROMPT

DEFAULT_WINDOW_SIZE = 10


class ChatMessage(BaseModel):
    """One role-tagged entry of a context window."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str

    def as_payload(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class StoredMessage(Protocol):
    role: MessageRole
    content: str


class ContextWindowBuilder:
    """Pure builder: same log in, same window out."""

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        system_prompt: str = MATH_TUTOR_SYSTEM_PROMPT,
    ):
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")
        self.window_size = window_size
        self.system_prompt = system_prompt

    def build(self, messages: Sequence[StoredMessage]) -> List[ChatMessage]:
        """Build the window from a log already sorted oldest to newest."""
        recent = list(messages)[-self.window_size:]
        window = [ChatMessage(role=MessageRole.SYSTEM, content=self.system_prompt)]
        window.extend(
            ChatMessage(role=MessageRole(m.role), content=m.content) for m in recent
        )
        return window
