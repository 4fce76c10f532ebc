"""Exceptions for the Conversation feature."""
from typing import Any, Dict, Optional

from api.shared.exceptions import NotFoundError, ValidationError


class ConversationNotFoundError(NotFoundError):
    """Raised when a conversation does not exist (or is not visible to the caller)."""

    def __init__(self, conversation_id: int):
        super().__init__("Conversation", conversation_id)
        self.error_code = "CONVERSATION_NOT_FOUND"
        self.conversation_id = conversation_id


class MessageRoleError(ValidationError):
    """Raised when a message role may not be persisted."""

    def __init__(self, role: str, details: Optional[Dict[str, Any]] = None):
        message = f"Messages with role '{role}' cannot be stored"
        error_details: Dict[str, Any] = {"role": role}
        if details:
            error_details.update(details)
        super().__init__(message, error_details)
        self.error_code = "MESSAGE_ROLE_NOT_PERSISTABLE"
