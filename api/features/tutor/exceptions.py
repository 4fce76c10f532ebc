"""Exceptions for the Tutor feature."""
from api.shared.exceptions import ValidationError


class EmptyQuestionError(ValidationError):
    """Raised when a submitted question has no text."""

    def __init__(self, conversation_id: int):
        super().__init__(
            "Question must not be empty", {"conversation_id": conversation_id}
        )
        self.error_code = "EMPTY_QUESTION"
