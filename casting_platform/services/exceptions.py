from typing import Any, Dict, Optional
from uuid import UUID


class ServiceError(Exception):
    """Base class for service layer errors."""

    status_code = 500

    def __init__(
        self,
        message: str = "An internal service error occurred.",
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.extra = extra or {}
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        """JSON error body: a single error string plus any extra fields."""
        return {"error": self.message, **self.extra}


class ValidationError(ServiceError):
    status_code = 400

    def __init__(self, message: str = "Invalid request."):
        super().__init__(message)


class NotAuthenticatedError(ServiceError):
    status_code = 401

    def __init__(self, message: str = "Authentication required."):
        super().__init__(message)


class NotAuthorizedError(ServiceError):
    status_code = 403

    def __init__(self, message: str = "Access denied."):
        super().__init__(message)


class NotFoundError(ServiceError):
    status_code = 404

    def __init__(self, message: str = "Resource not found."):
        super().__init__(message)


class ConversationNotFoundError(NotFoundError):
    def __init__(self, message: str = "Conversation not found."):
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = "User not found."):
        super().__init__(message)


class ContentNotFoundError(NotFoundError):
    def __init__(self, message: str = "Content not found."):
        super().__init__(message)


class ConversationExistsError(ServiceError):
    """Raised when a conversation between the same pair already exists.

    Carries the existing conversation id so the caller can open it instead.
    """

    status_code = 400

    def __init__(
        self,
        conversation_id: UUID,
        message: str = "A conversation with this user already exists.",
    ):
        self.conversation_id = conversation_id
        super().__init__(message, extra={"conversationId": str(conversation_id)})


class CastingNotFoundError(NotFoundError):
    def __init__(self, message: str = "Casting not found."):
        super().__init__(message)


class ApplicationNotFoundError(NotFoundError):
    def __init__(self, message: str = "Application not found."):
        super().__init__(message)
