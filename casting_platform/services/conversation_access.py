import logging
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.models.api.conversations import ConversationResponse
from casting_platform.models.api.users import UserResponse
from casting_platform.models.participants import Participants, participants_of
from casting_platform.repositories.conversation_repository import (
    ConversationRepository,
)
from casting_platform.services.exceptions import (
    ConversationNotFoundError,
    NotAuthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def validate_pagination(page: int, limit: int) -> int:
    """Validate page/limit and return the row offset."""
    if page < 1:
        raise ValidationError("Page must be 1 or greater")
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    return (page - 1) * limit


def parse_uuid(value: Optional[str], field: str) -> Optional[UUID]:
    """Parse an id taken from a request body; malformed ids are a 400."""
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        raise ValidationError(f"Invalid {field}")


class ConversationAccess:
    """Loads a conversation on behalf of a user who must be one of its participants."""

    def __init__(self, db: AsyncSession):
        self.conversation_repo = ConversationRepository(db)

    async def load(
        self, conversation_id: UUID, user: UserResponse
    ) -> Tuple[ConversationResponse, Participants]:
        conversation = await self.conversation_repo.get_by_id(conversation_id)
        if not conversation:
            raise ConversationNotFoundError()

        participants = participants_of(conversation)
        if not participants.contains(user.id):
            logger.warning(
                "User %s denied access to conversation %s", user.id, conversation_id
            )
            raise NotAuthorizedError()
        return conversation, participants
