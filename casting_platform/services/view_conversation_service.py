import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.models.api.conversations import ConversationDetailResponse
from casting_platform.models.api.users import UserResponse
from casting_platform.repositories.message_repository import MessageRepository
from casting_platform.services.conversation_access import (
    ConversationAccess,
    validate_pagination,
)

logger = logging.getLogger(__name__)


class ViewConversationService:
    """Service for reading a conversation's messages.

    Viewing is a command, not a pure query: every unread message the other
    participant sent is marked read before the page is returned.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.access = ConversationAccess(db)
        self.message_repo = MessageRepository(db)

    async def view_conversation(
        self, user: UserResponse, conversation_id: UUID, page: int = 1, limit: int = 50
    ) -> ConversationDetailResponse:
        """
        Open a conversation as one of its participants:

        1. Verify the conversation exists and the user participates
        2. Mark the counterpart's unread messages as read
        3. Load a page newest-first and return it in chronological order
        """
        offset = validate_pagination(page, limit)
        conversation, _ = await self.access.load(conversation_id, user)

        marked = await self.message_repo.mark_read(conversation_id, user.id)
        if marked:
            logger.debug(
                "Viewing conversation %s marked %d messages read for %s",
                conversation_id,
                marked,
                user.id,
            )

        newest_first = await self.message_repo.get_page(
            conversation_id, limit=limit, offset=offset
        )
        return ConversationDetailResponse(
            conversation=conversation,
            messages=list(reversed(newest_first)),
            has_more=len(newest_first) == limit,
        )

    async def mark_as_read(self, user: UserResponse, conversation_id: UUID) -> int:
        """Explicitly mark the counterpart's unread messages as read."""
        await self.access.load(conversation_id, user)
        return await self.message_repo.mark_read(conversation_id, user.id)
