import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.models.api.users import UserResponse
from casting_platform.repositories.conversation_repository import (
    ConversationRepository,
)
from casting_platform.repositories.message_repository import MessageRepository
from casting_platform.services.conversation_access import ConversationAccess

logger = logging.getLogger(__name__)


class ManageConversationService:
    """Service for closing and deleting conversations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.access = ConversationAccess(db)
        self.conversation_repo = ConversationRepository(db)
        self.message_repo = MessageRepository(db)

    async def close_conversation(self, user: UserResponse, conversation_id: UUID) -> None:
        """Soft-close: the conversation disappears from listings but keeps its data."""
        await self.access.load(conversation_id, user)
        await self.conversation_repo.close(conversation_id)
        logger.info("Conversation %s closed by %s", conversation_id, user.id)

    async def delete_conversation(
        self, user: UserResponse, conversation_id: UUID
    ) -> None:
        """Delete the conversation and all of its messages.

        Either participant may delete; there is no consent step.
        """
        await self.access.load(conversation_id, user)
        try:
            deleted_messages = await self.message_repo.delete_by_conversation(
                conversation_id, commit=False
            )
            await self.conversation_repo.delete(conversation_id, commit=False)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Conversation %s deleted by %s (%d messages)",
            conversation_id,
            user.id,
            deleted_messages,
        )
