import logging
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.database import utc_now
from casting_platform.models.api.messages import (
    MessageResponse,
    MessageSender,
    SendMessageRequest,
)
from casting_platform.models.api.users import UserResponse
from casting_platform.repositories.conversation_repository import (
    ConversationRepository,
)
from casting_platform.repositories.message_repository import MessageRepository
from casting_platform.services.conversation_access import ConversationAccess
from casting_platform.services.exceptions import ValidationError

logger = logging.getLogger(__name__)


class SendMessageService:
    """Service for appending messages to an existing conversation."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.access = ConversationAccess(db)
        self.message_repo = MessageRepository(db)
        self.conversation_repo = ConversationRepository(db)

    async def send_message(
        self, user: UserResponse, conversation_id: UUID, request: SendMessageRequest
    ) -> MessageResponse:
        """
        Main business logic for sending a message:
        1. Reject blank content
        2. Load the conversation and check the sender is a participant
        3. Save the message and move the conversation's last-message pointer
        4. Return the message with its sender
        """
        # Step 1: Validate content before touching the database
        content = (request.content or "").strip()
        if not content:
            raise ValidationError("Message content is required")

        # Step 2: Participancy check
        await self.access.load(conversation_id, user)

        # Step 3: Save and update the conversation in one transaction
        try:
            message = await self.message_repo.create(
                MessageResponse(
                    id=uuid4(),
                    conversation_id=conversation_id,
                    sender_id=user.id,
                    content=content,
                    is_read=False,
                    is_delivered=True,
                    created_at=utc_now(),
                ),
                commit=False,
            )
            await self.conversation_repo.set_last_message(
                conversation_id, message.id, sent_at=message.created_at, commit=False
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.debug("Message %s sent to conversation %s", message.id, conversation_id)

        # Step 4: Return formatted response
        return message.model_copy(
            update={
                "sender": MessageSender(
                    id=user.id,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    role=user.role,
                )
            }
        )
