import logging
from typing import Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.database import utc_now
from casting_platform.models.api.conversations import (
    ConversationResponse,
    CreateConversationRequest,
    CreateConversationResponse,
)
from casting_platform.models.api.messages import MessageResponse, MessageSender
from casting_platform.models.api.users import UserResponse
from casting_platform.models.enums import ConversationType, UserRole
from casting_platform.models.participants import (
    INITIATOR_CONVERSATION_TYPES,
    DirectorTalentParticipants,
    Participants,
    WriterUserParticipants,
)
from casting_platform.repositories.casting_repository import CastingRepository
from casting_platform.repositories.conversation_repository import (
    ConversationRepository,
)
from casting_platform.repositories.message_repository import MessageRepository
from casting_platform.repositories.user_repository import UserRepository
from casting_platform.services.conversation_access import parse_uuid
from casting_platform.services.exceptions import (
    ConversationExistsError,
    NotAuthorizedError,
    NotFoundError,
    UserNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SUBJECT_MAX_LENGTH = 200


class CreateConversationService:
    """Service for starting a conversation together with its first message."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.message_repo = MessageRepository(db)
        self.user_repo = UserRepository(db)
        self.casting_repo = CastingRepository(db)

    async def create_conversation(
        self, user: UserResponse, request: CreateConversationRequest
    ) -> CreateConversationResponse:
        """
        Start a conversation:

        1. Validate the request and the initiator's role
        2. Validate the recipient
        3. Refuse if the pair already has a conversation
        4. Write conversation, first message and last-message pointer in one transaction
        """
        subject = (request.subject or "").strip()
        initial_message = (request.initial_message or "").strip()
        if not request.recipient_id or not subject or not initial_message:
            raise ValidationError("Recipient, subject and initial message are required")
        if len(subject) > SUBJECT_MAX_LENGTH:
            raise ValidationError(
                f"Subject must be at most {SUBJECT_MAX_LENGTH} characters"
            )

        recipient_id = parse_uuid(request.recipient_id, "recipientId")
        casting_id = parse_uuid(request.casting_id, "castingId")
        conversation_type = self._conversation_type_for(user)

        recipient = await self.user_repo.get_by_id(recipient_id)
        if not recipient:
            raise UserNotFoundError("Recipient not found.")
        if recipient.id == user.id:
            raise ValidationError("You cannot start a conversation with yourself")
        if (
            conversation_type == ConversationType.DIRECTOR_TALENT
            and recipient.role != UserRole.TALENT.value
        ):
            raise ValidationError("Casting directors can only message talents")

        if casting_id:
            castings = await self.casting_repo.get_many([casting_id])
            if casting_id not in castings:
                raise NotFoundError("Casting not found.")

        participants = self._participants(conversation_type, user, recipient)
        existing = await self.conversation_repo.find_between(participants)
        if existing:
            raise ConversationExistsError(existing.id)

        try:
            conversation, message = await self._write(
                participants, subject, initial_message, casting_id, user
            )
        except IntegrityError:
            # Lost a race against a concurrent create for the same pair
            await self.db.rollback()
            existing = await self.conversation_repo.find_between(participants)
            if existing:
                raise ConversationExistsError(existing.id)
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Conversation %s (%s) started by %s",
            conversation.id,
            conversation_type.value,
            user.id,
        )
        return CreateConversationResponse(
            conversation=conversation, initial_message=message
        )

    def _conversation_type_for(self, user: UserResponse) -> ConversationType:
        try:
            conversation_type = INITIATOR_CONVERSATION_TYPES.get(UserRole(user.role))
        except ValueError:
            conversation_type = None
        if not conversation_type:
            raise NotAuthorizedError(
                "Only casting directors and writers can start conversations."
            )
        return conversation_type

    def _participants(
        self,
        conversation_type: ConversationType,
        user: UserResponse,
        recipient: UserResponse,
    ) -> Participants:
        if conversation_type == ConversationType.DIRECTOR_TALENT:
            return DirectorTalentParticipants(
                director_id=user.id, talent_id=recipient.id
            )
        return WriterUserParticipants(initiator_id=user.id, recipient_id=recipient.id)

    async def _write(
        self,
        participants: Participants,
        subject: str,
        initial_message: str,
        casting_id: Optional[UUID],
        user: UserResponse,
    ) -> Tuple[ConversationResponse, MessageResponse]:
        now = utc_now()
        conversation = await self.conversation_repo.create(
            ConversationResponse(
                id=uuid4(),
                conversation_type=participants.conversation_type.value,
                casting_id=casting_id,
                subject=subject,
                last_message_at=now,
                is_active=True,
                created_at=now,
                updated_at=now,
                **participants.column_values(),
            ),
            commit=False,
        )
        message = await self.message_repo.create(
            MessageResponse(
                id=uuid4(),
                conversation_id=conversation.id,
                sender_id=user.id,
                content=initial_message,
                is_read=False,
                is_delivered=True,
                created_at=now,
            ),
            commit=False,
        )
        await self.conversation_repo.set_last_message(
            conversation.id, message.id, sent_at=message.created_at, commit=False
        )
        await self.db.commit()

        conversation = conversation.model_copy(
            update={"last_message_id": message.id, "last_message_at": message.created_at}
        )
        message = message.model_copy(
            update={
                "sender": MessageSender(
                    id=user.id,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    role=user.role,
                )
            }
        )
        return conversation, message
