import logging
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.models.api.conversations import (
    ConversationListResponse,
    ConversationResponse,
    LastMessagePreview,
)
from casting_platform.models.api.users import ParticipantSummary, UserResponse
from casting_platform.models.enums import UserRole
from casting_platform.models.participants import participants_of, slots_for_role
from casting_platform.repositories.casting_repository import CastingRepository
from casting_platform.repositories.conversation_repository import (
    ConversationRepository,
    RoleSlots,
)
from casting_platform.repositories.message_repository import MessageRepository
from casting_platform.repositories.profile_repository import (
    DirectorProfileRepository,
    TalentProfileRepository,
    WriterProfileRepository,
)
from casting_platform.repositories.user_repository import UserRepository
from casting_platform.services.conversation_access import validate_pagination
from casting_platform.services.exceptions import NotAuthorizedError

logger = logging.getLogger(__name__)


class ListConversationsService:
    """Service for listing a user's conversations and counting unread messages."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.message_repo = MessageRepository(db)
        self.user_repo = UserRepository(db)
        self.casting_repo = CastingRepository(db)
        self.talent_profile_repo = TalentProfileRepository(db)
        self.director_profile_repo = DirectorProfileRepository(db)
        self.writer_profile_repo = WriterProfileRepository(db)

    async def list_conversations(
        self, user: UserResponse, page: int = 1, limit: int = 20
    ) -> ConversationListResponse:
        """
        List the user's active conversations, most recent activity first:

        1. Resolve which participant slots the user's role may hold
        2. Load one page of conversations
        3. Batch-load participants, profiles, last messages and castings
        4. Return the enriched page
        """
        offset = validate_pagination(page, limit)
        slots = self._slots_for(user)

        conversations = await self.conversation_repo.list_for_user(
            user.id, slots, limit=limit, offset=offset
        )
        enriched = await self._enrich(conversations)
        return ConversationListResponse(conversations=enriched, page=page, limit=limit)

    async def count_unread(self, user: UserResponse) -> int:
        """Unread messages sent to the user across their active conversations."""
        slots = self._slots_for(user)
        conversation_ids = await self.conversation_repo.active_ids_for_user(
            user.id, slots
        )
        return await self.message_repo.count_unread(conversation_ids, user.id)

    def _slots_for(self, user: UserResponse) -> RoleSlots:
        slots = slots_for_role(user.role)
        if not slots:
            logger.warning("Role %s cannot use messaging (user %s)", user.role, user.id)
            raise NotAuthorizedError()
        return slots

    async def _enrich(
        self, conversations: List[ConversationResponse]
    ) -> List[ConversationResponse]:
        user_ids = {
            user_id
            for conversation in conversations
            for user_id in participants_of(conversation).user_ids()
        }
        users = await self.user_repo.get_many(user_ids)
        summaries = await self._participant_summaries(users)
        last_messages = await self.message_repo.get_many(
            c.last_message_id for c in conversations
        )
        castings = await self.casting_repo.get_many(c.casting_id for c in conversations)

        enriched = []
        for conversation in conversations:
            update: Dict[str, object] = {
                slot: summaries.get(user_id)
                for slot, user_id in participants_of(conversation).slots().items()
            }
            last_message = last_messages.get(conversation.last_message_id)
            if last_message:
                update["last_message"] = LastMessagePreview(
                    id=last_message.id,
                    content=last_message.content,
                    created_at=last_message.created_at,
                )
            update["casting"] = castings.get(conversation.casting_id)
            enriched.append(conversation.model_copy(update=update))
        return enriched

    async def _participant_summaries(
        self, users: Dict[UUID, UserResponse]
    ) -> Dict[UUID, ParticipantSummary]:
        ids_by_role: Dict[str, List[UUID]] = {}
        for user in users.values():
            ids_by_role.setdefault(user.role, []).append(user.id)

        directors = await self.director_profile_repo.get_many_for_users(
            ids_by_role.get(UserRole.CASTING_DIRECTOR.value, [])
        )
        talents = await self.talent_profile_repo.get_many_for_users(
            ids_by_role.get(UserRole.TALENT.value, [])
        )
        writers = await self.writer_profile_repo.get_many_for_users(
            ids_by_role.get(UserRole.JOURNALIST.value, [])
        )

        summaries = {}
        for user in users.values():
            extras: Dict[str, Optional[str]] = {}
            if user.id in directors:
                extras = {
                    "profile_image": directors[user.id].profile_image,
                    "company_name": directors[user.id].company_name,
                }
            elif user.id in talents:
                extras = {
                    "headshot": talents[user.id].headshot,
                    "specialization": talents[user.id].specialization,
                }
            elif user.id in writers:
                extras = {
                    "profile_image": writers[user.id].profile_image,
                    "specialization": writers[user.id].specialization,
                }
            summaries[user.id] = ParticipantSummary(
                id=user.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
                role=user.role,
                **extras,
            )
        return summaries

