from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import and_, delete, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from casting_platform.database import utc_now
from casting_platform.models.api.conversations import ConversationResponse
from casting_platform.models.db.conversation_model import ConversationModel
from casting_platform.models.enums import ConversationType
from casting_platform.models.participants import Participants
from casting_platform.repositories.base_repository import BaseRepository

RoleSlots = Sequence[Tuple[ConversationType, str]]


class ConversationRepository(BaseRepository[ConversationModel, ConversationResponse]):
    """Repository for conversation operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, ConversationModel)

    async def find_between(
        self, participants: Participants
    ) -> Optional[ConversationResponse]:
        """Find an existing conversation of the same type between the same pair.

        Director/talent pairs are directional. Writer/user pairs match in
        either direction. Closed conversations count as existing.
        """
        conversation_type = participants.conversation_type
        if conversation_type == ConversationType.DIRECTOR_TALENT:
            pair_clause = and_(
                self.model_class.director_id == participants.director_id,
                self.model_class.talent_id == participants.talent_id,
            )
        else:
            pair_clause = or_(
                and_(
                    self.model_class.initiator_id == participants.initiator_id,
                    self.model_class.recipient_id == participants.recipient_id,
                ),
                and_(
                    self.model_class.initiator_id == participants.recipient_id,
                    self.model_class.recipient_id == participants.initiator_id,
                ),
            )

        query = (
            select(self.model_class)
            .where(self.model_class.conversation_type == conversation_type.value)
            .where(pair_clause)
            .limit(1)
        )
        result = await self.db.execute(query)
        db_model = result.scalars().first()
        return self._to_pydantic(db_model) if db_model else None

    async def list_for_user(
        self,
        user_id: UUID,
        slots: RoleSlots,
        limit: int = 20,
        offset: int = 0,
    ) -> List[ConversationResponse]:
        """Active conversations where the user holds one of the given slots."""
        query = (
            select(self.model_class)
            .where(self.model_class.is_active.is_(True))
            .where(self._slot_clause(user_id, slots))
            .order_by(
                self.model_class.last_message_at.desc(),
                self.model_class.created_at.desc(),
            )
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    async def active_ids_for_user(self, user_id: UUID, slots: RoleSlots) -> List[UUID]:
        query = (
            select(self.model_class.id)
            .where(self.model_class.is_active.is_(True))
            .where(self._slot_clause(user_id, slots))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def set_last_message(
        self,
        conversation_id: UUID,
        message_id: UUID,
        sent_at: Optional[datetime] = None,
        commit: bool = True,
    ) -> None:
        """Point the conversation at its newest message."""
        sent_at = sent_at or utc_now()
        await self.db.execute(
            update(self.model_class)
            .where(self.model_class.id == conversation_id)
            .values(
                last_message_id=message_id,
                last_message_at=sent_at,
                updated_at=utc_now(),
            )
        )
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()

    async def close(self, conversation_id: UUID) -> bool:
        """Soft-close a conversation."""
        closed = await self.update_fields(conversation_id, {"is_active": False})
        return closed is not None

    async def delete(self, id: UUID, commit: bool = True) -> bool:
        """Delete the conversation row. Messages must be removed first."""
        result = await self.db.execute(
            delete(self.model_class).where(self.model_class.id == id)
        )
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()
        return bool(result.rowcount)

    def _slot_clause(self, user_id: UUID, slots: RoleSlots) -> Any:
        return or_(
            *[
                and_(
                    self.model_class.conversation_type == conversation_type.value,
                    getattr(self.model_class, f"{slot}_id") == user_id,
                )
                for conversation_type, slot in slots
            ]
        )

    def _to_pydantic(self, db_model: Any) -> ConversationResponse:
        """Convert SQLAlchemy ConversationModel to Pydantic ConversationResponse."""
        return ConversationResponse(
            id=db_model.id,
            conversation_type=db_model.conversation_type,
            director_id=db_model.director_id,
            talent_id=db_model.talent_id,
            initiator_id=db_model.initiator_id,
            recipient_id=db_model.recipient_id,
            casting_id=db_model.casting_id,
            subject=db_model.subject,
            last_message_id=db_model.last_message_id,
            last_message_at=db_model.last_message_at,
            is_active=db_model.is_active,
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
        )

    def _from_pydantic(self, pydantic_model: ConversationResponse) -> ConversationModel:
        """Convert Pydantic ConversationResponse to SQLAlchemy ConversationModel."""
        return ConversationModel(
            id=pydantic_model.id,
            conversation_type=pydantic_model.conversation_type,
            director_id=pydantic_model.director_id,
            talent_id=pydantic_model.talent_id,
            initiator_id=pydantic_model.initiator_id,
            recipient_id=pydantic_model.recipient_id,
            casting_id=pydantic_model.casting_id,
            subject=pydantic_model.subject,
            last_message_id=pydantic_model.last_message_id,
            last_message_at=pydantic_model.last_message_at,
            is_active=pydantic_model.is_active,
            created_at=pydantic_model.created_at,
            updated_at=pydantic_model.updated_at,
        )
