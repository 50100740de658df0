from typing import Any, Dict, Iterable, List, Sequence
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from casting_platform.database import utc_now
from casting_platform.models.api.messages import MessageResponse, MessageSender
from casting_platform.models.db.message_model import MessageModel
from casting_platform.repositories.base_repository import BaseRepository


class MessageRepository(BaseRepository[MessageModel, MessageResponse]):
    """Repository for message operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, MessageModel)

    async def get_page(
        self, conversation_id: UUID, limit: int = 50, offset: int = 0
    ) -> List[MessageResponse]:
        """Get one page of a conversation's messages, newest first."""
        query = (
            select(self.model_class)
            .where(self.model_class.conversation_id == conversation_id)
            .options(selectinload(self.model_class.sender))
            .order_by(self.model_class.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        db_models = result.scalars().all()
        return [self._to_pydantic(db_model) for db_model in db_models]

    async def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, MessageResponse]:
        id_set = {message_id for message_id in ids if message_id is not None}
        if not id_set:
            return {}
        query = select(self.model_class).where(self.model_class.id.in_(id_set))
        result = await self.db.execute(query)
        return {
            db_model.id: self._to_pydantic(db_model, with_sender=False)
            for db_model in result.scalars().all()
        }

    async def mark_read(
        self, conversation_id: UUID, reader_id: UUID, commit: bool = True
    ) -> int:
        """Mark every unread message not sent by the reader as read.

        Returns the number of messages flipped; zero when nothing was unread.
        """
        unread_query = select(self.model_class.id).where(
            self.model_class.conversation_id == conversation_id,
            self.model_class.sender_id != reader_id,
            self.model_class.is_read.is_(False),
        )
        result = await self.db.execute(unread_query)
        unread_ids = list(result.scalars().all())
        if not unread_ids:
            return 0

        await self.db.execute(
            update(self.model_class)
            .where(self.model_class.id.in_(unread_ids))
            .values(is_read=True, read_at=utc_now())
        )
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()
        return len(unread_ids)

    async def count_unread(
        self, conversation_ids: Sequence[UUID], user_id: UUID
    ) -> int:
        """Count messages addressed to the user (not sent by them) that are unread."""
        if not conversation_ids:
            return 0
        query = select(func.count(self.model_class.id)).where(
            self.model_class.conversation_id.in_(conversation_ids),
            self.model_class.sender_id != user_id,
            self.model_class.is_read.is_(False),
        )
        result = await self.db.execute(query)
        return int(result.scalar() or 0)

    async def delete_by_conversation(
        self, conversation_id: UUID, commit: bool = True
    ) -> int:
        """Delete all messages of a conversation."""
        result = await self.db.execute(
            delete(self.model_class).where(
                self.model_class.conversation_id == conversation_id
            )
        )
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()
        return result.rowcount or 0

    def _to_pydantic(self, db_model: Any, with_sender: bool = True) -> MessageResponse:
        """Convert SQLAlchemy MessageModel to Pydantic MessageResponse."""
        sender = None
        # Only read the relationship when it was eagerly loaded
        if with_sender and "sender" in db_model.__dict__ and db_model.sender:
            sender = MessageSender(
                id=db_model.sender.id,
                first_name=db_model.sender.first_name,
                last_name=db_model.sender.last_name,
                role=db_model.sender.role,
            )
        return MessageResponse(
            id=db_model.id,
            conversation_id=db_model.conversation_id,
            sender_id=db_model.sender_id,
            sender=sender,
            content=db_model.content,
            is_read=bool(db_model.is_read),
            read_at=db_model.read_at,
            is_delivered=bool(db_model.is_delivered),
            created_at=db_model.created_at,
        )

    def _from_pydantic(self, pydantic_model: MessageResponse) -> MessageModel:
        """Convert Pydantic MessageResponse to SQLAlchemy MessageModel."""
        return MessageModel(
            id=pydantic_model.id,
            conversation_id=pydantic_model.conversation_id,
            sender_id=pydantic_model.sender_id,
            content=pydantic_model.content,
            is_read=pydantic_model.is_read,
            read_at=pydantic_model.read_at,
            is_delivered=pydantic_model.is_delivered,
            created_at=pydantic_model.created_at,
        )
