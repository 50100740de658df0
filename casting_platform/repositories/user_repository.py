from typing import Any, Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from casting_platform.database import utc_now
from casting_platform.models.api.users import UserResponse
from casting_platform.models.db.user_model import UserModel
from casting_platform.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[UserModel, UserResponse]):
    """Repository for user accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, UserModel)

    async def get_by_email(self, email: str) -> Optional[UserResponse]:
        query = select(self.model_class).where(
            self.model_class.email == email.strip().lower()
        )
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, UserResponse]:
        """Batch-fetch users, keyed by id."""
        id_set = {user_id for user_id in ids if user_id is not None}
        if not id_set:
            return {}
        query = select(self.model_class).where(self.model_class.id.in_(id_set))
        result = await self.db.execute(query)
        return {
            db_model.id: self._to_pydantic(db_model)
            for db_model in result.scalars().all()
        }

    def _to_pydantic(self, db_model: Any) -> UserResponse:
        """Convert SQLAlchemy UserModel to Pydantic UserResponse."""
        return UserResponse(
            id=db_model.id,
            email=db_model.email,
            first_name=db_model.first_name,
            last_name=db_model.last_name,
            role=db_model.role,
            status=db_model.status,
            identification_status=db_model.identification_status,
            created_at=db_model.created_at,
        )

    def _from_pydantic(self, pydantic_model: UserResponse) -> UserModel:
        """Convert Pydantic UserResponse to SQLAlchemy UserModel."""
        return UserModel(
            id=pydantic_model.id,
            email=pydantic_model.email.strip().lower(),
            first_name=pydantic_model.first_name.strip(),
            last_name=pydantic_model.last_name.strip(),
            role=pydantic_model.role,
            status=pydantic_model.status,
            identification_status=pydantic_model.identification_status,
            created_at=pydantic_model.created_at or utc_now(),
        )
