from typing import Any, Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from casting_platform.database import utc_now
from casting_platform.models.api.users import (
    DirectorProfileResponse,
    TalentProfileResponse,
    WriterProfileResponse,
)
from casting_platform.models.db.profile_models import (
    DirectorProfileModel,
    TalentProfileModel,
    WriterProfileModel,
)
from casting_platform.repositories.base_repository import (
    BaseRepository,
    ModelType,
    PydanticType,
)


class UserProfileRepository(BaseRepository[ModelType, PydanticType]):
    """Shared lookups for the one-to-one per-role profile tables."""

    async def get_for_user(self, user_id: UUID) -> Optional[PydanticType]:
        query = select(self.model_class).where(self.model_class.user_id == user_id)
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def get_many_for_users(
        self, user_ids: Iterable[UUID]
    ) -> Dict[UUID, PydanticType]:
        """Batch-fetch profiles, keyed by user id."""
        id_set = {user_id for user_id in user_ids if user_id is not None}
        if not id_set:
            return {}
        query = select(self.model_class).where(self.model_class.user_id.in_(id_set))
        result = await self.db.execute(query)
        return {
            db_model.user_id: self._to_pydantic(db_model)
            for db_model in result.scalars().all()
        }


class TalentProfileRepository(
    UserProfileRepository[TalentProfileModel, TalentProfileResponse]
):
    def __init__(self, db: AsyncSession):
        super().__init__(db, TalentProfileModel)

    def _to_pydantic(self, db_model: Any) -> TalentProfileResponse:
        return TalentProfileResponse(
            id=db_model.id,
            user_id=db_model.user_id,
            artistic_name=db_model.artistic_name,
            headshot=db_model.headshot,
            specialization=db_model.specialization,
        )

    def _from_pydantic(
        self, pydantic_model: TalentProfileResponse
    ) -> TalentProfileModel:
        return TalentProfileModel(
            id=pydantic_model.id,
            user_id=pydantic_model.user_id,
            artistic_name=pydantic_model.artistic_name,
            headshot=pydantic_model.headshot,
            specialization=pydantic_model.specialization,
            created_at=utc_now(),
        )


class DirectorProfileRepository(
    UserProfileRepository[DirectorProfileModel, DirectorProfileResponse]
):
    def __init__(self, db: AsyncSession):
        super().__init__(db, DirectorProfileModel)

    def _to_pydantic(self, db_model: Any) -> DirectorProfileResponse:
        return DirectorProfileResponse(
            id=db_model.id,
            user_id=db_model.user_id,
            company_name=db_model.company_name,
            profile_image=db_model.profile_image,
        )

    def _from_pydantic(
        self, pydantic_model: DirectorProfileResponse
    ) -> DirectorProfileModel:
        return DirectorProfileModel(
            id=pydantic_model.id,
            user_id=pydantic_model.user_id,
            company_name=pydantic_model.company_name,
            profile_image=pydantic_model.profile_image,
            created_at=utc_now(),
        )


class WriterProfileRepository(
    UserProfileRepository[WriterProfileModel, WriterProfileResponse]
):
    def __init__(self, db: AsyncSession):
        super().__init__(db, WriterProfileModel)

    def _to_pydantic(self, db_model: Any) -> WriterProfileResponse:
        return WriterProfileResponse(
            id=db_model.id,
            user_id=db_model.user_id,
            bio=db_model.bio,
            specialization=db_model.specialization,
            profile_image=db_model.profile_image,
            is_approved_writer=bool(db_model.is_approved_writer),
            auto_approval=bool(db_model.auto_approval),
            auto_approval_granted_at=db_model.auto_approval_granted_at,
            auto_approval_granted_by_id=db_model.auto_approval_granted_by_id,
        )

    def _from_pydantic(
        self, pydantic_model: WriterProfileResponse
    ) -> WriterProfileModel:
        return WriterProfileModel(
            id=pydantic_model.id,
            user_id=pydantic_model.user_id,
            bio=pydantic_model.bio,
            specialization=pydantic_model.specialization,
            profile_image=pydantic_model.profile_image,
            is_approved_writer=pydantic_model.is_approved_writer,
            auto_approval=pydantic_model.auto_approval,
            auto_approval_granted_at=pydantic_model.auto_approval_granted_at,
            auto_approval_granted_by_id=pydantic_model.auto_approval_granted_by_id,
            created_at=utc_now(),
        )
