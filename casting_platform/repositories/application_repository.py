from typing import Any, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from casting_platform.models.api.castings import ApplicationResponse
from casting_platform.models.db.casting_model import ApplicationModel
from casting_platform.repositories.base_repository import BaseRepository


class ApplicationRepository(BaseRepository[ApplicationModel, ApplicationResponse]):
    """Repository for casting applications."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, ApplicationModel)

    async def find_for(
        self, casting_id: UUID, talent_id: UUID
    ) -> Optional[ApplicationResponse]:
        """The talent's application to a casting, if any."""
        query = select(self.model_class).where(
            self.model_class.casting_id == casting_id,
            self.model_class.talent_id == talent_id,
        )
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def exists_for_casting(self, casting_id: UUID) -> bool:
        query = select(self.model_class.id).where(
            self.model_class.casting_id == casting_id
        )
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_for_casting(
        self,
        casting_id: UUID,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[ApplicationResponse], int]:
        filters = [self.model_class.casting_id == casting_id]
        if status:
            filters.append(self.model_class.status == status)
        return await self._page(filters, limit, offset)

    async def list_for_talent(
        self,
        talent_id: UUID,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[ApplicationResponse], int]:
        filters = [self.model_class.talent_id == talent_id]
        if status:
            filters.append(self.model_class.status == status)
        return await self._page(filters, limit, offset)

    async def _page(
        self, filters: List[Any], limit: int, offset: int
    ) -> Tuple[List[ApplicationResponse], int]:
        """Newest submissions first, with the total matching count."""
        total_result = await self.db.execute(
            select(func.count(self.model_class.id)).where(*filters)
        )
        query = (
            select(self.model_class)
            .where(*filters)
            .order_by(self.model_class.submitted_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        applications = [
            self._to_pydantic(db_model) for db_model in result.scalars().all()
        ]
        return applications, int(total_result.scalar() or 0)

    def _to_pydantic(self, db_model: Any) -> ApplicationResponse:
        return ApplicationResponse(
            id=db_model.id,
            casting_id=db_model.casting_id,
            talent_id=db_model.talent_id,
            cover_message=db_model.cover_message,
            status=db_model.status,
            director_notes=db_model.director_notes,
            director_response=db_model.director_response,
            responded_at=db_model.responded_at,
            reviewed_at=db_model.reviewed_at,
            status_updated_at=db_model.status_updated_at,
            submitted_at=db_model.submitted_at,
        )

    def _from_pydantic(self, pydantic_model: ApplicationResponse) -> ApplicationModel:
        return ApplicationModel(
            id=pydantic_model.id,
            casting_id=pydantic_model.casting_id,
            talent_id=pydantic_model.talent_id,
            cover_message=pydantic_model.cover_message,
            status=pydantic_model.status,
            director_notes=pydantic_model.director_notes,
            director_response=pydantic_model.director_response,
            responded_at=pydantic_model.responded_at,
            reviewed_at=pydantic_model.reviewed_at,
            status_updated_at=pydantic_model.status_updated_at,
            submitted_at=pydantic_model.submitted_at,
        )
