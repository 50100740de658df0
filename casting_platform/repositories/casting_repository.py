from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from casting_platform.models.api.castings import CastingResponse
from casting_platform.models.api.conversations import CastingSummary
from casting_platform.models.db.casting_model import CastingModel
from casting_platform.models.enums import CastingStatus
from casting_platform.repositories.base_repository import BaseRepository

# Counters kept on the casting row, bumped as applications come in
COUNTER_COLUMNS = ("total_applications", "shortlisted_applications")


class CastingRepository(BaseRepository[CastingModel, CastingResponse]):
    """Repository for casting operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, CastingModel)

    async def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, CastingSummary]:
        """Batch-fetch the id and title shown alongside conversations."""
        id_set = {casting_id for casting_id in ids if casting_id is not None}
        if not id_set:
            return {}
        query = select(self.model_class.id, self.model_class.title).where(
            self.model_class.id.in_(id_set)
        )
        result = await self.db.execute(query)
        return {
            row.id: CastingSummary(id=row.id, title=row.title) for row in result.all()
        }

    async def list_open(
        self, now: datetime, limit: int = 20, offset: int = 0
    ) -> Tuple[List[CastingResponse], int]:
        """Active castings still taking applications, newest first."""
        filters = [
            self.model_class.status == CastingStatus.ACTIVE.value,
            self.model_class.application_deadline >= now,
        ]
        return await self._page(filters, limit, offset)

    async def list_by_director(
        self,
        director_id: UUID,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[CastingResponse], int]:
        filters = [self.model_class.director_id == director_id]
        if status:
            filters.append(self.model_class.status == status)
        return await self._page(filters, limit, offset)

    async def increment(
        self, casting_id: UUID, column: str, commit: bool = True
    ) -> None:
        """Add one to an application counter in place."""
        if column not in COUNTER_COLUMNS:
            raise ValueError(f"Unknown casting counter: {column}")
        counter = getattr(self.model_class, column)
        await self.db.execute(
            update(self.model_class)
            .where(self.model_class.id == casting_id)
            .values({column: counter + 1})
        )
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()

    async def _page(
        self, filters: List[Any], limit: int, offset: int
    ) -> Tuple[List[CastingResponse], int]:
        total_result = await self.db.execute(
            select(func.count(self.model_class.id)).where(*filters)
        )
        query = (
            select(self.model_class)
            .where(*filters)
            .order_by(self.model_class.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        castings = [self._to_pydantic(db_model) for db_model in result.scalars().all()]
        return castings, int(total_result.scalar() or 0)

    def _to_pydantic(self, db_model: Any) -> CastingResponse:
        return CastingResponse(
            id=db_model.id,
            director_id=db_model.director_id,
            title=db_model.title,
            description=db_model.description,
            project_type=db_model.project_type,
            role_type=db_model.role_type,
            city=db_model.city,
            province=db_model.province,
            application_deadline=db_model.application_deadline,
            status=db_model.status,
            total_applications=db_model.total_applications or 0,
            shortlisted_applications=db_model.shortlisted_applications or 0,
            published_at=db_model.published_at,
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
        )

    def _from_pydantic(self, pydantic_model: CastingResponse) -> CastingModel:
        return CastingModel(
            id=pydantic_model.id,
            director_id=pydantic_model.director_id,
            title=pydantic_model.title,
            description=pydantic_model.description,
            project_type=pydantic_model.project_type,
            role_type=pydantic_model.role_type,
            city=pydantic_model.city,
            province=pydantic_model.province,
            application_deadline=pydantic_model.application_deadline,
            status=pydantic_model.status,
            total_applications=pydantic_model.total_applications,
            shortlisted_applications=pydantic_model.shortlisted_applications,
            published_at=pydantic_model.published_at,
            created_at=pydantic_model.created_at,
            updated_at=pydantic_model.updated_at,
        )
