from typing import Any, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from casting_platform.models.api.content import ContentResponse
from casting_platform.models.db.content_models import BlogModel, NewsModel
from casting_platform.models.enums import ContentKind, ContentStatus
from casting_platform.repositories.base_repository import BaseRepository

# Columns that only exist on one of the two content tables
KIND_FIELDS = {
    ContentKind.BLOG: ("excerpt", "read_time"),
    ContentKind.NEWS: ("summary", "priority", "is_breaking", "is_featured"),
}


class ContentRepository(BaseRepository[Any, ContentResponse]):
    """Repository shared by the blogs and news tables."""

    kind: ContentKind

    async def slug_exists(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        query = select(self.model_class.id).where(self.model_class.slug == slug)
        if exclude_id is not None:
            query = query.where(self.model_class.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def get_published_by_slug(self, slug: str) -> Optional[ContentResponse]:
        query = select(self.model_class).where(
            self.model_class.slug == slug,
            self.model_class.status == ContentStatus.PUBLISHED.value,
        )
        result = await self.db.execute(query)
        db_model = result.scalar_one_or_none()
        return self._to_pydantic(db_model) if db_model else None

    async def list_published(
        self, category: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> Tuple[List[ContentResponse], int]:
        """Published items, newest first, with the total matching count."""
        filters = [self.model_class.status == ContentStatus.PUBLISHED.value]
        if category:
            filters.append(self.model_class.category == category)

        total_result = await self.db.execute(
            select(func.count(self.model_class.id)).where(*filters)
        )
        query = (
            select(self.model_class)
            .where(*filters)
            .order_by(self.model_class.published_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        items = [self._to_pydantic(db_model) for db_model in result.scalars().all()]
        return items, int(total_result.scalar() or 0)

    async def list_by_author(self, author_id: UUID) -> List[ContentResponse]:
        query = (
            select(self.model_class)
            .where(self.model_class.author_id == author_id)
            .order_by(self.model_class.created_at.desc())
        )
        result = await self.db.execute(query)
        return [self._to_pydantic(db_model) for db_model in result.scalars().all()]

    async def increment_views(self, id: UUID) -> None:
        await self.db.execute(
            update(self.model_class)
            .where(self.model_class.id == id)
            .values(views=self.model_class.views + 1)
        )
        await self.db.commit()

    def _to_pydantic(self, db_model: Any) -> ContentResponse:
        kind_values = {
            field: getattr(db_model, field) for field in KIND_FIELDS[self.kind]
        }
        return ContentResponse(
            id=db_model.id,
            kind=self.kind.value,
            title=db_model.title,
            slug=db_model.slug,
            content=db_model.content,
            category=db_model.category,
            tags=db_model.tags or [],
            author_id=db_model.author_id,
            status=db_model.status,
            published_at=db_model.published_at,
            approved_by_id=db_model.approved_by_id,
            approved_at=db_model.approved_at,
            rejection_reason=db_model.rejection_reason,
            views=db_model.views or 0,
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
            **kind_values,
        )

    def _from_pydantic(self, pydantic_model: ContentResponse) -> Any:
        kind_values = {
            field: getattr(pydantic_model, field) for field in KIND_FIELDS[self.kind]
        }
        return self.model_class(
            id=pydantic_model.id,
            title=pydantic_model.title,
            slug=pydantic_model.slug,
            content=pydantic_model.content,
            category=pydantic_model.category,
            tags=pydantic_model.tags,
            author_id=pydantic_model.author_id,
            status=pydantic_model.status,
            published_at=pydantic_model.published_at,
            approved_by_id=pydantic_model.approved_by_id,
            approved_at=pydantic_model.approved_at,
            rejection_reason=pydantic_model.rejection_reason,
            views=pydantic_model.views,
            created_at=pydantic_model.created_at,
            updated_at=pydantic_model.updated_at,
            **kind_values,
        )


class BlogRepository(ContentRepository):
    kind = ContentKind.BLOG

    def __init__(self, db: AsyncSession):
        super().__init__(db, BlogModel)


class NewsRepository(ContentRepository):
    kind = ContentKind.NEWS

    def __init__(self, db: AsyncSession):
        super().__init__(db, NewsModel)


def content_repository_for(kind: ContentKind, db: AsyncSession) -> ContentRepository:
    if kind == ContentKind.BLOG:
        return BlogRepository(db)
    return NewsRepository(db)
