from typing import Any, Dict, Generic, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from casting_platform.database import Base, utc_now

ModelType = TypeVar("ModelType", bound=Base)
PydanticType = TypeVar("PydanticType", bound=BaseModel)


class BaseRepository(Generic[ModelType, PydanticType]):
    """Generic base repository with common CRUD operations.

    Write methods commit by default. Pass ``commit=False`` to only flush,
    leaving the caller to commit several writes as one transaction.
    """

    def __init__(self, db: AsyncSession, model_class: Any):
        self.db = db
        self.model_class = model_class

    async def get_model(self, id: UUID) -> Optional[ModelType]:
        """Get the SQLAlchemy row for an ID."""
        query = select(self.model_class).where(self.model_class.id == id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_id(self, id: UUID) -> Optional[PydanticType]:
        """Get a single record by ID."""
        db_model = await self.get_model(id)
        return self._to_pydantic(db_model) if db_model else None

    async def create(
        self, pydantic_model: PydanticType, commit: bool = True
    ) -> PydanticType:
        """Create a new record."""
        db_model = self._from_pydantic(pydantic_model)
        self.db.add(db_model)
        await self._save(db_model, commit)
        return self._to_pydantic(db_model)

    async def update_fields(
        self, id: UUID, changes: Dict[str, Any], commit: bool = True
    ) -> Optional[PydanticType]:
        """Set columns on one row. Touches ``updated_at`` where the table has it."""
        db_model = await self.get_model(id)
        if not db_model:
            return None

        for field, value in changes.items():
            setattr(db_model, field, value)
        if hasattr(db_model, "updated_at"):
            db_model.updated_at = utc_now()

        await self._save(db_model, commit)
        return self._to_pydantic(db_model)

    async def delete(self, id: UUID, commit: bool = True) -> bool:
        """Delete a record by ID."""
        db_model = await self.get_model(id)
        if not db_model:
            return False

        await self.db.delete(db_model)
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()
        return True

    async def _save(self, db_model: Any, commit: bool) -> None:
        if commit:
            await self.db.commit()
            await self.db.refresh(db_model)
        else:
            await self.db.flush()

    def _to_pydantic(self, db_model: ModelType) -> PydanticType:
        """Convert SQLAlchemy model to Pydantic model.

        This should be overridden in subclasses for specific conversion logic.
        """
        raise NotImplementedError

    def _from_pydantic(self, pydantic_model: PydanticType) -> ModelType:
        """Convert Pydantic model to SQLAlchemy model.

        This should be overridden in subclasses for specific conversion logic.
        """
        raise NotImplementedError
