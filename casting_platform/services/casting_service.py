"""Casting calls posted by directors.

Status workflow::

    draft -> active <-> paused -> closed | filled

``published_at`` is stamped the first time a casting goes ``active``. Owners
and admins may set any status.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.database import as_utc, utc_now
from casting_platform.models.api.castings import (
    ApplicationListResponse,
    CastingListResponse,
    CastingRequest,
    CastingResponse,
    CastingStatusRequest,
)
from casting_platform.models.api.users import UserResponse
from casting_platform.models.enums import (
    PROJECT_TYPES,
    ROLE_TYPES,
    CastingStatus,
    IdentificationStatus,
    UserRole,
)
from casting_platform.repositories.application_repository import (
    ApplicationRepository,
)
from casting_platform.repositories.casting_repository import CastingRepository
from casting_platform.services.conversation_access import validate_pagination
from casting_platform.services.exceptions import (
    CastingNotFoundError,
    NotAuthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000

_timestamp = TypeAdapter(datetime)


def parse_timestamp(value: Optional[str], field: str) -> datetime:
    """Parse an ISO 8601 request value into an aware UTC datetime."""
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return as_utc(_timestamp.validate_python(value))
    except PydanticValidationError:
        raise ValidationError(f"Invalid {field}")


class CastingService:
    """Service for creating and managing castings."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.casting_repo = CastingRepository(db)
        self.application_repo = ApplicationRepository(db)

    async def create(
        self, user: UserResponse, request: CastingRequest
    ) -> CastingResponse:
        if user.role != UserRole.CASTING_DIRECTOR.value:
            raise NotAuthorizedError("Only casting directors can post castings.")
        if user.identification_status != IdentificationStatus.APPROVED.value:
            raise NotAuthorizedError(
                "Your identification must be approved before posting castings."
            )

        fields = self._validated_fields(request)
        now = utc_now()
        casting = await self.casting_repo.create(
            CastingResponse(
                id=uuid4(),
                director_id=user.id,
                status=CastingStatus.DRAFT.value,
                total_applications=0,
                shortlisted_applications=0,
                created_at=now,
                updated_at=now,
                **fields,
            )
        )
        logger.info("Casting %s created by %s", casting.id, user.id)
        return casting

    async def list_open(self, page: int = 1, limit: int = 20) -> CastingListResponse:
        offset = validate_pagination(page, limit)
        castings, total = await self.casting_repo.list_open(
            utc_now(), limit=limit, offset=offset
        )
        return CastingListResponse(
            castings=castings, page=page, limit=limit, total=total
        )

    async def list_mine(
        self,
        user: UserResponse,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> CastingListResponse:
        if user.role != UserRole.CASTING_DIRECTOR.value:
            raise NotAuthorizedError("Only casting directors have castings.")
        offset = validate_pagination(page, limit)
        castings, total = await self.casting_repo.list_by_director(
            user.id, status=status, limit=limit, offset=offset
        )
        return CastingListResponse(
            castings=castings, page=page, limit=limit, total=total
        )

    async def get(
        self, casting_id: UUID, user: Optional[UserResponse] = None
    ) -> CastingResponse:
        """Active castings are public; the rest only reach their owner or an admin."""
        casting = await self.casting_repo.get_by_id(casting_id)
        if not casting:
            raise CastingNotFoundError()
        if casting.status != CastingStatus.ACTIVE.value and not (
            user and self._can_manage(user, casting)
        ):
            raise CastingNotFoundError()
        return casting

    async def change_status(
        self, user: UserResponse, casting_id: UUID, request: CastingStatusRequest
    ) -> CastingResponse:
        valid = [status.value for status in CastingStatus]
        if request.status not in valid:
            raise ValidationError(f"Status must be one of: {', '.join(valid)}")

        casting = await self._get_managed(user, casting_id)
        changes: Dict[str, Any] = {"status": request.status}
        if request.status == CastingStatus.ACTIVE.value and not casting.published_at:
            changes["published_at"] = utc_now()

        updated = await self.casting_repo.update_fields(casting_id, changes)
        if not updated:
            raise CastingNotFoundError()
        logger.info(
            "Casting %s moved %s -> %s by %s",
            casting_id,
            casting.status,
            request.status,
            user.id,
        )
        return updated

    async def delete(self, user: UserResponse, casting_id: UUID) -> None:
        await self._get_managed(user, casting_id)
        if await self.application_repo.exists_for_casting(casting_id):
            raise ValidationError(
                "A casting with applications cannot be deleted. Close it instead."
            )
        await self.casting_repo.delete(casting_id)
        logger.info("Casting %s deleted by %s", casting_id, user.id)

    async def list_applications(
        self,
        user: UserResponse,
        casting_id: UUID,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> ApplicationListResponse:
        offset = validate_pagination(page, limit)
        await self._get_managed(user, casting_id)
        applications, total = await self.application_repo.list_for_casting(
            casting_id, status=status, limit=limit, offset=offset
        )
        return ApplicationListResponse(
            applications=applications, page=page, limit=limit, total=total
        )

    async def _get_managed(
        self, user: UserResponse, casting_id: UUID
    ) -> CastingResponse:
        casting = await self.casting_repo.get_by_id(casting_id)
        if not casting:
            raise CastingNotFoundError()
        if not self._can_manage(user, casting):
            logger.warning("User %s denied access to casting %s", user.id, casting_id)
            raise NotAuthorizedError("You can only manage your own castings.")
        return casting

    def _can_manage(self, user: UserResponse, casting: CastingResponse) -> bool:
        return casting.director_id == user.id or user.role == UserRole.ADMIN.value

    def _validated_fields(self, request: CastingRequest) -> Dict[str, Any]:
        title = (request.title or "").strip()
        description = (request.description or "").strip()
        city = (request.city or "").strip()
        province = (request.province or "").strip()

        if not title or not description or not city or not province:
            raise ValidationError(
                "Title, description, city and province are required"
            )
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title must be at most {TITLE_MAX_LENGTH} characters"
            )
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
            )
        if request.project_type not in PROJECT_TYPES:
            raise ValidationError("Invalid project type")
        if request.role_type not in ROLE_TYPES:
            raise ValidationError("Invalid role type")

        deadline = parse_timestamp(request.application_deadline, "applicationDeadline")
        if deadline <= utc_now():
            raise ValidationError("Application deadline must be in the future")

        return {
            "title": title,
            "description": description,
            "project_type": request.project_type,
            "role_type": request.role_type,
            "city": city,
            "province": province,
            "application_deadline": deadline,
        }
