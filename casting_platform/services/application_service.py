"""Talent applications to castings.

Status workflow::

    pending -> reviewed -> shortlisted -> accepted | rejected

``withdrawn`` is only ever set by the applicant.
"""

import logging
from typing import Any, Dict, Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.database import as_utc, utc_now
from casting_platform.models.api.castings import (
    ApplicationListResponse,
    ApplicationRequest,
    ApplicationResponse,
    ApplicationStatusRequest,
    CastingResponse,
)
from casting_platform.models.api.users import UserResponse
from casting_platform.models.enums import ApplicationStatus, CastingStatus, UserRole
from casting_platform.repositories.application_repository import (
    ApplicationRepository,
)
from casting_platform.repositories.casting_repository import CastingRepository
from casting_platform.repositories.profile_repository import TalentProfileRepository
from casting_platform.services.conversation_access import (
    parse_uuid,
    validate_pagination,
)
from casting_platform.services.exceptions import (
    ApplicationNotFoundError,
    CastingNotFoundError,
    NotAuthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

COVER_MESSAGE_MAX_LENGTH = 1000
DIRECTOR_NOTES_MAX_LENGTH = 500

# Statuses a director may set; withdrawing belongs to the applicant
DIRECTOR_STATUSES = tuple(
    status.value
    for status in ApplicationStatus
    if status != ApplicationStatus.WITHDRAWN
)
FINAL_STATUSES = (
    ApplicationStatus.ACCEPTED.value,
    ApplicationStatus.REJECTED.value,
    ApplicationStatus.WITHDRAWN.value,
)

DUPLICATE_MESSAGE = "You have already applied to this casting"


class ApplicationService:
    """Service for submitting, reviewing and withdrawing applications."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.application_repo = ApplicationRepository(db)
        self.casting_repo = CastingRepository(db)
        self.talent_profile_repo = TalentProfileRepository(db)

    async def submit(
        self, user: UserResponse, request: ApplicationRequest
    ) -> ApplicationResponse:
        """
        Apply to a casting:

        1. Validate the request and the applicant's role
        2. Check the casting is active and still open
        3. Refuse duplicates and applicants without a talent profile
        4. Write the application and bump the casting's counter in one transaction
        """
        if user.role != UserRole.TALENT.value:
            raise NotAuthorizedError("Only talents can apply to castings.")

        cover_message = (request.cover_message or "").strip()
        if not request.casting_id or not cover_message:
            raise ValidationError("Casting and cover message are required")
        if len(cover_message) > COVER_MESSAGE_MAX_LENGTH:
            raise ValidationError(
                f"Cover message must be at most {COVER_MESSAGE_MAX_LENGTH} characters"
            )
        casting_id = parse_uuid(request.casting_id, "castingId")

        casting = await self.casting_repo.get_by_id(casting_id)
        if not casting:
            raise CastingNotFoundError()
        if casting.status != CastingStatus.ACTIVE.value:
            raise ValidationError("This casting is not accepting applications")
        if as_utc(casting.application_deadline) < utc_now():
            raise ValidationError("The application deadline has passed")

        if await self.application_repo.find_for(casting.id, user.id):
            raise ValidationError(DUPLICATE_MESSAGE)
        if not await self.talent_profile_repo.get_for_user(user.id):
            raise ValidationError("Complete your talent profile before applying")

        now = utc_now()
        try:
            application = await self.application_repo.create(
                ApplicationResponse(
                    id=uuid4(),
                    casting_id=casting.id,
                    talent_id=user.id,
                    cover_message=cover_message,
                    status=ApplicationStatus.PENDING.value,
                    status_updated_at=now,
                    submitted_at=now,
                ),
                commit=False,
            )
            await self.casting_repo.increment(
                casting.id, "total_applications", commit=False
            )
            await self.db.commit()
        except IntegrityError:
            # A concurrent submission for the same pair won the unique index
            await self.db.rollback()
            raise ValidationError(DUPLICATE_MESSAGE)
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Application %s submitted by %s to casting %s",
            application.id,
            user.id,
            casting.id,
        )
        return application

    async def list_mine(
        self,
        user: UserResponse,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> ApplicationListResponse:
        if user.role != UserRole.TALENT.value:
            raise NotAuthorizedError("Only talents have applications.")
        offset = validate_pagination(page, limit)
        applications, total = await self.application_repo.list_for_talent(
            user.id, status=status, limit=limit, offset=offset
        )
        return ApplicationListResponse(
            applications=applications, page=page, limit=limit, total=total
        )

    async def get(
        self, user: UserResponse, application_id: UUID
    ) -> ApplicationResponse:
        application, casting = await self._load(application_id)
        if application.talent_id != user.id and not self._can_review(user, casting):
            logger.warning(
                "User %s denied access to application %s", user.id, application_id
            )
            raise NotAuthorizedError("You cannot view this application.")
        return application

    async def change_status(
        self,
        user: UserResponse,
        application_id: UUID,
        request: ApplicationStatusRequest,
    ) -> ApplicationResponse:
        if request.status not in DIRECTOR_STATUSES:
            raise ValidationError(
                f"Status must be one of: {', '.join(DIRECTOR_STATUSES)}"
            )
        notes = (request.director_notes or "").strip()
        if len(notes) > DIRECTOR_NOTES_MAX_LENGTH:
            raise ValidationError(
                "Director notes must be at most "
                f"{DIRECTOR_NOTES_MAX_LENGTH} characters"
            )

        application, casting = await self._load(application_id)
        if not self._can_review(user, casting):
            raise NotAuthorizedError(
                "Only the casting's director can review applications."
            )
        if application.status == ApplicationStatus.WITHDRAWN.value:
            raise ValidationError("A withdrawn application cannot be changed")

        now = utc_now()
        changes: Dict[str, Any] = {"status": request.status, "status_updated_at": now}
        if (
            request.status != ApplicationStatus.PENDING.value
            and not application.reviewed_at
        ):
            changes["reviewed_at"] = now
        if notes:
            changes["director_notes"] = notes
        response = (request.director_response or "").strip()
        if response:
            changes.update(director_response=response, responded_at=now)

        newly_shortlisted = (
            request.status == ApplicationStatus.SHORTLISTED.value
            and application.status != ApplicationStatus.SHORTLISTED.value
        )
        try:
            updated = await self.application_repo.update_fields(
                application_id, changes, commit=False
            )
            if newly_shortlisted:
                await self.casting_repo.increment(
                    casting.id, "shortlisted_applications", commit=False
                )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        if not updated:
            raise ApplicationNotFoundError()

        logger.info(
            "Application %s moved %s -> %s by %s",
            application_id,
            application.status,
            request.status,
            user.id,
        )
        return updated

    async def withdraw(
        self, user: UserResponse, application_id: UUID
    ) -> ApplicationResponse:
        application = await self.application_repo.get_by_id(application_id)
        if not application:
            raise ApplicationNotFoundError()
        if application.talent_id != user.id:
            raise NotAuthorizedError("You can only withdraw your own applications.")
        if application.status in FINAL_STATUSES:
            raise ValidationError(
                f"An application that is {application.status} cannot be withdrawn"
            )

        updated = await self.application_repo.update_fields(
            application_id,
            {
                "status": ApplicationStatus.WITHDRAWN.value,
                "status_updated_at": utc_now(),
            },
        )
        if not updated:
            raise ApplicationNotFoundError()
        logger.info("Application %s withdrawn by %s", application_id, user.id)
        return updated

    async def _load(
        self, application_id: UUID
    ) -> Tuple[ApplicationResponse, CastingResponse]:
        application = await self.application_repo.get_by_id(application_id)
        if not application:
            raise ApplicationNotFoundError()
        casting = await self.casting_repo.get_by_id(application.casting_id)
        if not casting:
            raise CastingNotFoundError()
        return application, casting

    def _can_review(self, user: UserResponse, casting: CastingResponse) -> bool:
        return casting.director_id == user.id or user.role == UserRole.ADMIN.value
