import logging
from typing import Any, Dict
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.database import utc_now
from casting_platform.models.api.admin import (
    AutoApprovalRequest,
    WriterApprovalRequest,
    WriterControlResponse,
)
from casting_platform.models.api.users import UserResponse, WriterProfileResponse
from casting_platform.models.enums import UserRole
from casting_platform.repositories.profile_repository import WriterProfileRepository
from casting_platform.repositories.user_repository import UserRepository
from casting_platform.services.exceptions import (
    NotAuthorizedError,
    UserNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

AUTO_APPROVAL_ROLES = (UserRole.JOURNALIST.value, UserRole.CASTING_DIRECTOR.value)


class WriterAdminService:
    """Admin controls over who may write and who skips moderation."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)
        self.writer_profile_repo = WriterProfileRepository(db)

    async def set_auto_approval(
        self, admin: UserResponse, user_id: UUID, request: AutoApprovalRequest
    ) -> WriterControlResponse:
        """
        Grant or revoke auto-approval:

        1. Check the caller is an admin and the value is present
        2. Check the target is a journalist or casting director
        3. Create the writer profile if the target has none
        4. Record who granted it and when, or clear both on revoke
        """
        self._require_admin(admin)
        if request.auto_approval is None:
            raise ValidationError("autoApproval is required")

        user = await self._get_user(user_id)
        if user.role not in AUTO_APPROVAL_ROLES:
            raise ValidationError(
                "Only writers and casting directors can have auto-approval"
            )

        changes: Dict[str, Any] = {"auto_approval": request.auto_approval}
        if request.auto_approval:
            changes.update(
                auto_approval_granted_at=utc_now(),
                auto_approval_granted_by_id=admin.id,
            )
        else:
            changes.update(
                auto_approval_granted_at=None, auto_approval_granted_by_id=None
            )
        profile = await self._update_profile(user, changes)

        logger.info(
            "Auto-approval %s for %s by %s",
            "granted" if request.auto_approval else "revoked",
            user.id,
            admin.id,
        )
        message = (
            "Auto-approval granted."
            if request.auto_approval
            else "Auto-approval revoked."
        )
        return WriterControlResponse(user=user, writer_profile=profile, message=message)

    async def set_writer_approval(
        self, admin: UserResponse, user_id: UUID, request: WriterApprovalRequest
    ) -> WriterControlResponse:
        self._require_admin(admin)
        if request.is_approved_writer is None:
            raise ValidationError("isApprovedWriter is required")

        user = await self._get_user(user_id)
        if user.role != UserRole.JOURNALIST.value:
            raise ValidationError("Only writers can be approved as writers")

        profile = await self._update_profile(
            user, {"is_approved_writer": request.is_approved_writer}
        )
        logger.info(
            "Writer %s %s by %s",
            user.id,
            "approved" if request.is_approved_writer else "unapproved",
            admin.id,
        )
        message = (
            "Writer approved."
            if request.is_approved_writer
            else "Writer approval withdrawn."
        )
        return WriterControlResponse(user=user, writer_profile=profile, message=message)

    def _require_admin(self, user: UserResponse) -> None:
        if user.role != UserRole.ADMIN.value:
            raise NotAuthorizedError("Admin access required.")

    async def _get_user(self, user_id: UUID) -> UserResponse:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()
        return user

    async def _update_profile(
        self, user: UserResponse, changes: Dict[str, Any]
    ) -> WriterProfileResponse:
        profile = await self.writer_profile_repo.get_for_user(user.id)
        if not profile:
            logger.info("Creating writer profile for %s", user.id)
            return await self.writer_profile_repo.create(
                WriterProfileResponse(id=uuid4(), user_id=user.id, **changes)
            )
        updated = await self.writer_profile_repo.update_fields(profile.id, changes)
        if not updated:
            raise UserNotFoundError("Writer profile not found.")
        return updated
