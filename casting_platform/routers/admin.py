import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.auth import get_current_user
from casting_platform.database import get_db
from casting_platform.models.api.admin import (
    AutoApprovalRequest,
    WriterApprovalRequest,
    WriterControlResponse,
)
from casting_platform.models.api.users import UserResponse
from casting_platform.services.exceptions import ServiceError
from casting_platform.services.writer_admin_service import WriterAdminService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.patch("/users/{user_id}/auto-approval", response_model=WriterControlResponse)
async def set_auto_approval(
    user_id: UUID,
    request: AutoApprovalRequest,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WriterControlResponse:
    """
    Grant or revoke auto-approval for a writer or casting director.

    Content from users with auto-approval is published without moderation.
    """
    try:
        return await WriterAdminService(db).set_auto_approval(user, user_id, request)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to update auto-approval for %s", user_id)
        raise ServiceError("Failed to update auto-approval.")


@router.patch(
    "/users/{user_id}/writer-approval", response_model=WriterControlResponse
)
async def set_writer_approval(
    user_id: UUID,
    request: WriterApprovalRequest,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WriterControlResponse:
    try:
        return await WriterAdminService(db).set_writer_approval(
            user, user_id, request
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to update writer approval for %s", user_id)
        raise ServiceError("Failed to update writer approval.")
