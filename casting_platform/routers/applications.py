import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.auth import get_current_user
from casting_platform.database import get_db
from casting_platform.models.api.castings import (
    ApplicationItemResponse,
    ApplicationListResponse,
    ApplicationRequest,
    ApplicationResponse,
    ApplicationStatusRequest,
)
from casting_platform.models.api.users import UserResponse
from casting_platform.services.application_service import ApplicationService
from casting_platform.services.exceptions import ServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ApplicationItemResponse, status_code=201)
async def submit_application(
    request: ApplicationRequest,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApplicationItemResponse:
    """
    Apply to an active casting. Talents only; one application per casting.
    """
    try:
        application = await ApplicationService(db).submit(user, request)
        return ApplicationItemResponse(
            application=application, message="Application submitted."
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to submit application for %s", user.id)
        raise ServiceError("Failed to submit application.")


@router.get("/mine", response_model=ApplicationListResponse)
async def list_my_applications(
    status: Optional[str] = Query(None, description="Filter by status"),
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(20, description="Applications per page"),
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApplicationListResponse:
    try:
        return await ApplicationService(db).list_mine(
            user, status=status, page=page, limit=limit
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to list applications for %s", user.id)
        raise ServiceError("Failed to load your applications.")


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: UUID,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        return await ApplicationService(db).get(user, application_id)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to load application %s", application_id)
        raise ServiceError("Failed to load application.")


@router.patch("/{application_id}/status", response_model=ApplicationItemResponse)
async def change_application_status(
    application_id: UUID,
    request: ApplicationStatusRequest,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApplicationItemResponse:
    """Review an application (the casting's director or an admin)."""
    try:
        application = await ApplicationService(db).change_status(
            user, application_id, request
        )
        return ApplicationItemResponse(
            application=application,
            message=f"Application status changed to {application.status}.",
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to change status of application %s", application_id)
        raise ServiceError("Failed to change application status.")


@router.patch("/{application_id}/withdraw", response_model=ApplicationItemResponse)
async def withdraw_application(
    application_id: UUID,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApplicationItemResponse:
    try:
        application = await ApplicationService(db).withdraw(user, application_id)
        return ApplicationItemResponse(
            application=application, message="Application withdrawn."
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to withdraw application %s", application_id)
        raise ServiceError("Failed to withdraw application.")
