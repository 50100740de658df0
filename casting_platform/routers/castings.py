import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.auth import get_current_user, get_optional_user
from casting_platform.database import get_db
from casting_platform.models.api.base import StatusMessageResponse
from casting_platform.models.api.castings import (
    ApplicationListResponse,
    CastingItemResponse,
    CastingListResponse,
    CastingRequest,
    CastingResponse,
    CastingStatusRequest,
)
from casting_platform.models.api.users import UserResponse
from casting_platform.services.casting_service import CastingService
from casting_platform.services.exceptions import ServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=CastingListResponse)
async def list_open_castings(
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(20, description="Castings per page"),
    db: AsyncSession = Depends(get_db),
) -> CastingListResponse:
    """List active castings whose deadline has not passed, newest first."""
    try:
        return await CastingService(db).list_open(page=page, limit=limit)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to list castings")
        raise ServiceError("Failed to load castings.")


@router.get("/mine", response_model=CastingListResponse)
async def list_my_castings(
    status: Optional[str] = Query(None, description="Filter by status"),
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(20, description="Castings per page"),
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CastingListResponse:
    try:
        return await CastingService(db).list_mine(
            user, status=status, page=page, limit=limit
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to list castings for %s", user.id)
        raise ServiceError("Failed to load your castings.")


@router.get("/{casting_id}", response_model=CastingResponse)
async def get_casting(
    casting_id: UUID,
    user: Optional[UserResponse] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> CastingResponse:
    try:
        return await CastingService(db).get(casting_id, user)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to load casting %s", casting_id)
        raise ServiceError("Failed to load casting.")


@router.post("", response_model=CastingItemResponse, status_code=201)
async def create_casting(
    request: CastingRequest,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CastingItemResponse:
    """
    Post a casting. Requires a casting director with approved identification.
    New castings start as drafts.
    """
    try:
        casting = await CastingService(db).create(user, request)
        return CastingItemResponse(casting=casting, message="Casting created.")
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to create casting for %s", user.id)
        raise ServiceError("Failed to create casting.")


@router.patch("/{casting_id}/status", response_model=CastingItemResponse)
async def change_casting_status(
    casting_id: UUID,
    request: CastingStatusRequest,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CastingItemResponse:
    try:
        casting = await CastingService(db).change_status(user, casting_id, request)
        return CastingItemResponse(
            casting=casting, message=f"Casting status changed to {casting.status}."
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to change status of casting %s", casting_id)
        raise ServiceError("Failed to change casting status.")


@router.delete("/{casting_id}", response_model=StatusMessageResponse)
async def delete_casting(
    casting_id: UUID,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> StatusMessageResponse:
    """Delete a casting that has no applications yet."""
    try:
        await CastingService(db).delete(user, casting_id)
        return StatusMessageResponse(message="Casting deleted.")
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to delete casting %s", casting_id)
        raise ServiceError("Failed to delete casting.")


@router.get("/{casting_id}/applications", response_model=ApplicationListResponse)
async def list_casting_applications(
    casting_id: UUID,
    status: Optional[str] = Query(None, description="Filter by status"),
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(20, description="Applications per page"),
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApplicationListResponse:
    try:
        return await CastingService(db).list_applications(
            user, casting_id, status=status, page=page, limit=limit
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to list applications of casting %s", casting_id)
        raise ServiceError("Failed to load applications.")
