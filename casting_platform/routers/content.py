import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.auth import get_current_user
from casting_platform.database import get_db
from casting_platform.models.api.base import StatusMessageResponse
from casting_platform.models.api.content import (
    CanCreateResponse,
    ContentItemResponse,
    ContentListResponse,
    ContentRequest,
    ContentResponse,
    ContentStatusRequest,
)
from casting_platform.models.api.users import UserResponse
from casting_platform.models.enums import ContentKind, ContentStatus
from casting_platform.services.content_moderation_service import (
    ContentModerationService,
)
from casting_platform.services.exceptions import ServiceError

logger = logging.getLogger(__name__)


def create_content_router(kind: ContentKind) -> APIRouter:
    """Build the CRUD and moderation routes for one content kind."""
    router = APIRouter()
    label = "Blog post" if kind == ContentKind.BLOG else "News item"

    def get_service(db: AsyncSession = Depends(get_db)) -> ContentModerationService:
        return ContentModerationService(db, kind)

    @router.get("", response_model=ContentListResponse)
    async def list_published(
        category: Optional[str] = Query(None, description="Filter by category"),
        page: int = Query(1, description="Page number, starting at 1"),
        limit: int = Query(10, description="Items per page"),
        service: ContentModerationService = Depends(get_service),
    ) -> ContentListResponse:
        """List published items, newest first."""
        try:
            return await service.list_published(
                category=category, page=page, limit=limit
            )
        except ServiceError:
            raise
        except Exception:
            logger.exception("Failed to list %s", kind.value)
            raise ServiceError(f"Failed to load {kind.value} items.")

    @router.get("/mine", response_model=List[ContentResponse])
    async def list_mine(
        user: UserResponse = Depends(get_current_user),
        service: ContentModerationService = Depends(get_service),
    ) -> List[ContentResponse]:
        """The caller's own items in every status."""
        try:
            return await service.list_mine(user)
        except ServiceError:
            raise
        except Exception:
            logger.exception("Failed to list %s for %s", kind.value, user.id)
            raise ServiceError(f"Failed to load your {kind.value} items.")

    @router.get("/can-create", response_model=CanCreateResponse)
    async def can_create(
        user: UserResponse = Depends(get_current_user),
        service: ContentModerationService = Depends(get_service),
    ) -> CanCreateResponse:
        try:
            allowed, reason = await service.can_create(user)
            return CanCreateResponse(can_create=allowed, reason=reason)
        except ServiceError:
            raise
        except Exception:
            logger.exception("Failed to check writing permission for %s", user.id)
            raise ServiceError("Failed to check writing permission.")

    @router.get("/{slug}", response_model=ContentResponse)
    async def get_published(
        slug: str,
        service: ContentModerationService = Depends(get_service),
    ) -> ContentResponse:
        """Get a published item by slug. Counts as a view."""
        try:
            return await service.get_published(slug)
        except ServiceError:
            raise
        except Exception:
            logger.exception("Failed to load %s %s", kind.value, slug)
            raise ServiceError(f"Failed to load {kind.value} item.")

    @router.post("", response_model=ContentItemResponse, status_code=201)
    async def create_item(
        request: ContentRequest,
        user: UserResponse = Depends(get_current_user),
        service: ContentModerationService = Depends(get_service),
    ) -> ContentItemResponse:
        """
        Create an item. Admins and auto-approved writers publish immediately;
        everyone else waits for moderation.
        """
        try:
            item = await service.create(user, request)
            message = (
                f"{label} published."
                if item.status == ContentStatus.PUBLISHED.value
                else f"{label} submitted for review."
            )
            return ContentItemResponse(item=item, message=message)
        except ServiceError:
            raise
        except Exception:
            logger.exception("Failed to create %s for %s", kind.value, user.id)
            raise ServiceError(f"Failed to create {kind.value} item.")

    @router.put("/{item_id}", response_model=ContentItemResponse)
    async def update_item(
        item_id: UUID,
        request: ContentRequest,
        user: UserResponse = Depends(get_current_user),
        service: ContentModerationService = Depends(get_service),
    ) -> ContentItemResponse:
        try:
            item = await service.update(user, item_id, request)
            return ContentItemResponse(item=item, message=f"{label} updated.")
        except ServiceError:
            raise
        except Exception:
            logger.exception("Failed to update %s %s", kind.value, item_id)
            raise ServiceError(f"Failed to update {kind.value} item.")

    @router.patch("/{item_id}/status", response_model=ContentItemResponse)
    async def change_status(
        item_id: UUID,
        request: ContentStatusRequest,
        user: UserResponse = Depends(get_current_user),
        service: ContentModerationService = Depends(get_service),
    ) -> ContentItemResponse:
        """Moderate an item (admins only)."""
        try:
            item = await service.change_status(user, item_id, request)
            return ContentItemResponse(
                item=item, message=f"{label} status changed to {item.status}."
            )
        except ServiceError:
            raise
        except Exception:
            logger.exception("Failed to change status of %s %s", kind.value, item_id)
            raise ServiceError(f"Failed to change {kind.value} status.")

    @router.delete("/{item_id}", response_model=StatusMessageResponse)
    async def delete_item(
        item_id: UUID,
        user: UserResponse = Depends(get_current_user),
        service: ContentModerationService = Depends(get_service),
    ) -> StatusMessageResponse:
        try:
            await service.delete(user, item_id)
            return StatusMessageResponse(message=f"{label} deleted.")
        except ServiceError:
            raise
        except Exception:
            logger.exception("Failed to delete %s %s", kind.value, item_id)
            raise ServiceError(f"Failed to delete {kind.value} item.")

    return router
