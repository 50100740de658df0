from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from casting_platform.models.api.base import ApiModel


class ContentRequest(ApiModel):
    """Request model for creating or editing a blog post or news item.

    Required-field checks happen in the moderation service so that missing
    values surface as 400s with a descriptive message.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    # Blog only
    excerpt: Optional[str] = None
    # News only
    summary: Optional[str] = None
    priority: Optional[str] = None
    is_breaking: bool = False
    is_featured: bool = False


class ContentStatusRequest(ApiModel):
    status: Optional[str] = None
    rejection_reason: Optional[str] = None


class ContentResponse(ApiModel):
    """Response model for blog posts and news items."""

    id: UUID
    kind: str
    title: str
    slug: str
    content: str
    category: str
    tags: List[str]
    author_id: UUID
    status: str
    published_at: Optional[datetime] = None
    approved_by_id: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    views: int
    created_at: datetime
    updated_at: datetime
    excerpt: Optional[str] = None
    read_time: Optional[int] = None
    summary: Optional[str] = None
    priority: Optional[str] = None
    is_breaking: Optional[bool] = None
    is_featured: Optional[bool] = None


class ContentItemResponse(ApiModel):
    item: ContentResponse
    message: str


class ContentListResponse(ApiModel):
    items: List[ContentResponse]
    page: int
    limit: int
    total: int


class CanCreateResponse(ApiModel):
    can_create: bool
    reason: Optional[str] = None
