from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from casting_platform.models.api.base import ApiModel


class CastingRequest(ApiModel):
    """Request model for creating a casting.

    Every field is optional here; the casting service reports missing or
    malformed values as 400s.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    project_type: Optional[str] = None
    role_type: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    application_deadline: Optional[str] = Field(
        default=None, description="ISO 8601 timestamp"
    )


class CastingStatusRequest(ApiModel):
    status: Optional[str] = None


class CastingResponse(ApiModel):
    """Response model for casting data."""

    id: UUID
    director_id: UUID
    title: str
    description: str
    project_type: str
    role_type: str
    city: str
    province: str
    application_deadline: datetime
    status: str
    total_applications: int = 0
    shortlisted_applications: int = 0
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class CastingItemResponse(ApiModel):
    casting: CastingResponse
    message: str


class CastingListResponse(ApiModel):
    castings: List[CastingResponse]
    page: int
    limit: int
    total: int


class ApplicationRequest(ApiModel):
    """Request model for applying to a casting."""

    casting_id: Optional[str] = Field(default=None, description="Casting to apply to")
    cover_message: Optional[str] = None


class ApplicationStatusRequest(ApiModel):
    status: Optional[str] = None
    director_notes: Optional[str] = None
    director_response: Optional[str] = None


class ApplicationResponse(ApiModel):
    """Response model for application data."""

    id: UUID
    casting_id: UUID
    talent_id: UUID
    cover_message: str
    status: str
    director_notes: Optional[str] = None
    director_response: Optional[str] = None
    responded_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    status_updated_at: datetime
    submitted_at: datetime


class ApplicationItemResponse(ApiModel):
    application: ApplicationResponse
    message: str


class ApplicationListResponse(ApiModel):
    applications: List[ApplicationResponse]
    page: int
    limit: int
    total: int
