from datetime import datetime
from typing import Optional
from uuid import UUID

from casting_platform.models.api.base import ApiModel


class UserResponse(ApiModel):
    """Response model for user data."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: str
    status: str
    identification_status: str
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class TalentProfileResponse(ApiModel):
    id: UUID
    user_id: UUID
    artistic_name: Optional[str] = None
    headshot: Optional[str] = None
    specialization: Optional[str] = None


class DirectorProfileResponse(ApiModel):
    id: UUID
    user_id: UUID
    company_name: Optional[str] = None
    profile_image: Optional[str] = None


class WriterProfileResponse(ApiModel):
    id: UUID
    user_id: UUID
    bio: Optional[str] = None
    specialization: Optional[str] = None
    profile_image: Optional[str] = None
    is_approved_writer: bool = False
    auto_approval: bool = False
    auto_approval_granted_at: Optional[datetime] = None
    auto_approval_granted_by_id: Optional[UUID] = None


class ParticipantSummary(ApiModel):
    """A conversation participant enriched with role-specific profile data."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: str
    profile_image: Optional[str] = None
    company_name: Optional[str] = None
    headshot: Optional[str] = None
    specialization: Optional[str] = None
