from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from casting_platform.models.api.base import ApiModel
from casting_platform.models.api.messages import MessageResponse
from casting_platform.models.api.users import ParticipantSummary


class LastMessagePreview(ApiModel):
    id: UUID
    content: str
    created_at: datetime


class CastingSummary(ApiModel):
    id: UUID
    title: str


class ConversationResponse(ApiModel):
    """Response model for conversation data."""

    id: UUID
    conversation_type: str
    director_id: Optional[UUID] = None
    talent_id: Optional[UUID] = None
    initiator_id: Optional[UUID] = None
    recipient_id: Optional[UUID] = None
    casting_id: Optional[UUID] = None
    subject: str
    last_message_id: Optional[UUID] = None
    last_message_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    # Populated for list views
    director: Optional[ParticipantSummary] = None
    talent: Optional[ParticipantSummary] = None
    initiator: Optional[ParticipantSummary] = None
    recipient: Optional[ParticipantSummary] = None
    last_message: Optional[LastMessagePreview] = None
    casting: Optional[CastingSummary] = None


class CreateConversationRequest(ApiModel):
    """Request model for starting a conversation."""

    # Presence and id format are checked by the service so bad values map to a 400
    recipient_id: Optional[str] = Field(default=None, description="Recipient user id")
    subject: Optional[str] = Field(default=None, description="Conversation subject")
    initial_message: Optional[str] = Field(
        default=None, description="First message content"
    )
    casting_id: Optional[str] = Field(
        default=None, description="Casting this conversation is about"
    )


class CreateConversationResponse(ApiModel):
    conversation: ConversationResponse
    initial_message: MessageResponse


class ConversationListResponse(ApiModel):
    conversations: List[ConversationResponse]
    page: int
    limit: int


class ConversationDetailResponse(ApiModel):
    conversation: ConversationResponse
    messages: List[MessageResponse]
    has_more: bool


class MarkReadResponse(ApiModel):
    updated_count: int


class UnreadCountResponse(ApiModel):
    unread_count: int
