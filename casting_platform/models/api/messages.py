from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from casting_platform.models.api.base import ApiModel


class SendMessageRequest(ApiModel):
    """Request model for sending a message."""

    # Blank content is rejected by the service with a 400
    content: Optional[str] = Field(default=None, description="Message content")


class MessageSender(ApiModel):
    id: UUID
    first_name: str
    last_name: str
    role: str


class MessageResponse(ApiModel):
    """Response model for message data."""

    id: UUID
    conversation_id: UUID
    sender_id: UUID
    sender: Optional[MessageSender] = None
    content: str
    is_read: bool
    read_at: Optional[datetime] = None
    is_delivered: bool
    created_at: datetime


class SendMessageResponse(ApiModel):
    message: MessageResponse
