# API models for request/response contracts
from .admin import AutoApprovalRequest, WriterApprovalRequest, WriterControlResponse
from .base import ApiModel, StatusMessageResponse
from .castings import (
    ApplicationItemResponse,
    ApplicationListResponse,
    ApplicationRequest,
    ApplicationResponse,
    ApplicationStatusRequest,
    CastingItemResponse,
    CastingListResponse,
    CastingRequest,
    CastingResponse,
    CastingStatusRequest,
)
from .content import (
    CanCreateResponse,
    ContentItemResponse,
    ContentListResponse,
    ContentRequest,
    ContentResponse,
    ContentStatusRequest,
)
from .conversations import (
    CastingSummary,
    ConversationDetailResponse,
    ConversationListResponse,
    ConversationResponse,
    CreateConversationRequest,
    CreateConversationResponse,
    LastMessagePreview,
    MarkReadResponse,
    UnreadCountResponse,
)
from .messages import (
    MessageResponse,
    MessageSender,
    SendMessageRequest,
    SendMessageResponse,
)
from .users import (
    DirectorProfileResponse,
    ParticipantSummary,
    TalentProfileResponse,
    UserResponse,
    WriterProfileResponse,
)

__all__ = [
    "ApiModel",
    "ApplicationItemResponse",
    "ApplicationListResponse",
    "ApplicationRequest",
    "ApplicationResponse",
    "ApplicationStatusRequest",
    "AutoApprovalRequest",
    "CanCreateResponse",
    "CastingItemResponse",
    "CastingListResponse",
    "CastingRequest",
    "CastingResponse",
    "CastingStatusRequest",
    "CastingSummary",
    "ContentItemResponse",
    "ContentListResponse",
    "ContentRequest",
    "ContentResponse",
    "ContentStatusRequest",
    "ConversationDetailResponse",
    "ConversationListResponse",
    "ConversationResponse",
    "CreateConversationRequest",
    "CreateConversationResponse",
    "DirectorProfileResponse",
    "LastMessagePreview",
    "MarkReadResponse",
    "MessageResponse",
    "MessageSender",
    "ParticipantSummary",
    "SendMessageRequest",
    "SendMessageResponse",
    "StatusMessageResponse",
    "TalentProfileResponse",
    "UnreadCountResponse",
    "UserResponse",
    "WriterApprovalRequest",
    "WriterControlResponse",
    "WriterProfileResponse",
]
