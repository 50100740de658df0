# Export all models
from .api import (
    ContentResponse,
    ConversationResponse,
    MessageResponse,
    UserResponse,
)
from .db import (
    BlogModel,
    CastingModel,
    ConversationModel,
    DirectorProfileModel,
    MessageModel,
    NewsModel,
    TalentProfileModel,
    UserModel,
    WriterProfileModel,
)

__all__ = [
    # API models
    "ContentResponse",
    "ConversationResponse",
    "MessageResponse",
    "UserResponse",
    # DB models
    "BlogModel",
    "CastingModel",
    "ConversationModel",
    "DirectorProfileModel",
    "MessageModel",
    "NewsModel",
    "TalentProfileModel",
    "UserModel",
    "WriterProfileModel",
]
