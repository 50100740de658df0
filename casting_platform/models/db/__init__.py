# SQLAlchemy database models
from .casting_model import ApplicationModel, CastingModel
from .content_models import BlogModel, NewsModel
from .conversation_model import ConversationModel
from .message_model import MessageModel
from .profile_models import (
    DirectorProfileModel,
    TalentProfileModel,
    WriterProfileModel,
)
from .user_model import UserModel

__all__ = [
    "ApplicationModel",
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
