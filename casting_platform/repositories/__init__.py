# Repository classes for database operations
from .application_repository import ApplicationRepository
from .base_repository import BaseRepository
from .casting_repository import CastingRepository
from .content_repository import BlogRepository, ContentRepository, NewsRepository
from .conversation_repository import ConversationRepository
from .message_repository import MessageRepository
from .profile_repository import (
    DirectorProfileRepository,
    TalentProfileRepository,
    WriterProfileRepository,
)
from .user_repository import UserRepository

__all__ = [
    "ApplicationRepository",
    "BaseRepository",
    "BlogRepository",
    "CastingRepository",
    "ContentRepository",
    "ConversationRepository",
    "DirectorProfileRepository",
    "MessageRepository",
    "NewsRepository",
    "TalentProfileRepository",
    "UserRepository",
    "WriterProfileRepository",
]
