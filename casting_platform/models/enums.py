from enum import Enum


class UserRole(str, Enum):
    TALENT = "talent"
    CASTING_DIRECTOR = "casting_director"
    JOURNALIST = "journalist"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


class IdentificationStatus(str, Enum):
    NOT_SUBMITTED = "not_submitted"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CastingStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"
    FILLED = "filled"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    ACCEPTED = "accepted"
    WITHDRAWN = "withdrawn"


class ConversationType(str, Enum):
    DIRECTOR_TALENT = "director_talent"
    WRITER_USER = "writer_user"


class ContentStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"


class ContentKind(str, Enum):
    BLOG = "blog"
    NEWS = "news"


class NewsPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


BLOG_CATEGORIES = (
    "casting_tips",
    "industry_news",
    "success_stories",
    "interviews",
    "tutorials",
    "career_advice",
    "technology",
    "events",
    "other",
)

NEWS_CATEGORIES = (
    "industry_news",
    "casting_announcements",
    "platform_updates",
    "success_stories",
    "events",
    "awards",
    "partnerships",
    "technology",
    "breaking_news",
    "other",
)

PROJECT_TYPES = (
    "film",
    "tv_series",
    "commercial",
    "theater",
    "music_video",
    "documentary",
    "web_series",
    "other",
)

ROLE_TYPES = ("lead", "supporting", "background", "extra", "voice_over", "other")
