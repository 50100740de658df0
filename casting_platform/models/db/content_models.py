import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import declared_attr

from casting_platform.database import Base, utc_now


class ContentMixin:
    """Columns shared by moderated content tables (blogs, news)."""

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    content = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    tags = Column(JSON, default=list)
    status = Column(String(20), nullable=False, default="draft")
    published_at = Column(DateTime(timezone=True))
    approved_at = Column(DateTime(timezone=True))
    rejection_reason = Column(String(500))
    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    @declared_attr
    def author_id(cls):
        return Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    @declared_attr
    def approved_by_id(cls):
        return Column(Uuid, ForeignKey("users.id"))

    # Constraints (enforced by database CHECK constraints in the migration)
    # status IN ('draft', 'pending', 'published', 'rejected')


class BlogModel(ContentMixin, Base):
    """SQLAlchemy model for blogs table."""

    __tablename__ = "blogs"

    excerpt = Column(String(300))
    read_time = Column(Integer, nullable=False, default=5)


class NewsModel(ContentMixin, Base):
    """SQLAlchemy model for news table."""

    __tablename__ = "news"

    summary = Column(String(500))
    priority = Column(String(10), nullable=False, default="normal")
    is_breaking = Column(Boolean, nullable=False, default=False)
    is_featured = Column(Boolean, nullable=False, default=False)
