import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)

from casting_platform.database import Base, utc_now
from casting_platform.models.enums import ApplicationStatus, CastingStatus


class CastingModel(Base):
    """SQLAlchemy model for castings table."""

    __tablename__ = "castings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    director_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    project_type = Column(String(20), nullable=False, default="other")
    role_type = Column(String(20), nullable=False, default="other")
    city = Column(String(100), nullable=False, default="")
    province = Column(String(100), nullable=False, default="")
    application_deadline = Column(DateTime(timezone=True), nullable=False)
    # CHECK constraint lives in the migration
    status = Column(String(20), nullable=False, default=CastingStatus.DRAFT.value)
    total_applications = Column(Integer, nullable=False, default=0)
    shortlisted_applications = Column(Integer, nullable=False, default=0)
    published_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now)


class ApplicationModel(Base):
    """SQLAlchemy model for applications table."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint(
            "casting_id", "talent_id", name="uq_applications_casting_talent"
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    casting_id = Column(Uuid, ForeignKey("castings.id"), nullable=False, index=True)
    talent_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    cover_message = Column(Text, nullable=False)
    status = Column(
        String(20), nullable=False, default=ApplicationStatus.PENDING.value
    )
    director_notes = Column(String(500))
    director_response = Column(Text)
    responded_at = Column(DateTime(timezone=True))
    reviewed_at = Column(DateTime(timezone=True))
    status_updated_at = Column(DateTime(timezone=True), default=utc_now)
    submitted_at = Column(DateTime(timezone=True), default=utc_now)
