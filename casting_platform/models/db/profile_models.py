import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from casting_platform.database import Base, utc_now


class TalentProfileModel(Base):
    """SQLAlchemy model for talent_profiles table."""

    __tablename__ = "talent_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, unique=True)
    artistic_name = Column(String(100))
    headshot = Column(String(500))
    specialization = Column(String(100))
    created_at = Column(DateTime(timezone=True), default=utc_now)

    user = relationship("UserModel", back_populates="talent_profile")


class DirectorProfileModel(Base):
    """SQLAlchemy model for director_profiles table."""

    __tablename__ = "director_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, unique=True)
    company_name = Column(String(200))
    profile_image = Column(String(500))
    created_at = Column(DateTime(timezone=True), default=utc_now)

    user = relationship("UserModel", back_populates="director_profile")


class WriterProfileModel(Base):
    """SQLAlchemy model for writer_profiles table."""

    __tablename__ = "writer_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, unique=True)
    bio = Column(Text)
    specialization = Column(String(100))
    profile_image = Column(String(500))
    is_approved_writer = Column(Boolean, nullable=False, default=False)
    auto_approval = Column(Boolean, nullable=False, default=False)
    auto_approval_granted_at = Column(DateTime(timezone=True))
    auto_approval_granted_by_id = Column(Uuid, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), default=utc_now)

    user = relationship(
        "UserModel", back_populates="writer_profile", foreign_keys=[user_id]
    )
