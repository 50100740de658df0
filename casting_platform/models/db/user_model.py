import uuid

from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship

from casting_platform.database import Base, utc_now
from casting_platform.models.enums import IdentificationStatus, UserStatus


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=UserStatus.ACTIVE.value)
    identification_status = Column(
        String(20), nullable=False, default=IdentificationStatus.NOT_SUBMITTED.value
    )
    created_at = Column(DateTime(timezone=True), default=utc_now)

    # Relationships
    talent_profile = relationship(
        "TalentProfileModel", back_populates="user", uselist=False
    )
    director_profile = relationship(
        "DirectorProfileModel", back_populates="user", uselist=False
    )
    writer_profile = relationship(
        "WriterProfileModel",
        back_populates="user",
        uselist=False,
        foreign_keys="WriterProfileModel.user_id",
    )

    # Constraints (enforced by database CHECK constraints in the migration)
    # role IN ('talent', 'casting_director', 'journalist', 'admin')
    # status IN ('active', 'pending', 'suspended', 'inactive')
