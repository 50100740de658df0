import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import relationship

from casting_platform.database import Base, utc_now


class ConversationModel(Base):
    """SQLAlchemy model for conversations table.

    A conversation is either ``director_talent`` (director_id/talent_id set)
    or ``writer_user`` (initiator_id/recipient_id set).
    """

    __tablename__ = "conversations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_type = Column(String(20), nullable=False)
    director_id = Column(Uuid, ForeignKey("users.id"))
    talent_id = Column(Uuid, ForeignKey("users.id"))
    initiator_id = Column(Uuid, ForeignKey("users.id"))
    recipient_id = Column(Uuid, ForeignKey("users.id"))
    casting_id = Column(Uuid, ForeignKey("castings.id"))
    subject = Column(String(200), nullable=False)
    # Plain pointer, messages already reference conversations
    last_message_id = Column(Uuid)
    last_message_at = Column(DateTime(timezone=True), default=utc_now, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    # Relationships
    messages = relationship(
        "MessageModel",
        back_populates="conversation",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    casting = relationship("CastingModel")

    __table_args__ = (
        Index(
            "uq_conversations_director_talent",
            "director_id",
            "talent_id",
            unique=True,
            postgresql_where=text("conversation_type = 'director_talent'"),
            sqlite_where=text("conversation_type = 'director_talent'"),
        ),
        Index(
            "uq_conversations_writer_user",
            "initiator_id",
            "recipient_id",
            unique=True,
            postgresql_where=text("conversation_type = 'writer_user'"),
            sqlite_where=text("conversation_type = 'writer_user'"),
        ),
    )

    # Constraints (enforced by database CHECK constraints in the migration)
    # conversation_type IN ('director_talent', 'writer_user')
