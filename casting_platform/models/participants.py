"""Conversation participants as a tagged union.

Each conversation type owns a pair of participant slots. Operations ask the
participants object whether a user is in the conversation instead of
branching on the conversation type themselves.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from casting_platform.models.enums import ConversationType, UserRole


class Participants(ABC):
    """Abstract base class for the two participant shapes."""

    conversation_type: ConversationType

    @abstractmethod
    def slots(self) -> Dict[str, Optional[UUID]]:
        """Return participant slot name -> user id."""

    def user_ids(self) -> List[UUID]:
        return [user_id for user_id in self.slots().values() if user_id is not None]

    def contains(self, user_id: UUID) -> bool:
        return user_id in self.user_ids()

    def counterpart_of(self, user_id: UUID) -> Optional[UUID]:
        """Return the other participant, or None if user_id is not a participant."""
        if not self.contains(user_id):
            return None
        others = [other for other in self.user_ids() if other != user_id]
        return others[0] if others else None

    def column_values(self) -> Dict[str, Optional[UUID]]:
        """Slot values keyed by conversation column name."""
        return {f"{slot}_id": user_id for slot, user_id in self.slots().items()}


@dataclass(frozen=True)
class DirectorTalentParticipants(Participants):
    director_id: UUID
    talent_id: UUID

    conversation_type = ConversationType.DIRECTOR_TALENT

    def slots(self) -> Dict[str, Optional[UUID]]:
        return {"director": self.director_id, "talent": self.talent_id}


@dataclass(frozen=True)
class WriterUserParticipants(Participants):
    initiator_id: UUID
    recipient_id: UUID

    conversation_type = ConversationType.WRITER_USER

    def slots(self) -> Dict[str, Optional[UUID]]:
        return {"initiator": self.initiator_id, "recipient": self.recipient_id}


def participants_of(conversation: Any) -> Participants:
    """Build the participants variant for a conversation record or row."""
    conversation_type = ConversationType(conversation.conversation_type)
    if conversation_type == ConversationType.DIRECTOR_TALENT:
        return DirectorTalentParticipants(
            director_id=conversation.director_id, talent_id=conversation.talent_id
        )
    return WriterUserParticipants(
        initiator_id=conversation.initiator_id,
        recipient_id=conversation.recipient_id,
    )


# Slots a user may occupy, by role, when listing their conversations
ROLE_SLOTS: Dict[UserRole, Tuple[Tuple[ConversationType, str], ...]] = {
    UserRole.CASTING_DIRECTOR: (
        (ConversationType.DIRECTOR_TALENT, "director"),
        (ConversationType.WRITER_USER, "recipient"),
    ),
    UserRole.TALENT: (
        (ConversationType.DIRECTOR_TALENT, "talent"),
        (ConversationType.WRITER_USER, "recipient"),
    ),
    UserRole.JOURNALIST: (
        (ConversationType.WRITER_USER, "initiator"),
        (ConversationType.WRITER_USER, "recipient"),
    ),
}

# Roles allowed to open a conversation, and the type they open
INITIATOR_CONVERSATION_TYPES: Dict[UserRole, ConversationType] = {
    UserRole.CASTING_DIRECTOR: ConversationType.DIRECTOR_TALENT,
    UserRole.JOURNALIST: ConversationType.WRITER_USER,
}


def slots_for_role(role: str) -> Optional[Tuple[Tuple[ConversationType, str], ...]]:
    try:
        return ROLE_SLOTS.get(UserRole(role))
    except ValueError:
        return None
