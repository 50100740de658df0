from uuid import uuid4

import pytest

from casting_platform.models.enums import ConversationType, UserRole
from casting_platform.models.participants import (
    DirectorTalentParticipants,
    WriterUserParticipants,
    participants_of,
    slots_for_role,
)
from tests.factories import build_conversation, build_user


class TestParticipants:
    def test_director_talent_slots(self) -> None:
        director, talent, stranger = uuid4(), uuid4(), uuid4()
        participants = DirectorTalentParticipants(director_id=director, talent_id=talent)

        assert participants.contains(director)
        assert participants.contains(talent)
        assert not participants.contains(stranger)
        assert participants.counterpart_of(director) == talent
        assert participants.counterpart_of(stranger) is None
        assert participants.column_values() == {
            "director_id": director,
            "talent_id": talent,
        }

    def test_writer_user_slots(self) -> None:
        writer, recipient = uuid4(), uuid4()
        participants = WriterUserParticipants(initiator_id=writer, recipient_id=recipient)

        assert participants.conversation_type == ConversationType.WRITER_USER
        assert participants.counterpart_of(recipient) == writer
        assert participants.column_values() == {
            "initiator_id": writer,
            "recipient_id": recipient,
        }

    def test_participants_of_conversation(self) -> None:
        writer = build_user(UserRole.JOURNALIST)
        talent = build_user(UserRole.TALENT)
        conversation = build_conversation(initiator=writer, recipient=talent)

        participants = participants_of(conversation)
        assert isinstance(participants, WriterUserParticipants)
        assert participants.user_ids() == [writer.id, talent.id]

    @pytest.mark.parametrize(
        "role,expected",
        [
            (
                "talent",
                {
                    (ConversationType.DIRECTOR_TALENT, "talent"),
                    (ConversationType.WRITER_USER, "recipient"),
                },
            ),
            (
                "journalist",
                {
                    (ConversationType.WRITER_USER, "initiator"),
                    (ConversationType.WRITER_USER, "recipient"),
                },
            ),
        ],
    )
    def test_slots_for_role(self, role: str, expected: set) -> None:
        assert set(slots_for_role(role)) == expected

    @pytest.mark.parametrize("role", ["admin", "superuser"])
    def test_roles_without_slots(self, role: str) -> None:
        assert slots_for_role(role) is None
