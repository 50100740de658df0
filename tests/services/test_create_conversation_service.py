from typing import Any
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from casting_platform.models.api.conversations import CreateConversationRequest
from casting_platform.models.enums import UserRole
from casting_platform.models.participants import (
    DirectorTalentParticipants,
    WriterUserParticipants,
)
from casting_platform.services.create_conversation_service import (
    CreateConversationService,
)
from casting_platform.services.exceptions import (
    ConversationExistsError,
    NotAuthorizedError,
    NotFoundError,
    UserNotFoundError,
    ValidationError,
)
from tests.factories import build_conversation, build_message, build_user


class TestCreateConversationService:
    """Unit tests for CreateConversationService."""

    @pytest.fixture
    def service(self, mock_db: AsyncMock) -> CreateConversationService:
        """CreateConversationService instance."""
        return CreateConversationService(mock_db)

    @pytest.fixture
    def director(self) -> Any:
        return build_user(UserRole.CASTING_DIRECTOR)

    @pytest.fixture
    def talent(self) -> Any:
        return build_user(UserRole.TALENT)

    def request_for(self, recipient: Any, **overrides: Any) -> CreateConversationRequest:
        values = {
            "recipient_id": str(recipient.id),
            "subject": "Audition",
            "initial_message": "Hello",
        }
        values.update(overrides)
        return CreateConversationRequest(**values)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"subject": None},
            {"subject": "   "},
            {"initial_message": ""},
            {"recipient_id": None},
        ],
    )
    async def test_missing_fields_are_rejected(
        self,
        service: CreateConversationService,
        director: Any,
        talent: Any,
        overrides: Any,
    ) -> None:
        with pytest.raises(ValidationError):
            await service.create_conversation(
                director, self.request_for(talent, **overrides)
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [{"recipient_id": "not-a-uuid"}, {"casting_id": "12345"}],
    )
    async def test_malformed_ids_are_rejected(
        self,
        service: CreateConversationService,
        director: Any,
        talent: Any,
        overrides: Any,
    ) -> None:
        with patch.object(
            service.user_repo, "get_by_id", new_callable=AsyncMock
        ) as mock_get:
            with pytest.raises(ValidationError):
                await service.create_conversation(
                    director, self.request_for(talent, **overrides)
                )
        mock_get.assert_not_called()

    @pytest.mark.asyncio
    async def test_long_subject_is_rejected(
        self, service: CreateConversationService, director: Any, talent: Any
    ) -> None:
        with pytest.raises(ValidationError):
            await service.create_conversation(
                director, self.request_for(talent, subject="a" * 201)
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [UserRole.TALENT, UserRole.ADMIN])
    async def test_only_directors_and_writers_can_start(
        self, service: CreateConversationService, talent: Any, role: UserRole
    ) -> None:
        with pytest.raises(NotAuthorizedError):
            await service.create_conversation(build_user(role), self.request_for(talent))

    @pytest.mark.asyncio
    async def test_unknown_recipient(
        self, service: CreateConversationService, director: Any, talent: Any
    ) -> None:
        with patch.object(
            service.user_repo, "get_by_id", new_callable=AsyncMock, return_value=None
        ):
            with pytest.raises(UserNotFoundError):
                await service.create_conversation(director, self.request_for(talent))

    @pytest.mark.asyncio
    async def test_cannot_message_self(
        self, service: CreateConversationService
    ) -> None:
        writer = build_user(UserRole.JOURNALIST)
        with patch.object(
            service.user_repo, "get_by_id", new_callable=AsyncMock, return_value=writer
        ):
            with pytest.raises(ValidationError):
                await service.create_conversation(writer, self.request_for(writer))

    @pytest.mark.asyncio
    async def test_director_recipient_must_be_talent(
        self, service: CreateConversationService, director: Any
    ) -> None:
        other_director = build_user(UserRole.CASTING_DIRECTOR)
        with patch.object(
            service.user_repo,
            "get_by_id",
            new_callable=AsyncMock,
            return_value=other_director,
        ):
            with pytest.raises(ValidationError):
                await service.create_conversation(
                    director, self.request_for(other_director)
                )

    @pytest.mark.asyncio
    async def test_unknown_casting(
        self, service: CreateConversationService, director: Any, talent: Any
    ) -> None:
        with patch.object(
            service.user_repo, "get_by_id", new_callable=AsyncMock, return_value=talent
        ), patch.object(
            service.casting_repo, "get_many", new_callable=AsyncMock, return_value={}
        ):
            with pytest.raises(NotFoundError):
                await service.create_conversation(
                    director, self.request_for(talent, casting_id=str(uuid4()))
                )

    @pytest.mark.asyncio
    async def test_existing_conversation_is_reported(
        self, service: CreateConversationService, director: Any, talent: Any
    ) -> None:
        """Test that a duplicate pair raises a conflict carrying the existing id."""
        existing = build_conversation(director=director, talent=talent)
        with patch.object(
            service.user_repo, "get_by_id", new_callable=AsyncMock, return_value=talent
        ), patch.object(
            service.conversation_repo,
            "find_between",
            new_callable=AsyncMock,
            return_value=existing,
        ) as mock_find, patch.object(
            service.conversation_repo, "create", new_callable=AsyncMock
        ) as mock_create:
            with pytest.raises(ConversationExistsError) as exc_info:
                await service.create_conversation(director, self.request_for(talent))

        assert exc_info.value.conversation_id == existing.id
        assert exc_info.value.to_body()["conversationId"] == str(existing.id)
        mock_find.assert_called_once_with(
            DirectorTalentParticipants(director_id=director.id, talent_id=talent.id)
        )
        mock_create.assert_not_called()

    @pytest.mark.asyncio
    async def test_writer_conversation_uses_initiator_slots(
        self, service: CreateConversationService, director: Any
    ) -> None:
        writer = build_user(UserRole.JOURNALIST)
        with patch.object(
            service.user_repo, "get_by_id", new_callable=AsyncMock, return_value=director
        ), patch.object(
            service.conversation_repo,
            "find_between",
            new_callable=AsyncMock,
            return_value=build_conversation(initiator=director, recipient=writer),
        ) as mock_find:
            with pytest.raises(ConversationExistsError):
                await service.create_conversation(writer, self.request_for(director))

        mock_find.assert_called_once_with(
            WriterUserParticipants(initiator_id=writer.id, recipient_id=director.id)
        )

    @pytest.mark.asyncio
    async def test_successful_create_commits_once(
        self,
        service: CreateConversationService,
        mock_db: AsyncMock,
        director: Any,
        talent: Any,
    ) -> None:
        """Test that conversation, message and pointer are written in one commit."""
        conversation = build_conversation(director=director, talent=talent)
        message = build_message(conversation.id, director)
        with patch.object(
            service.user_repo, "get_by_id", new_callable=AsyncMock, return_value=talent
        ), patch.object(
            service.conversation_repo,
            "find_between",
            new_callable=AsyncMock,
            return_value=None,
        ), patch.object(
            service.conversation_repo,
            "create",
            new_callable=AsyncMock,
            return_value=conversation,
        ) as mock_create, patch.object(
            service.message_repo, "create", new_callable=AsyncMock, return_value=message
        ) as mock_message_create, patch.object(
            service.conversation_repo, "set_last_message", new_callable=AsyncMock
        ) as mock_pointer:
            result = await service.create_conversation(director, self.request_for(talent))

        assert mock_create.call_args.kwargs == {"commit": False}
        assert mock_message_create.call_args.kwargs == {"commit": False}
        mock_pointer.assert_called_once_with(
            conversation.id, message.id, sent_at=message.created_at, commit=False
        )
        mock_db.commit.assert_called_once()
        assert result.conversation.last_message_id == message.id
        assert result.initial_message.sender.id == director.id

        created = mock_create.call_args.args[0]
        assert created.director_id == director.id
        assert created.talent_id == talent.id
        assert created.conversation_type == "director_talent"

    @pytest.mark.asyncio
    async def test_integrity_race_reports_conflict(
        self,
        service: CreateConversationService,
        mock_db: AsyncMock,
        director: Any,
        talent: Any,
    ) -> None:
        """Test that losing a unique-index race is reported as the same conflict."""
        winner = build_conversation(director=director, talent=talent)
        with patch.object(
            service.user_repo, "get_by_id", new_callable=AsyncMock, return_value=talent
        ), patch.object(
            service.conversation_repo,
            "find_between",
            new_callable=AsyncMock,
            side_effect=[None, winner],
        ), patch.object(
            service.conversation_repo,
            "create",
            new_callable=AsyncMock,
            side_effect=IntegrityError("INSERT", {}, Exception("unique")),
        ):
            with pytest.raises(ConversationExistsError) as exc_info:
                await service.create_conversation(director, self.request_for(talent))

        assert exc_info.value.conversation_id == winner.id
        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_mid_write_rolls_back(
        self,
        service: CreateConversationService,
        mock_db: AsyncMock,
        director: Any,
        talent: Any,
    ) -> None:
        conversation = build_conversation(director=director, talent=talent)
        with patch.object(
            service.user_repo, "get_by_id", new_callable=AsyncMock, return_value=talent
        ), patch.object(
            service.conversation_repo,
            "find_between",
            new_callable=AsyncMock,
            return_value=None,
        ), patch.object(
            service.conversation_repo,
            "create",
            new_callable=AsyncMock,
            return_value=conversation,
        ), patch.object(
            service.message_repo,
            "create",
            new_callable=AsyncMock,
            side_effect=RuntimeError("disk full"),
        ):
            with pytest.raises(RuntimeError):
                await service.create_conversation(director, self.request_for(talent))

        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()
