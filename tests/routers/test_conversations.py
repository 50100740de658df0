from typing import Any, Generator
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from casting_platform.auth import get_current_user
from casting_platform.database import get_db
from casting_platform.main import app
from casting_platform.models.api.conversations import (
    ConversationDetailResponse,
    ConversationListResponse,
    CreateConversationResponse,
)
from casting_platform.models.enums import UserRole
from casting_platform.services.exceptions import (
    ConversationExistsError,
    ConversationNotFoundError,
    NotAuthorizedError,
    ValidationError,
)
from tests.factories import build_conversation, build_message, build_user


class TestConversationsRouter:
    """Unit tests for the messaging router endpoints."""

    @pytest.fixture
    def director(self) -> Any:
        return build_user(UserRole.CASTING_DIRECTOR)

    @pytest.fixture
    def talent(self) -> Any:
        return build_user(UserRole.TALENT)

    @pytest.fixture
    def client(self, director: Any) -> Generator[TestClient, Any, None]:
        """Test client with the caller and database stubbed out."""

        async def override_get_db() -> Any:
            yield MagicMock()

        app.dependency_overrides[get_current_user] = lambda: director
        app.dependency_overrides[get_db] = override_get_db
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_list_conversations_returns_page(
        self, client: TestClient, director: Any, talent: Any
    ) -> None:
        """Test that listing returns conversations with camelCase keys."""
        conversation = build_conversation(director=director, talent=talent)
        with patch(
            "casting_platform.services.list_conversations_service"
            ".ListConversationsService.list_conversations",
            new_callable=AsyncMock,
            return_value=ConversationListResponse(
                conversations=[conversation], page=1, limit=20
            ),
        ) as mock_list:
            response = client.get("/api/messages/conversations")

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["limit"] == 20
        assert data["conversations"][0]["id"] == str(conversation.id)
        assert data["conversations"][0]["directorId"] == str(director.id)
        assert "lastMessageAt" in data["conversations"][0]
        mock_list.assert_called_once_with(director, page=1, limit=20)

    def test_list_conversations_passes_pagination(self, client: TestClient) -> None:
        with patch(
            "casting_platform.services.list_conversations_service"
            ".ListConversationsService.list_conversations",
            new_callable=AsyncMock,
            return_value=ConversationListResponse(conversations=[], page=3, limit=5),
        ) as mock_list:
            response = client.get("/api/messages/conversations?page=3&limit=5")

        assert response.status_code == 200
        assert mock_list.call_args.kwargs == {"page": 3, "limit": 5}

    def test_create_conversation_returns_201(
        self, client: TestClient, director: Any, talent: Any
    ) -> None:
        conversation = build_conversation(director=director, talent=talent)
        message = build_message(conversation.id, director)
        with patch(
            "casting_platform.services.create_conversation_service"
            ".CreateConversationService.create_conversation",
            new_callable=AsyncMock,
            return_value=CreateConversationResponse(
                conversation=conversation, initial_message=message
            ),
        ) as mock_create:
            response = client.post(
                "/api/messages/conversations",
                json={
                    "recipientId": str(talent.id),
                    "subject": "Audition",
                    "initialMessage": "Hello",
                },
            )

        assert response.status_code == 201
        data = response.json()
        assert data["conversation"]["id"] == str(conversation.id)
        assert data["initialMessage"]["isDelivered"] is True
        assert data["initialMessage"]["isRead"] is False
        request = mock_create.call_args.args[1]
        assert request.recipient_id == talent.id
        assert request.initial_message == "Hello"

    def test_create_conversation_conflict_carries_existing_id(
        self, client: TestClient
    ) -> None:
        """Test that a duplicate conversation returns 400 with conversationId."""
        existing_id = uuid4()
        with patch(
            "casting_platform.services.create_conversation_service"
            ".CreateConversationService.create_conversation",
            new_callable=AsyncMock,
            side_effect=ConversationExistsError(existing_id),
        ):
            response = client.post(
                "/api/messages/conversations",
                json={
                    "recipientId": str(uuid4()),
                    "subject": "Audition",
                    "initialMessage": "Hello",
                },
            )

        assert response.status_code == 400
        body = response.json()
        assert body["conversationId"] == str(existing_id)
        assert "error" in body

    def test_view_conversation_forbidden(self, client: TestClient) -> None:
        with patch(
            "casting_platform.services.view_conversation_service"
            ".ViewConversationService.view_conversation",
            new_callable=AsyncMock,
            side_effect=NotAuthorizedError(),
        ):
            response = client.get(f"/api/messages/conversations/{uuid4()}")

        assert response.status_code == 403
        assert response.json() == {"error": "Access denied."}

    def test_view_conversation_returns_messages(
        self, client: TestClient, director: Any, talent: Any
    ) -> None:
        conversation = build_conversation(director=director, talent=talent)
        messages = [
            build_message(conversation.id, director, "Hello"),
            build_message(conversation.id, talent, "Hi"),
        ]
        with patch(
            "casting_platform.services.view_conversation_service"
            ".ViewConversationService.view_conversation",
            new_callable=AsyncMock,
            return_value=ConversationDetailResponse(
                conversation=conversation, messages=messages, has_more=False
            ),
        ) as mock_view:
            response = client.get(
                f"/api/messages/conversations/{conversation.id}?page=2&limit=10"
            )

        assert response.status_code == 200
        data = response.json()
        assert [m["content"] for m in data["messages"]] == ["Hello", "Hi"]
        assert data["hasMore"] is False
        assert mock_view.call_args.kwargs == {"page": 2, "limit": 10}

    def test_view_conversation_invalid_id(self, client: TestClient) -> None:
        """Test that a malformed conversation id is rejected before the service."""
        response = client.get("/api/messages/conversations/not-a-uuid")
        assert response.status_code == 422

    def test_send_message_returns_201(
        self, client: TestClient, director: Any
    ) -> None:
        conversation_id = uuid4()
        message = build_message(conversation_id, director, "Are you available?")
        with patch(
            "casting_platform.services.send_message_service"
            ".SendMessageService.send_message",
            new_callable=AsyncMock,
            return_value=message,
        ):
            response = client.post(
                f"/api/messages/conversations/{conversation_id}/messages",
                json={"content": "Are you available?"},
            )

        assert response.status_code == 201
        assert response.json()["message"]["content"] == "Are you available?"

    def test_send_message_blank_content(self, client: TestClient) -> None:
        with patch(
            "casting_platform.services.send_message_service"
            ".SendMessageService.send_message",
            new_callable=AsyncMock,
            side_effect=ValidationError("Message content is required"),
        ):
            response = client.post(
                f"/api/messages/conversations/{uuid4()}/messages",
                json={"content": "   "},
            )

        assert response.status_code == 400
        assert response.json() == {"error": "Message content is required"}

    def test_mark_as_read_returns_count(self, client: TestClient) -> None:
        with patch(
            "casting_platform.services.view_conversation_service"
            ".ViewConversationService.mark_as_read",
            new_callable=AsyncMock,
            return_value=3,
        ):
            response = client.patch(f"/api/messages/conversations/{uuid4()}/read")

        assert response.status_code == 200
        assert response.json() == {"updatedCount": 3}

    def test_close_conversation(self, client: TestClient) -> None:
        with patch(
            "casting_platform.services.manage_conversation_service"
            ".ManageConversationService.close_conversation",
            new_callable=AsyncMock,
            return_value=None,
        ):
            response = client.patch(f"/api/messages/conversations/{uuid4()}/close")

        assert response.status_code == 200
        assert response.json() == {"message": "Conversation closed."}

    def test_delete_conversation_not_found(self, client: TestClient) -> None:
        with patch(
            "casting_platform.services.manage_conversation_service"
            ".ManageConversationService.delete_conversation",
            new_callable=AsyncMock,
            side_effect=ConversationNotFoundError(),
        ):
            response = client.delete(f"/api/messages/conversations/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": "Conversation not found."}

    def test_unread_count(self, client: TestClient) -> None:
        with patch(
            "casting_platform.services.list_conversations_service"
            ".ListConversationsService.count_unread",
            new_callable=AsyncMock,
            return_value=4,
        ):
            response = client.get("/api/messages/unread-count")

        assert response.status_code == 200
        assert response.json() == {"unreadCount": 4}

    def test_unexpected_error_is_mapped_to_500(self, client: TestClient) -> None:
        """Test that unexpected errors become a fixed 500 message."""
        with patch(
            "casting_platform.services.list_conversations_service"
            ".ListConversationsService.list_conversations",
            new_callable=AsyncMock,
            side_effect=RuntimeError("connection reset"),
        ):
            response = client.get("/api/messages/conversations")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load conversations."}


class TestConversationsRouterAuth:
    """The messaging routes require a bearer token."""

    def test_missing_token_is_rejected(self) -> None:
        client = TestClient(app)
        response = client.get("/api/messages/unread-count")
        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required."}

    def test_garbage_token_is_rejected(self) -> None:
        client = TestClient(app)
        response = client.get(
            "/api/messages/unread-count",
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token."}
