from datetime import timedelta
from uuid import uuid4

import jwt
import pytest
from httpx import AsyncClient

from casting_platform.auth import decode_token, user_id_from_claims
from casting_platform.config import JWT_ALGORITHM
from casting_platform.models.enums import UserRole
from casting_platform.services.exceptions import NotAuthenticatedError
from tests.factories import make_token


class TestTokenDecoding:
    def test_valid_token(self) -> None:
        user_id = uuid4()
        claims = decode_token(make_token(user_id, role="talent"))
        assert claims["userId"] == str(user_id)
        assert user_id_from_claims(claims) == user_id

    def test_expired_token(self) -> None:
        token = make_token(uuid4(), expires_in=timedelta(minutes=-5))
        with pytest.raises(NotAuthenticatedError, match="Token has expired."):
            decode_token(token)

    def test_wrong_signature(self) -> None:
        token = jwt.encode(
            {"userId": str(uuid4())},
            "some-other-secret-that-is-long-enough-0123",
            algorithm=JWT_ALGORITHM,
        )
        with pytest.raises(NotAuthenticatedError, match="Invalid token."):
            decode_token(token)

    def test_garbage_token(self) -> None:
        with pytest.raises(NotAuthenticatedError, match="Invalid token."):
            decode_token("not-a-jwt")

    def test_sub_claim_is_accepted(self) -> None:
        user_id = uuid4()
        assert user_id_from_claims({"sub": str(user_id)}) == user_id

    @pytest.mark.parametrize("claims", [{}, {"userId": "42"}, {"sub": ""}])
    def test_missing_or_malformed_subject(self, claims: dict) -> None:
        with pytest.raises(NotAuthenticatedError):
            user_id_from_claims(claims)


class TestAuthenticatedRequests:
    @pytest.mark.asyncio
    async def test_unknown_user(self, api_client: AsyncClient) -> None:
        response = await api_client.get(
            "/api/messages/unread-count",
            headers={"Authorization": f"Bearer {make_token(uuid4())}"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "User not found."}

    @pytest.mark.asyncio
    async def test_expired_token_over_http(
        self, api_client: AsyncClient, make_user
    ) -> None:
        talent = await make_user(UserRole.TALENT)
        token = make_token(talent.id, expires_in=timedelta(seconds=-1))
        response = await api_client.get(
            "/api/messages/unread-count", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Token has expired."}

    @pytest.mark.asyncio
    async def test_valid_token(self, api_client: AsyncClient, make_user) -> None:
        talent = await make_user(UserRole.TALENT)
        response = await api_client.get(
            "/api/messages/unread-count",
            headers={"Authorization": f"Bearer {make_token(talent.id)}"},
        )
        assert response.status_code == 200
        assert response.json() == {"unreadCount": 0}
