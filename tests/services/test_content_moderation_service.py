from typing import Any, Optional
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from casting_platform.models.api.content import ContentRequest, ContentStatusRequest
from casting_platform.models.api.users import WriterProfileResponse
from casting_platform.models.enums import ContentKind, UserRole
from casting_platform.services.content_moderation_service import (
    ContentModerationService,
    read_time_minutes,
    slugify,
)
from casting_platform.services.exceptions import (
    ContentNotFoundError,
    NotAuthorizedError,
    ValidationError,
)
from tests.factories import build_item, build_user

LONG_CONTENT = "Every audition starts long before you walk into the room. " * 3


def writer_profile(
    user_id: Any, approved: bool = True, auto_approval: bool = False
) -> WriterProfileResponse:
    return WriterProfileResponse(
        id=uuid4(),
        user_id=user_id,
        is_approved_writer=approved,
        auto_approval=auto_approval,
    )


def blog_request(**overrides: Any) -> ContentRequest:
    values = {
        "title": "Preparing for a Screen Test",
        "content": LONG_CONTENT,
        "category": "casting_tips",
        "tags": ["audition", "  ", "tips"],
    }
    values.update(overrides)
    return ContentRequest(**values)


class TestSlugify:
    def test_latin_title(self) -> None:
        assert slugify("Preparing for a Screen Test!", "blog") == (
            "preparing-for-a-screen-test"
        )

    def test_persian_title_is_kept(self) -> None:
        assert slugify("نکات  تست بازیگری", "blog") == "نکات-تست-بازیگری"

    def test_collapses_hyphens_and_trims(self) -> None:
        assert slugify("--Hello -- World--", "news") == "hello-world"

    def test_fallback_when_nothing_survives(self) -> None:
        slug = slugify("!!!", "news")
        assert slug.startswith("news-")
        assert slug[len("news-"):].isdigit()


class TestReadTime:
    @pytest.mark.parametrize(
        "words,expected", [(0, 1), (1, 1), (200, 1), (201, 2), (1000, 5)]
    )
    def test_minutes(self, words: int, expected: int) -> None:
        assert read_time_minutes(" ".join(["word"] * words)) == expected


class TestContentModerationService:
    """Unit tests for ContentModerationService."""

    @pytest.fixture
    def service(self, mock_db: AsyncMock) -> ContentModerationService:
        return ContentModerationService(mock_db, ContentKind.BLOG)

    @pytest.fixture
    def news_service(self, mock_db: AsyncMock) -> ContentModerationService:
        return ContentModerationService(mock_db, ContentKind.NEWS)

    def patch_profile(
        self, service: ContentModerationService, profile: Optional[WriterProfileResponse]
    ) -> Any:
        return patch.object(
            service.writer_profile_repo,
            "get_for_user",
            new_callable=AsyncMock,
            return_value=profile,
        )

    @pytest.mark.asyncio
    async def test_can_create_rules(self, service: ContentModerationService) -> None:
        journalist = build_user(UserRole.JOURNALIST)
        approved_director = build_user(
            UserRole.CASTING_DIRECTOR, identification_status="approved"
        )
        unverified_director = build_user(UserRole.CASTING_DIRECTOR)

        with self.patch_profile(service, None):
            assert (await service.can_create(build_user(UserRole.ADMIN)))[0] is True
            assert (await service.can_create(journalist))[0] is False
            assert (await service.can_create(approved_director))[0] is True
            assert (await service.can_create(unverified_director))[0] is False
            assert (await service.can_create(build_user(UserRole.TALENT)))[0] is False

        with self.patch_profile(service, writer_profile(journalist.id)):
            assert await service.can_create(journalist) == (True, None)

    @pytest.mark.asyncio
    async def test_create_requires_permission(
        self, service: ContentModerationService
    ) -> None:
        with self.patch_profile(service, None):
            with pytest.raises(NotAuthorizedError):
                await service.create(build_user(UserRole.TALENT), blog_request())

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"title": "  "},
            {"title": "t" * 201},
            {"content": None},
            {"content": "Too short to publish."},
            {"category": "gossip"},
            {"category": None},
            {"tags": ["x" * 51]},
            {"excerpt": "e" * 301},
        ],
    )
    async def test_create_validation(
        self, service: ContentModerationService, overrides: Any
    ) -> None:
        admin = build_user(UserRole.ADMIN)
        with self.patch_profile(service, None):
            with pytest.raises(ValidationError):
                await service.create(admin, blog_request(**overrides))

    @pytest.mark.asyncio
    async def test_writer_create_starts_pending(
        self, service: ContentModerationService
    ) -> None:
        journalist = build_user(UserRole.JOURNALIST)
        with self.patch_profile(service, writer_profile(journalist.id)), patch.object(
            service.content_repo, "slug_exists", new_callable=AsyncMock, return_value=False
        ), patch.object(
            service.content_repo, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.side_effect = lambda item: item
            item = await service.create(journalist, blog_request())

        assert item.status == "pending"
        assert item.published_at is None
        assert item.approved_by_id is None
        assert item.slug == "preparing-for-a-screen-test"
        assert item.tags == ["audition", "tips"]
        assert item.author_id == journalist.id
        assert item.read_time == 1

    @pytest.mark.asyncio
    async def test_auto_approved_writer_publishes(
        self, service: ContentModerationService
    ) -> None:
        journalist = build_user(UserRole.JOURNALIST)
        profile = writer_profile(journalist.id, auto_approval=True)
        with self.patch_profile(service, profile), patch.object(
            service.content_repo, "slug_exists", new_callable=AsyncMock, return_value=False
        ), patch.object(
            service.content_repo, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.side_effect = lambda item: item
            item = await service.create(journalist, blog_request())

        assert item.status == "published"
        assert item.published_at is not None
        assert item.approved_by_id == journalist.id
        assert item.approved_at == item.published_at

    @pytest.mark.asyncio
    async def test_slug_collision_gets_suffix(
        self, service: ContentModerationService
    ) -> None:
        admin = build_user(UserRole.ADMIN)
        with self.patch_profile(service, None), patch.object(
            service.content_repo,
            "slug_exists",
            new_callable=AsyncMock,
            side_effect=[True, True, False],
        ), patch.object(
            service.content_repo, "create", new_callable=AsyncMock
        ) as mock_create:
            mock_create.side_effect = lambda item: item
            item = await service.create(admin, blog_request())

        assert item.slug == "preparing-for-a-screen-test-3"

    @pytest.mark.asyncio
    async def test_news_priority_validation(
        self, news_service: ContentModerationService
    ) -> None:
        admin = build_user(UserRole.ADMIN)
        with self.patch_profile(news_service, None):
            with pytest.raises(ValidationError):
                await news_service.create(
                    admin, blog_request(category="awards", priority="critical")
                )

    @pytest.mark.asyncio
    async def test_non_admin_edit_of_published_goes_back_to_pending(
        self, service: ContentModerationService
    ) -> None:
        journalist = build_user(UserRole.JOURNALIST)
        existing = build_item(
            status="published", author_id=journalist.id, title="Old title"
        )
        with patch.object(
            service.content_repo,
            "get_by_id",
            new_callable=AsyncMock,
            return_value=existing,
        ), patch.object(
            service.content_repo, "slug_exists", new_callable=AsyncMock, return_value=False
        ), patch.object(
            service.content_repo,
            "update_fields",
            new_callable=AsyncMock,
            return_value=existing,
        ) as mock_update:
            await service.update(journalist, existing.id, blog_request())

        changes = mock_update.call_args.args[1]
        assert changes["status"] == "pending"
        assert changes["published_at"] is None
        assert changes["approved_by_id"] is None
        assert changes["approved_at"] is None
        assert changes["slug"] == "preparing-for-a-screen-test"

    @pytest.mark.asyncio
    async def test_admin_edit_keeps_published(
        self, service: ContentModerationService
    ) -> None:
        existing = build_item(status="published", title="Preparing for a Screen Test")
        with patch.object(
            service.content_repo,
            "get_by_id",
            new_callable=AsyncMock,
            return_value=existing,
        ), patch.object(
            service.content_repo,
            "update_fields",
            new_callable=AsyncMock,
            return_value=existing,
        ) as mock_update:
            await service.update(build_user(UserRole.ADMIN), existing.id, blog_request())

        changes = mock_update.call_args.args[1]
        assert "status" not in changes
        assert "slug" not in changes

    @pytest.mark.asyncio
    async def test_only_author_or_admin_may_edit(
        self, service: ContentModerationService
    ) -> None:
        existing = build_item()
        with patch.object(
            service.content_repo,
            "get_by_id",
            new_callable=AsyncMock,
            return_value=existing,
        ):
            with pytest.raises(NotAuthorizedError):
                await service.update(
                    build_user(UserRole.JOURNALIST), existing.id, blog_request()
                )
            with pytest.raises(NotAuthorizedError):
                await service.delete(build_user(UserRole.JOURNALIST), existing.id)

    @pytest.mark.asyncio
    async def test_edit_missing_item(self, service: ContentModerationService) -> None:
        with patch.object(
            service.content_repo, "get_by_id", new_callable=AsyncMock, return_value=None
        ):
            with pytest.raises(ContentNotFoundError):
                await service.update(
                    build_user(UserRole.ADMIN), uuid4(), blog_request()
                )

    @pytest.mark.asyncio
    async def test_change_status_admin_only(
        self, service: ContentModerationService
    ) -> None:
        with pytest.raises(NotAuthorizedError):
            await service.change_status(
                build_user(UserRole.JOURNALIST),
                uuid4(),
                ContentStatusRequest(status="published"),
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [None, "archived"])
    async def test_change_status_rejects_unknown_status(
        self, service: ContentModerationService, status: Optional[str]
    ) -> None:
        with pytest.raises(ValidationError):
            await service.change_status(
                build_user(UserRole.ADMIN), uuid4(), ContentStatusRequest(status=status)
            )

    @pytest.mark.asyncio
    async def test_publish_stamps_approver(
        self, service: ContentModerationService
    ) -> None:
        admin = build_user(UserRole.ADMIN)
        existing = build_item(status="pending")
        with patch.object(
            service.content_repo,
            "get_by_id",
            new_callable=AsyncMock,
            return_value=existing,
        ), patch.object(
            service.content_repo,
            "update_fields",
            new_callable=AsyncMock,
            return_value=existing,
        ) as mock_update:
            await service.change_status(
                admin, existing.id, ContentStatusRequest(status="published")
            )

        changes = mock_update.call_args.args[1]
        assert changes["status"] == "published"
        assert changes["approved_by_id"] == admin.id
        assert changes["published_at"] is not None
        assert changes["approved_at"] == changes["published_at"]

    @pytest.mark.asyncio
    async def test_reject_clears_stamps_and_keeps_reason(
        self, service: ContentModerationService
    ) -> None:
        existing = build_item(status="published")
        with patch.object(
            service.content_repo,
            "get_by_id",
            new_callable=AsyncMock,
            return_value=existing,
        ), patch.object(
            service.content_repo,
            "update_fields",
            new_callable=AsyncMock,
            return_value=existing,
        ) as mock_update:
            await service.change_status(
                build_user(UserRole.ADMIN),
                existing.id,
                ContentStatusRequest(status="rejected", rejection_reason="Off topic"),
            )

        changes = mock_update.call_args.args[1]
        assert changes == {
            "status": "rejected",
            "published_at": None,
            "approved_by_id": None,
            "approved_at": None,
            "rejection_reason": "Off topic",
        }

    @pytest.mark.asyncio
    async def test_get_published_counts_view(
        self, service: ContentModerationService
    ) -> None:
        item = build_item(status="published", views=4)
        with patch.object(
            service.content_repo,
            "get_published_by_slug",
            new_callable=AsyncMock,
            return_value=item,
        ), patch.object(
            service.content_repo, "increment_views", new_callable=AsyncMock
        ) as mock_increment:
            result = await service.get_published(item.slug)

        mock_increment.assert_called_once_with(item.id)
        assert result.views == 5

    @pytest.mark.asyncio
    async def test_get_unpublished_is_not_found(
        self, service: ContentModerationService
    ) -> None:
        with patch.object(
            service.content_repo,
            "get_published_by_slug",
            new_callable=AsyncMock,
            return_value=None,
        ):
            with pytest.raises(ContentNotFoundError):
                await service.get_published("draft-slug")
