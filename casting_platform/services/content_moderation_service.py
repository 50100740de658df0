"""Blog/news authoring and moderation.

Status workflow::

    draft -> pending -> published | rejected

Admins and writers with auto-approval skip ``pending`` on create. A
non-admin edit of a published item sends it back to ``pending``.
"""

import logging
import math
import re
import time
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.database import utc_now
from casting_platform.models.api.content import (
    ContentListResponse,
    ContentRequest,
    ContentResponse,
    ContentStatusRequest,
)
from casting_platform.models.api.users import UserResponse, WriterProfileResponse
from casting_platform.models.enums import (
    BLOG_CATEGORIES,
    NEWS_CATEGORIES,
    ContentKind,
    ContentStatus,
    IdentificationStatus,
    NewsPriority,
    UserRole,
)
from casting_platform.repositories.content_repository import content_repository_for
from casting_platform.repositories.profile_repository import WriterProfileRepository
from casting_platform.services.conversation_access import validate_pagination
from casting_platform.services.exceptions import (
    ContentNotFoundError,
    NotAuthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200
CONTENT_MIN_LENGTH = 100
EXCERPT_MAX_LENGTH = 300
SUMMARY_MAX_LENGTH = 500
TAG_MAX_LENGTH = 50
WORDS_PER_MINUTE = 200

CATEGORIES = {ContentKind.BLOG: BLOG_CATEGORIES, ContentKind.NEWS: NEWS_CATEGORIES}

# Persian/Arabic letters, latin letters, digits, whitespace and hyphens survive
_SLUG_STRIP = re.compile(
    r"[^\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFFa-z0-9\s-]"
)


def slugify(title: str, fallback_prefix: str) -> str:
    slug = _SLUG_STRIP.sub("", title.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    if not slug:
        slug = f"{fallback_prefix}-{int(time.time() * 1000)}"
    return slug


def read_time_minutes(content: str) -> int:
    return max(1, math.ceil(len(content.split()) / WORDS_PER_MINUTE))


class ContentModerationService:
    """Service for writing and moderating one kind of content (blogs or news)."""

    def __init__(self, db: AsyncSession, kind: ContentKind):
        self.db = db
        self.kind = kind
        self.content_repo = content_repository_for(kind, db)
        self.writer_profile_repo = WriterProfileRepository(db)

    async def can_create(self, user: UserResponse) -> Tuple[bool, Optional[str]]:
        """Whether the user may write content, and why not."""
        profile = await self.writer_profile_repo.get_for_user(user.id)
        if user.role == UserRole.ADMIN.value:
            return True, None
        if user.role == UserRole.JOURNALIST.value:
            if profile and profile.is_approved_writer:
                return True, None
            return False, "Your writer account has not been approved yet."
        if user.role == UserRole.CASTING_DIRECTOR.value:
            if user.identification_status == IdentificationStatus.APPROVED.value:
                return True, None
            return False, "Casting directors need an approved identification to write."
        return False, "Your role cannot write content."

    async def create(
        self, user: UserResponse, request: ContentRequest
    ) -> ContentResponse:
        allowed, reason = await self.can_create(user)
        if not allowed:
            raise NotAuthorizedError(reason or "You cannot write content.")

        fields = self._validated_fields(request)
        profile = await self.writer_profile_repo.get_for_user(user.id)
        auto_publish = self._has_auto_approval(user, profile)

        now = utc_now()
        item = ContentResponse(
            id=uuid4(),
            kind=self.kind.value,
            slug=await self._unique_slug(fields["title"]),
            author_id=user.id,
            status=(
                ContentStatus.PUBLISHED.value
                if auto_publish
                else ContentStatus.PENDING.value
            ),
            published_at=now if auto_publish else None,
            approved_by_id=user.id if auto_publish else None,
            approved_at=now if auto_publish else None,
            views=0,
            created_at=now,
            updated_at=now,
            **fields,
        )
        created = await self.content_repo.create(item)
        logger.info(
            "%s %s created by %s with status %s",
            self.kind.value,
            created.id,
            user.id,
            created.status,
        )
        return created

    async def update(
        self, user: UserResponse, item_id: UUID, request: ContentRequest
    ) -> ContentResponse:
        existing = await self._get_owned(user, item_id)
        changes: Dict[str, Any] = self._validated_fields(request)
        if changes["title"] != existing.title:
            changes["slug"] = await self._unique_slug(
                changes["title"], exclude_id=item_id
            )

        if (
            existing.status == ContentStatus.PUBLISHED.value
            and user.role != UserRole.ADMIN.value
        ):
            # Edits to published content need approval again
            changes.update(
                status=ContentStatus.PENDING.value,
                published_at=None,
                approved_by_id=None,
                approved_at=None,
            )
            logger.info(
                "%s %s edited after publishing; back to pending", self.kind.value, item_id
            )

        updated = await self.content_repo.update_fields(item_id, changes)
        if not updated:
            raise ContentNotFoundError()
        return updated

    async def change_status(
        self, user: UserResponse, item_id: UUID, request: ContentStatusRequest
    ) -> ContentResponse:
        if user.role != UserRole.ADMIN.value:
            raise NotAuthorizedError("Only admins can change content status.")
        valid = [status.value for status in ContentStatus]
        if request.status not in valid:
            raise ValidationError(f"Status must be one of: {', '.join(valid)}")

        existing = await self.content_repo.get_by_id(item_id)
        if not existing:
            raise ContentNotFoundError()

        changes: Dict[str, Any] = {"status": request.status}
        if request.status == ContentStatus.PUBLISHED.value:
            now = utc_now()
            changes.update(
                published_at=now,
                approved_by_id=user.id,
                approved_at=now,
                rejection_reason=None,
            )
        elif request.status == ContentStatus.REJECTED.value:
            changes.update(
                published_at=None,
                approved_by_id=None,
                approved_at=None,
                rejection_reason=request.rejection_reason,
            )

        updated = await self.content_repo.update_fields(item_id, changes)
        if not updated:
            raise ContentNotFoundError()
        logger.info(
            "%s %s moved %s -> %s by %s",
            self.kind.value,
            item_id,
            existing.status,
            request.status,
            user.id,
        )
        return updated

    async def delete(self, user: UserResponse, item_id: UUID) -> None:
        await self._get_owned(user, item_id)
        await self.content_repo.delete(item_id)
        logger.info("%s %s deleted by %s", self.kind.value, item_id, user.id)

    async def list_published(
        self, category: Optional[str] = None, page: int = 1, limit: int = 10
    ) -> ContentListResponse:
        offset = validate_pagination(page, limit)
        items, total = await self.content_repo.list_published(
            category=category, limit=limit, offset=offset
        )
        return ContentListResponse(items=items, page=page, limit=limit, total=total)

    async def get_published(self, slug: str) -> ContentResponse:
        item = await self.content_repo.get_published_by_slug(slug)
        if not item:
            raise ContentNotFoundError()
        await self.content_repo.increment_views(item.id)
        return item.model_copy(update={"views": item.views + 1})

    async def list_mine(self, user: UserResponse) -> List[ContentResponse]:
        return await self.content_repo.list_by_author(user.id)

    async def _get_owned(self, user: UserResponse, item_id: UUID) -> ContentResponse:
        item = await self.content_repo.get_by_id(item_id)
        if not item:
            raise ContentNotFoundError()
        if item.author_id != user.id and user.role != UserRole.ADMIN.value:
            raise NotAuthorizedError("You can only manage your own content.")
        return item

    def _has_auto_approval(
        self, user: UserResponse, profile: Optional[WriterProfileResponse]
    ) -> bool:
        return user.role == UserRole.ADMIN.value or bool(
            profile and profile.auto_approval
        )

    def _validated_fields(self, request: ContentRequest) -> Dict[str, Any]:
        title = (request.title or "").strip()
        content = (request.content or "").strip()
        category = (request.category or "").strip()

        if not title:
            raise ValidationError("Title is required")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
        if not content:
            raise ValidationError("Content is required")
        if len(content) < CONTENT_MIN_LENGTH:
            raise ValidationError(
                f"Content must be at least {CONTENT_MIN_LENGTH} characters"
            )
        if category not in CATEGORIES[self.kind]:
            raise ValidationError("Invalid category")

        tags = [tag.strip() for tag in request.tags if tag and tag.strip()]
        if any(len(tag) > TAG_MAX_LENGTH for tag in tags):
            raise ValidationError(f"Tags must be at most {TAG_MAX_LENGTH} characters")

        fields: Dict[str, Any] = {
            "title": title,
            "content": content,
            "category": category,
            "tags": tags,
        }
        if self.kind == ContentKind.BLOG:
            excerpt = (request.excerpt or "").strip()
            if len(excerpt) > EXCERPT_MAX_LENGTH:
                raise ValidationError(
                    f"Excerpt must be at most {EXCERPT_MAX_LENGTH} characters"
                )
            fields.update(excerpt=excerpt, read_time=read_time_minutes(content))
        else:
            priority = request.priority or NewsPriority.NORMAL.value
            if priority not in [p.value for p in NewsPriority]:
                raise ValidationError("Invalid priority")
            summary = (request.summary or "").strip() or None
            if summary and len(summary) > SUMMARY_MAX_LENGTH:
                raise ValidationError(
                    f"Summary must be at most {SUMMARY_MAX_LENGTH} characters"
                )
            fields.update(
                summary=summary,
                priority=priority,
                is_breaking=request.is_breaking,
                is_featured=request.is_featured,
            )
        return fields

    async def _unique_slug(self, title: str, exclude_id: Optional[UUID] = None) -> str:
        base = slugify(title, self.kind.value)
        slug = base
        suffix = 2
        while await self.content_repo.slug_exists(slug, exclude_id=exclude_id):
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug
