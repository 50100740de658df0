import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.auth import get_current_user
from casting_platform.database import get_db
from casting_platform.models.api.base import StatusMessageResponse
from casting_platform.models.api.conversations import (
    ConversationDetailResponse,
    ConversationListResponse,
    CreateConversationRequest,
    CreateConversationResponse,
    MarkReadResponse,
    UnreadCountResponse,
)
from casting_platform.models.api.messages import (
    SendMessageRequest,
    SendMessageResponse,
)
from casting_platform.models.api.users import UserResponse
from casting_platform.services.create_conversation_service import (
    CreateConversationService,
)
from casting_platform.services.exceptions import ServiceError
from casting_platform.services.list_conversations_service import (
    ListConversationsService,
)
from casting_platform.services.manage_conversation_service import (
    ManageConversationService,
)
from casting_platform.services.send_message_service import SendMessageService
from casting_platform.services.view_conversation_service import (
    ViewConversationService,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations(
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(20, description="Conversations per page"),
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConversationListResponse:
    """
    List the caller's active conversations, most recent activity first.

    Query parameters:
    - page: Page number (default: 1)
    - limit: Conversations per page (default: 20, max: 100)
    """
    try:
        service = ListConversationsService(db)
        return await service.list_conversations(user, page=page, limit=limit)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to list conversations for %s", user.id)
        raise ServiceError("Failed to load conversations.")


@router.post(
    "/conversations", response_model=CreateConversationResponse, status_code=201
)
async def create_conversation(
    request: CreateConversationRequest,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CreateConversationResponse:
    """
    Start a conversation with an initial message.

    Casting directors write to talents; journalists write to any user.
    A pair may only have one conversation; a duplicate returns 400 with the
    existing ``conversationId``.
    """
    try:
        service = CreateConversationService(db)
        return await service.create_conversation(user, request)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to create conversation for %s", user.id)
        raise ServiceError("Failed to create conversation.")


@router.get(
    "/conversations/{conversation_id}", response_model=ConversationDetailResponse
)
async def view_conversation(
    conversation_id: UUID,
    page: int = Query(1, description="Page number, starting at 1"),
    limit: int = Query(50, description="Messages per page"),
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConversationDetailResponse:
    """
    Open a conversation. Marks the counterpart's messages as read, then
    returns one page of messages in chronological order.

    Path parameters:
    - conversation_id: UUID of the conversation
    """
    try:
        service = ViewConversationService(db)
        return await service.view_conversation(
            user, conversation_id, page=page, limit=limit
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to load conversation %s", conversation_id)
        raise ServiceError("Failed to load conversation.")


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=SendMessageResponse,
    status_code=201,
)
async def send_message(
    conversation_id: UUID,
    request: SendMessageRequest,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SendMessageResponse:
    """Send a message in a conversation the caller participates in."""
    try:
        service = SendMessageService(db)
        message = await service.send_message(user, conversation_id, request)
        return SendMessageResponse(message=message)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to send message in %s", conversation_id)
        raise ServiceError("Failed to send message.")


@router.patch(
    "/conversations/{conversation_id}/read", response_model=MarkReadResponse
)
async def mark_as_read(
    conversation_id: UUID,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MarkReadResponse:
    """Mark the counterpart's unread messages as read."""
    try:
        service = ViewConversationService(db)
        updated = await service.mark_as_read(user, conversation_id)
        return MarkReadResponse(updated_count=updated)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to mark conversation %s read", conversation_id)
        raise ServiceError("Failed to mark messages as read.")


@router.patch(
    "/conversations/{conversation_id}/close", response_model=StatusMessageResponse
)
async def close_conversation(
    conversation_id: UUID,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> StatusMessageResponse:
    """Close a conversation. Closed conversations cannot be reopened."""
    try:
        service = ManageConversationService(db)
        await service.close_conversation(user, conversation_id)
        return StatusMessageResponse(message="Conversation closed.")
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to close conversation %s", conversation_id)
        raise ServiceError("Failed to close conversation.")


@router.delete(
    "/conversations/{conversation_id}", response_model=StatusMessageResponse
)
async def delete_conversation(
    conversation_id: UUID,
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> StatusMessageResponse:
    """Delete a conversation together with all of its messages."""
    try:
        service = ManageConversationService(db)
        await service.delete_conversation(user, conversation_id)
        return StatusMessageResponse(message="Conversation deleted.")
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to delete conversation %s", conversation_id)
        raise ServiceError("Failed to delete conversation.")


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user: UserResponse = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UnreadCountResponse:
    """Count unread messages across the caller's active conversations."""
    try:
        service = ListConversationsService(db)
        count = await service.count_unread(user)
        return UnreadCountResponse(unread_count=count)
    except ServiceError:
        raise
    except Exception:
        logger.exception("Failed to count unread messages for %s", user.id)
        raise ServiceError("Failed to count unread messages.")
