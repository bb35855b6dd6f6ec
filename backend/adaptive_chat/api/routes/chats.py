"""
Chat Routes

Endpoints:
- POST /chats - Start a chat from its first message (multipart, optional file)
- GET /chats - List chat summaries with optional filters
- DELETE /chats - Delete every chat of the current user
- GET /chats/{chat_id} - Full chat with messages
- POST /chats/{chat_id}/message - Send one more message (multipart, optional file)
- PUT /chats/{chat_id} - Rename / pin
- DELETE /chats/{chat_id} - Delete one chat

All queries are scoped to the authenticated user; another user's chat
answers 404 exactly like a missing one.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from adaptive_chat.api.deps import CurrentUser, DbSession, Gateway
from adaptive_chat.config import get_settings
from adaptive_chat.db.models import PersonaMode
from adaptive_chat.schemas.base import MessageResponse
from adaptive_chat.schemas.chat import (
    ChatListFilters,
    ChatMessageResponse,
    ChatSummary,
    ChatUpdateRequest,
    ChatWithMessages,
    DeleteAllResponse,
    TurnResponse,
)
from adaptive_chat.services import conversations, orchestrator
from adaptive_chat.services.attachments import read_upload

router = APIRouter(prefix="/chats", tags=["chats"])
settings = get_settings()


@router.post("", response_model=ChatWithMessages, status_code=status.HTTP_201_CREATED)
async def create_chat(
    current_user: CurrentUser,
    db: DbSession,
    gateway: Gateway,
    mode: Annotated[str | None, Form()] = None,
    message: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File()] = None,
) -> ChatWithMessages:
    """
    Start a chat.

    The assistant reply and a generated title are included in the response.
    A failing model provider still yields a chat whose assistant message
    explains the failure.
    """
    attachment = await read_upload(file, settings.max_upload_size_bytes)
    chat = await orchestrator.start_chat(
        db, gateway, current_user.id, mode or "", message, attachment
    )
    return ChatWithMessages.model_validate(chat)


@router.get("", response_model=list[ChatSummary])
async def list_chats(
    current_user: CurrentUser,
    db: DbSession,
    mode: PersonaMode | None = None,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
    keyword: str | None = None,
) -> list[ChatSummary]:
    """List chats, pinned first then most recently updated."""
    filters = ChatListFilters(
        mode=mode,
        start_date=start_date,
        end_date=end_date,
        keyword=keyword,
    )
    chats = await conversations.list_chats(db, current_user.id, filters)
    return [ChatSummary.model_validate(c) for c in chats]


@router.delete("", response_model=DeleteAllResponse)
async def delete_all_chats(current_user: CurrentUser, db: DbSession) -> DeleteAllResponse:
    deleted = await conversations.delete_all_chats(db, current_user.id)
    return DeleteAllResponse(message="All chats deleted successfully", deleted=deleted)


@router.get("/{chat_id}", response_model=ChatWithMessages)
async def get_chat(
    chat_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> ChatWithMessages:
    chat = await conversations.get_chat(db, current_user.id, chat_id)
    return ChatWithMessages.model_validate(chat)


@router.post("/{chat_id}/message", response_model=TurnResponse)
async def send_message(
    chat_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
    gateway: Gateway,
    message: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File()] = None,
) -> TurnResponse:
    """Add one turn. Only the new user and assistant messages are returned."""
    attachment = await read_upload(file, settings.max_upload_size_bytes)
    chat, new_messages = await orchestrator.continue_chat(
        db, gateway, current_user.id, chat_id, message, attachment
    )
    return TurnResponse(
        chat_id=chat.id,
        messages=[ChatMessageResponse.model_validate(m) for m in new_messages],
    )


@router.put("/{chat_id}", response_model=ChatWithMessages)
async def update_chat(
    chat_id: UUID,
    data: ChatUpdateRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> ChatWithMessages:
    """Rename and/or pin a chat."""
    chat = await conversations.update_chat(db, current_user.id, chat_id, data)
    return ChatWithMessages.model_validate(chat)


@router.delete("/{chat_id}", response_model=MessageResponse)
async def delete_chat(
    chat_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    await conversations.delete_chat(db, current_user.id, chat_id)
    return MessageResponse(message="Chat deleted successfully")
