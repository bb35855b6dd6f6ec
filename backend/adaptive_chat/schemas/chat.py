"""Pydantic schemas for chat operations."""

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field

from adaptive_chat.db.models import ChatRole, PersonaMode
from adaptive_chat.schemas.base import BaseSchema, IDMixin, TimestampMixin


# Request schemas
class ChatUpdateRequest(BaseSchema):
    """Rename and/or pin a chat. Omitted fields are unchanged."""

    title: str | None = Field(None, min_length=1, max_length=255)
    is_pinned: bool | None = None


class ChatListFilters(BaseSchema):
    """Optional filters for listing chats, combined with AND."""

    mode: PersonaMode | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    keyword: str | None = None


# Response schemas
class AttachmentMeta(BaseSchema):
    """What is kept of an uploaded file: never its content."""

    filename: str
    mimetype: str
    size: int


class ChatMessageResponse(IDMixin):
    """Chat message response."""

    # Message bodies are returned exactly as stored (leading indentation, trailing newlines)
    model_config = ConfigDict(str_strip_whitespace=False)

    role: ChatRole
    content: str
    attachments: list[AttachmentMeta] = Field(default_factory=list)
    created_at: datetime


class ChatSummary(IDMixin, TimestampMixin):
    """Chat metadata used in list results (no message bodies)."""

    mode: PersonaMode
    title: str
    is_pinned: bool
    message_count: int


class ChatWithMessages(ChatSummary):
    """Chat with message history."""

    messages: list[ChatMessageResponse]


class TurnResponse(BaseSchema):
    """The two messages produced by one turn of an existing chat."""

    chat_id: UUID
    messages: list[ChatMessageResponse]


class DeleteAllResponse(BaseSchema):
    message: str
    deleted: int
