"""
Conversation store: persisted chats and their messages.

Every lookup is scoped by user_id in the WHERE clause, so a chat owned by
someone else is indistinguishable from a missing one (404 either way).
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import raiseload
from sqlalchemy.orm.exc import StaleDataError

from adaptive_chat.db.models import Chat, ChatMessage, ChatRole, User
from adaptive_chat.errors import ConflictError, NotFoundError
from adaptive_chat.schemas.chat import AttachmentMeta, ChatListFilters, ChatUpdateRequest

logger = logging.getLogger(__name__)

CONCURRENT_EDIT = "Chat was modified by another request, please retry"


def _utc(value: datetime) -> datetime:
    """Treat naive filter datetimes as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def build_message(
    role: ChatRole,
    content: str,
    attachments: list[AttachmentMeta] | None = None,
) -> ChatMessage:
    """Create an unsaved message; its position is assigned when appended to a chat."""
    return ChatMessage(
        role=role.value,
        content=content,
        attachments=[a.model_dump() for a in attachments or []],
        created_at=datetime.now(timezone.utc),
    )


def _append(chat: Chat, message: ChatMessage) -> None:
    message.position = len(chat.messages)
    chat.messages.append(message)


async def _commit_chat(db: AsyncSession) -> None:
    try:
        await db.commit()
    except StaleDataError as e:
        await db.rollback()
        logger.warning("Concurrent modification detected: %s", e)
        raise ConflictError(CONCURRENT_EDIT, status_code=409) from e


async def _refresh_favorite_mode(db: AsyncSession, user_id: UUID) -> None:
    result = await db.execute(select(Chat.mode).where(Chat.user_id == user_id))
    counts = Counter(result.scalars().all())
    if counts:
        favorite, _ = counts.most_common(1)[0]
        await db.execute(update(User).where(User.id == user_id).values(favorite_mode=favorite))


async def create_chat(
    db: AsyncSession,
    user_id: UUID,
    mode: str,
    title: str,
    user_message: ChatMessage,
    assistant_message: ChatMessage,
) -> Chat:
    """
    Persist a new chat holding its first turn.

    The chat, both messages and the user's stats change are written in one
    transaction, so a failure leaves nothing behind.
    """
    now = datetime.now(timezone.utc)
    chat = Chat(
        user_id=user_id,
        mode=mode,
        title=title,
        messages=[],
        created_at=now,
        updated_at=now,
    )
    _append(chat, user_message)
    _append(chat, assistant_message)
    chat.message_count = len(chat.messages)
    db.add(chat)
    await db.flush()

    await db.execute(
        update(User).where(User.id == user_id).values(total_chats=User.total_chats + 1)
    )
    await _refresh_favorite_mode(db, user_id)
    await db.commit()

    logger.info("Created chat %s (%s) for user %s", chat.id, mode, user_id)
    return chat


async def list_chats(db: AsyncSession, user_id: UUID, filters: ChatListFilters) -> list[Chat]:
    """
    List chat metadata for a user.

    All filters are optional and combine with AND. Results are pinned
    first, then most recently updated. Messages are never loaded.
    """
    query = (
        select(Chat)
        .where(Chat.user_id == user_id)
        .options(raiseload(Chat.messages))
    )

    if filters.mode is not None:
        query = query.where(Chat.mode == filters.mode.value)
    if filters.start_date is not None:
        query = query.where(Chat.created_at >= _utc(filters.start_date))
    if filters.end_date is not None:
        query = query.where(Chat.created_at <= _utc(filters.end_date))
    if filters.keyword:
        query = query.where(Chat.title.icontains(filters.keyword, autoescape=True))

    query = query.order_by(Chat.is_pinned.desc(), Chat.updated_at.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def get_chat(db: AsyncSession, user_id: UUID, chat_id: UUID) -> Chat:
    """Full chat with ordered messages. Raises NotFoundError if missing or not owned."""
    result = await db.execute(
        select(Chat).where(Chat.id == chat_id, Chat.user_id == user_id)
    )
    chat = result.scalar_one_or_none()
    if chat is None:
        raise NotFoundError("Chat not found")
    return chat


async def append_turn(
    db: AsyncSession,
    chat: Chat,
    user_message: ChatMessage,
    assistant_message: ChatMessage,
) -> list[ChatMessage]:
    """Append one turn to a loaded chat and persist it. Returns only the two new messages."""
    _append(chat, user_message)
    _append(chat, assistant_message)
    chat.message_count = len(chat.messages)
    chat.updated_at = datetime.now(timezone.utc)
    await _commit_chat(db)
    return [user_message, assistant_message]


async def update_chat(
    db: AsyncSession,
    user_id: UUID,
    chat_id: UUID,
    changes: ChatUpdateRequest,
) -> Chat:
    """Rename and/or pin a chat; omitted fields are unchanged."""
    chat = await get_chat(db, user_id, chat_id)

    if changes.title is not None:
        chat.title = changes.title
    if changes.is_pinned is not None:
        chat.is_pinned = changes.is_pinned

    chat.updated_at = datetime.now(timezone.utc)
    await _commit_chat(db)
    return chat


async def delete_chat(db: AsyncSession, user_id: UUID, chat_id: UUID) -> None:
    chat = await get_chat(db, user_id, chat_id)
    await db.delete(chat)
    await _commit_chat(db)
    logger.info("Deleted chat %s for user %s", chat_id, user_id)


async def delete_all_chats(db: AsyncSession, user_id: UUID) -> int:
    """
    Delete every chat the user owns, in a single transaction.

    Returns the number of chats removed. Other users' chats are untouched.
    """
    owned = select(Chat.id).where(Chat.user_id == user_id)
    count = (
        await db.execute(select(func.count()).select_from(Chat).where(Chat.user_id == user_id))
    ).scalar() or 0

    await db.execute(
        delete(ChatMessage)
        .where(ChatMessage.chat_id.in_(owned))
        .execution_options(synchronize_session=False)
    )
    await db.execute(
        delete(Chat)
        .where(Chat.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    logger.info("Deleted %d chats for user %s", count, user_id)
    return count
