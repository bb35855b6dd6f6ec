"""
SQLAlchemy 2.0 Models for Adaptive Chat.

Uses modern declarative syntax with Mapped[] type annotations.
Column types are portable (PostgreSQL in deployment, SQLite for local runs
and tests); JSON columns become JSONB on PostgreSQL.
"""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from adaptive_chat.db.base import Base, JSONType


# =============================================================================
# ENUMS
# =============================================================================


class PersonaMode(str, PyEnum):
    """Assistant persona a chat runs under."""

    DEVELOPER = "developer"
    LEARNER = "learner"
    HR = "hr"


class ChatRole(str, PyEnum):
    """Role in chat conversation."""

    USER = "user"
    ASSISTANT = "assistant"


MODE_NAMES = tuple(m.value for m in PersonaMode)


def _mode_check(column: str) -> str:
    allowed = ", ".join(f"'{m}'" for m in MODE_NAMES)
    return f"{column} IN ({allowed})"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_preferences() -> dict[str, Any]:
    """Preferences every new account starts with."""
    return {
        "default_mode": PersonaMode.DEVELOPER.value,
        "themes": {
            PersonaMode.DEVELOPER.value: "neural-blue",
            PersonaMode.LEARNER.value: "aurora-teal",
            PersonaMode.HR.value: "solar-amber",
        },
        "dark_mode": True,
        "animations_enabled": True,
        "xp_visible": True,
    }


def default_integrations() -> dict[str, Any]:
    return {
        "github": {"connected": False, "username": None},
        "slack": {"connected": False, "workspace_id": None},
    }


# =============================================================================
# MODELS
# =============================================================================


class User(Base):
    """
    Registered account.

    Preferences and integration flags are small nested documents stored as
    JSON; stats live in plain columns so counters can be incremented in SQL.
    """

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    profile_picture: Mapped[str] = mapped_column(Text, nullable=False, default="")

    preferences: Mapped[dict[str, Any]] = mapped_column(
        JSONType, nullable=False, default=default_preferences
    )
    integrations: Mapped[dict[str, Any]] = mapped_column(
        JSONType, nullable=False, default=default_integrations
    )

    # Stats
    total_chats: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    favorite_mode: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PersonaMode.DEVELOPER.value
    )
    learning_xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    streak_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_active: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "total_chats": self.total_chats,
            "favorite_mode": self.favorite_mode,
            "learning_xp": self.learning_xp,
            "streak_days": self.streak_days,
            "last_active": self.last_active,
        }


class Mode(Base):
    """
    Persona definition (reference data).

    Replaced wholesale from the in-code catalog by the seeding step; never
    mutated through the API.
    """

    __tablename__ = "modes"
    __table_args__ = (
        CheckConstraint(_mode_check("name"), name="valid_mode_name"),
    )

    name: Mapped[str] = mapped_column(String(20), primary_key=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    icon: Mapped[str] = mapped_column(String(16), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    system_prompt: Mapped[str] = mapped_column(Text, nullable=False)
    greeting: Mapped[str] = mapped_column(Text, nullable=False)  # contains a {name} placeholder
    themes: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Chat(Base):
    """
    Conversation owned by one user, running under one persona.

    `version` is the ORM version counter: an UPDATE based on a stale read
    matches no row and raises StaleDataError.
    """

    __tablename__ = "chats"
    __table_args__ = (
        Index("idx_chats_user_pinned_updated", "user_id", "is_pinned", "updated_at"),
        Index("idx_chats_user_created", "user_id", "created_at"),
        CheckConstraint(_mode_check("mode"), name="valid_chat_mode"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    mode: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="New Chat")
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    message_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    # Relationships
    messages: Mapped[list["ChatMessage"]] = relationship(
        "ChatMessage",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="ChatMessage.position",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}


class ChatMessage(Base):
    """
    One message inside a chat.

    Only attachment metadata is kept; file content is consumed once when
    the prompt is built.
    """

    __tablename__ = "chat_messages"
    __table_args__ = (Index("idx_chat_messages_chat_position", "chat_id", "position"),)

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    chat_id: Mapped[UUID] = mapped_column(
        ForeignKey("chats.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)  # 'user' or 'assistant'
    content: Mapped[str] = mapped_column(Text, nullable=False)
    attachments: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, nullable=False, default=list
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    # Relationships
    chat: Mapped[Optional["Chat"]] = relationship("Chat", back_populates="messages")
