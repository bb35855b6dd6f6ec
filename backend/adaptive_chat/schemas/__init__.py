"""Pydantic schemas for API request/response validation."""

from adaptive_chat.schemas.base import MessageResponse
from adaptive_chat.schemas.user import (
    Preferences,
    PreferencesUpdate,
    PreferencesUpdateResponse,
    ProfileUpdateResponse,
    RegisterResponse,
    UserCreate,
    UserRead,
    UserStats,
    UserSummary,
    UserUpdate,
)
from adaptive_chat.schemas.auth import LoginRequest, LoginResponse
from adaptive_chat.schemas.modes import ModeDefinition, Theme, ThemeColors
from adaptive_chat.schemas.chat import (
    AttachmentMeta,
    ChatListFilters,
    ChatMessageResponse,
    ChatSummary,
    ChatUpdateRequest,
    ChatWithMessages,
    DeleteAllResponse,
    TurnResponse,
)

__all__ = [
    "MessageResponse",
    # User
    "Preferences",
    "PreferencesUpdate",
    "PreferencesUpdateResponse",
    "ProfileUpdateResponse",
    "RegisterResponse",
    "UserCreate",
    "UserRead",
    "UserStats",
    "UserSummary",
    "UserUpdate",
    # Auth
    "LoginRequest",
    "LoginResponse",
    # Modes
    "ModeDefinition",
    "Theme",
    "ThemeColors",
    # Chat
    "AttachmentMeta",
    "ChatListFilters",
    "ChatMessageResponse",
    "ChatSummary",
    "ChatUpdateRequest",
    "ChatWithMessages",
    "DeleteAllResponse",
    "TurnResponse",
]
