"""User schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import EmailStr, Field, StringConstraints

from adaptive_chat.db.models import PersonaMode
from adaptive_chat.schemas.base import BaseSchema

# Passwords are compared byte for byte, never trimmed
Password = Annotated[str, StringConstraints(strip_whitespace=False)]


class ThemeSelection(BaseSchema):
    """Selected theme name per mode."""

    developer: str = "neural-blue"
    learner: str = "aurora-teal"
    hr: str = "solar-amber"


class Preferences(BaseSchema):
    """Per-user UI and persona preferences."""

    default_mode: PersonaMode = PersonaMode.DEVELOPER
    themes: ThemeSelection = Field(default_factory=ThemeSelection)
    dark_mode: bool = True
    animations_enabled: bool = True
    xp_visible: bool = True


class PreferencesUpdate(BaseSchema):
    """
    Partial preferences update.

    Omitted keys are left untouched. `themes` is merged per mode: sending
    `{"themes": {"learner": "sage-green"}}` changes only the learner theme.
    """

    default_mode: PersonaMode | None = None
    themes: dict[PersonaMode, str] | None = None
    dark_mode: bool | None = None
    animations_enabled: bool | None = None
    xp_visible: bool | None = None


class UserStats(BaseSchema):
    total_chats: int = 0
    favorite_mode: PersonaMode = PersonaMode.DEVELOPER
    learning_xp: int = Field(0, alias="learningXP")
    streak_days: int = 0
    last_active: datetime


class GithubIntegration(BaseSchema):
    connected: bool = False
    username: str | None = None


class SlackIntegration(BaseSchema):
    connected: bool = False
    workspace_id: str | None = None


class Integrations(BaseSchema):
    github: GithubIntegration = Field(default_factory=GithubIntegration)
    slack: SlackIntegration = Field(default_factory=SlackIntegration)


class UserCreate(BaseSchema):
    """
    Registration payload.

    Fields are optional here so that a missing field produces the service's
    "All fields are required" error instead of a schema error.
    """

    name: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    password: Password | None = None


class UserSummary(BaseSchema):
    """Minimal projection returned on registration."""

    id: UUID
    name: str
    email: str


class UserRead(BaseSchema):
    """Public user projection (never includes the password hash)."""

    id: UUID
    name: str
    email: str
    profile_picture: str = ""
    preferences: Preferences
    stats: UserStats
    integrations: Integrations
    created_at: datetime


class UserUpdate(BaseSchema):
    """Schema for updating user profile."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    profile_picture: str | None = None


class RegisterResponse(BaseSchema):
    message: str
    user: UserSummary


class ProfileUpdateResponse(BaseSchema):
    message: str
    user: UserRead


class PreferencesUpdateResponse(BaseSchema):
    message: str
    preferences: Preferences
