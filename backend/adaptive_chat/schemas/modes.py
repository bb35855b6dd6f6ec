"""Persona (mode) schemas."""

from pydantic import Field

from adaptive_chat.db.models import PersonaMode
from adaptive_chat.schemas.base import BaseSchema


class ThemeColors(BaseSchema):
    """Color palette of a theme: nine colors plus a three-stop gradient."""

    primary: str
    secondary: str
    accent: str
    background: str
    background_gradient: list[str] = Field(..., min_length=3, max_length=3)
    text: str
    text_secondary: str
    user_bubble: str
    ai_bubble: str
    border: str


class Theme(BaseSchema):
    name: str
    display_name: str
    colors: ThemeColors


class ModeDefinition(BaseSchema):
    """A persona as stored in the registry."""

    name: PersonaMode
    display_name: str
    icon: str
    description: str
    system_prompt: str
    greeting: str
    themes: list[Theme]
