"""API routes package."""

from adaptive_chat.api.routes import chats, modes, users

__all__ = [
    "chats",
    "modes",
    "users",
]
