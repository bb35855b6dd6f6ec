"""
Prompt composition for one chat turn.

Pure functions: no I/O, no settings. The system prompt and the new user
message are never truncated; only history is capped.
"""

import base64
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from adaptive_chat.services.attachments import Attachment

HISTORY_LIMIT = 10


class HistoryEntry(Protocol):
    role: str
    content: str


@dataclass(frozen=True)
class ImagePart:
    """Image sent next to the prompt text rather than inside it."""

    media_type: str
    data: str  # base64


@dataclass(frozen=True)
class PromptPayload:
    """Everything the model gateway needs for one request."""

    text: str
    user_message: str
    image: ImagePart | None = None

    @property
    def is_image(self) -> bool:
        return self.image is not None


def _speaker(role: str) -> str:
    return "User" if role == "user" else "Assistant"


def format_history(history: Sequence[HistoryEntry], limit: int = HISTORY_LIMIT) -> str:
    """Render the most recent `limit` entries as `Role: content` lines, oldest first."""
    recent = list(history)[-limit:] if limit > 0 else []
    if not recent:
        return ""
    lines = [f"{_speaker(entry.role)}: {entry.content}" for entry in recent]
    return "Conversation history:\n" + "\n".join(lines) + "\n"


def format_attachment(attachment: Attachment) -> str:
    return (
        "**File Information:**\n"
        f"- File Name: {attachment.filename}\n"
        f"- File Type: {attachment.mimetype}\n"
        f"- File Size: {attachment.size} bytes\n\n"
        f"**File Content:**\n{attachment.text}\n"
    )


def compose_prompt(
    system_prompt: str,
    history: Sequence[HistoryEntry],
    user_message: str,
    attachment: Attachment | None = None,
    *,
    history_limit: int = HISTORY_LIMIT,
) -> PromptPayload:
    """
    Build the request for one turn.

    Layout: system prompt, conversation history, optional textual
    attachment block, then the new user message. Image attachments are
    returned as a separate ImagePart.
    """
    sections = [system_prompt]

    rendered_history = format_history(history, history_limit)
    if rendered_history:
        sections.append(rendered_history)

    image = None
    if attachment is not None:
        if attachment.is_image:
            image = ImagePart(
                media_type=attachment.mimetype,
                data=base64.b64encode(attachment.data).decode("ascii"),
            )
        else:
            sections.append(format_attachment(attachment))

    sections.append(f"User: {user_message}\nAssistant:")

    return PromptPayload(
        text="\n\n".join(sections),
        user_message=user_message,
        image=image,
    )
