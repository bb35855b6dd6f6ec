"""
Chat turn orchestration.

Ties the persona registry, prompt composer, model gateway and conversation
store together for the two entry points: starting a chat and continuing one.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from adaptive_chat.config import get_settings
from adaptive_chat.db.models import Chat, ChatMessage, ChatRole
from adaptive_chat.errors import ValidationError
from adaptive_chat.services import conversations, personas
from adaptive_chat.services.attachments import Attachment
from adaptive_chat.services.model_gateway import ModelGateway
from adaptive_chat.services.prompt_composer import compose_prompt

logger = logging.getLogger(__name__)
settings = get_settings()


def _require_text(text: str | None) -> str:
    if text is None or not text.strip():
        raise ValidationError("Message is required")
    return text


async def start_chat(
    db: AsyncSession,
    gateway: ModelGateway,
    user_id: UUID,
    mode: str,
    text: str | None,
    attachment: Attachment | None = None,
) -> Chat:
    """
    Create a chat from its first user message.

    The assistant reply and the title are computed before anything is
    written; the chat is then persisted once with both messages.
    """
    text = _require_text(text)
    persona = await personas.find_mode(db, mode)
    if persona is None:
        raise ValidationError("Invalid mode")

    user_message = conversations.build_message(
        ChatRole.USER, text, [attachment.meta()] if attachment else None
    )

    payload = compose_prompt(persona.system_prompt, [], text, attachment)
    reply = await gateway.generate(payload)
    title = await gateway.generate_title(text)

    assistant_message = conversations.build_message(ChatRole.ASSISTANT, reply)
    return await conversations.create_chat(
        db, user_id, persona.name, title, user_message, assistant_message
    )


async def continue_chat(
    db: AsyncSession,
    gateway: ModelGateway,
    user_id: UUID,
    chat_id: UUID,
    text: str | None,
    attachment: Attachment | None = None,
) -> tuple[Chat, list[ChatMessage]]:
    """
    Add one turn to an existing chat.

    The prompt uses the most recent stored messages as history; the new
    message is passed separately. Returns the chat and the two new messages.
    """
    text = _require_text(text)
    chat = await conversations.get_chat(db, user_id, chat_id)

    history = list(chat.messages[-settings.history_limit:])
    system_prompt = await personas.system_prompt_for(db, chat.mode)
    payload = compose_prompt(
        system_prompt, history, text, attachment, history_limit=settings.history_limit
    )

    user_message = conversations.build_message(
        ChatRole.USER, text, [attachment.meta()] if attachment else None
    )
    reply = await gateway.generate(payload)
    assistant_message = conversations.build_message(ChatRole.ASSISTANT, reply)

    new_messages = await conversations.append_turn(db, chat, user_message, assistant_message)
    logger.debug("Appended turn to chat %s (%d messages)", chat.id, chat.message_count)
    return chat, new_messages
