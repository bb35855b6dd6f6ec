"""
Model gateway over the Anthropic Messages API.

The gateway never raises to its callers: an unconfigured provider yields a
placeholder reply and a failing provider yields a labeled error reply, so
every turn still produces a visible, persisted assistant message.
"""

import asyncio
import logging
import re
from typing import Any

from anthropic import APIConnectionError, APIStatusError, AsyncAnthropic, RateLimitError

from adaptive_chat.config import Settings, get_settings, sanitize_error
from adaptive_chat.errors import UpstreamError
from adaptive_chat.services.prompt_composer import PromptPayload

logger = logging.getLogger(__name__)

# Transient error types that warrant retrying
_RETRYABLE_ERRORS = (APIConnectionError, RateLimitError)
_OVERLOADED_STATUS = 529

TITLE_MAX_CHARS = 50
FALLBACK_TITLE_WORDS = 5
FALLBACK_TITLE_MAX_CHARS = 40
DEFAULT_TITLE = "New Chat"

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")

NOT_CONFIGURED_TEMPLATE = """⚠️ **AI Provider Not Configured**

To enable AI responses, please:
1. Get an API key from https://console.anthropic.com/
2. Add it to the `.env` file:
   `ANTHROPIC_API_KEY=your_actual_key_here`
3. Restart the backend server

**Your message**: {message}

*This is a placeholder response. Configure the API key to get real AI responses.*"""

ERROR_TEMPLATE = """⚠️ **AI Response Error**

There was an error generating the AI response. Please check:
- Your API key is valid
- You have API quota available
- Your internet connection is working

**Your message**: {message}

*Error: {detail}*"""


def fallback_title(first_message: str) -> str:
    """First few words of the message, shortened with an ellipsis when long."""
    words = " ".join(first_message.split()[:FALLBACK_TITLE_WORDS])
    if not words:
        return DEFAULT_TITLE
    if len(words) > FALLBACK_TITLE_MAX_CHARS:
        return words[: FALLBACK_TITLE_MAX_CHARS - 3] + "..."
    return words


def clean_title(raw: str) -> str:
    title = _SURROUNDING_QUOTES.sub("", raw.strip()).strip()
    if len(title) > TITLE_MAX_CHARS:
        title = title[: TITLE_MAX_CHARS - 3] + "..."
    return title


class ModelGateway:
    """Text and vision generation with timeouts, bounded retries and graceful degradation."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: Any | None = None,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 2000,
        title_max_tokens: int = 30,
        timeout: float = 60.0,
        max_attempts: int = 3,
        retry_base_delay: float = 1.0,
    ):
        if client is None and api_key:
            # Retries are handled here, not by the SDK
            client = AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.title_max_tokens = title_max_tokens
        self.max_attempts = max(1, max_attempts)
        self.retry_base_delay = retry_base_delay

    @classmethod
    def from_settings(cls, settings: Settings) -> "ModelGateway":
        return cls(
            settings.anthropic_api_key,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            title_max_tokens=settings.llm_title_max_tokens,
            timeout=settings.llm_timeout_seconds,
            max_attempts=settings.llm_max_attempts,
            retry_base_delay=settings.llm_retry_base_delay,
        )

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def _complete(self, content: str | list[dict[str, Any]], max_tokens: int) -> str:
        """
        Call the Messages API with exponential backoff on transient errors.

        Raises:
            UpstreamError: retries exhausted or a non-retryable provider error.
        """
        for attempt in range(self.max_attempts):
            try:
                message = await self.client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    messages=[{"role": "user", "content": content}],
                )
                return "".join(
                    block.text for block in message.content if getattr(block, "type", "") == "text"
                )

            except _RETRYABLE_ERRORS as e:
                if attempt < self.max_attempts - 1:
                    delay = self.retry_base_delay * (2 ** attempt)
                    logger.warning(
                        "Anthropic API transient error (attempt %d/%d), retrying in %.1fs: %s",
                        attempt + 1, self.max_attempts, delay, str(e),
                    )
                    await asyncio.sleep(delay)
                    continue
                raise UpstreamError(str(e)) from e

            except APIStatusError as e:
                if e.status_code == _OVERLOADED_STATUS and attempt < self.max_attempts - 1:
                    delay = self.retry_base_delay * (2 ** attempt)
                    logger.warning(
                        "Anthropic API overloaded (attempt %d/%d), retrying in %.1fs",
                        attempt + 1, self.max_attempts, delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise UpstreamError(str(e)) from e

            except Exception as e:
                raise UpstreamError(str(e)) from e

        raise UpstreamError("No attempts were made")

    async def generate(self, payload: PromptPayload) -> str:
        """Reply text for a composed prompt; placeholder or labeled error text instead of raising."""
        if not self.configured:
            return NOT_CONFIGURED_TEMPLATE.format(message=payload.user_message)

        content: str | list[dict[str, Any]] = payload.text
        if payload.image is not None:
            content = [
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": payload.image.media_type,
                        "data": payload.image.data,
                    },
                },
                {"type": "text", "text": payload.text},
            ]

        try:
            return await self._complete(content, self.max_tokens)
        except UpstreamError as e:
            logger.error("Model generation failed: %s", e.message, exc_info=e.__cause__)
            detail = sanitize_error(e, generic_message="The model provider is unavailable.")
            return ERROR_TEMPLATE.format(message=payload.user_message, detail=detail)

    async def generate_title(self, first_message: str) -> str:
        """Short chat title from the first message, falling back to its first words."""
        if not self.configured:
            return fallback_title(first_message)

        prompt = (
            "Generate a short, descriptive title (max 6 words) for a chat that starts with "
            f'this message: "{first_message}". Only respond with the title, nothing else.'
        )
        try:
            title = clean_title(await self._complete(prompt, self.title_max_tokens))
        except UpstreamError as e:
            logger.warning("Title generation failed, using fallback: %s", e.message)
            return fallback_title(first_message)
        return title or fallback_title(first_message)


# Singleton instance
model_gateway = ModelGateway.from_settings(get_settings())


def get_model_gateway() -> ModelGateway:
    """FastAPI dependency; tests override it with a fake gateway."""
    return model_gateway
