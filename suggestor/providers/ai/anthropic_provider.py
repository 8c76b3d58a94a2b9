"""Anthropic AI provider adapter.

Wraps the ``anthropic`` async client.  The system prompt is a top-level
parameter of the Messages API rather than a message, and the reply is a
list of content blocks of which only the text blocks are used.
"""

from __future__ import annotations

import anthropic
import structlog

from suggestor.config.schema import AISection
from suggestor.config.settings import Settings
from suggestor.providers.ai.base import CompletionAIProvider
from suggestor.utils.errors import ProviderError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicAIProvider(CompletionAIProvider):
    """AI provider backed by the Anthropic Claude API."""

    def __init__(self, config: AISection, settings: Settings) -> None:
        self._api_key = config.key or settings.anthropic_api_key
        self._model = config.model or DEFAULT_MODEL
        client_kwargs: dict = {
            "api_key": self._api_key,
            "timeout": anthropic.Timeout(config.read_timeout, connect=config.conn_timeout),
        }
        if config.url:
            client_kwargs["base_url"] = config.url
        self._client = anthropic.AsyncAnthropic(**client_kwargs)

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=2000,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as exc:
            raise ProviderError(
                message=f"Anthropic API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        text_blocks = [block.text for block in response.content if block.type == "text"]
        logger.info(
            "anthropic_completion",
            model=self._model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        return "\n".join(text_blocks)

    def get_provider_name(self) -> str:
        return "anthropic"

    def get_model(self) -> str:
        return self._model

    def is_available(self) -> bool:
        """Return ``True`` if an Anthropic API key is configured."""
        return bool(self._api_key)
