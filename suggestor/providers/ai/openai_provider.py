"""OpenAI-compatible AI provider adapter.

Wraps the ``openai`` async client.  When ``ai.url`` is configured the
client points at that base URL instead, so any OpenAI-compatible host
(Ollama, vLLM, TogetherAI ...) can serve the suggestion prompt.
"""

from __future__ import annotations

import openai
import structlog

from suggestor.config.schema import AISection
from suggestor.config.settings import Settings
from suggestor.providers.ai.base import CompletionAIProvider
from suggestor.utils.errors import ProviderError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIAIProvider(CompletionAIProvider):
    """AI provider backed by an OpenAI-compatible chat completions API."""

    def __init__(self, config: AISection, settings: Settings) -> None:
        # ai.key wins over the process-level OPENAI key.
        self._api_key = config.key or settings.openai_api_key
        self._base_url = config.url
        self._model = config.model or DEFAULT_MODEL
        self._read_timeout = config.read_timeout

        client_kwargs: dict = {
            # Local OpenAI-compatible hosts ignore the key, but the SDK requires one.
            "api_key": self._api_key or ("unused" if self._base_url else ""),
            "timeout": openai.Timeout(config.read_timeout, connect=config.conn_timeout),
        }
        if self._base_url:
            client_kwargs["base_url"] = self._base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._provider_label = "openai-compatible" if self._base_url else "openai"

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=0.5,
                max_tokens=2000,
            )
        except openai.APITimeoutError as exc:
            raise ProviderError(
                message=f"{self._provider_label} timed out after {self._read_timeout:g}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise ProviderError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        logger.info(
            "openai_completion",
            model=self._model,
            provider=self._provider_label,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    def get_provider_name(self) -> str:
        return self._provider_label

    def get_model(self) -> str:
        return self._model

    def is_available(self) -> bool:
        """Return ``True`` if an API key or a compatible base URL is configured."""
        return bool(self._api_key or self._base_url)
