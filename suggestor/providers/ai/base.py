"""Shared base for AI providers that reduce to a single text completion.

Every concrete provider sends the same prompt and parses the same JSON
reply; only the transport differs.  Subclasses implement
:meth:`CompletionAIProvider._complete` and inherit ``get_suggestions``.
"""

from __future__ import annotations

from abc import abstractmethod

from suggestor.interfaces.ai_provider import IAIProvider
from suggestor.models.suggestion import AIProposal
from suggestor.services.ai_refiner import (
    SYSTEM_PROMPT,
    build_suggestion_prompt,
    parse_ai_reply,
)


class CompletionAIProvider(IAIProvider):
    """IAIProvider built on top of one system+user completion call."""

    async def get_suggestions(
        self,
        query: str,
        custom_prompt: str,
        existing: list[str],
    ) -> AIProposal:
        prompt = build_suggestion_prompt(query, existing, custom_prompt)
        text = await self._complete(SYSTEM_PROMPT, prompt)
        return parse_ai_reply(text, self.get_provider_name())

    @abstractmethod
    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Return the model's raw text reply.

        Raises:
            ProviderError: On any transport, status, or credential failure.
        """
