"""Abstract base class for generative-AI suggestion providers.

Defines the contract for any model-hosting backend asked to refine a query
into author suggestions.  Implementations may wrap Amazon Bedrock, OpenAI
(or an OpenAI-compatible host), or Anthropic.  Call-sites only ever see
this interface, so the AI step can be swapped or removed entirely.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from suggestor.models.suggestion import AIProposal


# Concrete implementations: BedrockAIProvider, OpenAIAIProvider, AnthropicAIProvider
# Located in: suggestor/providers/ai/
class IAIProvider(ABC):
    """Contract for AI providers used by the refinement step.

    A provider receives the caller's raw query plus the baseline author
    suggestions and returns a structured :class:`AIProposal`.
    """

    @abstractmethod
    async def get_suggestions(
        self,
        query: str,
        custom_prompt: str,
        existing: list[str],
    ) -> AIProposal:
        """Ask the model for an optional corrected query and author terms.

        Parameters
        ----------
        query:
            The caller's literal query text.
        custom_prompt:
            A prompt template containing ``$QUERY`` and ``$RESULTS``, or the
            empty string to use the built-in prompt.
        existing:
            Baseline suggestion values, in order.  Read-only context.

        Returns
        -------
        AIProposal
            The parsed reply.  Terms are unverified.

        Raises
        ------
        suggestor.utils.errors.ProviderError
            If the call fails, returns an error status, or the reply cannot
            be parsed into the expected structure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"bedrock"`` or ``"openai"``."""

    @abstractmethod
    def get_model(self) -> str:
        """Return the configured model identifier."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured well enough to call.

        Implementations should check for credentials without making an
        inference call.
        """
