"""AI provider adapters.

Three concrete implementations of IAIProvider (suggestor/interfaces/ai_provider.py):
    - BedrockAIProvider   -- Amazon Bedrock invoke API, SigV4-signed httpx calls
    - OpenAIAIProvider    -- OpenAI or any OpenAI-compatible host
    - AnthropicAIProvider -- Anthropic Claude Messages API

All three share prompt construction and reply parsing through
CompletionAIProvider.  At startup, main.py builds the one named by
``ai.provider`` in configuration, or none at all.
"""

from suggestor.providers.ai.anthropic_provider import AnthropicAIProvider
from suggestor.providers.ai.base import CompletionAIProvider
from suggestor.providers.ai.bedrock_provider import BedrockAIProvider
from suggestor.providers.ai.dialects import (
    BedrockDialect,
    ChatTurnsDialect,
    SystemMessagesDialect,
    classify_model,
)
from suggestor.providers.ai.openai_provider import OpenAIAIProvider

__all__ = [
    "AnthropicAIProvider",
    "BedrockAIProvider",
    "BedrockDialect",
    "ChatTurnsDialect",
    "CompletionAIProvider",
    "OpenAIAIProvider",
    "SystemMessagesDialect",
    "classify_model",
]
