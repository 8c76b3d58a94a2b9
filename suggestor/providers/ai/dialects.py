"""Bedrock request/response dialects, selected from the model identifier.

Bedrock's ``invoke`` endpoint takes a model-specific JSON body and returns
a model-specific JSON reply.  Two shapes are supported:

- :class:`ChatTurnsDialect` -- chat-turn models (Gemma).  The system prompt
  is folded into a single user turn.
- :class:`SystemMessagesDialect` -- Anthropic Claude on Bedrock, with a
  separate ``system`` field and ``anthropic_version``.

:func:`classify_model` is the only place that decides which applies, and
it never touches the network.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

MAX_TOKENS = 2000
ANTHROPIC_BEDROCK_VERSION = "bedrock-2023-05-31"


class BedrockDialect(ABC):
    """One model family's request body and reply shape."""

    name: str = ""

    @abstractmethod
    def build_body(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        """Return the JSON request body for one completion."""

    @abstractmethod
    def extract_text(self, payload: Any) -> str:
        """Return the reply text, or ``""`` when the shape is unexpected."""


class ChatTurnsDialect(BedrockDialect):
    name = "chat_turns"

    def build_body(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        return {
            "messages": [
                {"role": "user", "content": f"{system_prompt}\n\n{user_prompt}"},
            ],
            "maxTokens": MAX_TOKENS,
            "temperature": 0.5,
            "topP": 0.9,
        }

    def extract_text(self, payload: Any) -> str:
        if not isinstance(payload, dict):
            return ""

        # OpenAI style: choices[0].message.content
        choices = payload.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")
            if isinstance(message, dict) and isinstance(message.get("content"), str):
                if message["content"]:
                    return message["content"]

        # Converse style: output.message.content[0].text
        output = payload.get("output")
        if isinstance(output, dict):
            message = output.get("message")
            if isinstance(message, dict):
                blocks = message.get("content")
                if isinstance(blocks, list) and blocks and isinstance(blocks[0], dict):
                    text = blocks[0].get("text")
                    if isinstance(text, str):
                        return text
        return ""


class SystemMessagesDialect(BedrockDialect):
    name = "system_messages"

    def build_body(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        return {
            "anthropic_version": ANTHROPIC_BEDROCK_VERSION,
            "max_tokens": MAX_TOKENS,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
        }

    def extract_text(self, payload: Any) -> str:
        if not isinstance(payload, dict):
            return ""
        content = payload.get("content")
        if isinstance(content, list) and content and isinstance(content[0], dict):
            text = content[0].get("text")
            if isinstance(text, str):
                return text
        return ""


def classify_model(model_id: str) -> BedrockDialect:
    """Pick the dialect for a Bedrock model id (case-insensitive substring match)."""
    if "gemma" in model_id.lower():
        return ChatTurnsDialect()
    return SystemMessagesDialect()
