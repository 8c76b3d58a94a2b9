"""AI refinement step: prompt construction and structured-reply parsing.

The module-level helpers are shared by every AI provider:

- :func:`format_results_block` renders the baseline author suggestions.
- :func:`build_suggestion_prompt` builds the instruction prompt, either the
  built-in one or a ``$QUERY``/``$RESULTS`` template from configuration.
- :func:`parse_ai_reply` turns the model's free text into an
  :class:`AIProposal`, tolerating code fences and surrounding prose.

:class:`AIRefiner` is the pipeline-facing wrapper around one provider.
"""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from suggestor.interfaces.ai_provider import IAIProvider
from suggestor.models.suggestion import AIProposal, ConfidenceSet
from suggestor.utils.errors import ProviderError
from suggestor.utils.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant that outputs JSON."

_TEMPLATE_TOKEN = re.compile(r"\$(QUERY|RESULTS)")
_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def format_results_block(existing: list[str]) -> str:
    """Render baseline suggestion values as a numbered list, or a 'none found' note."""
    if not existing:
        return "No author suggestions were found in our catalog.\n"
    lines = ["Here are some author suggestions retrieved from our catalog:"]
    lines.extend(f"{i}. {value}" for i, value in enumerate(existing, start=1))
    return "\n".join(lines) + "\n"


def build_suggestion_prompt(query: str, existing: list[str], custom_prompt: str = "") -> str:
    """Build the user prompt sent to the AI provider.

    With a ``custom_prompt`` template, the first ``$QUERY`` becomes the raw
    query and the first ``$RESULTS`` becomes :func:`format_results_block`.
    Both substitutions happen in a single pass, so text substituted in is
    never scanned for further tokens.
    """
    results_block = format_results_block(existing)

    if custom_prompt:
        replacements = {"QUERY": query, "RESULTS": results_block}

        def _substitute(match: re.Match[str]) -> str:
            token = match.group(1)
            if token in replacements:
                return replacements.pop(token)
            return match.group(0)

        return _TEMPLATE_TOKEN.sub(_substitute, custom_prompt)

    parts = [
        f'You are a helpful academic librarian assistant. The user is searching for: "{query}".\n',
    ]
    if existing:
        parts.append(results_block)
        parts.append(
            "\nAnalyze the query and these suggestions. You may keep good suggestions, "
            "refine them, or replace them if they are not relevant.\n"
        )
    else:
        parts.append("\n" + results_block)
    parts.extend(
        [
            "1. If the query contains an OBVIOUS spelling error, set 'didYouMean' to the "
            "FULL corrected query string.\n",
            "2. If the query is likely intentional, leave 'didYouMean' empty.\n",
            "3. Populate 'suggestions' with 6-10 relevant AUTHORS (people or organizations) "
            "related to the query, ordered by relevance.\n",
            "   - STRICTLY names of people (historians, writers) or organizations/agencies.\n",
            "   - Do NOT suggest book titles, general topics, historical events, or refined "
            "search queries.\n",
            "   - Example: For 'civil war', suggest 'Foote, Shelby' or 'McPherson, James', "
            "NOT 'Civil War Battles'.\n",
            '\nRespond in JSON format: {"didYouMean": "", "suggestions": ["..."]}',
        ]
    )
    return "".join(parts)


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def parse_ai_reply(text: str, provider_name: str) -> AIProposal:
    """Extract the JSON object from a model reply and validate it.

    Raises:
        ProviderError: If the text is empty, holds no ``{...}`` span, or the
            span is not a valid proposal object.
    """
    cleaned = _strip_code_fences(text or "")
    if not cleaned:
        raise ProviderError(message="empty content from AI provider", provider_name=provider_name)

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise ProviderError(
            message="no JSON object found in AI reply",
            provider_name=provider_name,
        )

    try:
        payload = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as exc:
        raise ProviderError(
            message=f"failed to parse generated text as JSON: {exc}",
            provider_name=provider_name,
        ) from exc

    if not isinstance(payload, dict):
        raise ProviderError(message="AI reply is not a JSON object", provider_name=provider_name)

    try:
        return AIProposal.model_validate(payload)
    except ValidationError as exc:
        raise ProviderError(
            message=f"AI reply has an unexpected structure: {exc}",
            provider_name=provider_name,
        ) from exc


class AIRefiner:
    """Asks an AI provider to refine a query, given the baseline author set."""

    def __init__(self, provider: IAIProvider) -> None:
        self._provider = provider

    @property
    def provider(self) -> IAIProvider:
        return self._provider

    async def refine(
        self,
        term: str,
        raw_query: str,
        baseline: ConfidenceSet,
        prompt_override: str | None = None,
    ) -> AIProposal:
        """Return the provider's proposal for ``raw_query``.

        ``term`` is the parsed keyword when parsing succeeded, otherwise
        empty; it is only used for logging.  The baseline is read-only.

        Raises:
            ProviderError: Propagated from the provider.
        """
        existing = baseline.phrases
        logger.info(
            "ai_refine_started",
            provider=self._provider.get_provider_name(),
            model=self._provider.get_model(),
            term=term,
            existing=len(existing),
        )
        proposal = await self._provider.get_suggestions(raw_query, prompt_override or "", existing)
        logger.info(
            "ai_refine_complete",
            provider=self._provider.get_provider_name(),
            suggestions=proposal.suggestions,
            did_you_mean=proposal.did_you_mean,
        )
        return proposal
