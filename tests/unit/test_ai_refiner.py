"""Unit tests for AI prompt construction, reply parsing and the AIRefiner."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from suggestor.models.search import Candidate
from suggestor.models.suggestion import AIProposal, ConfidenceSet
from suggestor.services.ai_refiner import (
    AIRefiner,
    build_suggestion_prompt,
    format_results_block,
    parse_ai_reply,
)
from suggestor.utils.errors import ProviderError

# ======================================================================
# Prompt construction
# ======================================================================


class TestFormatResultsBlock:
    def test_numbered_list(self) -> None:
        block = format_results_block(["Twain, Mark", "Clemens, Samuel"])
        assert block == (
            "Here are some author suggestions retrieved from our catalog:\n"
            "1. Twain, Mark\n"
            "2. Clemens, Samuel\n"
        )

    def test_none_found(self) -> None:
        assert format_results_block([]) == "No author suggestions were found in our catalog.\n"


class TestBuildSuggestionPrompt:
    def test_default_prompt_with_existing(self) -> None:
        prompt = build_suggestion_prompt("civil war", ["Foote, Shelby"])
        assert '"civil war"' in prompt
        assert "1. Foote, Shelby" in prompt
        assert "keep good suggestions" in prompt
        assert "OBVIOUS spelling error" in prompt
        assert "6-10 relevant AUTHORS" in prompt
        assert prompt.endswith('{"didYouMean": "", "suggestions": ["..."]}')

    def test_default_prompt_without_existing(self) -> None:
        prompt = build_suggestion_prompt("civl war", [])
        assert "No author suggestions were found in our catalog." in prompt
        assert "keep good suggestions" not in prompt

    def test_custom_prompt_substitution(self) -> None:
        prompt = build_suggestion_prompt(
            "twain",
            ["Twain, Mark"],
            custom_prompt="Q=$QUERY\n$RESULTS",
        )
        assert prompt == (
            "Q=twain\n"
            "Here are some author suggestions retrieved from our catalog:\n"
            "1. Twain, Mark\n"
        )

    def test_custom_prompt_first_occurrence_only(self) -> None:
        prompt = build_suggestion_prompt("x", [], custom_prompt="$QUERY $QUERY $RESULTS $RESULTS")
        assert prompt.startswith("x $QUERY No author suggestions")
        assert prompt.endswith(" $RESULTS")

    def test_substituted_text_not_rescanned(self) -> None:
        prompt = build_suggestion_prompt("$RESULTS", [], custom_prompt="[$QUERY]")
        assert prompt == "[$RESULTS]"

    def test_custom_prompt_without_tokens_unchanged(self) -> None:
        assert build_suggestion_prompt("x", [], custom_prompt="static") == "static"


# ======================================================================
# Reply parsing
# ======================================================================


class TestParseAIReply:
    def test_plain_json(self) -> None:
        proposal = parse_ai_reply(
            '{"didYouMean": "civil war", "suggestions": ["Foote, Shelby"]}', "test"
        )
        assert proposal.did_you_mean == "civil war"
        assert proposal.suggestions == ["Foote, Shelby"]

    def test_code_fenced_json(self) -> None:
        text = '```json\n{"didYouMean": "", "suggestions": ["A", "B"]}\n```'
        assert parse_ai_reply(text, "test").suggestions == ["A", "B"]

    def test_json_with_surrounding_prose(self) -> None:
        text = 'Sure! Here you go: {"suggestions": ["A"]} Hope that helps.'
        proposal = parse_ai_reply(text, "test")
        assert proposal.suggestions == ["A"]
        assert proposal.did_you_mean == ""

    def test_blank_entries_dropped(self) -> None:
        proposal = parse_ai_reply('{"suggestions": ["  A  ", "", "   "], "didYouMean": null}', "t")
        assert proposal.suggestions == ["A"]
        assert proposal.did_you_mean == ""

    @pytest.mark.parametrize(
        ("text", "fragment"),
        [
            ("", "empty content"),
            ("```\n```", "empty content"),
            ("no braces here", "no JSON object"),
            ("{not json}", "failed to parse"),
            ('{"suggestions": "not a list"}', "unexpected structure"),
        ],
    )
    def test_errors(self, text: str, fragment: str) -> None:
        with pytest.raises(ProviderError) as exc_info:
            parse_ai_reply(text, "test")
        assert fragment in exc_info.value.message
        assert exc_info.value.provider_name == "test"


# ======================================================================
# AIRefiner
# ======================================================================


class TestAIRefiner:
    @pytest.mark.asyncio
    async def test_refine_passes_raw_query_and_baseline(self, mock_ai_provider: MagicMock) -> None:
        mock_ai_provider.get_suggestions.return_value = AIProposal(suggestions=["Twain, Mark"])
        baseline = ConfidenceSet(candidates=[Candidate(phrase="Clemens, Samuel", score=9.0)])

        refiner = AIRefiner(mock_ai_provider)
        proposal = await refiner.refine("twain", "keyword: {twain}", baseline)

        assert proposal.suggestions == ["Twain, Mark"]
        mock_ai_provider.get_suggestions.assert_awaited_once_with(
            "keyword: {twain}", "", ["Clemens, Samuel"]
        )

    @pytest.mark.asyncio
    async def test_refine_forwards_prompt_override(self, mock_ai_provider: MagicMock) -> None:
        refiner = AIRefiner(mock_ai_provider)
        await refiner.refine("", "twain", ConfidenceSet(), prompt_override="$QUERY")
        mock_ai_provider.get_suggestions.assert_awaited_once_with("twain", "$QUERY", [])

    @pytest.mark.asyncio
    async def test_refine_propagates_provider_error(self, mock_ai_provider: MagicMock) -> None:
        mock_ai_provider.get_suggestions.side_effect = ProviderError("boom", provider_name="mock")
        refiner = AIRefiner(mock_ai_provider)
        with pytest.raises(ProviderError):
            await refiner.refine("twain", "twain", ConfidenceSet())

    def test_provider_property(self, mock_ai_provider: MagicMock) -> None:
        assert AIRefiner(mock_ai_provider).provider is mock_ai_provider
