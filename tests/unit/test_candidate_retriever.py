"""Unit tests for author candidate retrieval."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from suggestor.config.schema import SolrParamsConfig, SuggestionConfig
from suggestor.models.search import SolrRequestParams
from suggestor.services.candidate_retriever import CandidateRetriever
from suggestor.utils.errors import BackendError
from tests.conftest import solr_response


class TestRetrieve:
    @pytest.mark.asyncio
    async def test_maps_docs_in_order(
        self, mock_backend: MagicMock, author_config: SuggestionConfig
    ) -> None:
        mock_backend.search.return_value = solr_response(
            [("Twain, Mark", 20.0), ("Clemens, Samuel", 5.0)]
        )
        retriever = CandidateRetriever(mock_backend, author_config)

        candidates = await retriever.retrieve("twain")

        assert [(c.phrase, c.score) for c in candidates] == [
            ("Twain, Mark", 20.0),
            ("Clemens, Samuel", 5.0),
        ]

    @pytest.mark.asyncio
    async def test_request_carries_configured_params(
        self, mock_backend: MagicMock, author_config: SuggestionConfig
    ) -> None:
        await CandidateRetriever(mock_backend, author_config).retrieve("twain")

        request: SolrRequestParams = mock_backend.search.await_args.args[0]
        assert request.q == "twain"
        assert request.start == 0
        assert request.rows == 100
        assert request.def_type == "edismax"
        assert request.fl == ["phrase", "type", "count", "score"]
        assert request.fq == ["type:author"]
        assert request.qf == "phrase^10 phrase_text"
        assert request.sort == "score desc"

    @pytest.mark.asyncio
    async def test_params_override(
        self, mock_backend: MagicMock, author_config: SuggestionConfig
    ) -> None:
        override = SolrParamsConfig(deftype="lucene", qf="phrase")
        await CandidateRetriever(mock_backend, author_config).retrieve("twain", params=override)

        request: SolrRequestParams = mock_backend.search.await_args.args[0]
        assert request.def_type == "lucene"
        assert request.fq == []

    @pytest.mark.asyncio
    async def test_zero_docs_is_empty(
        self, mock_backend: MagicMock, author_config: SuggestionConfig
    ) -> None:
        assert await CandidateRetriever(mock_backend, author_config).retrieve("zzz") == []

    @pytest.mark.asyncio
    async def test_backend_error_propagates(
        self, mock_backend: MagicMock, author_config: SuggestionConfig
    ) -> None:
        mock_backend.search.side_effect = BackendError("400 - bad", provider_name="solr")
        with pytest.raises(BackendError):
            await CandidateRetriever(mock_backend, author_config).retrieve("twain")


class TestCount:
    @pytest.mark.asyncio
    async def test_count_only_request(
        self, mock_backend: MagicMock, author_config: SuggestionConfig
    ) -> None:
        mock_backend.search.return_value = solr_response([], num_found=17)

        total = await CandidateRetriever(mock_backend, author_config).count("Twain, Mark")

        assert total == 17
        request: SolrRequestParams = mock_backend.search.await_args.args[0]
        assert request.q == "Twain, Mark"
        assert request.rows == 0
        assert request.fl == []
        assert request.fq == []
        assert request.qf == ""
