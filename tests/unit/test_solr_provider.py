"""Unit tests for the Solr search backend provider (httpx MockTransport)."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from suggestor.config.schema import SolrSection
from suggestor.models.search import SolrRequestParams
from suggestor.providers.search.solr_provider import SolrSearchProvider
from suggestor.utils.errors import BackendError, BackendUnavailableError
from tests.conftest import json_response, solr_select_payload

Handler = Callable[[httpx.Request], httpx.Response]


def _provider(config: SolrSection, handler: Handler) -> SolrSearchProvider:
    transport = httpx.MockTransport(handler)
    return SolrSearchProvider(
        config=config,
        service_client=httpx.AsyncClient(transport=transport),
        healthcheck_client=httpx.AsyncClient(transport=transport),
    )


def _params(**overrides) -> SolrRequestParams:
    defaults = {
        "q": "twain",
        "rows": 100,
        "def_type": "edismax",
        "fl": ["phrase", "score"],
        "fq": ["type:author"],
        "qf": "phrase^10",
        "sort": "score desc",
    }
    defaults.update(overrides)
    return SolrRequestParams(**defaults)


# ======================================================================
# search
# ======================================================================


class TestSearch:
    @pytest.mark.asyncio
    async def test_success_decodes_documents(self, solr_config: SolrSection) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response(solr_select_payload([("Twain, Mark", 12.5)], num_found=42))

        provider = _provider(solr_config, handler)
        result = await provider.search(_params())

        assert result.response.num_found == 42
        assert result.response.docs[0].phrase == "Twain, Mark"
        assert result.response.docs[0].score == 12.5

        request = seen[0]
        assert request.method == "GET"
        assert str(request.url).startswith("http://solr.test:8080/solr/suggestions/select?")
        params = request.url.params
        assert params["q"] == "twain"
        assert params["rows"] == "100"
        assert params["defType"] == "edismax"
        assert params.get_list("fl") == ["phrase", "score"]
        assert params.get_list("fq") == ["type:author"]
        assert params["sort"] == "score desc"
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_empty_optional_params_omitted(self, solr_config: SolrSection) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response(solr_select_payload([], num_found=7))

        provider = _provider(solr_config, handler)
        result = await provider.search(SolrRequestParams(q="twain", rows=0))

        assert result.response.num_found == 7
        params = seen[0].url.params
        assert "fl" not in params
        assert "fq" not in params
        assert "qf" not in params

    @pytest.mark.asyncio
    async def test_solr_reported_error(self, solr_config: SolrSection) -> None:
        payload = solr_select_payload([], status=400)
        payload["error"] = {"msg": "undefined field foo", "code": 400}

        provider = _provider(solr_config, lambda request: json_response(payload, 400))
        with pytest.raises(BackendError) as exc_info:
            await provider.search(_params())

        assert exc_info.value.message == "400 - undefined field foo"
        assert exc_info.value.code == 400
        assert exc_info.value.provider_name == "solr"

    @pytest.mark.asyncio
    async def test_undecodable_body(self, solr_config: SolrSection) -> None:
        provider = _provider(solr_config, lambda request: httpx.Response(502, text="<html>"))
        with pytest.raises(BackendError) as exc_info:
            await provider.search(_params())
        assert exc_info.value.message == "failed to decode Solr response"

    @pytest.mark.asyncio
    async def test_corrupt_content_encoding(self, solr_config: SolrSection) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content=b"not gzip at all",
                headers={"Content-Type": "application/json", "Content-Encoding": "gzip"},
            )

        provider = _provider(solr_config, handler)
        with pytest.raises(BackendError) as exc_info:
            await provider.search(_params())
        assert exc_info.value.message == "failed to decode Solr response"
        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)

    @pytest.mark.asyncio
    async def test_timeout(self, solr_config: SolrSection) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        provider = _provider(solr_config, handler)
        with pytest.raises(BackendUnavailableError) as exc_info:
            await provider.search(_params())
        assert exc_info.value.message.endswith("timed out")

    @pytest.mark.asyncio
    async def test_connection_refused(self, solr_config: SolrSection) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = _provider(solr_config, handler)
        with pytest.raises(BackendUnavailableError) as exc_info:
            await provider.search(_params())
        assert exc_info.value.message.endswith("refused connection")

    @pytest.mark.asyncio
    async def test_other_transport_failure(self, solr_config: SolrSection) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("bad frame", request=request)

        provider = _provider(solr_config, handler)
        with pytest.raises(BackendUnavailableError) as exc_info:
            await provider.search(_params())
        assert exc_info.value.message == "failed to receive Solr response"


# ======================================================================
# ping
# ======================================================================


class TestPing:
    @pytest.mark.asyncio
    async def test_ping_ok(self, solr_config: SolrSection) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response({"responseHeader": {"status": 0, "QTime": 1}, "status": "OK"})

        provider = _provider(solr_config, handler)
        await provider.ping()
        assert seen[0].url.path == "/solr/suggestions/admin/ping"

    @pytest.mark.asyncio
    async def test_ping_not_ok(self, solr_config: SolrSection) -> None:
        provider = _provider(
            solr_config,
            lambda request: json_response({"responseHeader": {"status": 0}, "status": "FAIL"}),
        )
        with pytest.raises(BackendError) as exc_info:
            await provider.ping()
        assert exc_info.value.message == "ping status was not OK"

    @pytest.mark.asyncio
    async def test_ping_error_status(self, solr_config: SolrSection) -> None:
        payload = {"responseHeader": {"status": 503}, "error": {"msg": "core down", "code": 503}}
        provider = _provider(solr_config, lambda request: json_response(payload, 503))
        with pytest.raises(BackendError) as exc_info:
            await provider.ping()
        assert exc_info.value.code == 503

    @pytest.mark.asyncio
    async def test_ping_unreachable(self, solr_config: SolrSection) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = _provider(solr_config, handler)
        with pytest.raises(BackendUnavailableError):
            await provider.ping()


def test_identity(solr_config: SolrSection) -> None:
    provider = _provider(solr_config, lambda request: json_response({}))
    assert provider.get_provider_name() == "solr"
    assert provider.is_available() is True
