"""Solr search backend provider implementing ISearchBackend.

Talks to one Solr core through two ``httpx.AsyncClient`` instances: a
*service* client for select requests and a *healthcheck* client for ping,
each with its own connect/read timeouts taken from configuration.

Select requests are plain GETs with the parameters as query string
(``fl`` and ``fq`` repeated per value).  The body is decoded whatever the
HTTP status, because Solr reports application errors inside the JSON
(``responseHeader.status`` + ``error``) rather than only via the status
line.
"""

from __future__ import annotations

import time

import httpx
import structlog
from pydantic import ValidationError

from suggestor.config.schema import SolrClientConfig, SolrSection
from suggestor.interfaces.search_backend import ISearchBackend
from suggestor.models.search import SolrRequestParams, SolrResponse
from suggestor.utils.errors import BackendError, BackendUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_PING_OK = "OK"


def _build_client(client_config: SolrClientConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(client_config.read_timeout, connect=client_config.conn_timeout),
        headers={"Accept": "application/json"},
    )


def _failure_status(exc: httpx.TransportError) -> int:
    """Map a transport failure to the HTTP status used in failure logs."""
    if isinstance(exc, httpx.TimeoutException):
        return 408
    if isinstance(exc, httpx.ConnectError):
        return 503
    return 400


class SolrSearchProvider(ISearchBackend):
    """Search backend provider for a Solr suggestion core.

    Parameters
    ----------
    config:
        The ``solr`` configuration section (host, core and the two clients).
    service_client, healthcheck_client:
        Optional pre-built clients.  Tests inject clients backed by
        ``httpx.MockTransport``; production builds them from ``config``.
    """

    def __init__(
        self,
        config: SolrSection,
        service_client: httpx.AsyncClient | None = None,
        healthcheck_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._service_url = config.url_for(config.clients.service)
        self._healthcheck_url = config.url_for(config.clients.healthcheck)
        self._service_client = service_client or _build_client(config.clients.service)
        self._healthcheck_client = healthcheck_client or _build_client(
            config.clients.healthcheck
        )
        logger.info(
            "solr_provider_initialized",
            service_url=self._service_url,
            healthcheck_url=self._healthcheck_url,
        )

    # ------------------------------------------------------------------
    # ISearchBackend implementation
    # ------------------------------------------------------------------

    async def search(self, params: SolrRequestParams) -> SolrResponse:
        """Execute a select request and return the decoded response."""
        query_params = params.to_query_params()
        logger.debug("solr_request", method="GET", url=self._service_url, params=query_params)

        solr_res = await self._get(self._service_client, self._service_url, query_params)
        header = solr_res.response_header

        if header.status != 0:
            logger.warning(
                "solr_error_response",
                status=header.status,
                qtime=header.qtime,
                code=solr_res.error.code,
                msg=solr_res.error.msg,
            )
            raise BackendError(
                message=f"{solr_res.error.code} - {solr_res.error.msg}",
                provider_name=self.get_provider_name(),
                code=solr_res.error.code,
            )

        logger.info(
            "solr_response",
            status=header.status,
            qtime=header.qtime,
            start=solr_res.response.start,
            rows=len(solr_res.response.docs),
            total=solr_res.response.num_found,
            max_score=solr_res.response.max_score,
        )
        return solr_res

    async def ping(self) -> None:
        """Ping the core; raise unless Solr reports status ``OK``."""
        solr_res = await self._get(self._healthcheck_client, self._healthcheck_url, [])
        header = solr_res.response_header

        if header.status != 0:
            raise BackendError(
                message=f"{solr_res.error.code} - {solr_res.error.msg}",
                provider_name=self.get_provider_name(),
                code=solr_res.error.code,
            )

        logger.debug("solr_ping", status=header.status, qtime=header.qtime, ping=solr_res.status)
        if solr_res.status != _PING_OK:
            raise BackendError(
                message="ping status was not OK",
                provider_name=self.get_provider_name(),
            )

    def get_provider_name(self) -> str:
        return "solr"

    def is_available(self) -> bool:
        return bool(self._config.host)

    async def aclose(self) -> None:
        """Close both HTTP clients.  Called from the application lifespan."""
        await self._service_client.aclose()
        await self._healthcheck_client.aclose()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get(
        self,
        client: httpx.AsyncClient,
        url: str,
        query_params: list[tuple[str, str]],
    ) -> SolrResponse:
        start = time.perf_counter()
        try:
            response = await client.get(url, params=query_params)
        except httpx.TransportError as exc:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            status = _failure_status(exc)
            logger.error(
                "solr_request_failed",
                method="GET",
                url=url,
                status=status,
                error=str(exc) or type(exc).__name__,
                elapsed_ms=elapsed_ms,
            )
            if status == 408:
                message = f"{url} timed out"
            elif status == 503:
                message = f"{url} refused connection"
            else:
                message = "failed to receive Solr response"
            raise BackendUnavailableError(
                message=message,
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.DecodingError as exc:
            # Content-Encoding decoding happens while httpx reads the body.
            logger.error(
                "solr_decode_failed",
                method="GET",
                url=url,
                status=500,
                error=str(exc),
                elapsed_ms=int((time.perf_counter() - start) * 1000),
            )
            raise BackendError(
                message="failed to decode Solr response",
                provider_name=self.get_provider_name(),
            ) from exc

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug("solr_http_response", url=url, http_status=response.status_code, elapsed_ms=elapsed_ms)

        decode_start = time.perf_counter()
        try:
            solr_res = SolrResponse.model_validate_json(response.content)
        except ValidationError as exc:
            logger.error(
                "solr_decode_failed",
                method="GET",
                url=url,
                status=500,
                error=str(exc),
                elapsed_ms=elapsed_ms,
            )
            raise BackendError(
                message="failed to decode Solr response",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug(
            "solr_json_decoded",
            url=url,
            decode_ms=int((time.perf_counter() - decode_start) * 1000),
            elapsed_ms=elapsed_ms,
        )
        return solr_res
