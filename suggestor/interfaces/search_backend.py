"""Abstract base class for the bibliographic search backend.

Defines the request/response contract the suggestion pipeline needs from
the search index: a parameterized select and a health check.  The only
implementation today is Solr (suggestor/providers/search/solr_provider.py).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from suggestor.models.search import SolrRequestParams, SolrResponse


class ISearchBackend(ABC):
    """Contract for the search index queried for author candidates."""

    @abstractmethod
    async def search(self, params: SolrRequestParams) -> SolrResponse:
        """Run one select request.

        Raises
        ------
        suggestor.utils.errors.BackendUnavailableError
            On connect failures, timeouts and other transport errors.
        suggestor.utils.errors.BackendError
            If the body cannot be decoded or the backend reports a failure.
        """

    @abstractmethod
    async def ping(self) -> None:
        """Check backend health; return normally when healthy.

        Raises
        ------
        suggestor.utils.errors.BackendUnavailableError
            If the backend cannot be reached.
        suggestor.utils.errors.BackendError
            If the backend answers with anything but the ``"OK"`` status.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"solr"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the backend is configured (a host is set)."""
