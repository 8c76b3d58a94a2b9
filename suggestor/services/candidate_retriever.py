"""Author candidate retrieval against the search backend.

Turns a normalized term plus the per-type Solr configuration into a
select request and maps the returned documents to scored
:class:`Candidate` objects.  Backend errors propagate unchanged; the
orchestrator decides what they mean for the request.
"""

from __future__ import annotations

from suggestor.config.schema import SolrParamsConfig, SuggestionConfig
from suggestor.interfaces.search_backend import ISearchBackend
from suggestor.models.search import Candidate, SolrRequestParams
from suggestor.utils.logging import get_logger

logger = get_logger(__name__)


class CandidateRetriever:
    """Fetches scored author phrases for one term.

    Parameters
    ----------
    backend:
        The search backend to query.
    config:
        The ``suggestions.author`` section: forwarded Solr parameters and
        the number of rows to request.
    """

    def __init__(self, backend: ISearchBackend, config: SuggestionConfig) -> None:
        self._backend = backend
        self._config = config

    async def retrieve(self, term: str, params: SolrParamsConfig | None = None) -> list[Candidate]:
        """Return candidates for ``term`` in backend (descending score) order.

        Zero documents is an empty list, not an error.

        Raises:
            BackendUnavailableError: Transport failure or timeout.
            BackendError: Undecodable reply or backend-reported failure.
        """
        params = params or self._config.params
        request = SolrRequestParams(
            q=term,
            start=0,
            rows=self._config.rows,
            def_type=params.deftype,
            fl=params.fl,
            fq=params.fq,
            qf=params.qf,
            sort=params.sort,
        )
        response = await self._backend.search(request)
        candidates = [Candidate(phrase=doc.phrase, score=doc.score) for doc in response.response.docs]
        logger.debug("candidates_retrieved", term=term, count=len(candidates))
        return candidates

    async def count(self, term: str) -> int:
        """Return the total number of backend matches for ``term``.

        A count-only request: no rows, and none of the relevance settings
        (``qf``, ``fl``, ``fq``) that narrow the author retrieval.
        """
        request = SolrRequestParams(
            q=term,
            start=0,
            rows=0,
            def_type=self._config.params.deftype,
            sort=self._config.params.sort,
        )
        response = await self._backend.search(request)
        return response.response.num_found
