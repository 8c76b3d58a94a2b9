"""Search backend wire models and the scored candidate they produce.

Defines Pydantic v2 models for the Solr select/ping request parameters and
JSON responses.  Field aliases match Solr's camelCase keys
(``responseHeader``, ``numFound``, ``QTime`` ...) so responses can be fed
straight into ``model_validate``; unknown keys (``debug``, facet blocks,
highlighting) are ignored.

Architecture note:
    Only the Solr provider (suggestor/providers/search/solr_provider.py)
    speaks these models on the wire.  The rest of the pipeline only sees
    :class:`Candidate` -- a (phrase, score) pair -- and a total-match count.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SolrRequestParams(BaseModel):
    """Parameters for a single Solr select request.

    Everything except ``q``/``start``/``rows`` is opaque per-suggestion-type
    configuration forwarded verbatim to Solr.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    q: str = ""
    start: int = 0
    rows: int = 0
    def_type: str = Field(default="", alias="defType")
    fl: list[str] = Field(default_factory=list)
    fq: list[str] = Field(default_factory=list)
    qf: str = ""
    sort: str = ""

    def to_query_params(self) -> list[tuple[str, str]]:
        """Flatten into URL query parameters, omitting empty values.

        ``fl`` and ``fq`` are repeated once per entry, which is how Solr
        expects multi-valued parameters on a GET request.
        """
        params: list[tuple[str, str]] = [
            ("q", self.q),
            ("start", str(self.start)),
            ("rows", str(self.rows)),
        ]
        for key, value in (("sort", self.sort), ("defType", self.def_type), ("qf", self.qf)):
            if value:
                params.append((key, value))
        params.extend(("fl", value) for value in self.fl if value)
        params.extend(("fq", value) for value in self.fq if value)
        return params


class SolrResponseHeader(BaseModel):
    """The ``responseHeader`` block; ``status`` is 0 on success."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    status: int = 0
    qtime: int = Field(default=0, alias="QTime")


class SolrDocument(BaseModel):
    """A single result record from the suggestion core."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    phrase: str = ""
    type: str = ""
    count: int = 0
    score: float = 0.0


class SolrResponseDocuments(BaseModel):
    """The ``response`` block: result records plus match metadata."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    num_found: int = Field(default=0, alias="numFound")
    start: int = 0
    max_score: float = Field(default=0.0, alias="maxScore")
    docs: list[SolrDocument] = Field(default_factory=list)


class SolrError(BaseModel):
    """The ``error`` block Solr includes when a request fails."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    metadata: list[str] = Field(default_factory=list)
    msg: str = ""
    code: int = 0


class SolrResponse(BaseModel):
    """A complete Solr JSON response (select or ping)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    response_header: SolrResponseHeader = Field(
        default_factory=SolrResponseHeader, alias="responseHeader"
    )
    response: SolrResponseDocuments = Field(default_factory=SolrResponseDocuments)
    error: SolrError = Field(default_factory=SolrError)
    # Only populated by the ping handler ("OK" when healthy).
    status: str = ""


class Candidate(BaseModel):
    """A scored author phrase returned by the backend.

    Candidates from one retrieval keep Solr's ordering (descending score);
    that order is not guaranteed stable across calls.
    """

    model_config = ConfigDict(frozen=True)

    phrase: str
    score: float
