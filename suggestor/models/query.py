"""Parsed query model produced by the query parser."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ParsedQuery(BaseModel):
    """A raw query broken down into field -> values.

    ``term`` is only set once the query has passed the single-keyword
    eligibility check; see :class:`suggestor.services.query_parser.QueryParser`.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    field_values: dict[str, list[str]] = Field(default_factory=dict)
    term: str = ""

    @property
    def fields(self) -> list[str]:
        return list(self.field_values)
