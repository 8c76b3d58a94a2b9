"""Immutable service configuration schema.

The merged configuration document (YAML + JSON env blobs + overrides, see
loader.py) is validated into :class:`ServiceConfig` once at startup and then
passed explicitly into each component constructor.

Every section forbids unknown keys so that a typo in a deployment config
fails loudly at startup instead of silently falling back to a default.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Floor applied to every timeout; invalid or non-positive values fall back to it.
MIN_TIMEOUT_SECONDS = 1.0


def _timeout_with_minimum(value: Any) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return MIN_TIMEOUT_SECONDS
    return seconds if seconds >= MIN_TIMEOUT_SECONDS else MIN_TIMEOUT_SECONDS


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ServiceSection(_Section):
    """HTTP listener and authentication settings."""

    port: str = "8080"
    jwt_key: str = ""


class SolrClientConfig(_Section):
    """One HTTP client against the Solr core (endpoint + timeouts)."""

    endpoint: str = "select"
    conn_timeout: float = 5.0
    read_timeout: float = 10.0

    @field_validator("conn_timeout", "read_timeout", mode="before")
    @classmethod
    def _floor_timeouts(cls, value: Any) -> float:
        return _timeout_with_minimum(value)


class SolrClients(_Section):
    service: SolrClientConfig = Field(default_factory=SolrClientConfig)
    healthcheck: SolrClientConfig = Field(
        default_factory=lambda: SolrClientConfig(endpoint="admin/ping")
    )


class SolrSection(_Section):
    """Location of the suggestion core."""

    host: str = "http://localhost:8983/solr"
    core: str = "suggestions"
    clients: SolrClients = Field(default_factory=SolrClients)

    def url_for(self, client: SolrClientConfig) -> str:
        return f"{self.host.rstrip('/')}/{self.core}/{client.endpoint.lstrip('/')}"


class SolrParamsConfig(_Section):
    """Opaque per-type Solr parameters, forwarded verbatim."""

    deftype: str = ""
    fl: list[str] = Field(default_factory=list)
    fq: list[str] = Field(default_factory=list)
    qf: str = ""
    sort: str = ""


class SuggestionConfig(_Section):
    """Retrieval and filtering policy for one suggestion type."""

    # Maximum number of suggestions returned from the confident set.
    limit: int = Field(default=5, ge=0)
    # Rows requested from Solr per retrieval.
    rows: int = Field(default=100, ge=1)
    # k in cutoff = mean + k * stddev.
    confidence_multiplier: float = Field(default=2.0, ge=0.0)
    params: SolrParamsConfig = Field(default_factory=SolrParamsConfig)


class SuggestionTypes(_Section):
    author: SuggestionConfig = Field(default_factory=SuggestionConfig)


class AISection(_Section):
    """Generative-AI provider selection.

    An empty ``provider`` disables the AI step entirely.
    """

    provider: str = ""
    model: str = ""
    region: str = ""
    url: str = ""
    key: str = ""
    # Optional prompt template containing $QUERY and $RESULTS.
    prompt: str = ""
    conn_timeout: float = 5.0
    read_timeout: float = 30.0
    # Cap on concurrent verification queries for one request.
    max_verifications: int = Field(default=10, ge=1)

    @field_validator("conn_timeout", "read_timeout", mode="before")
    @classmethod
    def _floor_timeouts(cls, value: Any) -> float:
        return _timeout_with_minimum(value)


class ServiceConfig(_Section):
    """The complete, immutable service configuration."""

    service: ServiceSection = Field(default_factory=ServiceSection)
    solr: SolrSection = Field(default_factory=SolrSection)
    suggestions: SuggestionTypes = Field(default_factory=SuggestionTypes)
    ai: AISection = Field(default_factory=AISection)

    def redacted(self) -> dict[str, Any]:
        """Return the configuration as a dict with secrets masked, for logging."""
        data = self.model_dump()
        if data["service"]["jwt_key"]:
            data["service"]["jwt_key"] = "***"
        if data["ai"]["key"]:
            data["ai"]["key"] = "***"
        return data
