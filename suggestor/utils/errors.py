"""Custom exception hierarchy for the author suggestor.

All application exceptions inherit from :class:`SuggestorError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "solr", "bedrock", "openai") caused the failure.

The hierarchy follows the suggestion pipeline:

    SuggestorError  (base -- catch-all for any suggestor error)
    +-- InvalidQueryError        (query shape not eligible for suggestions)
    +-- BackendUnavailableError  (network / timeout talking to Solr)
    +-- BackendError             (Solr answered but reported failure or sent garbage)
    +-- ProviderError            (AI provider unreachable, errored, or unparseable)
    +-- ConfigurationError       (startup / invalid config)

Every runtime error above is recovered at the orchestrator boundary and
turned into "contribute nothing further to the suggestion list".  Only
ConfigurationError is allowed to stop the process.
"""

from __future__ import annotations


class SuggestorError(Exception):
    """Base exception for all suggestor errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for log output, e.g. ``[solr] failed to decode Solr response``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Query validation
# ---------------------------------------------------------------------------

class InvalidQueryError(SuggestorError):
    """Raised when a query is not a single unqualified keyword term.

    The message is one of ``"malformed syntax"``, ``"unhandled query"`` or
    ``"blank or wildcard keyword"``.
    """

    def __init__(
        self,
        message: str = "unhandled query",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Search backend errors
# ---------------------------------------------------------------------------

class BackendUnavailableError(SuggestorError):
    """Raised when the search backend cannot be reached (refused, timed out)."""

    def __init__(
        self,
        message: str = "Search backend is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class BackendError(SuggestorError):
    """Raised when the search backend replies with an error or unreadable data.

    ``code`` holds the backend-reported error code when there is one
    (Solr's ``error.code``), otherwise ``None``.
    """

    def __init__(
        self,
        message: str = "Search backend request failed",
        provider_name: str | None = None,
        code: int | None = None,
    ) -> None:
        self._code = code
        super().__init__(message=message, provider_name=provider_name)

    @property
    def code(self) -> int | None:
        return self._code


# ---------------------------------------------------------------------------
# AI provider errors
# ---------------------------------------------------------------------------

class ProviderError(SuggestorError):
    """Raised when an AI provider call fails or its reply cannot be parsed."""

    def __init__(
        self,
        message: str = "AI provider call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(SuggestorError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
