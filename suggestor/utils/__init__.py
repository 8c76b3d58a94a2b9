"""Utility modules for the author suggestor.

- **errors** -- Domain exception hierarchy rooted at SuggestorError; each
  pipeline stage raises its own subclass so the orchestrator can recover
  from each failure class separately.
- **concurrency** -- semaphore-throttled gather used by term verification.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from suggestor.utils.concurrency import throttled_gather
from suggestor.utils.errors import (
    BackendError,
    BackendUnavailableError,
    ConfigurationError,
    InvalidQueryError,
    ProviderError,
    SuggestorError,
)
from suggestor.utils.logging import configure_logging, get_logger

__all__ = [
    "BackendError",
    "BackendUnavailableError",
    "ConfigurationError",
    "InvalidQueryError",
    "ProviderError",
    "SuggestorError",
    "configure_logging",
    "get_logger",
    "throttled_gather",
]
