"""Structured logging setup using structlog.

Implements a **dual-renderer pattern**: the same shared processor chain
(context vars, log level, enum flattening, timestamps, stack info) feeds
into either a coloured ConsoleRenderer for local development or a
JSONRenderer for production.  The renderer is selected from the
``SUGGESTOR_APP_ENV`` environment variable (default ``"development"``), or
forced via the ``json_output`` flag.

Suggestion requests bind their ``query`` (and, once parsed, the ``term``)
with :func:`query_context`; every event logged while the pipeline runs,
including events from verification tasks spawned inside it, carries those
fields without each call site passing them.

Standard-library ``logging`` is rewired through the same structlog
formatter so that httpx and uvicorn produce identically formatted output.
"""

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

import structlog


def _flatten_enums(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Render enum fields (``stage``, suggestion ``type``) as their plain values."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog with environment-appropriate rendering.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output. When False, uses console rendering in
                     development and JSON in production (SUGGESTOR_APP_ENV).

    Returns:
        A configured structlog BoundLogger.
    """
    app_env = os.environ.get("SUGGESTOR_APP_ENV", "development")
    use_json = json_output or app_env == "production"

    # contextvars first so query/term bindings sit under explicit fields.
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _flatten_enums,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *shared_processors,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # httpx and uvicorn log through stdlib; route them through the same chain.
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    return structlog.get_logger()


@contextmanager
def query_context(query: str) -> Iterator[None]:
    """Bind ``query`` to every event logged inside the block.

    Bindings made with :func:`bind_term` inside the block are removed on
    exit as well, so nothing leaks into the next request on the same task.
    """
    with structlog.contextvars.bound_contextvars(query=query):
        try:
            yield
        finally:
            structlog.contextvars.unbind_contextvars("term")


def bind_term(term: str) -> None:
    """Attach the parsed search term to the current query context."""
    structlog.contextvars.bind_contextvars(term=term)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger.

    If structlog has not been configured yet, calls configure_logging() with defaults.

    Args:
        name: Logger name, typically the module name.

    Returns:
        A structlog BoundLogger bound with the given name.
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
