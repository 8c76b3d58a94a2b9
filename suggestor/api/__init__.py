"""Author suggestor API layer -- routes, auth, schemas, and middleware."""

from suggestor.api.auth import get_bearer_token, require_bearer_auth
from suggestor.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_compression,
    configure_cors,
)
from suggestor.api.routes import router
from suggestor.api.schemas import ComponentHealth, ErrorResponse, VersionResponse

__all__ = [
    "ComponentHealth",
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "RequestLoggingMiddleware",
    "VersionResponse",
    "configure_compression",
    "configure_cors",
    "get_bearer_token",
    "require_bearer_auth",
    "router",
]
