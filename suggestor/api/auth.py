"""Bearer-token authentication for the suggestion endpoints.

Tokens are HS256 JWTs signed with ``service.jwt_key``.  The Authorization
header must be exactly ``Bearer <token>``; a literal ``undefined`` token
(what browser clients send before login completes) is rejected outright.

When no ``jwt_key`` is configured, authentication is skipped; this is
only meant for local development.
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt

from suggestor.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

JWT_ALGORITHM = "HS256"


class BearerTokenError(ValueError):
    """The Authorization header does not carry a usable bearer token."""


def get_bearer_token(authorization: str) -> str:
    """Extract the token from an ``Authorization`` header value.

    Runs of whitespace are collapsed first, then the value must split into
    exactly two components: ``Bearer`` and a non-empty token.

    Raises:
        BearerTokenError: If the header is malformed or the token is ``undefined``.
    """
    components = " ".join(authorization.split()).split(" ")
    if len(components) != 2 or components[0] != "Bearer" or not components[1]:
        raise BearerTokenError(f"invalid Authorization header: [{authorization}]")

    token = components[1]
    if token == "undefined":
        raise BearerTokenError("bearer token is undefined")
    return token


def validate_token(token: str, jwt_key: str) -> dict[str, Any]:
    """Verify an HS256 signature and expiry; return the claims.

    Raises:
        JWTError: If the signature, expiry or format is invalid.
    """
    return jwt.decode(token, jwt_key, algorithms=[JWT_ALGORITHM])


async def require_bearer_auth(request: Request) -> dict[str, Any]:
    """FastAPI dependency: authenticate the request or respond 401.

    The decoded claims are stored on ``request.state.claims``.
    """
    config = request.app.state.config
    jwt_key = config.service.jwt_key
    if not jwt_key:
        request.state.claims = {}
        return {}

    try:
        token = get_bearer_token(request.headers.get("Authorization", ""))
    except BearerTokenError as exc:
        _logger.warning("authentication_failed", error=str(exc), path=request.url.path)
        raise HTTPException(status_code=401, detail="Unauthorized") from exc

    try:
        claims = validate_token(token, jwt_key)
    except JWTError as exc:
        _logger.warning("jwt_invalid", error=str(exc), path=request.url.path)
        raise HTTPException(status_code=401, detail="Unauthorized") from exc

    request.state.claims = claims
    return claims


ClaimsDep = Annotated[dict[str, Any], Depends(require_bearer_auth)]
