"""
Errors and Global Error Handling

This module defines the exception taxonomy shared by the search, stats and
client layers, and the application-wide exception handlers registered on the
FastAPI app.

Taxonomy
--------
- Connectivity/backend failures (``ConnectivityError``, ``EmbeddingError``)
- Malformed responses from internal APIs (``MalformedResponseError``)
- Identity lookups that cannot be completed (``IdentityLookupError``)
- Lookups of domains outside the registry (``UnknownDomainError``)

Handlers never leak internal exception details to clients.
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("wwah.errors")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class ConnectivityError(RuntimeError):
    """Raised when the vector storage backend cannot be reached."""


class EmbeddingError(RuntimeError):
    """Raised when embedding generation fails."""


class MalformedResponseError(ValueError):
    """Raised when an internal API answers with an unexpected shape."""


class IdentityLookupError(RuntimeError):
    """Raised when the identity service rejects a token or answers badly."""


class UnknownDomainError(ValueError):
    """Raised when a domain key is not part of the registry."""


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def unknown_domain_handler(
    request: Request,
    exc: UnknownDomainError,
) -> JSONResponse:
    """
    Map an unregistered domain key to a 404 response.
    """
    return JSONResponse(
        status_code=404,
        content={"error": "unknown_domain", "detail": str(exc)},
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    This handler is registered with FastAPI as the final safety net for any
    exception not otherwise handled by route-level or framework-level
    handlers.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.

    Returns
    -------
    JSONResponse
        A JSON 500 response with a minimal error payload.
    """
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
