"""API key verification for admin and stream endpoints.

The expected key comes from the settings the app was created with
(``app.state.settings``), not from the process environment.
"""

import secrets

from fastapi import Header, HTTPException, Query, Request


def _check_key(request: Request, provided: str) -> str:
    expected = request.app.state.settings.api.key
    if not secrets.compare_digest(provided.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Invalid API key")
    return provided


def verify_api_key(request: Request, x_api_key: str = Header(...)) -> str:
    """Validates API key from X-API-Key header."""
    return _check_key(request, x_api_key)


def verify_stream_api_key(
    request: Request,
    x_api_key: str | None = Header(default=None),
    api_key: str | None = Query(default=None),
) -> str:
    """Validates the key for event streams.

    Browsers' EventSource cannot set headers, so the key may also arrive as
    the ``api_key`` query parameter.
    """
    provided = x_api_key or api_key
    if not provided:
        raise HTTPException(status_code=401, detail="Missing API key")
    return _check_key(request, provided)
