"""HTTP error mapping helpers for API routes."""

from __future__ import annotations

from typing import Any
from typing import NoReturn

from fastapi import HTTPException
from fastapi import Request
from fastapi.responses import JSONResponse

from jellypick.catalog.jellyfin import CatalogUnavailableError
from jellypick.core.errors import InvalidInputError
from jellypick.core.errors import InvalidInviteCodeError
from jellypick.core.errors import LobbyNotFoundError
from jellypick.core.errors import SessionNotFoundError

# Most specific class first; lookup walks the raised error's MRO.
ERROR_RESPONSES: dict[type[Exception], tuple[int, str]] = {
    InvalidInviteCodeError: (404, "INVITE_CODE_NOT_FOUND"),
    LobbyNotFoundError: (404, "LOBBY_NOT_FOUND"),
    SessionNotFoundError: (404, "SESSION_NOT_FOUND"),
    InvalidInputError: (400, "VALIDATION_ERROR"),
    CatalogUnavailableError: (502, "CATALOG_UNAVAILABLE"),
}


def api_error(*, code: str, message: str, detail: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build a unified API error payload."""
    return {"code": code, "message": message, "detail": detail or {}}


def raise_api_error(
    *,
    status_code: int,
    code: str,
    message: str,
    detail: dict[str, Any],
) -> NoReturn:
    raise HTTPException(
        status_code=status_code,
        detail=api_error(code=code, message=message, detail=detail),
    )


def raise_for_domain_error(exc: Exception, *, detail: dict[str, Any]) -> NoReturn:
    """Re-raise a lobby or catalog error as its mapped HTTP error."""
    for error_type in type(exc).__mro__:
        if error_type in ERROR_RESPONSES:
            status_code, code = ERROR_RESPONSES[error_type]
            break
    else:
        raise exc
    message = getattr(exc, "message", str(exc))
    raise_api_error(status_code=status_code, code=code, message=message.lower(), detail=detail)


async def handle_http_exception(_: Request, exc: HTTPException) -> JSONResponse:
    """Unify HTTP errors to {code,message,detail} payload."""
    if isinstance(exc.detail, dict) and {"code", "message", "detail"} <= set(exc.detail):
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)
    return JSONResponse(
        status_code=exc.status_code,
        content=api_error(code="HTTP_ERROR", message=str(exc.detail)),
        headers=exc.headers,
    )
