"""Mapping failed Results onto HTTP errors."""
from __future__ import annotations

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from homework_planner.domain.common.result import ErrorKind, Result

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.PERSISTENCE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ApiError(HTTPException):
    """HTTPException that also carries a stable error code."""

    def __init__(self, status_code: int, detail: str, code: str):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code


def raise_for(result: Result) -> None:
    """Raise the matching ApiError when `result` failed."""
    if result.is_success:
        return
    kind = result.kind or ErrorKind.VALIDATION
    raise ApiError(_STATUS_BY_KIND.get(kind, status.HTTP_400_BAD_REQUEST), result.error, kind)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "code": exc.code})


def _describe(error: dict) -> str:
    # drop the leading "body"/"query" segment
    location = ".".join(str(part) for part in error.get("loc", ())[1:])
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and parameters are reported like any other validation failure."""
    detail = "; ".join(_describe(e) for e in exc.errors()) or "Invalid request data"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "code": ErrorKind.VALIDATION},
    )
