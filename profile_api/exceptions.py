from enum import Enum

from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    STORAGE = "storage"


class ProfileError(Exception):
    """Failure raised by the service layer, tagged with its kind."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"ProfileError({self.kind.value!r}, {self.message!r})"


async def http_exception_handler(request: Request, exc: HTTPException) -> PlainTextResponse:
    """Render HTTPException details as plain text"""
    return PlainTextResponse(
        str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    """Malformed request bodies are client errors, reported as 400"""
    return PlainTextResponse("Invalid request body.", status_code=400)
