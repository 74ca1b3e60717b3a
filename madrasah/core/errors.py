"""
Backend error taxonomy.

Raw backend errors never reach the caller: they are logged server-side and
replaced with one of a fixed set of user-facing messages.
"""

import logging
from enum import Enum

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from madrasah.utils.response import error_response

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    UNIQUE = "unique"
    REFERENCE = "reference"
    REQUIRED = "required"
    INVALID = "invalid"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"
    UNKNOWN = "unknown"


MESSAGES = {
    "bn": {
        ErrorKind.UNIQUE: "এই আইডি ইতিমধ্যে ব্যবহৃত হয়েছে",
        ErrorKind.REFERENCE: "সংযুক্ত তথ্য খুঁজে পাওয়া যায়নি",
        ErrorKind.REQUIRED: "প্রয়োজনীয় তথ্য প্রদান করুন",
        ErrorKind.INVALID: "প্রদত্ত তথ্য সঠিক নয়",
        ErrorKind.FORBIDDEN: "আপনার এই কাজের অনুমতি নেই",
        ErrorKind.UNAUTHENTICATED: "আপনি লগইন করা নেই",
        ErrorKind.UNKNOWN: "একটি সমস্যা হয়েছে। আবার চেষ্টা করুন",
    },
    "en": {
        ErrorKind.UNIQUE: "This ID is already in use",
        ErrorKind.REFERENCE: "Related data not found",
        ErrorKind.REQUIRED: "Please provide the required information",
        ErrorKind.INVALID: "The provided information is not valid",
        ErrorKind.FORBIDDEN: "You are not permitted to do this",
        ErrorKind.UNAUTHENTICATED: "You are not logged in",
        ErrorKind.UNKNOWN: "Something went wrong. Please try again",
    },
}

STATUS_CODES = {
    ErrorKind.UNIQUE: status.HTTP_409_CONFLICT,
    ErrorKind.REFERENCE: status.HTTP_409_CONFLICT,
    ErrorKind.REQUIRED: 422,
    ErrorKind.INVALID: 422,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_PG_CODES = {
    "23505": ErrorKind.UNIQUE,
    "23503": ErrorKind.REFERENCE,
    "23502": ErrorKind.REQUIRED,
    "23514": ErrorKind.INVALID,
}


def classify_error(error) -> ErrorKind:
    """Classify anything shaped like a PostgREST/GoTrue error (``code`` / ``message``)."""
    code = getattr(error, "code", None)
    if code is not None and str(code) in _PG_CODES:
        return _PG_CODES[str(code)]

    message = getattr(error, "message", None) or str(error) or ""
    if any(word in message for word in ("RLS", "policy", "permission", "denied")):
        return ErrorKind.FORBIDDEN
    if "JWT" in message or "auth" in message:
        return ErrorKind.UNAUTHENTICATED
    return ErrorKind.UNKNOWN


def map_database_error(error, locale: str = "bn") -> str:
    return MESSAGES[locale][classify_error(error)]


def _locale(request: Request) -> str:
    ctx = getattr(request.app.state, "context", None)
    return ctx.settings.ERROR_LOCALE if ctx is not None else "bn"


async def database_error_handler(request: Request, exc: APIError):
    kind = classify_error(exc)
    logger.warning("%s %s failed (%s): %s", request.method, request.url.path, kind.value, exc)
    return JSONResponse(
        status_code=STATUS_CODES[kind],
        content=error_response(MESSAGES[_locale(request)][kind], data={"kind": kind.value}),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        errors.setdefault(".".join(loc) or "body", err.get("msg", ""))
    return JSONResponse(
        status_code=422,
        content=error_response("Validation failed", data={"errors": errors}),
    )


async def unexpected_error_handler(request: Request, exc: Exception):
    """Anything unclassified: storage, network and auth client failures."""
    logger.error("%s %s failed: %r", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=STATUS_CODES[ErrorKind.UNKNOWN],
        content=error_response(MESSAGES[_locale(request)][ErrorKind.UNKNOWN],
                               data={"kind": ErrorKind.UNKNOWN.value}),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """HTTPExceptions (including unmatched paths) in the same envelope as everything else."""
    message = exc.detail if isinstance(exc.detail, str) else "Error"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(message),
        headers=getattr(exc, "headers", None),
    )
