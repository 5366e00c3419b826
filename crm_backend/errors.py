"""Error kinds raised by the service layer and their HTTP mapping."""
from __future__ import annotations

from fastapi import HTTPException


class ValidationError(ValueError):
    """Missing or malformed field; detected before any write."""


class ConflictError(Exception):
    """Uniqueness violation (duplicate phone number)."""


class NotFoundError(LookupError):
    """Referenced customer or address does not exist."""


class StoreFailure(Exception):
    """Unexpected backing-store error. Reported to callers as an opaque 500."""


STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def http_error(exc: Exception, log=None) -> HTTPException:
    """Translate a service exception into an HTTPException and close out the log."""
    for kind, status in STATUS_BY_ERROR:
        if isinstance(exc, kind):
            detail = str(exc)
            break
    else:
        status, detail = 500, "internal error"
    if log is not None:
        log.write("ERROR", str(exc) or exc.__class__.__name__)
    return HTTPException(status_code=status, detail=detail)
