"""Typed service-layer errors.

Every failure a request-path service can report carries an ``ErrorKind`` tag.
The API layer maps the tag to an HTTP status in one place (see ``main.py``),
so services never build HTTP responses themselves.
"""
from enum import Enum


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    INVALID = "invalid"


class ServiceError(Exception):
    """Base class for expected, caller-facing failures."""

    kind: ErrorKind = ErrorKind.INVALID

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthorizedError(ServiceError):
    """Caller lacks the rights for this action."""

    kind = ErrorKind.UNAUTHORIZED


class NotFoundError(ServiceError):
    """Referenced ballot, candidate, organization or link does not exist."""

    kind = ErrorKind.NOT_FOUND


class InvalidStateError(ServiceError):
    """Action conflicts with the current state (closed ballot, duplicate join...)."""

    kind = ErrorKind.INVALID_STATE


class InvalidError(ServiceError):
    """Malformed identifiers or out-of-range values."""

    kind = ErrorKind.INVALID


HTTP_STATUS_BY_KIND = {
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.INVALID: 400,
}
