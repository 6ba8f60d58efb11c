"""Unit tests for typed service errors."""
import pytest

from rangevote.core.errors import (
    HTTP_STATUS_BY_KIND,
    ErrorKind,
    InvalidError,
    InvalidStateError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)


@pytest.mark.unit
class TestServiceErrors:

    @pytest.mark.parametrize("error_cls,kind,status", [
        (UnauthorizedError, ErrorKind.UNAUTHORIZED, 403),
        (NotFoundError, ErrorKind.NOT_FOUND, 404),
        (InvalidStateError, ErrorKind.INVALID_STATE, 409),
        (InvalidError, ErrorKind.INVALID, 400),
    ])
    def test_kind_and_status(self, error_cls, kind, status):
        error = error_cls("boom")
        assert isinstance(error, ServiceError)
        assert error.kind == kind
        assert error.message == "boom"
        assert HTTP_STATUS_BY_KIND[error.kind] == status

    def test_every_kind_has_a_status(self):
        assert set(HTTP_STATUS_BY_KIND) == set(ErrorKind)
