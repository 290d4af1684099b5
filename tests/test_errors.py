"""Tests for mediabox.core.errors."""

import errno

import pytest

from mediabox.core.errors import (
    GenerationFailure,
    InvalidTransformError,
    IOFailure,
    MediaboxError,
    NotFoundError,
    NotSupportedTypeError,
    StaleIdentityError,
    from_os_error,
)


class TestErrorTaxonomy:
    """Codes and HTTP statuses of the error classes."""

    @pytest.mark.parametrize(
        ("error_cls", "code", "status"),
        [
            (NotFoundError, "ENOENT", 404),
            (NotSupportedTypeError, "ENOTDIRFILE", 404),
            (StaleIdentityError, "ESTALE", 409),
            (InvalidTransformError, "EINVAL", 400),
            (GenerationFailure, "EGENERATION", 500),
            (IOFailure, "EIO", 500),
        ],
    )
    def test_code_and_status(self, error_cls, code, status):
        error = error_cls("boom", "/srv/a.jpg")
        assert isinstance(error, MediaboxError)
        assert error.code == code
        assert error.http_status == status
        assert error.path == "/srv/a.jpg"
        assert str(error) == "boom"

    def test_invalid_transform_is_value_error(self):
        with pytest.raises(ValueError):
            raise InvalidTransformError("width is required")


class TestFromOsError:
    """OSError classification."""

    @pytest.mark.parametrize("code", [errno.ENOENT, errno.ENOTDIR])
    def test_missing_maps_to_not_found(self, code):
        err = OSError(code, "missing", "/srv/gone")
        result = from_os_error(err)
        assert isinstance(result, NotFoundError)
        assert result.path == "/srv/gone"

    @pytest.mark.parametrize("code", [errno.EACCES, errno.EIO, errno.ENOSPC])
    def test_other_errors_map_to_io_failure(self, code):
        err = OSError(code, "nope")
        result = from_os_error(err, "/srv/file")
        assert isinstance(result, IOFailure)
        assert result.path == "/srv/file"
        assert "nope" in str(result)
