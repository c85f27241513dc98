"""Tests for domain and storage exceptions (error_code, message, details)."""

import pytest

from binstore.domain.exceptions import (
    BinstoreException,
    ConfigurationException,
    UploadSessionNotFoundError,
    UploadStateError,
    ValidationException,
)
from binstore.infrastructure.exceptions import (
    StorageChecksumMismatchError,
    StorageDeleteError,
    StorageDownloadError,
    StorageException,
    StorageIOError,
    StorageNotSupportedError,
    StoragePermissionError,
    StorageUploadError,
)


def test_binstore_exception_default_error_code() -> None:
    """Base BinstoreException uses class name as error_code when not provided."""
    exc = BinstoreException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "BinstoreException"
    assert exc.details == {}
    assert str(exc) == "Something failed"


def test_binstore_exception_custom_error_code_and_details() -> None:
    exc = BinstoreException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.error_code == "CUSTOM"
    assert exc.details == {"key": "value"}


def test_configuration_exception_with_partition() -> None:
    """ConfigurationException sets CONFIGURATION_ERROR and partition in details."""
    exc = ConfigurationException("Invalid partition: blah", "blah")
    assert exc.message == "Invalid partition: blah"
    assert exc.error_code == "CONFIGURATION_ERROR"
    assert exc.details == {"partition": "blah"}


def test_configuration_exception_without_partition() -> None:
    exc = ConfigurationException("bad")
    assert exc.details == {}


def test_validation_exception() -> None:
    exc = ValidationException("Invalid part", field="part_number")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "part_number"}


def test_upload_session_not_found() -> None:
    exc = UploadSessionNotFoundError("abc")
    assert exc.error_code == "UPLOAD_SESSION_NOT_FOUND"
    assert "abc" in exc.message
    assert exc.details == {"session_id": "abc"}


def test_upload_state_error_message() -> None:
    exc = UploadStateError("abc", "completed", "upload_part")
    assert exc.message == "Cannot upload_part upload session abc in status 'completed'"
    assert exc.error_code == "UPLOAD_STATE_ERROR"
    assert exc.details["status"] == "completed"


class TestStorageExceptions:
    """Storage errors are BinstoreExceptions with identifier and reason details."""

    @pytest.mark.parametrize(
        ("cls", "code"),
        [
            (StorageIOError, "STORAGE_IO_ERROR"),
            (StorageDownloadError, "STORAGE_DOWNLOAD_ERROR"),
            (StorageDeleteError, "STORAGE_DELETE_ERROR"),
            (StorageUploadError, "STORAGE_UPLOAD_ERROR"),
        ],
    )
    def test_io_errors_carry_identifier_and_reason(
        self, cls: type[StorageException], code: str
    ) -> None:
        exc = cls("file:a", "disk full")
        assert isinstance(exc, StorageException)
        assert isinstance(exc, BinstoreException)
        assert exc.error_code == code
        assert exc.details == {"identifier": "file:a", "reason": "disk full"}
        assert "file:a" in exc.message

    def test_download_and_delete_are_io_errors(self) -> None:
        assert issubclass(StorageDownloadError, StorageIOError)
        assert issubclass(StorageDeleteError, StorageIOError)
        assert not issubclass(StorageUploadError, StorageIOError)

    def test_checksum_mismatch(self) -> None:
        exc = StorageChecksumMismatchError("s1", {1: "aa"}, {1: "bb"})
        assert exc.error_code == "STORAGE_CHECKSUM_ERROR"
        assert exc.details["expected"] == {1: "aa"}
        assert exc.details["actual"] == {1: "bb"}

    def test_not_supported(self) -> None:
        exc = StorageNotSupportedError("initiate_upload", "file")
        assert exc.message == "Operation 'initiate_upload' not supported by file backend"
        assert exc.error_code == "STORAGE_NOT_SUPPORTED"

    def test_permission(self) -> None:
        exc = StoragePermissionError("file:../x", "path_validation")
        assert exc.error_code == "STORAGE_PERMISSION_ERROR"
        assert exc.details == {"identifier": "file:../x", "operation": "path_validation"}
