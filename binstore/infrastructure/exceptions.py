"""Infrastructure exceptions for storage backends.

Storage errors extend BinstoreException so callers can handle every
binstore failure through a single base class. Each carries the originating
exception as __cause__ (raise ... from ...).
"""

from binstore.domain.exceptions import BinstoreException


class StorageException(BinstoreException):
    """Base exception for storage operations."""


class StorageIOError(StorageException):
    """I/O failure while talking to a storage backend."""

    def __init__(
        self,
        identifier: str,
        reason: str,
        message: str | None = None,
        error_code: str = "STORAGE_IO_ERROR",
    ) -> None:
        super().__init__(
            message or f"Storage I/O failure for: {identifier}",
            error_code,
            {"identifier": identifier, "reason": reason},
        )


class StorageDownloadError(StorageIOError):
    """Reading content failed."""

    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(
            identifier,
            reason,
            f"Failed to read content: {identifier}",
            "STORAGE_DOWNLOAD_ERROR",
        )


class StorageDeleteError(StorageIOError):
    """Purging content failed."""

    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(
            identifier,
            reason,
            f"Failed to purge content: {identifier}",
            "STORAGE_DELETE_ERROR",
        )


class StorageUploadError(StorageException):
    """Writing content failed (filesystem error or rejected HTTP PUT)."""

    def __init__(self, identifier: str, reason: str) -> None:
        super().__init__(
            f"Failed to write content: {identifier}",
            "STORAGE_UPLOAD_ERROR",
            {"identifier": identifier, "reason": reason},
        )


class StorageChecksumMismatchError(StorageException):
    """Caller-supplied part digests do not match the stored ones."""

    def __init__(
        self,
        session_id: str,
        expected: dict[int, str],
        actual: dict[int, str],
    ) -> None:
        super().__init__(
            f"Part digest mismatch for upload session: {session_id}",
            "STORAGE_CHECKSUM_ERROR",
            {"session_id": session_id, "expected": expected, "actual": actual},
        )


class StorageNotSupportedError(StorageException):
    """Operation not supported by this storage backend."""

    def __init__(self, operation: str, backend: str) -> None:
        super().__init__(
            f"Operation '{operation}' not supported by {backend} backend",
            "STORAGE_NOT_SUPPORTED",
            {"operation": operation, "backend": backend},
        )


class StoragePermissionError(StorageException):
    """Identifier maps to a location outside its partition root."""

    def __init__(self, identifier: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {identifier}",
            "STORAGE_PERMISSION_ERROR",
            {"identifier": identifier, "operation": operation},
        )
