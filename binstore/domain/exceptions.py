"""Domain exceptions for binstore.

Defines domain-level exceptions that represent contract violations
(configuration, input validation, upload session lifecycle). They are
independent of any particular storage backend; backend failures live in
binstore.infrastructure.exceptions.
"""

from typing import Any


class BinstoreException(Exception):
    """Base exception for all binstore errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. partition, identifier).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationException(BinstoreException):
    """Raised when service or partition configuration is invalid.

    Always fatal: raised while constructing the binary service, never
    deferred to the first request.
    """

    def __init__(self, message: str, partition: str | None = None) -> None:
        """Initialize with message and optional partition name.

        Args:
            message: Description of the configuration problem.
            partition: Optional partition the problem relates to.
        """
        details = {"partition": partition} if partition else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)


class ValidationException(BinstoreException):
    """Raised when input validation fails (e.g. invalid part number)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or argument that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class UploadSessionNotFoundError(BinstoreException):
    """Raised when a multipart upload session id is unknown."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            f"Upload session not found: {session_id}",
            "UPLOAD_SESSION_NOT_FOUND",
            {"session_id": session_id},
        )


class UploadStateError(BinstoreException):
    """Raised when an operation is not allowed in the session's current state."""

    def __init__(self, session_id: str, status: str, operation: str) -> None:
        """Initialize with session, its status and the rejected operation.

        Args:
            session_id: Upload session id.
            status: Current session status value.
            operation: Operation that was attempted (e.g. 'upload_part').
        """
        super().__init__(
            f"Cannot {operation} upload session {session_id} in status '{status}'",
            "UPLOAD_STATE_ERROR",
            {"session_id": session_id, "status": status, "operation": operation},
        )
