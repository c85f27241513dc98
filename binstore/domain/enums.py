"""Domain enumerations for binstore.

Enums represent fixed sets of domain values (e.g. upload session status).
"""

from enum import Enum


class UploadStatus(str, Enum):
    """Multipart upload session lifecycle status.

    initiated -> in_progress -> completed | aborted. The last two are
    terminal: a session in either accepts no further mutation.
    """

    INITIATED = "initiated"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        """Return True for completed and aborted sessions."""
        return self in (UploadStatus.COMPLETED, UploadStatus.ABORTED)

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]


class DigestEncoding(str, Enum):
    """Output encoding of a computed digest."""

    HEX = "hex"
    BASE64 = "base64"
