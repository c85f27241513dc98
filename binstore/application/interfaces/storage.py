"""Storage resolver protocol (DIP).

Implementations: FileResolver, HttpResolver, ChunkedFileResolver.
The binary service dispatches to them by URI scheme; it never depends on a
concrete backend.
"""

from collections.abc import Iterable, Mapping
from typing import BinaryIO, Protocol, runtime_checkable

from binstore.domain.entities import Binary


@runtime_checkable
class StorageResolver(Protocol):
    """Protocol for binary storage backends bound to one or more URI schemes."""

    def get_uri_schemes(self) -> tuple[str, ...]:
        """Return the non-empty, ordered schemes this backend claims."""
        ...

    def exists(self, partition: str, identifier: str) -> bool:
        """Return True iff content is currently retrievable.

        Raises:
            StorageIOError: I/O failure (never coerced to False).
        """
        ...

    def get_content(self, partition: str, identifier: str) -> BinaryIO | None:
        """Return a fresh stream at offset 0, or None if absent. Caller closes it."""
        ...

    def set_content(
        self,
        partition: str,
        identifier: str,
        stream: BinaryIO,
        metadata: Mapping[str, str] | None = None,
    ) -> None:
        """Store content; readers see wholly-old or wholly-new content.

        Raises:
            StorageUploadError: Write failed.
            StorageNotSupportedError: Backend is read-only.
        """
        ...

    def purge_content(self, partition: str, identifier: str) -> None:
        """Best-effort delete; absent content is not an error."""
        ...

    def supports_multipart_upload(self) -> bool:
        """Gate for the multipart operations below."""
        ...

    def initiate_upload(
        self, partition: str, identifier: str, mime_type: str | None
    ) -> str:
        """Start a multipart session and return its id."""
        ...

    def upload_part(
        self,
        session_id: str,
        part_number: int,
        length: int | None,
        stream: BinaryIO,
    ) -> str:
        """Store one part and return its hex digest."""
        ...

    def list_parts(self, session_id: str) -> Iterable[tuple[int, str]]:
        """Lazy, restartable ascending (part_number, digest) pairs."""
        ...

    def complete_upload(
        self, session_id: str, part_digests: Mapping[int, str]
    ) -> Binary:
        """Verify digests, concatenate parts ascending, finalize the session."""
        ...

    def abort_upload(self, session_id: str) -> None:
        """Discard parts and finalize as aborted (idempotent)."""
        ...

    def upload_session_exists(self, session_id: str) -> bool:
        """Return True while the session is open."""
        ...

    def close(self) -> None:
        """Release owned resources (connection pool)."""
        ...
