"""Multipart upload session domain entity.

A session collects independently uploaded parts for one target
identifier and is finalized exactly once (completed or aborted).
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock

from binstore.domain.enums import UploadStatus
from binstore.domain.exceptions import UploadStateError, ValidationException
from binstore.shared.utils.datetime import utc_now


@dataclass
class UploadSession:
    """Domain entity for a multipart upload session.

    parts maps part number to the hex digest computed when the part was
    stored. lock serializes terminal transitions (complete/abort) so that
    exactly one of them wins.
    """

    session_id: str
    partition: str
    identifier: str
    mime_type: str | None
    status: UploadStatus = UploadStatus.INITIATED
    parts: dict[int, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utc_now)
    lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    @property
    def is_open(self) -> bool:
        return not self.status.is_terminal

    def require_open(self, operation: str) -> None:
        """Raise UploadStateError unless the session still accepts changes."""
        if not self.is_open:
            raise UploadStateError(self.session_id, self.status.value, operation)

    def record_part(self, part_number: int, digest: str) -> None:
        """Store (or overwrite) a part digest and move to in_progress."""
        validate_part_number(part_number)
        self.require_open("upload_part")
        self.parts[part_number] = digest
        self.status = UploadStatus.IN_PROGRESS

    def sorted_parts(self) -> list[tuple[int, str]]:
        """Snapshot of (part_number, digest) pairs in ascending order."""
        return sorted(self.parts.items())

    def mark_completed(self) -> None:
        self.require_open("complete")
        self.status = UploadStatus.COMPLETED

    def mark_aborted(self) -> None:
        """Abort the session. Aborting twice is a no-op; aborting a completed session fails."""
        if self.status == UploadStatus.ABORTED:
            return
        self.require_open("abort")
        self.parts.clear()
        self.status = UploadStatus.ABORTED


class PartListing:
    """Lazy, restartable view over a session's parts.

    Each iteration takes a fresh ascending snapshot, so it reflects the
    session state at the time iteration starts.
    """

    def __init__(self, session: UploadSession) -> None:
        self._session = session

    def __iter__(self) -> Iterator[tuple[int, str]]:
        return iter(self._session.sorted_parts())


def validate_part_number(part_number: int) -> None:
    """Raise ValidationException unless part_number is a positive int."""
    if isinstance(part_number, bool) or not isinstance(part_number, int) or part_number < 1:
        raise ValidationException(
            f"Part number must be a positive integer, got {part_number!r}",
            "part_number",
        )
