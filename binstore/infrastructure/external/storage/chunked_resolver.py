"""Filesystem resolver with multipart upload support.

Single-shot operations behave exactly like FileResolver. Each part upload
is written to its own file under <staging_root>/<session_id>/, then moved
to <part_number>.part under the session lock together with recording its
digest. Parts are concatenated into the target on completion.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import BinaryIO

from binstore.application.services.digest_service import DigestService
from binstore.core.constants import CHUNKED_SCHEMES, PART_DIGEST_ALGORITHM
from binstore.domain.entities import (
    Binary,
    PartListing,
    UploadSession,
    validate_part_number,
)
from binstore.domain.enums import DigestEncoding, UploadStatus
from binstore.domain.exceptions import UploadStateError
from binstore.infrastructure.exceptions import (
    StorageChecksumMismatchError,
    StorageUploadError,
)
from binstore.infrastructure.external.storage.base import atomic_write, iter_chunks
from binstore.infrastructure.external.storage.file_resolver import FileResolver
from binstore.infrastructure.external.storage.upload_sessions import UploadSessionStore
from binstore.shared.utils.datetime import from_timestamp_utc
from binstore.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


class ChunkedFileResolver(FileResolver):
    """Filesystem storage for the `chunked` scheme, with multipart uploads.

    Session lifecycle: initiated -> in_progress -> completed | aborted.
    Each part is digested (hex MD5) while it is written, and only becomes
    the session's part once its digest is recorded under the session lock.
    complete_upload holds the same lock for the whole
    verify-concatenate-finalize step, so it never reads an unverified part
    and it and abort_upload cannot both win.
    """

    URI_SCHEMES: tuple[str, ...] = CHUNKED_SCHEMES
    BACKEND_NAME = "chunked"

    def __init__(
        self,
        partitions: Mapping[str, str | Path],
        staging_root: str | Path,
        session_store: UploadSessionStore | None = None,
        digest_service: DigestService | None = None,
    ) -> None:
        """Initialize chunked storage.

        Args:
            partitions: Partition name -> root directory for final content.
            staging_root: Directory holding in-flight parts.
            session_store: Session registry (defaults to a new in-memory store).
            digest_service: Engine for part digests.
        """
        super().__init__(partitions)
        self.staging_root = Path(staging_root).expanduser().resolve()
        self._sessions = session_store or UploadSessionStore()
        self._digests = digest_service or DigestService(encoding=DigestEncoding.HEX)

    def supports_multipart_upload(self) -> bool:
        return True

    def _session_dir(self, session_id: str) -> Path:
        return self.staging_root / session_id

    def _part_path(self, session_id: str, part_number: int) -> Path:
        return self._session_dir(session_id) / f"{part_number}.part"

    def _discard_staging(self, session_id: str) -> None:
        try:
            shutil.rmtree(self._session_dir(session_id))
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning("Failed to remove staged parts for %s: %s", session_id, e)

    def initiate_upload(
        self, partition: str, identifier: str, mime_type: str | None
    ) -> str:
        """Start a session for (partition, identifier). Returns the session id."""
        if self._get_full_path(partition, identifier) is None:
            raise StorageUploadError(
                identifier, f"No root directory configured for partition {partition}"
            )
        session = self._sessions.create(partition, identifier, mime_type)
        logger.info(
            "Initiated upload session %s for %s in %s",
            session.session_id,
            identifier,
            partition,
        )
        return session.session_id

    def upload_part(
        self,
        session_id: str,
        part_number: int,
        length: int | None,
        stream: BinaryIO,
    ) -> str:
        """Stage one part (overwriting a previous upload of the same number).

        Returns:
            Lowercase hex MD5 of the part, for caller-side verification.

        Raises:
            ValidationException: part_number is not a positive int.
            UploadSessionNotFoundError: Unknown session.
            UploadStateError: Session already completed or aborted.
            StorageUploadError: Write failed or length mismatch.
        """
        validate_part_number(part_number)
        session = self._sessions.get(session_id)
        session.require_open("upload_part")
        hasher = self._digests.new_hash(PART_DIGEST_ALGORITHM)
        if hasher is None:
            raise StorageUploadError(
                session.identifier, f"{PART_DIGEST_ALGORITHM} digests unavailable"
            )

        def hashed_chunks() -> Iterator[bytes]:
            for chunk in iter_chunks(stream):
                hasher.update(chunk)
                yield chunk

        staged = self._session_dir(session_id) / f"{part_number}.{generate_cuid()}.upload"
        try:
            with stream:
                atomic_write(staged, hashed_chunks(), expected_size=length)
        except (OSError, ValueError) as e:
            with session.lock:
                self._require_open_or_discard(session)
            logger.error(
                "Error while storing part %s of session %s: %s", part_number, session_id, e
            )
            raise StorageUploadError(session.identifier, str(e)) from e

        digest = self._digests.encode(hasher.digest(), DigestEncoding.HEX)
        with session.lock:
            self._require_open_or_discard(session)
            try:
                os.replace(staged, self._part_path(session_id, part_number))
            except OSError as e:
                staged.unlink(missing_ok=True)
                logger.error(
                    "Error while storing part %s of session %s: %s", part_number, session_id, e
                )
                raise StorageUploadError(session.identifier, str(e)) from e
            session.record_part(part_number, digest)
        logger.debug("Stored part %s of session %s (%s)", part_number, session_id, digest)
        return digest

    def _require_open_or_discard(self, session: UploadSession) -> None:
        # Caller holds session.lock. A part that finished writing after the
        # session ended may have re-created the staging directory.
        if not session.is_open:
            self._discard_staging(session.session_id)
            raise UploadStateError(session.session_id, session.status.value, "upload_part")

    def list_parts(self, session_id: str) -> Iterable[tuple[int, str]]:
        return PartListing(self._sessions.get(session_id))

    def complete_upload(
        self, session_id: str, part_digests: Mapping[int, str]
    ) -> Binary:
        """Verify part digests, concatenate parts ascending and finalize.

        Raises:
            UploadSessionNotFoundError: Unknown session.
            UploadStateError: Session is terminal or has no parts.
            StorageChecksumMismatchError: Expected digests differ from the
                stored ones; the session stays in_progress.
            StorageUploadError: Writing the target failed; the session stays
                in_progress.
        """
        session = self._sessions.get(session_id)
        with session.lock:
            session.require_open("complete")
            if session.status == UploadStatus.INITIATED:
                raise UploadStateError(session_id, session.status.value, "complete")
            expected = {int(n): d.lower() for n, d in part_digests.items()}
            actual = dict(session.parts)
            if expected != actual:
                logger.warning("Part digest mismatch for upload session %s", session_id)
                raise StorageChecksumMismatchError(session_id, expected, actual)

            target = self._target_path(session)
            try:
                size = atomic_write(target, self._concatenated_parts(session))
            except OSError as e:
                logger.error("Error while completing upload session %s: %s", session_id, e)
                raise StorageUploadError(session.identifier, str(e)) from e
            session.mark_completed()

        self._discard_staging(session_id)
        logger.info(
            "Completed upload session %s: %d bytes from %d parts for %s",
            session_id,
            size,
            len(actual),
            session.identifier,
        )
        return Binary(
            identifier=session.identifier,
            mime_type=session.mime_type,
            size=size,
            modified=from_timestamp_utc(target.stat().st_mtime),
        )

    def _target_path(self, session: UploadSession) -> Path:
        path = self._get_full_path(session.partition, session.identifier)
        if path is None:
            raise StorageUploadError(
                session.identifier,
                f"No root directory configured for partition {session.partition}",
            )
        return path

    def _concatenated_parts(self, session: UploadSession) -> Iterator[bytes]:
        for part_number, _ in session.sorted_parts():
            with self._part_path(session.session_id, part_number).open("rb") as part:
                yield from iter_chunks(part)

    def abort_upload(self, session_id: str) -> None:
        """Discard all parts. Aborting an aborted session is a no-op.

        Raises:
            UploadSessionNotFoundError: Unknown session.
            UploadStateError: Session already completed.
        """
        session = self._sessions.get(session_id)
        with session.lock:
            if session.status == UploadStatus.ABORTED:
                return
            session.mark_aborted()
        self._discard_staging(session_id)
        logger.info("Aborted upload session %s for %s", session_id, session.identifier)

    def upload_session_exists(self, session_id: str) -> bool:
        """True while the session is initiated or in progress."""
        session = self._sessions.find(session_id)
        return session is not None and session.is_open
