"""In-memory store for multipart upload sessions.

Single place for session state; sessions are keyed by session_id and kept
after they reach a terminal status so that repeated aborts stay no-ops and
late part uploads are rejected instead of silently reopening a session.
"""

from __future__ import annotations

from threading import Lock

from binstore.core.constants import DEFAULT_MIME_TYPE
from binstore.domain.entities import UploadSession
from binstore.domain.exceptions import UploadSessionNotFoundError
from binstore.shared.utils.generators import generate_cuid


class UploadSessionStore:
    """Thread-safe in-memory registry of upload sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, UploadSession] = {}
        self._lock = Lock()

    def create(
        self, partition: str, identifier: str, mime_type: str | None
    ) -> UploadSession:
        """Register a new session in the initiated state (mime type defaults to octet-stream)."""
        session = UploadSession(
            session_id=generate_cuid(),
            partition=partition,
            identifier=identifier,
            mime_type=mime_type or DEFAULT_MIME_TYPE,
        )
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def find(self, session_id: str) -> UploadSession | None:
        """Return the session or None if not found."""
        with self._lock:
            return self._sessions.get(session_id)

    def get(self, session_id: str) -> UploadSession:
        """Return the session.

        Raises:
            UploadSessionNotFoundError: Unknown session id.
        """
        session = self.find(session_id)
        if session is None:
            raise UploadSessionNotFoundError(session_id)
        return session

    def open_sessions(self) -> list[UploadSession]:
        """Sessions that are neither completed nor aborted."""
        with self._lock:
            return [s for s in self._sessions.values() if s.is_open]
