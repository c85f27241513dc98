"""Helpers shared by the bundled storage resolvers."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import BinaryIO, NoReturn

from binstore.core.constants import CHUNK_SIZE
from binstore.domain.entities import Binary
from binstore.infrastructure.exceptions import StorageNotSupportedError


def iter_chunks(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the stream's content in chunks until EOF."""
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield chunk


def atomic_write(
    target: Path,
    chunks: Iterable[bytes],
    expected_size: int | None = None,
) -> int:
    """Write chunks to target via temp file + rename. Returns bytes written.

    The temp file lives in target's directory so os.replace is atomic:
    concurrent readers see either the previous file or the complete new
    one. Missing parent directories are created. When expected_size is
    given and does not match, ValueError is raised and target is left
    untouched.

    Raises:
        OSError: Filesystem failure (temp file is removed).
        ValueError: Size mismatch.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(
        dir=target.parent,
        prefix=".tmp_",
        suffix=target.suffix,
    )
    try:
        size = 0
        with os.fdopen(temp_fd, "wb") as f:
            for chunk in chunks:
                f.write(chunk)
                size += len(chunk)
            f.flush()
            os.fsync(f.fileno())
        if expected_size is not None and size != expected_size:
            raise ValueError(f"expected {expected_size} bytes, received {size}")
        os.replace(temp_path, target)
        return size
    finally:
        if os.path.exists(temp_path):
            os.unlink(temp_path)


class NoMultipartUploadMixin:
    """Multipart operations for backends that do not opt in.

    Every call fails fast with StorageNotSupportedError rather than
    degrading to a single-shot upload.
    """

    BACKEND_NAME = "unknown"

    def supports_multipart_upload(self) -> bool:
        return False

    def _unsupported(self, operation: str) -> NoReturn:
        raise StorageNotSupportedError(operation, self.BACKEND_NAME)

    def initiate_upload(
        self, partition: str, identifier: str, mime_type: str | None
    ) -> str:
        self._unsupported("initiate_upload")

    def upload_part(
        self,
        session_id: str,
        part_number: int,
        length: int | None,
        stream: BinaryIO,
    ) -> str:
        self._unsupported("upload_part")

    def list_parts(self, session_id: str) -> Iterable[tuple[int, str]]:
        self._unsupported("list_parts")

    def complete_upload(
        self, session_id: str, part_digests: Mapping[int, str]
    ) -> Binary:
        self._unsupported("complete_upload")

    def abort_upload(self, session_id: str) -> None:
        self._unsupported("abort_upload")

    def upload_session_exists(self, session_id: str) -> bool:
        self._unsupported("upload_session_exists")
