"""Local filesystem resolver with atomic writes and path traversal protection."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO

from binstore.core.constants import FILE_SCHEMES
from binstore.domain.value_objects import Identifier
from binstore.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageIOError,
    StoragePermissionError,
    StorageUploadError,
)
from binstore.infrastructure.external.storage.base import (
    NoMultipartUploadMixin,
    atomic_write,
    iter_chunks,
)

logger = logging.getLogger(__name__)


class FileResolver(NoMultipartUploadMixin):
    """Filesystem storage for the `file` scheme.

    Each partition maps to a root directory. An identifier's location is
    root + its scheme-specific part taken as a raw relative path, so
    'file:ab/cd/doc.txt' in partition 'repository' lives at
    <root>/ab/cd/doc.txt. Locations are validated against the root.
    Writes use temp file + rename.
    """

    URI_SCHEMES: tuple[str, ...] = FILE_SCHEMES
    BACKEND_NAME = "file"

    def __init__(self, partitions: Mapping[str, str | Path]) -> None:
        """Initialize file storage.

        Args:
            partitions: Partition name -> root directory. Roots are created
                lazily on first write.
        """
        self._partitions = {
            name: Path(root).expanduser().resolve() for name, root in partitions.items()
        }

    def get_uri_schemes(self) -> tuple[str, ...]:
        return self.URI_SCHEMES

    def _get_full_path(self, partition: str, identifier: str) -> Path | None:
        """Map (partition, identifier) to a path under the partition root.

        Returns None for an unknown partition. Raises StoragePermissionError
        if the identifier escapes the root (e.g. 'file:../x').
        """
        root = self._partitions.get(partition)
        if root is None:
            return None
        relative = Identifier(identifier).scheme_specific_part.lstrip("/")
        full_path = (root / relative).resolve()
        try:
            full_path.relative_to(root)
        except ValueError as e:
            raise StoragePermissionError(identifier, "path_validation") from e
        return full_path

    def exists(self, partition: str, identifier: str) -> bool:
        path = self._get_full_path(partition, identifier)
        if path is None:
            return False
        try:
            return path.is_file()
        except OSError as e:
            logger.error("Error while checking for %s: %s", identifier, e)
            raise StorageIOError(identifier, str(e)) from e

    def get_content(self, partition: str, identifier: str) -> BinaryIO | None:
        path = self._get_full_path(partition, identifier)
        if path is None:
            return None
        try:
            return path.open("rb")
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            return None
        except OSError as e:
            logger.error("Error while reading %s at %s: %s", identifier, path, e)
            raise StorageDownloadError(identifier, str(e)) from e

    def set_content(
        self,
        partition: str,
        identifier: str,
        stream: BinaryIO,
        metadata: Mapping[str, str] | None = None,
    ) -> None:
        """Atomically replace the content at the identifier's location.

        The stream is read to EOF and closed. Metadata is not persisted by
        this backend.
        """
        path = self._get_full_path(partition, identifier)
        if path is None:
            raise StorageUploadError(
                identifier, f"No root directory configured for partition {partition}"
            )
        logger.debug("Setting binary content for %s at %s", identifier, path)
        try:
            with stream:
                size = atomic_write(path, iter_chunks(stream))
        except OSError as e:
            logger.error("Error while setting content for %s: %s", identifier, e)
            raise StorageUploadError(identifier, str(e)) from e
        logger.info("Stored %d bytes for %s", size, identifier)

    def purge_content(self, partition: str, identifier: str) -> None:
        path = self._get_full_path(partition, identifier)
        if path is None:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Error while purging %s: %s", identifier, e)
            raise StorageDeleteError(identifier, str(e)) from e
        logger.debug("Purged %s", identifier)

    def close(self) -> None:
        """Nothing to release for the filesystem."""
