"""HTTP(S) resolver backed by a pooled httpx client.

Consistency: this backend cannot guarantee atomic replace. A PUT is only
as atomic as the remote server makes it, which is strictly weaker than
the temp-file + rename used by the filesystem backends.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Iterator, Mapping
from threading import BoundedSemaphore, Lock
from typing import BinaryIO

import httpx

from binstore.core.constants import (
    CHUNK_SIZE,
    DEFAULT_HTTP_MAX_CONNECTIONS_PER_ROUTE,
    DEFAULT_HTTP_MAX_CONNECTIONS_TOTAL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    HTTP_ABSENT_STATUSES,
    HTTP_SCHEMES,
)
from binstore.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageIOError,
    StorageNotSupportedError,
    StorageUploadError,
)
from binstore.infrastructure.external.storage.base import (
    NoMultipartUploadMixin,
    iter_chunks,
)

logger = logging.getLogger(__name__)

# Errors raised by httpx for a request that could not be completed.
_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError)


class HttpResponseStream(io.RawIOBase):
    """Readable raw stream over a live (unbuffered) httpx response body.

    Closing the stream closes the response, returning its connection to
    the pool, and runs on_close once.
    """

    def __init__(
        self,
        response: httpx.Response,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        super().__init__()
        self._response = response
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._pending = b""
        self._on_close = on_close

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: memoryview | bytearray) -> int:  # type: ignore[override]
        while not self._pending:
            try:
                chunk = next(self._chunks, None)
            except (httpx.HTTPError, httpx.StreamError) as e:
                raise OSError(f"Error reading {self._response.url}: {e}") from e
            if chunk is None:
                return 0
            self._pending = chunk
        n = min(len(buffer), len(self._pending))
        buffer[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._response.close()
        finally:
            if self._on_close is not None:
                self._on_close()
            super().close()


class HttpResolver(NoMultipartUploadMixin):
    """Remote storage for the `http` and `https` schemes.

    The identifier is used as the request URL. Redirects are followed for
    every method, including http <-> https. Concurrency is capped by the
    client pool (max_connections_total) and by a per-origin limit
    (max_connections_per_route); callers over either cap block until a
    connection frees up.
    """

    URI_SCHEMES: tuple[str, ...] = HTTP_SCHEMES
    BACKEND_NAME = "http"

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        max_connections_per_route: int = DEFAULT_HTTP_MAX_CONNECTIONS_PER_ROUTE,
        max_connections_total: int = DEFAULT_HTTP_MAX_CONNECTIONS_TOTAL,
        timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        read_only: bool = False,
    ) -> None:
        """Initialize HTTP storage.

        Args:
            client: Pre-built client (tests or DI). Its pool settings are
                used as-is and it is not closed by close().
            max_connections_per_route: Concurrent requests per origin.
            max_connections_total: Pool size of the client created here.
            timeout_seconds: Connect/read/write timeout of the client created here.
            read_only: Reject set_content/purge_content.
        """
        if max_connections_per_route < 1 or max_connections_total < 1:
            raise ValueError("HTTP connection limits must be positive")
        self._owns_client = client is None
        self._client = client or self.create_client(
            max_connections_total, timeout_seconds
        )
        self.max_connections_per_route = max_connections_per_route
        self.read_only = read_only
        self._route_slots: dict[str, BoundedSemaphore] = {}
        self._route_slots_lock = Lock()

    @staticmethod
    def create_client(
        max_connections_total: int = DEFAULT_HTTP_MAX_CONNECTIONS_TOTAL,
        timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    ) -> httpx.Client:
        """Create a pooled client that follows redirects.

        Pool acquisition has no timeout: over the limit, callers wait.
        """
        return httpx.Client(
            follow_redirects=True,
            limits=httpx.Limits(
                max_connections=max_connections_total,
                max_keepalive_connections=max_connections_total,
            ),
            timeout=httpx.Timeout(timeout_seconds, pool=None),
        )

    def get_uri_schemes(self) -> tuple[str, ...]:
        return self.URI_SCHEMES

    def _route_slot(self, identifier: str) -> BoundedSemaphore:
        try:
            url = httpx.URL(identifier)
        except httpx.InvalidURL:
            origin = identifier
        else:
            origin = f"{url.scheme}://{url.host}:{url.port or ''}"
        with self._route_slots_lock:
            slot = self._route_slots.get(origin)
            if slot is None:
                slot = BoundedSemaphore(self.max_connections_per_route)
                self._route_slots[origin] = slot
            return slot

    def _require_writable(self, operation: str) -> None:
        if self.read_only:
            raise StorageNotSupportedError(operation, "read-only http")

    def exists(self, partition: str, identifier: str) -> bool:
        """HEAD the identifier; any status below 400 means it exists."""
        slot = self._route_slot(identifier)
        with slot:
            try:
                response = self._client.head(identifier)
            except _REQUEST_ERRORS as e:
                logger.error("Error while checking for %s: %s", identifier, e)
                raise StorageIOError(identifier, str(e)) from e
        logger.debug("HTTP HEAD %s returned %s", identifier, response.status_code)
        return response.status_code < 400

    def get_content(self, partition: str, identifier: str) -> BinaryIO | None:
        """GET the identifier and return its live body stream.

        The body is not buffered; the caller must close the returned stream
        to release the connection. 404/410 return None.
        """
        slot = self._route_slot(identifier)
        slot.acquire()
        try:
            request = self._client.build_request("GET", identifier)
            response = self._client.send(request, stream=True)
        except _REQUEST_ERRORS as e:
            slot.release()
            logger.error("IO Error while fetching the content for %s: %s", identifier, e)
            raise StorageDownloadError(identifier, str(e)) from e
        logger.debug(
            "HTTP GET Request to %s returned %s status: %s",
            identifier,
            response.status_code,
            response.reason_phrase,
        )
        if response.status_code >= 400:
            response.close()
            slot.release()
            if response.status_code in HTTP_ABSENT_STATUSES:
                return None
            raise StorageDownloadError(
                identifier,
                f"HTTP GET returned {response.status_code} {response.reason_phrase}",
            )
        raw = HttpResponseStream(response, on_close=slot.release)
        return io.BufferedReader(raw, buffer_size=CHUNK_SIZE)

    def set_content(
        self,
        partition: str,
        identifier: str,
        stream: BinaryIO,
        metadata: Mapping[str, str] | None = None,
    ) -> None:
        """PUT the raw stream (chunked). Any status >= 300 is a write failure."""
        self._require_writable("set_content")
        headers = {}
        content_type = (metadata or {}).get("content_type")
        if content_type:
            headers["Content-Type"] = content_type
        with self._route_slot(identifier):
            try:
                with stream:
                    response = self._client.put(
                        identifier, content=iter_chunks(stream), headers=headers
                    )
            except (*_REQUEST_ERRORS, OSError) as e:
                logger.error(
                    "IO Error while setting the content for %s: %s", identifier, e
                )
                raise StorageUploadError(identifier, str(e)) from e
        logger.info(
            "HTTP PUT Request to %s returned %s status: %s",
            identifier,
            response.status_code,
            response.reason_phrase,
        )
        if response.status_code >= 300:
            raise StorageUploadError(
                identifier,
                f"HTTP PUT request failed with a {response.status_code} "
                f"{response.reason_phrase}",
            )

    def purge_content(self, partition: str, identifier: str) -> None:
        """DELETE the identifier; 404/410 are treated as already purged."""
        self._require_writable("purge_content")
        with self._route_slot(identifier):
            try:
                response = self._client.delete(identifier)
            except _REQUEST_ERRORS as e:
                logger.error("IO Error while purging %s: %s", identifier, e)
                raise StorageDeleteError(identifier, str(e)) from e
        status = response.status_code
        logger.debug("HTTP DELETE %s returned %s", identifier, status)
        if status >= 300 and status not in HTTP_ABSENT_STATUSES:
            raise StorageDeleteError(
                identifier, f"HTTP DELETE returned {status} {response.reason_phrase}"
            )

    def close(self) -> None:
        """Close the connection pool if this resolver created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpResolver":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
