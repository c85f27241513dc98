"""Pytest configuration and fixtures for binstore.

Filesystem fixtures live under pytest's tmp_path; HTTP tests use
httpx.MockTransport so no network is touched. Settings are cached by
get_settings(), so the cache is cleared around every test.
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

from binstore.application.services import DigestService
from binstore.core.config import get_settings
from binstore.domain.enums import DigestEncoding
from binstore.infrastructure.external.storage import (
    ChunkedFileResolver,
    FileResolver,
    HttpResolver,
)


class StubResolver:
    """Minimal resolver for registry and routing tests (no storage)."""

    def __init__(self, *schemes: str) -> None:
        self.schemes = schemes
        self.closed = False

    def get_uri_schemes(self) -> tuple[str, ...]:
        return self.schemes

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def stub_resolver() -> type[StubResolver]:
    """StubResolver class; call it with the schemes to claim."""
    return StubResolver


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Root directory of the 'repository' partition."""
    return tmp_path / "repository"


@pytest.fixture
def file_resolver(repo_root: Path) -> FileResolver:
    return FileResolver({"repository": repo_root})


@pytest.fixture
def staging_root(tmp_path: Path) -> Path:
    return tmp_path / "staging"


@pytest.fixture
def chunked_resolver(repo_root: Path, staging_root: Path) -> ChunkedFileResolver:
    return ChunkedFileResolver(
        {"repository": repo_root},
        staging_root,
        digest_service=DigestService(encoding=DigestEncoding.HEX),
    )


@pytest.fixture
def make_http_resolver() -> Iterator[Callable[..., HttpResolver]]:
    """Build an HttpResolver whose client is served by a MockTransport handler."""
    clients: list[httpx.Client] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response], **kwargs: object
    ) -> HttpResolver:
        client = httpx.Client(
            transport=httpx.MockTransport(handler), follow_redirects=True
        )
        clients.append(client)
        return HttpResolver(client, **kwargs)

    yield _make
    for client in clients:
        client.close()
