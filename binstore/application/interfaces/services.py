"""Service protocols (DIP).

Define contracts for the binary service and its collaborators so callers
and tests can substitute implementations.
"""

from collections.abc import Callable
from typing import BinaryIO, Protocol

from binstore.application.interfaces.storage import StorageResolver
from binstore.domain.enums import DigestEncoding


class IDigestService(Protocol):
    """Protocol for streaming digest computation."""

    def digest(
        self,
        algorithm: str | None,
        stream: BinaryIO,
        encoding: DigestEncoding | None = None,
    ) -> str | None:
        """Return the encoded digest, or None (unsupported algorithm or I/O error)."""

    def supported_algorithms(self) -> frozenset[str]:
        """Return accepted algorithm names."""


class IIdentifierService(Protocol):
    """Protocol for identifier minting (external collaborator)."""

    def get_supplier(
        self, prefix: str, levels: int = 0, length: int = 2
    ) -> Callable[[], str]:
        """Return a supplier of fresh identifiers under prefix."""


class IBinaryService(Protocol):
    """Protocol for the resolver registry / binary service."""

    def bind(self, resolver: StorageResolver) -> None:
        """Bind the resolver's schemes (last bind wins)."""

    def unbind(self, resolver: StorageResolver) -> None:
        """Unbind the resolver's schemes where still bound to it."""

    def get_resolver(self, identifier: str) -> StorageResolver | None:
        """Return the resolver for the identifier's scheme, or None."""

    def get_resolver_for_partition(self, partition: str) -> StorageResolver | None:
        """Return the resolver for the partition's prefix scheme, or None."""

    def get_identifier_supplier(self, partition: str) -> Callable[[], str]:
        """Return an identifier supplier for the partition."""

    def digest(
        self,
        algorithm: str | None,
        stream: BinaryIO,
        encoding: DigestEncoding | None = None,
    ) -> str | None:
        """Digest a stream with the service's engine."""

    def supported_algorithms(self) -> frozenset[str]:
        """Return accepted algorithm names."""
