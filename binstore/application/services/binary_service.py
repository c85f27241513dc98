"""Default binary service: routes identifiers and partitions to resolvers.

Partitions are validated when the service is constructed: each needs a
prefix whose scheme is already bound to a resolver. A misconfigured
partition therefore fails at startup, never on the first request.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any, BinaryIO

from binstore.application.interfaces.services import IDigestService, IIdentifierService
from binstore.application.interfaces.storage import StorageResolver
from binstore.application.services.digest_service import DigestService
from binstore.application.services.resolver_registry import ResolverRegistry
from binstore.domain.enums import DigestEncoding
from binstore.domain.exceptions import ConfigurationException
from binstore.domain.value_objects import Identifier, PartitionConfig

logger = logging.getLogger(__name__)

PartitionEntry = PartitionConfig | Mapping[str, Any]


class DefaultBinaryService:
    """Resolver registry plus partition configuration (IBinaryService)."""

    def __init__(
        self,
        identifier_service: IIdentifierService,
        partitions: Mapping[str, PartitionEntry],
        resolvers: Iterable[StorageResolver],
        digest_service: IDigestService | None = None,
    ) -> None:
        """Bind resolvers, then validate and freeze partition configuration.

        Args:
            identifier_service: Mints identifiers for get_identifier_supplier.
            partitions: Partition name -> PartitionConfig or raw
                {prefix, levels, length} mapping.
            resolvers: Resolvers to bind, in order (last bind wins per scheme).
            digest_service: Digest engine; defaults to a base64 DigestService.

        Raises:
            ConfigurationException: A partition has no prefix, invalid
                hierarchy values, or a prefix scheme with no bound resolver.
        """
        self._identifier_service = identifier_service
        self._digest_service: IDigestService = digest_service or DigestService()
        self._registry = ResolverRegistry()
        for resolver in resolvers:
            self._registry.bind(resolver)

        configs: dict[str, PartitionConfig] = {}
        for name, entry in partitions.items():
            config = (
                entry
                if isinstance(entry, PartitionConfig)
                else PartitionConfig.from_mapping(name, entry)
            )
            if self._registry.get(config.scheme) is None:
                logger.error(
                    "No binary resolver for prefix %s in partition %s",
                    config.prefix,
                    name,
                )
                raise ConfigurationException(
                    f"No binary resolver defined to handle prefix {config.prefix} "
                    f"in partition {name}",
                    name,
                )
            configs[name] = config
        self._partitions: Mapping[str, PartitionConfig] = MappingProxyType(configs)
        logger.info(
            "Binary service ready: partitions=%s schemes=%s",
            sorted(configs),
            sorted(self._registry.schemes()),
        )

    @property
    def partitions(self) -> Mapping[str, PartitionConfig]:
        """Read-only view of partition configuration."""
        return self._partitions

    @property
    def registry(self) -> ResolverRegistry:
        return self._registry

    def get_partition(self, partition: str) -> PartitionConfig | None:
        return self._partitions.get(partition)

    def bind(self, resolver: StorageResolver) -> None:
        self._registry.bind(resolver)

    def unbind(self, resolver: StorageResolver) -> None:
        self._registry.unbind(resolver)

    def get_resolver(self, identifier: str | Identifier | None) -> StorageResolver | None:
        """Return the resolver bound to the identifier's scheme, or None (never raises)."""
        if identifier is None:
            return None
        if not isinstance(identifier, Identifier):
            identifier = Identifier(str(identifier))
        return self._registry.get(identifier.scheme)

    def get_resolver_for_partition(self, partition: str) -> StorageResolver | None:
        """Return the resolver for the partition's prefix scheme, or None."""
        config = self._partitions.get(partition)
        if config is None:
            return None
        return self._registry.get(config.scheme)

    def get_identifier_supplier(self, partition: str) -> Callable[[], str]:
        """Return a supplier of fresh identifiers for the partition.

        Raises:
            ConfigurationException: Unknown partition.
        """
        config = self._partitions.get(partition)
        if config is None:
            raise ConfigurationException(f"Invalid partition: {partition}", partition)
        return self._identifier_service.get_supplier(
            config.prefix, config.levels, config.length
        )

    def digest(
        self,
        algorithm: str | None,
        stream: BinaryIO,
        encoding: DigestEncoding | None = None,
    ) -> str | None:
        """Digest a stream; see DigestService.digest."""
        return self._digest_service.digest(algorithm, stream, encoding)

    def supported_algorithms(self) -> frozenset[str]:
        return self._digest_service.supported_algorithms()

    def close(self) -> None:
        """Close every bound resolver (e.g. HTTP connection pools)."""
        for resolver in self._registry.resolvers():
            resolver.close()
