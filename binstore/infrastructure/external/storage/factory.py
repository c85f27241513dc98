"""Binary service factory: builds resolvers and the binary service from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from binstore.application.interfaces.storage import StorageResolver
from binstore.application.services.binary_service import DefaultBinaryService
from binstore.application.services.digest_service import DigestService
from binstore.application.services.identifier_service import IdentifierService
from binstore.domain.enums import DigestEncoding
from binstore.domain.exceptions import ConfigurationException

if TYPE_CHECKING:
    from binstore.application.interfaces.services import IIdentifierService
    from binstore.core.config import Settings

logger = logging.getLogger(__name__)


class BinaryServiceFactory:
    """Factory for resolver and binary service instances based on configuration."""

    @staticmethod
    def create_resolvers(settings: "Settings") -> list[StorageResolver]:
        """Create the bundled resolvers enabled by settings.

        The file resolver is always created (it may have no partitions);
        the HTTP resolver unless http_enabled is false; the chunked resolver
        only when chunked_partitions is set.
        """
        from binstore.infrastructure.external.storage.file_resolver import FileResolver

        resolvers: list[StorageResolver] = [FileResolver(settings.file_partitions)]
        try:
            if settings.http_enabled:
                from binstore.infrastructure.external.storage.http_resolver import (
                    HttpResolver,
                )

                resolvers.append(
                    HttpResolver(
                        max_connections_per_route=settings.http_max_connections_per_route,
                        max_connections_total=settings.http_max_connections_total,
                        timeout_seconds=settings.http_timeout_seconds,
                        read_only=settings.http_read_only,
                    )
                )
            if settings.chunked_partitions:
                from binstore.infrastructure.external.storage.chunked_resolver import (
                    ChunkedFileResolver,
                )

                if not settings.chunked_staging_root:
                    raise ConfigurationException(
                        "chunked_staging_root required for chunked partitions"
                    )
                resolvers.append(
                    ChunkedFileResolver(
                        settings.chunked_partitions,
                        settings.chunked_staging_root,
                        digest_service=DigestService(encoding=DigestEncoding.HEX),
                    )
                )
        except Exception:
            BinaryServiceFactory.close_resolvers(resolvers)
            raise
        return resolvers

    @staticmethod
    def close_resolvers(resolvers: list[StorageResolver]) -> None:
        """Close resolvers built for a service that will not be returned."""
        for resolver in resolvers:
            try:
                resolver.close()
            except Exception as e:
                logger.warning("Error closing %s: %s", type(resolver).__name__, e)

    @staticmethod
    def create_binary_service(
        settings: "Settings | None" = None,
        identifier_service: "IIdentifierService | None" = None,
    ) -> DefaultBinaryService:
        """Create a binary service from settings.

        Args:
            settings: Settings; if None, uses get_settings().
            identifier_service: Identifier minting; defaults to IdentifierService().

        Returns:
            DefaultBinaryService with the bundled resolvers bound.

        Raises:
            ConfigurationException: Invalid settings or partition configuration.
        """
        from binstore.core.config import get_settings

        try:
            s = settings or get_settings()
        except ValidationError as e:
            raise ConfigurationException(f"Invalid binstore settings: {e}") from e

        resolvers = BinaryServiceFactory.create_resolvers(s)
        partitions = {name: entry.model_dump() for name, entry in s.partitions.items()}
        try:
            return DefaultBinaryService(
                identifier_service or IdentifierService(),
                partitions,
                resolvers,
                digest_service=DigestService(encoding=s.digest_encoding),
            )
        except ConfigurationException:
            BinaryServiceFactory.close_resolvers(resolvers)
            raise
