"""Application services: binary service, registry, digests, identifiers."""

from binstore.application.services.binary_service import DefaultBinaryService
from binstore.application.services.digest_service import (
    ALGORITHM_ALIASES,
    DEFAULT_ALGORITHMS,
    DigestService,
    HashAlgorithm,
    HashlibAlgorithm,
    MD2Algorithm,
)
from binstore.application.services.identifier_service import IdentifierService
from binstore.application.services.resolver_registry import ResolverRegistry

__all__ = [
    "ALGORITHM_ALIASES",
    "DEFAULT_ALGORITHMS",
    "DefaultBinaryService",
    "DigestService",
    "HashAlgorithm",
    "HashlibAlgorithm",
    "IdentifierService",
    "MD2Algorithm",
    "ResolverRegistry",
]
