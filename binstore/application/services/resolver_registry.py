"""Scheme -> resolver registry.

Owns the only mutable routing state in binstore. Mutations run in one
critical section and publish a new immutable snapshot; lookups read the
current snapshot without taking the lock.
"""

from __future__ import annotations

import logging
from threading import Lock
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from binstore.application.interfaces.storage import StorageResolver

logger = logging.getLogger(__name__)


class ResolverRegistry:
    """Thread-safe registry binding URI schemes to storage resolvers."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._resolvers: Mapping[str, StorageResolver] = MappingProxyType({})

    def bind(self, resolver: StorageResolver) -> None:
        """Bind every scheme the resolver declares. Last bind for a scheme wins."""
        schemes = [s.lower() for s in resolver.get_uri_schemes()]
        with self._lock:
            updated = dict(self._resolvers)
            for scheme in schemes:
                previous = updated.get(scheme)
                if previous is not None and previous is not resolver:
                    logger.info(
                        "Rebinding scheme %s from %s to %s",
                        scheme,
                        type(previous).__name__,
                        type(resolver).__name__,
                    )
                updated[scheme] = resolver
            self._resolvers = MappingProxyType(updated)
        logger.debug("Bound %s for schemes %s", type(resolver).__name__, schemes)

    def unbind(self, resolver: StorageResolver) -> None:
        """Remove the resolver's schemes, only where it is still the bound resolver."""
        schemes = [s.lower() for s in resolver.get_uri_schemes()]
        with self._lock:
            updated = dict(self._resolvers)
            removed = [s for s in schemes if updated.get(s) is resolver]
            if not removed:
                return
            for scheme in removed:
                del updated[scheme]
            self._resolvers = MappingProxyType(updated)
        logger.debug("Unbound %s from schemes %s", type(resolver).__name__, removed)

    def get(self, scheme: str | None) -> StorageResolver | None:
        """Return the resolver bound to scheme, or None."""
        if not scheme:
            return None
        return self._resolvers.get(scheme.lower())

    def schemes(self) -> frozenset[str]:
        """Snapshot of currently bound schemes."""
        return frozenset(self._resolvers)

    def resolvers(self) -> list[StorageResolver]:
        """Distinct bound resolvers, in first-bound-scheme order."""
        seen: list[StorageResolver] = []
        for resolver in self._resolvers.values():
            if not any(r is resolver for r in seen):
                seen.append(resolver)
        return seen
