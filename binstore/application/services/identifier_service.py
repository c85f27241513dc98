"""Identifier service: mints fresh identifiers for a partition.

An identifier is prefix + optional hierarchy segments + a CUID2 leaf.
Segments are cut from the SHA-256 hex digest of the leaf, so fan-out is
uniform across directories while the leaf alone keeps ids unique.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable

from binstore.domain.exceptions import ConfigurationException
from binstore.domain.value_objects import MAX_SEGMENT_CHARS
from binstore.shared.utils.generators import generate_cuid


class IdentifierService:
    """Default identifier minting (IIdentifierService)."""

    def __init__(self, id_generator: Callable[[], str] | None = None) -> None:
        """Initialize with an optional leaf generator (for tests or DI).

        Args:
            id_generator: Zero-arg callable returning a unique leaf id.
        """
        self._generate = id_generator or generate_cuid

    @staticmethod
    def hierarchy(leaf: str, levels: int, length: int) -> list[str]:
        """Return the directory segments for a leaf id.

        Args:
            leaf: Unique leaf id.
            levels: Number of segments.
            length: Characters per segment.

        Returns:
            List of `levels` hex strings of `length` characters each.
        """
        if levels < 0 or length < 1 or levels * length > MAX_SEGMENT_CHARS:
            raise ConfigurationException(
                f"Invalid hierarchy: levels={levels}, length={length}"
            )
        digest = hashlib.sha256(leaf.encode()).hexdigest()
        return [digest[i * length : (i + 1) * length] for i in range(levels)]

    def get_supplier(
        self, prefix: str, levels: int = 0, length: int = 2
    ) -> Callable[[], str]:
        """Return a supplier of fresh identifiers under prefix.

        The prefix is used verbatim (e.g. 'file:' or 'file:binaries/').
        """
        # Validate eagerly so a bad hierarchy fails before the first call.
        self.hierarchy("", levels, length)

        def supplier() -> str:
            leaf = self._generate()
            segments = self.hierarchy(leaf, levels, length)
            return prefix + "".join(f"{s}/" for s in segments) + leaf

        return supplier
