"""Domain value objects: identifiers and partition configuration."""

from binstore.domain.value_objects.core import (
    MAX_SEGMENT_CHARS,
    Identifier,
    PartitionConfig,
)

__all__ = ["Identifier", "PartitionConfig", "MAX_SEGMENT_CHARS"]
