"""Domain value objects for binstore.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from binstore.domain.exceptions import ConfigurationException

# Hex characters available to the segmenting function (SHA-256 hex digest).
MAX_SEGMENT_CHARS = 64


def _split_scheme(value: str) -> tuple[str | None, str]:
    """Split 'scheme:rest' into its parts. Scheme is None when absent or malformed.

    Follows RFC 3986: a scheme starts with a letter and continues with
    letters, digits, '+', '-' or '.'.
    """
    scheme, sep, rest = value.partition(":")
    if not sep or not scheme or not scheme[0].isascii() or not scheme[0].isalpha():
        return None, value
    if not all(c.isascii() and (c.isalnum() or c in "+-.") for c in scheme):
        return None, value
    return scheme.lower(), rest


@dataclass(frozen=True)
class Identifier:
    """Opaque URI identifying a binary.

    Only the scheme is interpreted here (it selects the resolver). The
    scheme-specific part is left to each resolver: a raw relative path for
    the file backends, the whole URI for HTTP.
    """

    value: str

    @property
    def scheme(self) -> str | None:
        return _split_scheme(self.value)[0]

    @property
    def scheme_specific_part(self) -> str:
        return _split_scheme(self.value)[1]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PartitionConfig:
    """Immutable configuration of one named partition.

    Attributes:
        name: Partition name (e.g. 'repository').
        prefix: '<scheme>:<opaque-prefix>' prepended to minted identifiers.
        levels: Number of hierarchy segments inserted before the id leaf.
        length: Characters per hierarchy segment.
    """

    DEFAULT_LEVELS: ClassVar[int] = 0
    DEFAULT_LENGTH: ClassVar[int] = 2

    name: str
    prefix: str
    levels: int = DEFAULT_LEVELS
    length: int = DEFAULT_LENGTH

    def __post_init__(self) -> None:
        if not self.prefix:
            raise ConfigurationException(
                f"No prefix value defined for partition: {self.name}", self.name
            )
        if Identifier(self.prefix).scheme is None:
            raise ConfigurationException(
                f"Prefix '{self.prefix}' of partition {self.name} has no URI scheme",
                self.name,
            )
        if self.levels < 0:
            raise ConfigurationException(
                f"levels must be non-negative for partition {self.name}", self.name
            )
        if self.length < 1:
            raise ConfigurationException(
                f"length must be positive for partition {self.name}", self.name
            )
        if self.levels * self.length > MAX_SEGMENT_CHARS:
            raise ConfigurationException(
                f"levels * length must not exceed {MAX_SEGMENT_CHARS} "
                f"for partition {self.name}",
                self.name,
            )

    @property
    def scheme(self) -> str:
        """URI scheme of the prefix (validated non-empty at construction)."""
        return Identifier(self.prefix).scheme or ""

    @classmethod
    def from_mapping(cls, name: str, entry: Mapping[str, Any]) -> "PartitionConfig":
        """Build from a raw configuration entry {prefix, levels, length}.

        Numeric values may be given as strings (e.g. from properties files).

        Raises:
            ConfigurationException: Missing prefix or non-numeric levels/length.
        """
        prefix = entry.get("prefix")
        if prefix is None:
            raise ConfigurationException(
                f"No prefix value defined for partition: {name}", name
            )
        return cls(
            name=name,
            prefix=str(prefix),
            levels=_parse_int(entry.get("levels"), cls.DEFAULT_LEVELS, "levels", name),
            length=_parse_int(entry.get("length"), cls.DEFAULT_LENGTH, "length", name),
        )


def _parse_int(raw: Any, default: int, field_name: str, partition: str) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationException(
            f"Invalid {field_name} value for partition {partition}: {raw!r}",
            partition,
        ) from e
