"""Digest service: streaming hash computation over byte streams.

Algorithms are looked up by case-insensitive name ("SHA" aliases SHA-1)
and the result is encoded as lowercase hex or standard base64. MD2 is not
available from hashlib/OpenSSL and comes from pycryptodome.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import BinaryIO, Protocol

from Crypto.Hash import MD2

from binstore.core.constants import CHUNK_SIZE
from binstore.domain.enums import DigestEncoding

logger = logging.getLogger(__name__)


class Hasher(Protocol):
    """Running hash accumulator (hashlib and pycryptodome objects both fit)."""

    def update(self, data: bytes) -> object: ...

    def digest(self) -> bytes: ...


class HashAlgorithm(ABC):
    """Abstract hash algorithm (OCP)."""

    @abstractmethod
    def new(self) -> Hasher:
        """Return a fresh accumulator."""
        ...


class HashlibAlgorithm(HashAlgorithm):
    """Algorithm backed by hashlib (MD5, SHA family)."""

    def __init__(self, hashlib_name: str) -> None:
        self.hashlib_name = hashlib_name

    def new(self) -> Hasher:
        return hashlib.new(self.hashlib_name)


class MD2Algorithm(HashAlgorithm):
    """MD2 implementation (pycryptodome)."""

    def new(self) -> Hasher:
        return MD2.new()


DEFAULT_ALGORITHMS: Mapping[str, HashAlgorithm] = {
    "MD2": MD2Algorithm(),
    "MD5": HashlibAlgorithm("md5"),
    "SHA-1": HashlibAlgorithm("sha1"),
    "SHA-256": HashlibAlgorithm("sha256"),
    "SHA-384": HashlibAlgorithm("sha384"),
    "SHA-512": HashlibAlgorithm("sha512"),
}

ALGORITHM_ALIASES: Mapping[str, str] = {"SHA": "SHA-1"}


class DigestService:
    """Single source of truth for binary digest computation (IDigestService).

    The engine's encoding is a construction-time choice; digest() also
    accepts a per-call override for call sites that need the other one.
    """

    def __init__(
        self,
        encoding: DigestEncoding = DigestEncoding.BASE64,
        chunk_size: int = CHUNK_SIZE,
        algorithms: Mapping[str, HashAlgorithm] | None = None,
    ) -> None:
        self.encoding = encoding
        self.chunk_size = chunk_size
        self._algorithms = dict(algorithms or DEFAULT_ALGORITHMS)

    def normalize(self, algorithm: str | None) -> str | None:
        """Return the canonical algorithm name, or None if unsupported."""
        if not algorithm:
            return None
        name = algorithm.strip().upper()
        name = ALGORITHM_ALIASES.get(name, name)
        return name if name in self._algorithms else None

    def supported_algorithms(self) -> frozenset[str]:
        """Canonical names plus aliases whose target is supported."""
        aliases = {a for a, target in ALGORITHM_ALIASES.items() if target in self._algorithms}
        return frozenset(self._algorithms) | aliases

    def new_hash(self, algorithm: str | None) -> Hasher | None:
        """Return a fresh accumulator for the algorithm, or None if unsupported."""
        name = self.normalize(algorithm)
        if name is None:
            return None
        return self._algorithms[name].new()

    def encode(self, raw: bytes, encoding: DigestEncoding | None = None) -> str:
        """Encode raw digest bytes as lowercase hex or standard base64."""
        if (encoding or self.encoding) == DigestEncoding.HEX:
            return raw.hex()
        return base64.b64encode(raw).decode("ascii")

    def digest(
        self,
        algorithm: str | None,
        stream: BinaryIO,
        encoding: DigestEncoding | None = None,
    ) -> str | None:
        """Digest a stream, reading it once in chunks.

        The stream is owned by this call and closed before returning, also
        when the algorithm is unsupported or reading fails.

        Returns:
            Encoded digest, or None when the algorithm is unsupported or the
            stream could not be read (I/O error, or already closed). The
            causes are not distinguished by the return value; read failures
            are logged.
        """
        hasher = self.new_hash(algorithm)
        try:
            with stream:
                if hasher is None:
                    logger.debug("Unsupported digest algorithm: %s", algorithm)
                    return None
                while True:
                    chunk = stream.read(self.chunk_size)
                    if not chunk:
                        break
                    hasher.update(chunk)
        except (OSError, ValueError) as e:
            logger.error("Error computing %s digest: %s", algorithm, e)
            return None
        return self.encode(hasher.digest(), encoding)
