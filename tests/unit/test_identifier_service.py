"""Tests for IdentifierService (prefix, hierarchy segments, uniqueness)."""

import hashlib

import pytest

from binstore.application.services.identifier_service import IdentifierService
from binstore.domain.exceptions import ConfigurationException


class TestHierarchy:
    """Segments are cut from the SHA-256 hex digest of the leaf."""

    def test_segments(self) -> None:
        digest = hashlib.sha256(b"leaf").hexdigest()
        assert IdentifierService.hierarchy("leaf", 3, 2) == [
            digest[0:2],
            digest[2:4],
            digest[4:6],
        ]

    def test_zero_levels(self) -> None:
        assert IdentifierService.hierarchy("leaf", 0, 2) == []

    def test_invalid(self) -> None:
        with pytest.raises(ConfigurationException):
            IdentifierService.hierarchy("leaf", -1, 2)
        with pytest.raises(ConfigurationException):
            IdentifierService.hierarchy("leaf", 1, 0)
        with pytest.raises(ConfigurationException):
            IdentifierService.hierarchy("leaf", 33, 2)


class TestSupplier:
    """get_supplier mints prefix + segments + leaf."""

    def test_flat(self) -> None:
        supplier = IdentifierService(lambda: "abc").get_supplier("file:")
        assert supplier() == "file:abc"

    def test_prefix_used_verbatim(self) -> None:
        supplier = IdentifierService(lambda: "abc").get_supplier("file:binaries/")
        assert supplier() == "file:binaries/abc"

    def test_with_hierarchy(self) -> None:
        digest = hashlib.sha256(b"abc").hexdigest()
        supplier = IdentifierService(lambda: "abc").get_supplier("file:", 2, 3)
        assert supplier() == f"file:{digest[0:3]}/{digest[3:6]}/abc"

    def test_default_generator_is_unique(self) -> None:
        supplier = IdentifierService().get_supplier("file:", 2, 2)
        minted = {supplier() for _ in range(200)}
        assert len(minted) == 200
        for identifier in minted:
            assert identifier.startswith("file:")
            assert identifier.count("/") == 2

    def test_invalid_hierarchy_fails_eagerly(self) -> None:
        with pytest.raises(ConfigurationException):
            IdentifierService().get_supplier("file:", 65, 1)
