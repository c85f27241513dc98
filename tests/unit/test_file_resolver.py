"""Tests for FileResolver (round trip, atomic replace, purge, path validation)."""

import io
from pathlib import Path

import pytest

from binstore.application.interfaces import StorageResolver
from binstore.infrastructure.exceptions import (
    StorageNotSupportedError,
    StoragePermissionError,
    StorageUploadError,
)
from binstore.infrastructure.external.storage import FileResolver
from binstore.infrastructure.external.storage.base import atomic_write


class TestFileResolverBasics:
    def test_schemes_and_protocol(self, file_resolver: FileResolver) -> None:
        assert file_resolver.get_uri_schemes() == ("file",)
        assert isinstance(file_resolver, StorageResolver)
        assert not file_resolver.supports_multipart_upload()

    def test_location_is_root_plus_path(
        self, file_resolver: FileResolver, repo_root: Path
    ) -> None:
        file_resolver.set_content("repository", "file:ab/cd/doc.txt", io.BytesIO(b"x"))
        assert (repo_root / "ab" / "cd" / "doc.txt").read_bytes() == b"x"

    def test_leading_slash_stays_under_root(
        self, file_resolver: FileResolver, repo_root: Path
    ) -> None:
        file_resolver.set_content("repository", "file:///abs.txt", io.BytesIO(b"x"))
        assert (repo_root / "abs.txt").is_file()


class TestFileResolverContent:
    def test_round_trip(self, file_resolver: FileResolver) -> None:
        ident = "file:doc.txt"
        assert not file_resolver.exists("repository", ident)
        assert file_resolver.get_content("repository", ident) is None
        file_resolver.set_content("repository", ident, io.BytesIO(b"hello world"))
        assert file_resolver.exists("repository", ident)
        with file_resolver.get_content("repository", ident) as stream:
            assert stream.read() == b"hello world"

    def test_each_get_is_fresh_stream(self, file_resolver: FileResolver) -> None:
        file_resolver.set_content("repository", "file:a", io.BytesIO(b"abc"))
        first = file_resolver.get_content("repository", "file:a")
        second = file_resolver.get_content("repository", "file:a")
        try:
            assert first.read() == b"abc"
            assert second.read() == b"abc"
        finally:
            first.close()
            second.close()

    def test_overwrite_replaces_wholly(self, file_resolver: FileResolver) -> None:
        file_resolver.set_content("repository", "file:a", io.BytesIO(b"a much longer body"))
        file_resolver.set_content("repository", "file:a", io.BytesIO(b"short"))
        with file_resolver.get_content("repository", "file:a") as stream:
            assert stream.read() == b"short"

    def test_open_reader_keeps_old_content(self, file_resolver: FileResolver) -> None:
        file_resolver.set_content("repository", "file:a", io.BytesIO(b"old"))
        reader = file_resolver.get_content("repository", "file:a")
        try:
            file_resolver.set_content("repository", "file:a", io.BytesIO(b"new"))
            assert reader.read() == b"old"
        finally:
            reader.close()

    def test_set_content_closes_input(self, file_resolver: FileResolver) -> None:
        stream = io.BytesIO(b"data")
        file_resolver.set_content("repository", "file:a", stream)
        assert stream.closed

    def test_no_temp_files_left(
        self, file_resolver: FileResolver, repo_root: Path
    ) -> None:
        file_resolver.set_content("repository", "file:a", io.BytesIO(b"data"))
        assert [p.name for p in repo_root.iterdir()] == ["a"]

    def test_directory_is_not_content(
        self, file_resolver: FileResolver, repo_root: Path
    ) -> None:
        (repo_root / "dir").mkdir(parents=True)
        assert not file_resolver.exists("repository", "file:dir")
        assert file_resolver.get_content("repository", "file:dir") is None


class TestFileResolverPurge:
    def test_purge(self, file_resolver: FileResolver) -> None:
        file_resolver.set_content("repository", "file:a", io.BytesIO(b"data"))
        file_resolver.purge_content("repository", "file:a")
        assert not file_resolver.exists("repository", "file:a")

    def test_purge_absent_is_noop(self, file_resolver: FileResolver) -> None:
        file_resolver.purge_content("repository", "file:missing")


class TestFileResolverPartitions:
    """Unknown partitions have no root: reads find nothing, writes fail."""

    def test_unknown_partition(self, file_resolver: FileResolver) -> None:
        assert not file_resolver.exists("other", "file:a")
        assert file_resolver.get_content("other", "file:a") is None
        file_resolver.purge_content("other", "file:a")
        with pytest.raises(StorageUploadError):
            file_resolver.set_content("other", "file:a", io.BytesIO(b"x"))


class TestFileResolverPathValidation:
    def test_traversal_rejected(self, file_resolver: FileResolver) -> None:
        with pytest.raises(StoragePermissionError):
            file_resolver.set_content("repository", "file:../escape", io.BytesIO(b"x"))
        with pytest.raises(StoragePermissionError):
            file_resolver.get_content("repository", "file:a/../../escape")


class TestFileResolverMultipart:
    """Multipart operations fail fast with StorageNotSupportedError."""

    def test_unsupported(self, file_resolver: FileResolver) -> None:
        with pytest.raises(StorageNotSupportedError):
            file_resolver.initiate_upload("repository", "file:a", None)
        with pytest.raises(StorageNotSupportedError):
            file_resolver.upload_part("s", 1, None, io.BytesIO(b""))
        with pytest.raises(StorageNotSupportedError):
            file_resolver.list_parts("s")
        with pytest.raises(StorageNotSupportedError):
            file_resolver.complete_upload("s", {})
        with pytest.raises(StorageNotSupportedError):
            file_resolver.abort_upload("s")
        with pytest.raises(StorageNotSupportedError):
            file_resolver.upload_session_exists("s")


class TestAtomicWrite:
    def test_size_mismatch_leaves_target(self, tmp_path: Path) -> None:
        target = tmp_path / "t"
        target.write_bytes(b"previous")
        with pytest.raises(ValueError):
            atomic_write(target, [b"abc"], expected_size=4)
        assert target.read_bytes() == b"previous"
        assert [p.name for p in tmp_path.iterdir()] == ["t"]

    def test_returns_size(self, tmp_path: Path) -> None:
        assert atomic_write(tmp_path / "sub" / "t", [b"ab", b"cd"]) == 4
