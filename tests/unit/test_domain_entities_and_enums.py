"""Tests for domain entities (UploadSession, PartListing) and enums (UploadStatus)."""

import pytest

from binstore.domain.entities import PartListing, UploadSession, validate_part_number
from binstore.domain.enums import UploadStatus
from binstore.domain.exceptions import UploadStateError, ValidationException


class TestUploadStatus:
    """UploadStatus enum values and terminal states."""

    def test_values_returns_all_status_strings(self) -> None:
        assert UploadStatus.values() == ["initiated", "in_progress", "completed", "aborted"]

    def test_terminal(self) -> None:
        assert UploadStatus.COMPLETED.is_terminal
        assert UploadStatus.ABORTED.is_terminal
        assert not UploadStatus.INITIATED.is_terminal
        assert not UploadStatus.IN_PROGRESS.is_terminal


def _session() -> UploadSession:
    return UploadSession("s1", "repository", "chunked:doc", "text/plain")


class TestUploadSession:
    """UploadSession state transitions."""

    def test_starts_initiated(self) -> None:
        session = _session()
        assert session.status == UploadStatus.INITIATED
        assert session.is_open
        assert session.parts == {}
        assert session.created_at.tzinfo is not None

    def test_record_part_moves_to_in_progress(self) -> None:
        session = _session()
        session.record_part(2, "bb")
        session.record_part(1, "aa")
        assert session.status == UploadStatus.IN_PROGRESS
        assert session.sorted_parts() == [(1, "aa"), (2, "bb")]

    def test_record_part_overwrites(self) -> None:
        session = _session()
        session.record_part(1, "aa")
        session.record_part(1, "cc")
        assert session.sorted_parts() == [(1, "cc")]

    def test_completed_rejects_parts(self) -> None:
        session = _session()
        session.record_part(1, "aa")
        session.mark_completed()
        with pytest.raises(UploadStateError):
            session.record_part(2, "bb")
        assert not session.is_open

    def test_abort_clears_parts_and_is_idempotent(self) -> None:
        session = _session()
        session.record_part(1, "aa")
        session.mark_aborted()
        session.mark_aborted()
        assert session.status == UploadStatus.ABORTED
        assert session.parts == {}

    def test_abort_after_complete_fails(self) -> None:
        session = _session()
        session.record_part(1, "aa")
        session.mark_completed()
        with pytest.raises(UploadStateError):
            session.mark_aborted()
        assert session.status == UploadStatus.COMPLETED


class TestPartListing:
    """PartListing restarts from a fresh snapshot on every iteration."""

    def test_restartable(self) -> None:
        session = _session()
        session.record_part(3, "cc")
        session.record_part(1, "aa")
        listing = PartListing(session)
        assert list(listing) == [(1, "aa"), (3, "cc")]
        session.record_part(2, "bb")
        assert list(listing) == [(1, "aa"), (2, "bb"), (3, "cc")]


class TestValidatePartNumber:
    def test_positive_ok(self) -> None:
        validate_part_number(1)
        validate_part_number(10_000)

    @pytest.mark.parametrize("bad", [0, -1, True, "1", 1.0, None])
    def test_invalid(self, bad: object) -> None:
        with pytest.raises(ValidationException) as exc_info:
            validate_part_number(bad)  # type: ignore[arg-type]
        assert exc_info.value.details == {"field": "part_number"}
