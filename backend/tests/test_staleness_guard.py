"""낙관적 staleness 가드의 허용/거부 규칙을 검증합니다."""

from datetime import datetime, timedelta

from studio.services import staleness_guard
from studio.services.staleness_guard import ContentStamps

T0 = datetime(2026, 3, 2, 9, 0, 0)


def test_never_modified_record_allows_write_without_read():
    assert staleness_guard.check_write(ContentStamps()).allowed


def test_read_after_modification_allows_write():
    stamps = ContentStamps(modified_at=T0, read_at=T0 + timedelta(seconds=1))
    assert staleness_guard.check_write(stamps).allowed


def test_read_at_same_instant_as_modification_allows_write():
    stamps = ContentStamps(modified_at=T0, read_at=T0)
    assert staleness_guard.check_write(stamps).allowed


def test_modification_after_read_rejects_with_both_timestamps():
    stamps = ContentStamps(modified_at=T0 + timedelta(seconds=5), read_at=T0)
    check = staleness_guard.check_write(stamps, subject="Document", read_tool="get_document")
    assert not check.allowed
    assert "Document has been modified since it was last read" in check.reason
    assert (T0 + timedelta(seconds=5)).isoformat() in check.reason
    assert T0.isoformat() in check.reason
    assert "get_document" in check.reason


def test_successful_write_forces_fresh_read_before_next_write():
    stamps = staleness_guard.record_read(ContentStamps(), T0)
    assert staleness_guard.check_write(stamps).allowed

    stamps = staleness_guard.record_write(stamps, T0 + timedelta(seconds=1))
    assert stamps.read_at is None
    check = staleness_guard.check_write(stamps)
    assert not check.allowed
    assert "Last read: never" in check.reason

    stamps = staleness_guard.record_read(stamps, T0 + timedelta(seconds=2))
    assert staleness_guard.check_write(stamps).allowed


def test_reset_clears_both_timestamps():
    assert staleness_guard.reset() == ContentStamps(modified_at=None, read_at=None)
