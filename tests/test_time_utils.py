from datetime import UTC, datetime, timedelta, timezone

import pytest

from unfold_note.app.core.time import as_utc, parse_cursor, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_as_utc_treats_naive_values_as_utc():
    naive = datetime(2024, 5, 1, 12, 0, 0)
    assert as_utc(naive) == datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


def test_parse_cursor_accepts_z_suffix_and_offsets():
    assert parse_cursor("2024-05-01T12:00:00Z") == datetime(2024, 5, 1, 12, tzinfo=UTC)
    shifted = parse_cursor("2024-05-01T21:00:00+09:00")
    assert shifted == datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
    assert shifted.utcoffset() == timedelta(0)


def test_parse_cursor_rejects_garbage():
    with pytest.raises(ValueError):
        parse_cursor("not-a-date")
