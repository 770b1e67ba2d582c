"""Tests for UTC time helpers."""

from datetime import datetime, timedelta, timezone

from helpers.time_utils import as_utc, format_timestamp, utc_now


class TestTimeUtils:
    def test_utc_now_is_aware(self):
        assert utc_now().utcoffset() == timedelta(0)

    def test_naive_values_are_treated_as_utc(self):
        value = as_utc(datetime(2024, 3, 1, 12, 30))

        assert value.utcoffset().total_seconds() == 0
        assert format_timestamp(value) == "2024-03-01 12:30:00"

    def test_aware_values_keep_their_instant(self):
        cairo = timezone(timedelta(hours=2))
        value = as_utc(datetime(2024, 3, 1, 14, 30, tzinfo=cairo))

        assert value == datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)

    def test_format_none(self):
        assert format_timestamp(None) is None
