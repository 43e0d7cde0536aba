"""Tests for UTC timestamp helpers (format/parse of RFC 3339 strings)."""

from datetime import UTC, datetime, timedelta, timezone

from firestore_server.shared.utils.datetime import (
    ensure_utc,
    format_timestamp,
    parse_timestamp,
)


class TestEnsureUtc:
    def test_none_passthrough(self) -> None:
        assert ensure_utc(None) is None

    def test_naive_assumed_utc(self) -> None:
        result = ensure_utc(datetime(2024, 1, 1, 12, 0))
        assert result == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_aware_converted(self) -> None:
        eat = timezone(timedelta(hours=3))
        result = ensure_utc(datetime(2024, 1, 1, 15, 0, tzinfo=eat))
        assert result.tzinfo == UTC
        assert result.hour == 12


class TestFormatTimestamp:
    def test_microseconds_and_z_suffix(self) -> None:
        dt = datetime(2024, 3, 5, 7, 8, 9, 123456, tzinfo=UTC)
        assert format_timestamp(dt) == "2024-03-05T07:08:09.123456Z"

    def test_zero_fraction_kept(self) -> None:
        assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000000Z"


class TestParseTimestamp:
    def test_with_fraction(self) -> None:
        assert parse_timestamp("2024-03-05T07:08:09.123456Z") == datetime(
            2024, 3, 5, 7, 8, 9, 123456, tzinfo=UTC
        )

    def test_without_fraction(self) -> None:
        assert parse_timestamp("2024-03-05T07:08:09Z") == datetime(
            2024, 3, 5, 7, 8, 9, tzinfo=UTC
        )

    def test_nanoseconds_truncated(self) -> None:
        """Firestore emits nanoseconds; only microseconds survive."""
        assert parse_timestamp("2024-03-05T07:08:09.123456789Z") == datetime(
            2024, 3, 5, 7, 8, 9, 123456, tzinfo=UTC
        )

    def test_short_fraction(self) -> None:
        assert parse_timestamp("2024-03-05T07:08:09.5Z").microsecond == 500000

    def test_offset_converted_to_utc(self) -> None:
        result = parse_timestamp("2024-03-05T10:00:00+03:00")
        assert result == datetime(2024, 3, 5, 7, 0, tzinfo=UTC)

    def test_invalid_returns_none(self) -> None:
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None  # type: ignore[arg-type]


class TestEarlyYears:
    def test_years_below_1000_zero_padded(self) -> None:
        assert format_timestamp(datetime(1, 1, 1, tzinfo=UTC)) == "0001-01-01T00:00:00.000000Z"
        assert format_timestamp(datetime(999, 12, 31, tzinfo=UTC)) == "0999-12-31T00:00:00.000000Z"

    def test_parse_reads_padded_years(self) -> None:
        assert parse_timestamp("0999-12-31T23:59:59.5Z") == datetime(
            999, 12, 31, 23, 59, 59, 500000, tzinfo=UTC
        )
