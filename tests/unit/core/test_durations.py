"""Tests for duration parsing."""

import pytest

from lsx.core.durations import format_duration, parse_duration


class TestParseDuration:
    """Tests for parse_duration function."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("30", 30.0),
            ("0", 0.0),
            ("0.5", 0.5),
            ("500ms", 0.5),
            ("30s", 30.0),
            ("2m", 120.0),
            ("1h", 3600.0),
            ("1.5S", 1.5),
            (" 10s ", 10.0),
        ],
    )
    def test_valid(self, value: str, expected: float) -> None:
        assert parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["", "abc", "-1", "10d", "1m30s", "ms"])
    def test_invalid_raises(self, value: str) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(value)


class TestFormatDuration:
    """Tests for format_duration function."""

    def test_milliseconds(self) -> None:
        assert format_duration(1.5) == "1500ms"

    def test_zero(self) -> None:
        assert format_duration(0) == "0ms"

    def test_accepted_by_parse(self) -> None:
        assert parse_duration(format_duration(0.25)) == pytest.approx(0.25)
