"""Unit tests for the timestamp codecs.

WHY: Subtitle players reject files whose timestamps use the wrong
separator or digit widths. A rounding slip shifts every caption.

HOW: Format known values in both variants, check the display labels,
and parse back what was written.

RULES:
- Expected strings are written out literally, never computed
"""

import re

import pytest

from caption_studio.core.timecode import (
    TimestampFormat,
    format_clip_time,
    format_display_time,
    format_timestamp,
    parse_timestamp,
)


class TestFormatTimestamp:
    """SRT and VTT file timestamps."""

    def test_zero(self):
        assert format_timestamp(0) == "00:00:00,000"
        assert format_timestamp(0, TimestampFormat.VTT) == "00:00:00.000"

    def test_srt_uses_comma(self):
        assert format_timestamp(3723.456) == "01:02:03,456"

    def test_vtt_uses_dot(self):
        assert format_timestamp(3723.456, TimestampFormat.VTT) == "01:02:03.456"

    def test_variant_accepts_string(self):
        assert format_timestamp(1.5, "vtt") == "00:00:01.500"

    def test_minute_and_hour_rollover(self):
        assert format_timestamp(59.999) == "00:00:59,999"
        assert format_timestamp(60) == "00:01:00,000"
        assert format_timestamp(3600) == "01:00:00,000"

    def test_rounds_to_nearest_millisecond(self):
        assert format_timestamp(1.0004) == "00:00:01,000"
        assert format_timestamp(1.0006) == "00:00:01,001"

    def test_rounding_carries_into_seconds(self):
        assert format_timestamp(1.9999) == "00:00:02,000"

    def test_hours_are_not_wrapped(self):
        assert format_timestamp(100 * 3600 + 1) == "100:00:01,000"

    def test_negative_clamped_to_zero(self):
        assert format_timestamp(-2.5) == "00:00:00,000"


class TestParseTimestamp:
    """Parsing file timestamps back to seconds."""

    @pytest.mark.parametrize("text,expected", [
        ("01:02:03,456", 3723.456),
        ("01:02:03.456", 3723.456),
        ("02:03.456", 123.456),
        ("00:00:01,5", 1.5),
        (" 00:00:10,000 ", 10.0),
        ("100:00:00,000", 360000.0),
    ])
    def test_valid(self, text, expected):
        assert parse_timestamp(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", "1.5", "00:00:01", "aa:bb:cc,ddd", "00:00:01,1234"])
    def test_invalid_raises(self, text):
        with pytest.raises(ValueError):
            parse_timestamp(text)

    def test_reads_back_formatted_value(self):
        written = format_timestamp(4321.987, TimestampFormat.VTT)
        assert parse_timestamp(written) == pytest.approx(4321.987)

    @pytest.mark.parametrize("seconds", [
        0, 0.001, 0.999, 59.999, 60.0, 3599.999, 3600.0, 86399.999, 359999.999,
    ])
    @pytest.mark.parametrize("variant,separator", [
        (TimestampFormat.SRT, ","),
        (TimestampFormat.VTT, "."),
    ])
    def test_boundary_values_read_back(self, seconds, variant, separator):
        written = format_timestamp(seconds, variant)
        assert re.fullmatch(r"\d{2,}:\d{2}:\d{2}" + re.escape(separator) + r"\d{3}", written)
        assert parse_timestamp(written) == pytest.approx(seconds, abs=5e-4)

    def test_largest_two_digit_hour(self):
        assert format_timestamp(359999.999) == "99:59:59,999"
        assert format_timestamp(359999.999, TimestampFormat.VTT) == "99:59:59.999"


class TestDisplayLabels:
    """Timeline and highlight list labels."""

    def test_display_time(self):
        assert format_display_time(83.25) == "01:23.250"

    def test_display_time_minutes_absorb_hours(self):
        assert format_display_time(3723.456) == "62:03.456"

    def test_clip_time_floors_seconds(self):
        assert format_clip_time(65.9) == "01:05"

    def test_clip_time_zero_and_negative(self):
        assert format_clip_time(0) == "00:00"
        assert format_clip_time(-1) == "00:00"
