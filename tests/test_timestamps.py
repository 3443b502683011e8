import pytest

from datadog_mcp.core.errors import InvalidTimestamp
from datadog_mcp.core.timestamps import SECONDS_THRESHOLD, normalize_timestamp, to_iso


@pytest.mark.parametrize("value", [0, 1, 1609459200, 1700000000, 1700000000.75, SECONDS_THRESHOLD - 1])
def test_seconds_and_milliseconds_agree_below_threshold(value):
    assert normalize_timestamp(value, "s") * 1000 <= normalize_timestamp(value, "ms")
    assert normalize_timestamp(value, "ms") - normalize_timestamp(value, "s") * 1000 < 1000


def test_large_numbers_are_milliseconds():
    assert normalize_timestamp(1700000000000, "ms") == 1700000000000
    assert normalize_timestamp(1700000000000, "s") == 1700000000
    assert normalize_timestamp(SECONDS_THRESHOLD, "s") == SECONDS_THRESHOLD // 1000


def test_fractions_are_floored():
    assert normalize_timestamp(1700000000.9, "s") == 1700000000
    assert normalize_timestamp(1700000000999.9, "ms") == 1700000000999


def test_iso_strings():
    assert normalize_timestamp("2021-01-01T00:00:00Z", "s") == 1609459200
    assert normalize_timestamp("2021-01-01T00:00:00Z", "ms") == 1609459200000
    assert normalize_timestamp("2021-01-01T01:00:00+01:00", "s") == 1609459200


def test_naive_iso_strings_are_utc():
    assert normalize_timestamp("2021-01-01T00:00:00", "s") == 1609459200


def test_numeric_strings_use_leading_integer():
    assert normalize_timestamp("1700000000", "s") == 1700000000
    assert normalize_timestamp("1700000000000", "s") == 1700000000
    assert normalize_timestamp("1700000000abc", "ms") == 1700000000000


@pytest.mark.parametrize("value", ["not a time", "", None, True, False, float("nan"), float("inf"), [1], {}])
def test_invalid_values(value):
    with pytest.raises(InvalidTimestamp, match="Invalid timestamp format"):
        normalize_timestamp(value, "s")


def test_unknown_unit():
    with pytest.raises(ValueError):
        normalize_timestamp(1, "us")


def test_to_iso():
    assert to_iso(1609459200000) == "2021-01-01T00:00:00.000Z"
    assert to_iso(1609459200, "s") == "2021-01-01T00:00:00.000Z"


@pytest.mark.parametrize("value,expected", [
    ("2021-01-01T00:00:00+0000", 1609459200),
    ("2021-01-01T00:00:00.5Z", 1609459200),
    ("2021-01-01T00:00:00z", 1609459200),
    ("2021-01", 1609459200),
])
def test_iso_variants(value, expected):
    assert normalize_timestamp(value, "s") == expected


def test_fractional_iso_milliseconds():
    assert normalize_timestamp("2021-01-01T00:00:00.5Z", "ms") == 1609459200500


@pytest.mark.parametrize("value", ["2021-13-01", "2021-01-01T25:00:00", "12:30"])
def test_malformed_dates_are_not_read_as_epochs(value):
    with pytest.raises(InvalidTimestamp, match="Invalid timestamp format"):
        normalize_timestamp(value, "s")
