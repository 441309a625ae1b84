"""
Tests für placement/units.py
"""

import pytest

from placement.units import (
    InvalidValueFormatError, UNITS, convert_between_units, convert_from_mm,
    convert_to_mm, format_value, parse_value_with_unit
)


@pytest.mark.parametrize("raw,expected_mm,expected_unit", [
    ("10", 10.0, "mm"),
    ("2cm", 20.0, "cm"),
    ("1.5 in", 38.1, "in"),
    (" -3MM ", -3.0, "mm"),
    (".5m", 500.0, "m"),
    ("+1ft", 304.8, "ft"),
])
def test_parse_string(raw, expected_mm, expected_unit):
    parsed = parse_value_with_unit(raw)
    assert parsed.value_in_mm == pytest.approx(expected_mm)
    assert parsed.unit == expected_unit


def test_number_uses_default_unit():
    parsed = parse_value_with_unit(5, "in")
    assert parsed.value == 5.0
    assert parsed.unit == "in"
    assert parsed.value_in_mm == pytest.approx(127.0)


def test_string_without_suffix_uses_default_unit():
    assert parse_value_with_unit("3", "cm").value_in_mm == pytest.approx(30.0)


def test_suffix_overrides_default_unit():
    assert parse_value_with_unit("3mm", "cm").value_in_mm == pytest.approx(3.0)


@pytest.mark.parametrize("raw", ["abc", "10 km", "", "1.2.3", "mm", "10."])
def test_invalid_strings_raise(raw):
    with pytest.raises(InvalidValueFormatError) as excinfo:
        parse_value_with_unit(raw)
    assert excinfo.value.value == raw


@pytest.mark.parametrize("raw", [None, True, [1, 2]])
def test_non_measure_types_raise(raw):
    with pytest.raises(InvalidValueFormatError):
        parse_value_with_unit(raw)


def test_unknown_default_unit_raises():
    with pytest.raises(InvalidValueFormatError, match="unbekannte Einheit"):
        parse_value_with_unit(1, "yd")


def test_error_is_value_error():
    with pytest.raises(ValueError):
        parse_value_with_unit("nope")


def test_conversions():
    assert UNITS == ["mm", "cm", "m", "in", "ft"]
    assert convert_to_mm(2, "m") == 2000.0
    assert convert_from_mm(50.8, "in") == pytest.approx(2.0)
    assert convert_between_units(1, "ft", "in") == pytest.approx(12.0)


def test_format_value():
    assert format_value(25.4, "in") == "1.00in"
    assert format_value(1234.5, "m", decimals=1) == "1.2m"
