"""
SketchCore - Einheiten-System
Maße als Zahl oder String mit Einheit ('2cm', '1.5 in'), kanonisch in mm

Verwendung:
    from placement.units import parse_value_with_unit

    parsed = parse_value_with_unit('2cm')
    parsed.value_in_mm  # -> 20.0

    parse_value_with_unit(5, 'in').value_in_mm  # -> 127.0
"""

import numbers
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

UNITS: List[str] = ['mm', 'cm', 'm', 'in', 'ft']

UNIT_TO_MM: Dict[str, float] = {
    'mm': 1.0,
    'cm': 10.0,
    'm': 1000.0,
    'in': 25.4,
    'ft': 304.8,
}

DEFAULT_UNIT = 'mm'

_VALUE_PATTERN = re.compile(r'^([-+]?[0-9]*\.?[0-9]+)\s*(mm|cm|m|in|ft)?$', re.IGNORECASE)


class InvalidValueFormatError(ValueError):
    """Maß-String entspricht nicht <Zahl><optionale Einheit> (oder unbekannte Einheit)"""

    def __init__(self, value, reason: str = ""):
        self.value = value
        message = f"Ungültiges Werteformat: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


@dataclass(frozen=True)
class ParsedValue:
    """Geparstes Maß: Originalwert, Einheit und Wert in Millimetern"""
    value: float
    unit: str
    value_in_mm: float


def _check_unit(unit: str) -> str:
    normalized = unit.strip().lower()
    if normalized not in UNIT_TO_MM:
        raise InvalidValueFormatError(unit, f"unbekannte Einheit, erlaubt: {', '.join(UNITS)}")
    return normalized


def convert_to_mm(value: float, from_unit: str) -> float:
    return value * UNIT_TO_MM[_check_unit(from_unit)]


def convert_from_mm(value: float, to_unit: str) -> float:
    return value / UNIT_TO_MM[_check_unit(to_unit)]


def convert_between_units(value: float, from_unit: str, to_unit: str) -> float:
    return convert_from_mm(convert_to_mm(value, from_unit), to_unit)


def parse_value_with_unit(value: Union[int, float, str], default_unit: Optional[str] = None) -> ParsedValue:
    """
    Parst eine Zahl oder einen Maß-String.

    Args:
        value: Zahl (in default_unit) oder String wie '10', '2cm', '-1.5 in'
        default_unit: Einheit für Zahlen und Strings ohne Suffix (Standard: mm)

    Returns:
        ParsedValue mit value_in_mm

    Raises:
        InvalidValueFormatError: bei ungültigem String oder unbekannter Einheit
    """
    unit = _check_unit(default_unit) if default_unit else DEFAULT_UNIT

    # bool ist ein Integral - als Maß aber sinnlos
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        number = float(value)
        return ParsedValue(number, unit, convert_to_mm(number, unit))

    if not isinstance(value, str):
        raise InvalidValueFormatError(value, "erwartet Zahl oder String")

    match = _VALUE_PATTERN.match(value.strip())
    if not match:
        raise InvalidValueFormatError(value)

    number = float(match.group(1))
    parsed_unit = match.group(2).lower() if match.group(2) else unit
    return ParsedValue(number, parsed_unit, convert_to_mm(number, parsed_unit))


def format_value(value_in_mm: float, unit: str, decimals: int = 2) -> str:
    """Formatiert einen mm-Wert in der Ziel-Einheit, z.B. '2.54cm'"""
    unit = _check_unit(unit)
    return f"{convert_from_mm(value_in_mm, unit):.{decimals}f}{unit}"
