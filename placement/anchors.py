"""
SketchCore - Anker-System
Bezugspunkt innerhalb der Bounding-Box einer Form

Ein Anker ist entweder
- ein Preset ('center', 'top-left', ...) als 0/50/100 Prozent-Paar,
- ein Koordinaten-Paar [x, y] - jede Komponente 0-100 (Prozent),
  '25%' oder ein Maß mit Einheit ('3mm', 150),
- ein Dict {'x': ..., 'y': ..., 'unit': ...}.

Sobald eine Komponente absolut ist, gilt der ganze Anker als absolut.
"""

import numbers
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from loguru import logger

from .units import InvalidValueFormatError, parse_value_with_unit

ANCHOR_PRESETS: Dict[str, Tuple[float, float]] = {
    'bottom-left': (0.0, 0.0),
    'bottom-center': (50.0, 0.0),
    'bottom-right': (100.0, 0.0),
    'center-left': (0.0, 50.0),
    'center': (50.0, 50.0),
    'center-right': (100.0, 50.0),
    'top-left': (0.0, 100.0),
    'top-center': (50.0, 100.0),
    'top-right': (100.0, 100.0),
}

AnchorSpec = Union[str, Mapping[str, Any], Tuple[Any, Any], List[Any], None]


@dataclass(frozen=True)
class ParsedAnchor:
    x_percent: float
    y_percent: float
    x_absolute: float
    y_absolute: float
    is_percentage: bool


@dataclass(frozen=True)
class AnchorOffset:
    offset_x: float
    offset_y: float


def anchor_presets() -> List[str]:
    return list(ANCHOR_PRESETS)


def _percentage_anchor(x: float, y: float) -> ParsedAnchor:
    return ParsedAnchor(x, y, 0.0, 0.0, True)


def _parse_component(value: Union[int, float, str], unit: Optional[str]) -> Tuple[float, float, bool]:
    """Returns (wert, wert_in_mm, ist_prozent)"""
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        if 0 <= value <= 100:
            return float(value), 0.0, True
        parsed = parse_value_with_unit(value, unit)
        return parsed.value, parsed.value_in_mm, False

    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed.endswith('%'):
            try:
                percent = float(trimmed[:-1])
            except ValueError:
                raise InvalidValueFormatError(value, "ungültige Prozentangabe") from None
            return percent, 0.0, True

    parsed = parse_value_with_unit(value, unit)
    return parsed.value, parsed.value_in_mm, False


def _parse_coordinates(x: Any, y: Any, unit: Optional[str]) -> ParsedAnchor:
    x_value, x_mm, x_is_percent = _parse_component(x, unit)
    y_value, y_mm, y_is_percent = _parse_component(y, unit)

    return ParsedAnchor(
        x_percent=x_value if x_is_percent else 0.0,
        y_percent=y_value if y_is_percent else 0.0,
        x_absolute=0.0 if x_is_percent else x_mm,
        y_absolute=0.0 if y_is_percent else y_mm,
        is_percentage=x_is_percent and y_is_percent,
    )


def parse_anchor(anchor: AnchorSpec = None, unit: Optional[str] = None) -> ParsedAnchor:
    """
    Parst eine Anker-Angabe.

    Args:
        anchor: Preset-Name, [x, y]-Paar oder {'x', 'y', 'unit'}-Dict;
            None ergibt 'center'
        unit: Standard-Einheit für absolute Komponenten

    Returns:
        ParsedAnchor

    Raises:
        InvalidValueFormatError: wenn eine absolute Komponente kein gültiges Maß ist
    """
    if anchor is None or anchor == '':
        return _percentage_anchor(50.0, 50.0)

    if isinstance(anchor, str):
        preset = ANCHOR_PRESETS.get(anchor.strip().lower())
        if preset is not None:
            return _percentage_anchor(*preset)
        logger.warning(f"Unbekanntes Anker-Preset '{anchor}', nutze 'top-left'")
        return _percentage_anchor(*ANCHOR_PRESETS['top-left'])

    if isinstance(anchor, (list, tuple)) and len(anchor) == 2:
        return _parse_coordinates(anchor[0], anchor[1], unit)

    if isinstance(anchor, Mapping) and 'x' in anchor and 'y' in anchor:
        return _parse_coordinates(anchor['x'], anchor['y'], anchor.get('unit') or unit)

    logger.warning(f"Nicht interpretierbarer Anker {anchor!r}, nutze 'top-left'")
    return _percentage_anchor(*ANCHOR_PRESETS['top-left'])


def calculate_anchor_offset(anchor: ParsedAnchor, width: float, height: float) -> AnchorOffset:
    """Prozent-Anker gegen die Bounding-Box auflösen, absolute Anker durchreichen"""
    if anchor.is_percentage:
        return AnchorOffset(
            offset_x=width * anchor.x_percent / 100,
            offset_y=height * anchor.y_percent / 100,
        )
    return AnchorOffset(offset_x=anchor.x_absolute, offset_y=anchor.y_absolute)
