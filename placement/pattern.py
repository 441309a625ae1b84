"""
SketchCore - T-Nut Muster
Shape-Baum für die Nut-Schnitte eines quadratischen Profils

Alle Positionen sind relativ (relativeTo / Anker) und werden erst von
resolve_all_positions() in absolute mm aufgelöst.
"""

from typing import Any, Dict, List, Union

from .units import parse_value_with_unit

Measure = Union[int, float, str]

_UNIT = 'mm'


def _slot(side: str, anchor: str, inner_xy, outer_offset, width_axis: str,
          outer_slot_width: Measure, inner_cavity_width: Measure,
          wall_thickness: Measure, web_depth: Measure) -> List[Dict[str, Any]]:
    """
    Drei verkettete Rechtecke einer Seite: Innenwand -> Außenwand -> Steg.

    width_axis gibt an, welche Rechteck-Abmessung parallel zur Profilkante liegt.
    """
    def rect(width: Measure, depth: Measure) -> Dict[str, Any]:
        if width_axis == 'x':
            return {'width': width, 'height': depth}
        return {'width': depth, 'height': width}

    inner_id = f"{side}InnerWall"
    outer_id = f"{side}OuterWall"
    off_x, off_y = outer_offset

    return [
        {
            'type': 'rectangle', 'id': inner_id, 'unit': _UNIT,
            'params': {**rect(inner_cavity_width, wall_thickness), 'x': inner_xy[0], 'y': inner_xy[1],
                       'anchor': anchor},
            'relativeTo': 'outerProfile',
        },
        {
            'type': 'rectangle', 'id': outer_id, 'unit': _UNIT,
            'params': {**rect(outer_slot_width, wall_thickness), 'x': off_x, 'y': off_y,
                       'anchor': anchor},
            'relativeTo': inner_id,
        },
        {
            'type': 'trapezoid', 'id': f"{side}Web", 'unit': _UNIT,
            'params': {'topWidth': inner_cavity_width, 'bottomWidth': outer_slot_width,
                       'height': web_depth, 'axis': 'y' if width_axis == 'x' else 'x',
                       'x': off_x, 'y': off_y, 'anchor': anchor},
            'relativeTo': outer_id,
        },
    ]


def extrusion_pattern(size: Measure, outer_slot_width: Measure, inner_cavity_width: Measure,
                      wall_thickness: Measure, web_depth: Measure, bore_radius: Measure) -> Dict[str, Any]:
    """
    Baut den Subtraktions-Baum: Außenquadrat minus Mittelbohrung minus
    vier T-Nuten (oben, unten, links, rechts).

    Args:
        size: Kantenlänge des Profils
        outer_slot_width: Breite der Nut-Öffnung
        inner_cavity_width: Breite des Hohlraums hinter der Öffnung
        wall_thickness: Wandstärke der Nut-Lippen
        web_depth: Tiefe des Trapez-Stegs
        bore_radius: Radius der Mittelbohrung

    Returns:
        {'operation': 'subtract', 'ops': [...]} - Knoten mit IDs, direkt
        verwendbar für resolve_all_positions([pattern])

    Raises:
        InvalidValueFormatError: wenn size kein gültiges Maß ist
    """
    size_mm = parse_value_with_unit(size, _UNIT).value_in_mm
    center = size_mm / 2
    wall = parse_value_with_unit(wall_thickness, _UNIT).value_in_mm

    # Positionen bleiben Zahlen in mm - keine String-Rundung
    ops: List[Dict[str, Any]] = [
        {
            'type': 'rectangle', 'id': 'outerProfile', 'unit': _UNIT,
            'params': {'width': size, 'height': size, 'x': 0.0, 'y': 0.0,
                       'anchor': {'x': 0, 'y': 0}},
        },
        {
            'type': 'circle', 'id': 'centralBore', 'unit': _UNIT,
            'params': {'radius': bore_radius, 'x': center, 'y': center,
                       'anchor': {'x': 50, 'y': 50}},
            'relativeTo': 'outerProfile',
        },
    ]

    slot_widths = (outer_slot_width, inner_cavity_width, wall_thickness, web_depth)
    ops += _slot('top', 'top-center', (center, size_mm), (0.0, -wall), 'x', *slot_widths)
    ops += _slot('bottom', 'bottom-center', (center, 0.0), (0.0, wall), 'x', *slot_widths)
    ops += _slot('left', 'center-left', (0.0, center), (wall, 0.0), 'y', *slot_widths)
    ops += _slot('right', 'center-right', (size_mm, center), (-wall, 0.0), 'y', *slot_widths)

    return {'operation': 'subtract', 'ops': ops}
