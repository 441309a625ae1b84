"""
SketchCore - Relative Positionierung
====================================

Löst symbolische Positionen eines Shape-Baums in absolute mm-Koordinaten auf.

Ein Knoten wird positioniert über
- eigene x/y (Zahl oder Maß-String, unter ``params`` oder direkt am Knoten),
- ``relativeTo``: Position des referenzierten Knotens + eigener Offset,
- Koordinaten-Referenz: ein x/y-Wert, der einer Knoten-ID entspricht,
  übernimmt die aufgelöste x- bzw. y-Komponente dieses Knotens.

Jeder Knoten wird pro resolve_all_positions()-Aufruf genau einmal
berechnet (Cache). Die Kette der gerade aufgelösten IDs erkennt Zyklen.

Verwendung:
    positions = resolve_all_positions([
        {'id': 'base', 'x': '10', 'y': '20', 'unit': 'mm'},
        {'id': 'rel', 'x': '5', 'y': '3', 'unit': 'mm', 'relativeTo': 'base'},
    ])
    positions['rel']  # -> ResolvedPosition(x=15.0, y=23.0)
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional
from loguru import logger

from config.feature_flags import is_enabled
from .units import InvalidValueFormatError, parse_value_with_unit

ShapeNode = Mapping[str, Any]

# Strings dieser Form sind als ID-Referenz gemeint, nicht als Maß
_IDENTIFIER = re.compile(r'^[A-Za-z_][\w\-]*$')


class CircularDependencyError(Exception):
    """Knoten referenziert sich (über die Kette) selbst"""

    def __init__(self, chain: List[str]):
        self.chain = list(chain)
        super().__init__(f"Zirkuläre Abhängigkeit in relativer Positionierung: {' → '.join(self.chain)}")


class MissingReferenceError(Exception):
    """relativeTo oder Koordinaten-Referenz zeigt auf unbekannte ID"""

    def __init__(self, shape_id: str, reference_id: str):
        self.shape_id = shape_id
        self.reference_id = reference_id
        super().__init__(f"Shape '{shape_id}' referenziert nicht existierendes Shape '{reference_id}'")


@dataclass(frozen=True)
class ResolvedPosition:
    """Absolute Position in mm"""
    x: float
    y: float


def build_shapes_map(nodes: Iterable[Any]) -> Dict[str, ShapeNode]:
    """
    Indiziert alle Knoten mit ID, rekursiv über verschachtelte ``ops``.

    Returns:
        Dict ID -> Knoten (Baum-Reihenfolge, depth-first)
    """
    shapes_map: Dict[str, ShapeNode] = {}

    def collect(node: Any) -> None:
        if not isinstance(node, Mapping):
            return

        node_id = node.get('id')
        if node_id:
            if node_id in shapes_map:
                logger.warning(f"Doppelte Shape-ID '{node_id}', der spätere Knoten gewinnt")
            shapes_map[str(node_id)] = node

        ops = node.get('ops')
        if isinstance(ops, (list, tuple)):
            for child in ops:
                collect(child)

    for node in nodes:
        collect(node)
    return shapes_map


def _node_unit(node: ShapeNode) -> Optional[str]:
    params = node.get('params')
    if isinstance(params, Mapping):
        return node.get('unit') or params.get('unit')
    return node.get('unit')


def _node_coordinate(node: ShapeNode, axis: str) -> Any:
    params = node.get('params')
    if isinstance(params, Mapping) and params.get(axis) is not None:
        return params[axis]
    value = node.get(axis)
    return 0 if value is None else value


def _resolve_coordinate(node_id: str, value: Any, axis: str, unit: Optional[str],
                        shapes_map: Mapping[str, ShapeNode], cache: Dict[str, ResolvedPosition],
                        chain: List[str]) -> float:
    """Ein x/y-Wert in mm - Maß oder Referenz auf eine andere Knoten-ID"""
    if not isinstance(value, str):
        return parse_value_with_unit(value, unit).value_in_mm

    reference_id = value.strip()
    if reference_id in shapes_map:
        reference = resolve_position(shapes_map[reference_id], shapes_map, cache, chain)
        return getattr(reference, axis)

    try:
        return parse_value_with_unit(value, unit).value_in_mm
    except InvalidValueFormatError:
        if _IDENTIFIER.match(reference_id):
            raise MissingReferenceError(node_id, reference_id) from None
        raise


def resolve_position(node: ShapeNode, shapes_map: Mapping[str, ShapeNode],
                     cache: Optional[Dict[str, ResolvedPosition]] = None,
                     chain: Optional[List[str]] = None) -> ResolvedPosition:
    """
    Löst die absolute Position eines Knotens auf (rekursiv, memoisiert).

    Args:
        node: Shape-Knoten
        shapes_map: Index aus build_shapes_map()
        cache: Bereits aufgelöste Positionen (wird befüllt)
        chain: IDs, die gerade aufgelöst werden

    Raises:
        CircularDependencyError: wenn die Auflösung den Knoten erneut erreicht
        MissingReferenceError: wenn eine Referenz-ID nicht im Index ist
        InvalidValueFormatError: bei ungültigen Maß-Strings
    """
    cache = cache if cache is not None else {}
    chain = chain if chain is not None else []
    node_id = str(node.get('id') or 'anonymous')

    if node_id in cache:
        return cache[node_id]

    if node_id in chain:
        raise CircularDependencyError(chain + [node_id])

    if is_enabled("positioning_debug"):
        logger.debug(f"[Positioning] {' → '.join(chain + [node_id])}")

    unit = _node_unit(node)
    inner_chain = chain + [node_id]

    base_x, base_y = 0.0, 0.0
    relative_to = node.get('relativeTo')
    if relative_to:
        reference = shapes_map.get(relative_to)
        if reference is None:
            raise MissingReferenceError(node_id, relative_to)
        base = resolve_position(reference, shapes_map, cache, inner_chain)
        base_x, base_y = base.x, base.y

    x = _resolve_coordinate(node_id, _node_coordinate(node, 'x'), 'x', unit, shapes_map, cache, inner_chain)
    y = _resolve_coordinate(node_id, _node_coordinate(node, 'y'), 'y', unit, shapes_map, cache, inner_chain)

    position = ResolvedPosition(base_x + x, base_y + y)
    cache[node_id] = position
    return position


def resolve_all_positions(nodes: Iterable[Any]) -> Dict[str, ResolvedPosition]:
    """
    Löst alle Knoten mit ID auf.

    Der Cache lebt nur für diesen Aufruf - keine Wiederverwendung über
    unabhängige Läufe.

    Returns:
        Dict ID -> ResolvedPosition in Index-Reihenfolge
    """
    shapes_map = build_shapes_map(nodes)
    cache: Dict[str, ResolvedPosition] = {}

    for node in shapes_map.values():
        resolve_position(node, shapes_map, cache)

    logger.info(f"Positionierung: {len(shapes_map)} Shapes aufgelöst")
    return {shape_id: cache[shape_id] for shape_id in shapes_map}
