"""
SketchCore Sketcher - Dimension Manager
========================================

Parametrische Bemaßungen (Länge, Abstand, Radius), die direkt auf die
Punkt-Koordinaten des Sketches wirken.

Der DimensionManager iteriert NICHT selbst: apply_dimension() macht genau
eine Korrektur und meldet, ob sich etwas geändert hat. Die Konvergenz-
Schleife liegt beim Aufrufer (siehe Sketch.solve()).

Usage:
    manager = DimensionManager()
    dim = Dimension(DimensionType.LINEAR, [line.id], 25.0)
    changed = manager.apply_dimension(dim, sketch)
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Union
from enum import Enum
from loguru import logger

from config.tolerances import Tolerances
from .geometry import SketchLine, SketchPoint, distance, new_id

if TYPE_CHECKING:
    from .sketch import Sketch


class DimensionType(Enum):
    """Arten von Dimensionen."""
    LINEAR = "linear"       # Punkt-zu-Punkt oder Linienlänge
    RADIAL = "radial"       # Kreis-Radius
    ANGULAR = "angular"     # Deklariert, wird nicht angewendet


@dataclass
class Dimension:
    """
    Bemaßung mit Sollwert.

    Attributes:
        type: Art der Dimension
        entities: IDs der bemaßten Elemente (Punkte, Linien oder Kreis)
        value: Sollwert (Länge bzw. Radius)
        name: Optionaler Parametername
    """
    type: DimensionType
    entities: List[str]
    value: float
    id: str = field(default_factory=lambda: new_id("d-"))
    name: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.type, str):
            self.type = DimensionType(self.type)
        self.value = float(self.value)


class DimensionManager:
    """Setzt Dimensionen durch Skalieren/Verschieben der betroffenen Punkte um."""

    def __init__(self, tolerance: Optional[float] = None):
        self.tolerance = tolerance if tolerance is not None else Tolerances.SKETCH_DIMENSION

    def apply_dimension(self, dimension: Dimension, sketch: 'Sketch') -> bool:
        """
        Wendet eine Dimension einmal an.

        Returns:
            True wenn Koordinaten oder Radius geändert wurden
        """
        if dimension.type == DimensionType.LINEAR:
            changed = self._apply_linear(dimension, sketch)
        elif dimension.type == DimensionType.RADIAL:
            changed = self._apply_radial(dimension, sketch)
        else:
            # Winkel-Bemaßung ist nicht implementiert
            changed = False

        if changed:
            logger.debug(f"Dimension {dimension.id} ({dimension.type.value}) angewendet: Soll={dimension.value}")
        return changed

    # === Linear ===

    def _resolve_entity(self, sketch: 'Sketch', entity_id: str) -> Optional[Union[SketchPoint, SketchLine]]:
        point = sketch.get_point(entity_id)
        if point is not None:
            return point
        return sketch.get_line(entity_id)

    def _apply_linear(self, dimension: Dimension, sketch: 'Sketch') -> bool:
        if not dimension.entities:
            return False

        first = self._resolve_entity(sketch, dimension.entities[0])
        if first is None:
            return False

        if isinstance(first, SketchLine):
            return self._apply_line_length(first, dimension.value, sketch)

        if len(dimension.entities) < 2:
            return False
        second = self._resolve_entity(sketch, dimension.entities[1])
        if isinstance(second, SketchPoint):
            return self._apply_point_distance(first, second, dimension.value)
        return False

    def _apply_point_distance(self, p1: SketchPoint, p2: SketchPoint, target: float) -> bool:
        current = distance(p1, p2)

        if abs(current - target) < self.tolerance:
            return False
        if current < Tolerances.EPSILON_MATH:
            # Skalierung undefiniert
            return False

        scale = target / current
        dx = p2.x - p1.x
        dy = p2.y - p1.y

        if not p1.fixed and not p2.fixed:
            # Symmetrisch um den gemeinsamen Mittelpunkt
            mid_x = (p1.x + p2.x) / 2
            mid_y = (p1.y + p2.y) / 2
            p1.move_to(mid_x - dx * scale / 2, mid_y - dy * scale / 2)
            p2.move_to(mid_x + dx * scale / 2, mid_y + dy * scale / 2)
        elif not p2.fixed:
            p2.move_to(p1.x + dx * scale, p1.y + dy * scale)
        elif not p1.fixed:
            p1.move_to(p2.x - dx * scale, p2.y - dy * scale)
        else:
            return False
        return True

    def _apply_line_length(self, line: SketchLine, target: float, sketch: 'Sketch') -> bool:
        start = sketch.get_point(line.start_point_id)
        end = sketch.get_point(line.end_point_id)
        if start is None or end is None:
            return False

        current = distance(start, end)
        if abs(current - target) < self.tolerance:
            return False
        if current < Tolerances.EPSILON_MATH:
            return False

        scale = target / current
        dx = end.x - start.x
        dy = end.y - start.y

        if not end.fixed:
            end.move_to(start.x + dx * scale, start.y + dy * scale)
        elif not start.fixed:
            start.move_to(end.x - dx * scale, end.y - dy * scale)
        else:
            return False
        return True

    # === Radial ===

    def _apply_radial(self, dimension: Dimension, sketch: 'Sketch') -> bool:
        if not dimension.entities:
            return False
        circle = sketch.get_circle(dimension.entities[0])
        if circle is None:
            return False

        previous = circle.radius
        circle.radius = dimension.value
        return abs(previous - dimension.value) >= self.tolerance

    # === Messen ===

    def calculate_distance(self, entity1_id: str, entity2_id: Optional[str], sketch: 'Sketch') -> float:
        """
        Aktueller Messwert: Punkt-zu-Punkt-Abstand oder Linienlänge.
        0.0 wenn die Entities nicht auflösbar sind.
        """
        first = self._resolve_entity(sketch, entity1_id)
        second = self._resolve_entity(sketch, entity2_id) if entity2_id is not None else None

        if isinstance(first, SketchPoint) and isinstance(second, SketchPoint):
            return distance(first, second)

        if isinstance(first, SketchLine):
            start = sketch.get_point(first.start_point_id)
            end = sketch.get_point(first.end_point_id)
            if start is not None and end is not None:
                return distance(start, end)

        return 0.0
