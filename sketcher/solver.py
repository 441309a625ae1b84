"""
SketchCore Sketcher - Constraint Solver
Iterative lokale Relaxation über den Punkt/Linien-Graphen
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple
import math
from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances
from .constraints import Constraint, ConstraintType
from .geometry import SketchPoint, distance, midpoint, normalize_angle, segment_angle

if TYPE_CHECKING:
    from .sketch import Sketch


@dataclass
class SolverResult:
    """Ergebnis einer kompletten Sketch-Relaxation (Dimensionen + Constraints)"""
    success: bool
    rounds: int
    iterations: int
    message: str = ""


def _fold_half_turn(angle: float) -> float:
    """Faltet einen Winkel auf (-pi/2, pi/2] - Richtung der Linie egal"""
    angle = normalize_angle(angle)
    if angle > math.pi / 2:
        angle -= math.pi
    elif angle <= -math.pi / 2:
        angle += math.pi
    return angle


class ConstraintSolver:
    """
    Relaxations-Solver: wendet jeden Constraint einmal pro Durchlauf an,
    in Einfüge-Reihenfolge, bis ein Durchlauf nichts mehr bewegt.

    Kein simultanes Gleichungssystem - über- oder widersprüchlich
    bestimmte Sketches konvergieren ggf. nicht. Das ist ein erwartetes
    Ergebnis (Rückgabe False), kein Fehler.
    """

    def __init__(self, max_iterations: Optional[int] = None, tolerance: Optional[float] = None):
        self.max_iterations = max_iterations if max_iterations is not None else Tolerances.SOLVER_MAX_ITERATIONS
        self.tolerance = tolerance if tolerance is not None else Tolerances.SKETCH_SOLVER
        self.last_iterations = 0

        self._handlers = {
            ConstraintType.COINCIDENT: self._apply_coincident,
            ConstraintType.HORIZONTAL: self._apply_horizontal,
            ConstraintType.VERTICAL: self._apply_vertical,
            ConstraintType.PARALLEL: self._apply_parallel,
            ConstraintType.PERPENDICULAR: self._apply_perpendicular,
            ConstraintType.EQUAL: self._apply_equal,
            ConstraintType.MIDPOINT: self._apply_midpoint,
        }

    def solve(self, sketch: 'Sketch') -> bool:
        """
        Relaxiert den Sketch bis zum Fixpunkt.

        Returns:
            True wenn ein Durchlauf ohne Korrektur erreicht wurde (alle
            Constraints werden dann als satisfied markiert), False wenn
            max_iterations erschöpft ist.
        """
        constraints = list(sketch.constraints.values())

        for iteration in range(1, self.max_iterations + 1):
            changed = False
            for constraint in constraints:
                if self.apply_constraint(constraint, sketch):
                    changed = True

            if not changed:
                for constraint in constraints:
                    constraint.satisfied = True
                self.last_iterations = iteration
                logger.debug(f"Solver konvergiert nach {iteration} Durchläufen ({len(constraints)} Constraints)")
                return True

        self.last_iterations = self.max_iterations
        logger.warning(
            f"Solver nicht konvergiert: {self.max_iterations} Durchläufe, {len(constraints)} Constraints"
        )
        return False

    def apply_constraint(self, constraint: Constraint, sketch: 'Sketch') -> bool:
        """Wendet einen Constraint einmal an. Returns True wenn ein Punkt bewegt wurde."""
        if not constraint.is_valid():
            return False

        handler = self._handlers.get(constraint.type)
        if handler is None:
            return False

        changed = handler(constraint, sketch)
        if changed and is_enabled("solver_debug"):
            logger.debug(f"[Solver] Korrektur: {constraint!r}")
        return changed

    # === Auflösung (tolerant gegenüber hängenden IDs) ===

    @staticmethod
    def _line_points(sketch: 'Sketch', line_id: str) -> Optional[Tuple[SketchPoint, SketchPoint]]:
        line = sketch.get_line(line_id)
        if line is None:
            return None
        start = sketch.get_point(line.start_point_id)
        end = sketch.get_point(line.end_point_id)
        if start is None or end is None:
            return None
        return start, end

    def _line_pair(self, constraint: Constraint, sketch: 'Sketch'):
        first = self._line_points(sketch, constraint.entities[0])
        second = self._line_points(sketch, constraint.entities[1])
        if first is None or second is None:
            return None
        return first, second

    @staticmethod
    def _place_free_end(start: SketchPoint, end: SketchPoint, length: float, angle: float) -> bool:
        """
        Setzt den freien Endpunkt so, dass die Linie Länge/Winkel erhält.
        Bevorzugt den Endpunkt; der andere Punkt dient als Drehpunkt.
        """
        dx = length * math.cos(angle)
        dy = length * math.sin(angle)
        if not end.fixed:
            end.move_to(start.x + dx, start.y + dy)
            return True
        if not start.fixed:
            start.move_to(end.x - dx, end.y - dy)
            return True
        return False

    # === Constraint-Korrekturen ===

    def _apply_coincident(self, constraint: Constraint, sketch: 'Sketch') -> bool:
        p1 = sketch.get_point(constraint.entities[0])
        p2 = sketch.get_point(constraint.entities[1])
        if p1 is None or p2 is None:
            return False

        if abs(p1.x - p2.x) < self.tolerance and abs(p1.y - p2.y) < self.tolerance:
            return False

        if p1.fixed and p2.fixed:
            # Nicht korrigierbar - bleibt unerfüllt
            return False
        if p1.fixed:
            p2.move_to(p1.x, p1.y)
        elif p2.fixed:
            p1.move_to(p2.x, p2.y)
        else:
            mx, my = midpoint(p1, p2)
            p1.move_to(mx, my)
            p2.move_to(mx, my)
        return True

    def _apply_horizontal(self, constraint: Constraint, sketch: 'Sketch') -> bool:
        points = self._line_points(sketch, constraint.entities[0])
        if points is None:
            return False
        start, end = points

        if abs(start.y - end.y) < self.tolerance:
            return False

        if not start.fixed and not end.fixed:
            avg_y = (start.y + end.y) / 2
            start.y = avg_y
            end.y = avg_y
        elif not start.fixed:
            start.y = end.y
        elif not end.fixed:
            end.y = start.y
        else:
            return False
        return True

    def _apply_vertical(self, constraint: Constraint, sketch: 'Sketch') -> bool:
        points = self._line_points(sketch, constraint.entities[0])
        if points is None:
            return False
        start, end = points

        if abs(start.x - end.x) < self.tolerance:
            return False

        if not start.fixed and not end.fixed:
            avg_x = (start.x + end.x) / 2
            start.x = avg_x
            end.x = avg_x
        elif not start.fixed:
            start.x = end.x
        elif not end.fixed:
            end.x = start.x
        else:
            return False
        return True

    def _apply_parallel(self, constraint: Constraint, sketch: 'Sketch') -> bool:
        pair = self._line_pair(constraint, sketch)
        if pair is None:
            return False
        (start1, end1), (start2, end2) = pair

        length2 = distance(start2, end2)
        if length2 < Tolerances.EPSILON_MATH or distance(start1, end1) < Tolerances.EPSILON_MATH:
            return False

        angle1 = segment_angle(start1, end1)
        angle2 = segment_angle(start2, end2)

        # Antiparallel zählt als parallel
        diff = _fold_half_turn(angle2 - angle1)
        if abs(diff) < self.tolerance:
            return False

        # Zur Mitte beider Richtungen drehen
        return self._place_free_end(start2, end2, length2, angle2 - diff / 2)

    def _apply_perpendicular(self, constraint: Constraint, sketch: 'Sketch') -> bool:
        pair = self._line_pair(constraint, sketch)
        if pair is None:
            return False
        (start1, end1), (start2, end2) = pair

        length2 = distance(start2, end2)
        if length2 < Tolerances.EPSILON_MATH or distance(start1, end1) < Tolerances.EPSILON_MATH:
            return False

        angle1 = segment_angle(start1, end1)
        angle2 = segment_angle(start2, end2)

        # Abweichung zum nächstgelegenen 90°-Winkel; Linie 1 bleibt Referenz
        off = _fold_half_turn(angle2 - (angle1 + math.pi / 2))
        if abs(off) < self.tolerance:
            return False

        return self._place_free_end(start2, end2, length2, angle2 - off)

    def _apply_equal(self, constraint: Constraint, sketch: 'Sketch') -> bool:
        pair = self._line_pair(constraint, sketch)
        if pair is None:
            return False
        (start1, end1), (start2, end2) = pair

        length1 = distance(start1, end1)
        length2 = distance(start2, end2)
        if abs(length1 - length2) < self.tolerance:
            return False

        avg_length = (length1 + length2) / 2
        return self._place_free_end(start2, end2, avg_length, segment_angle(start2, end2))

    def _apply_midpoint(self, constraint: Constraint, sketch: 'Sketch') -> bool:
        point = sketch.get_point(constraint.entities[0])
        points = self._line_points(sketch, constraint.entities[1])
        if point is None or points is None:
            return False

        mid_x, mid_y = midpoint(*points)
        if abs(point.x - mid_x) < self.tolerance and abs(point.y - mid_y) < self.tolerance:
            return False

        if point.fixed:
            return False
        point.move_to(mid_x, mid_y)
        return True
