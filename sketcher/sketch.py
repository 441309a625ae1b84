"""
SketchCore Sketcher - Sketch Object
Fasst Geometrie, Constraints und Dimensionen in einer ID-Arena zusammen
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union
from loguru import logger

from config.tolerances import Tolerances
from .geometry import SketchPoint, SketchLine, SketchCircle, new_id
from .constraints import (
    Constraint, ConstraintType,
    make_coincident, make_horizontal, make_vertical, make_parallel,
    make_perpendicular, make_equal, make_midpoint
)
from .dimensions import Dimension, DimensionType, DimensionManager
from .profile_detector import ClosedProfile, ProfileDetector
from .solver import ConstraintSolver, SolverResult


@dataclass
class Sketch:
    """
    2D-Sketch mit Geometrie, Constraints und Dimensionen.

    Alle Collections sind Dicts (ID -> Objekt) in Einfüge-Reihenfolge;
    Referenzen zwischen Entities laufen ausschließlich über IDs.
    Lookups liefern None statt eine Exception zu werfen.
    """

    name: str = "Sketch"
    id: str = field(default_factory=new_id)
    plane_id: Optional[str] = None

    # Geometrie
    points: Dict[str, SketchPoint] = field(default_factory=dict)
    lines: Dict[str, SketchLine] = field(default_factory=dict)
    circles: Dict[str, SketchCircle] = field(default_factory=dict)

    # Constraints & Bemaßung
    constraints: Dict[str, Constraint] = field(default_factory=dict)
    dimensions: Dict[str, Dimension] = field(default_factory=dict)

    # Abgeleitet - wird bei detect_profiles() komplett neu berechnet
    profiles: List[ClosedProfile] = field(default_factory=list)

    _solver: ConstraintSolver = field(default_factory=ConstraintSolver, repr=False)
    _dimension_manager: DimensionManager = field(default_factory=DimensionManager, repr=False)
    _profile_detector: ProfileDetector = field(default_factory=ProfileDetector, repr=False)

    # === Lookups ===

    def get_point(self, point_id: Optional[str]) -> Optional[SketchPoint]:
        return self.points.get(point_id) if point_id is not None else None

    def get_line(self, line_id: Optional[str]) -> Optional[SketchLine]:
        return self.lines.get(line_id) if line_id is not None else None

    def get_circle(self, circle_id: Optional[str]) -> Optional[SketchCircle]:
        return self.circles.get(circle_id) if circle_id is not None else None

    # === Geometrie-Erstellung ===

    def add_point(self, x: float, y: float, fixed: bool = False, point_id: Optional[str] = None) -> SketchPoint:
        """Fügt einen Punkt hinzu"""
        point = SketchPoint(x, y, fixed=fixed)
        if point_id is not None:
            point.id = point_id
        self.points[point.id] = point
        return point

    def add_line(self, start_id: str, end_id: str, construction: bool = False,
                 line_id: Optional[str] = None) -> SketchLine:
        """Fügt eine Linie zwischen (existierenden) Punkt-IDs hinzu - ohne Validierung"""
        line = SketchLine(start_id, end_id, construction=construction)
        if line_id is not None:
            line.id = line_id
        self.lines[line.id] = line
        return line

    def add_line_xy(self, x1: float, y1: float, x2: float, y2: float,
                    construction: bool = False) -> SketchLine:
        """Fügt eine Linie mit zwei neuen Endpunkten hinzu"""
        start = self.add_point(x1, y1)
        end = self.add_point(x2, y2)
        return self.add_line(start.id, end.id, construction=construction)

    def add_polygon(self, coords: Sequence[Tuple[float, float]], construction: bool = False) -> List[SketchLine]:
        """Geschlossener Linienzug mit geteilten Eckpunkten"""
        corners = [self.add_point(x, y) for x, y in coords]
        lines = []
        for i, corner in enumerate(corners):
            following = corners[(i + 1) % len(corners)]
            lines.append(self.add_line(corner.id, following.id, construction=construction))
        return lines

    def add_rectangle(self, x: float, y: float, width: float, height: float,
                      construction: bool = False) -> List[SketchLine]:
        """Rechteck gegen den Uhrzeigersinn ab (x, y) als linker unterer Ecke"""
        return self.add_polygon(
            [(x, y), (x + width, y), (x + width, y + height), (x, y + height)],
            construction=construction,
        )

    def add_circle(self, cx: float, cy: float, radius: float) -> SketchCircle:
        """Fügt einen Kreis mit neuem Mittelpunkt hinzu"""
        center = self.add_point(cx, cy)
        circle = SketchCircle(center.id, float(radius))
        self.circles[circle.id] = circle
        return circle

    # === Constraints ===

    def add_constraint(self, constraint_or_type: Union[Constraint, ConstraintType, str],
                       entity_ids: Optional[Sequence[str]] = None) -> Constraint:
        """
        Registriert einen Constraint und trägt seine ID bei allen
        referenzierten Punkten/Linien ein.
        """
        if isinstance(constraint_or_type, Constraint):
            constraint = constraint_or_type
        else:
            constraint = Constraint(type=ConstraintType(constraint_or_type), entities=list(entity_ids or []))

        self.constraints[constraint.id] = constraint

        for entity_id in constraint.entities:
            entity = self.get_point(entity_id) or self.get_line(entity_id)
            if entity is not None and constraint.id not in entity.constraints:
                entity.constraints.append(constraint.id)
        return constraint

    def add_coincident(self, p1_id: str, p2_id: str) -> Constraint:
        return self.add_constraint(make_coincident(p1_id, p2_id))

    def add_horizontal(self, line_id: str) -> Constraint:
        return self.add_constraint(make_horizontal(line_id))

    def add_vertical(self, line_id: str) -> Constraint:
        return self.add_constraint(make_vertical(line_id))

    def add_parallel(self, reference_line_id: str, line_id: str) -> Constraint:
        return self.add_constraint(make_parallel(reference_line_id, line_id))

    def add_perpendicular(self, reference_line_id: str, line_id: str) -> Constraint:
        return self.add_constraint(make_perpendicular(reference_line_id, line_id))

    def add_equal(self, reference_line_id: str, line_id: str) -> Constraint:
        return self.add_constraint(make_equal(reference_line_id, line_id))

    def add_midpoint(self, point_id: str, line_id: str) -> Constraint:
        return self.add_constraint(make_midpoint(point_id, line_id))

    # === Dimensionen ===

    def add_dimension(self, dim_type: Union[DimensionType, str], entity_ids: Sequence[str],
                      value: float, name: Optional[str] = None) -> Dimension:
        """Fügt eine Bemaßung hinzu (wird erst in solve() angewendet)"""
        dimension = Dimension(DimensionType(dim_type), list(entity_ids), value, name=name)
        self.dimensions[dimension.id] = dimension
        return dimension

    # === Relaxation ===

    def solve(self, max_rounds: Optional[int] = None) -> SolverResult:
        """
        Äußere Konvergenz-Schleife: alle Dimensionen anwenden, dann den
        Constraint-Solver laufen lassen - bis eine Runde weder eine
        Dimension ändert noch der Solver etwas korrigieren muss.
        """
        max_rounds = max_rounds if max_rounds is not None else Tolerances.SKETCH_RELAX_ROUNDS
        total_iterations = 0

        for round_no in range(1, max_rounds + 1):
            dims_changed = False
            for dimension in self.dimensions.values():
                if self._dimension_manager.apply_dimension(dimension, self):
                    dims_changed = True

            converged = self._solver.solve(self)
            total_iterations += self._solver.last_iterations

            if converged and not dims_changed:
                message = f"Konvergiert nach {round_no} Runden ({total_iterations} Solver-Durchläufe)"
                logger.info(f"Sketch '{self.name}': {message}")
                return SolverResult(True, round_no, total_iterations, message)

        message = f"Nicht konvergiert nach {max_rounds} Runden ({total_iterations} Solver-Durchläufe)"
        logger.warning(f"Sketch '{self.name}': {message}")
        return SolverResult(False, max_rounds, total_iterations, message)

    # === Profile ===

    def detect_profiles(self) -> List[ClosedProfile]:
        """Berechnet alle geschlossenen Profile neu und speichert sie"""
        self.profiles = self._profile_detector.detect_closed_profiles(self)
        return self.profiles

    def profile_polygon(self, profile: ClosedProfile) -> List[Tuple[float, float]]:
        """Koordinatenfolge eines Profils für Extrusion/Meshing"""
        return self._profile_detector.profile_polygon(profile, self)

    def __repr__(self):
        return (f"Sketch('{self.name}', {len(self.points)} Punkte, {len(self.lines)} Linien, "
                f"{len(self.constraints)} Constraints, {len(self.dimensions)} Dimensionen)")
