"""
SketchCore Sketcher - Constraint System
Geometrische Constraints für parametrisches Design
"""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum

from .geometry import new_id


class ConstraintType(Enum):
    """Verfügbare Constraint-Typen"""
    # Punkt-Constraints
    COINCIDENT = "coincident"        # Zwei Punkte zusammen
    MIDPOINT = "midpoint"            # Punkt auf Linienmitte

    # Linien-Constraints
    HORIZONTAL = "horizontal"        # Linie horizontal
    VERTICAL = "vertical"            # Linie vertikal
    PARALLEL = "parallel"            # Zwei Linien parallel
    PERPENDICULAR = "perpendicular"  # Zwei Linien senkrecht
    EQUAL = "equal"                  # Zwei Linien gleich lang


# Anzahl der erforderlichen Entities pro Constraint-Typ (Reihenfolge zählt)
_REQUIRED_ENTITIES = {
    ConstraintType.COINCIDENT: 2,     # Punkt, Punkt
    ConstraintType.MIDPOINT: 2,       # Punkt, Linie
    ConstraintType.HORIZONTAL: 1,     # Linie
    ConstraintType.VERTICAL: 1,       # Linie
    ConstraintType.PARALLEL: 2,       # Referenz-Linie, angepasste Linie
    ConstraintType.PERPENDICULAR: 2,  # Referenz-Linie, angepasste Linie
    ConstraintType.EQUAL: 2,          # Referenz-Linie, angepasste Linie
}


@dataclass
class Constraint:
    """
    Typisierte Beziehung zwischen Sketch-Entities.

    ``entities`` enthält nur IDs; aufgelöst wird erst im Solver.
    ``satisfied`` ist reiner Status und wird ausschließlich vom Solver
    gesetzt, wenn ein kompletter Durchlauf keine Korrektur mehr erzeugt.
    """
    type: ConstraintType
    entities: List[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: new_id("c-"))
    satisfied: bool = False

    def __post_init__(self):
        if isinstance(self.type, str):
            self.type = ConstraintType(self.type)

    def __repr__(self):
        state = "ok" if self.satisfied else "open"
        return f"{self.type.name}({', '.join(self.entities)})[{state}]"

    def get_required_entities(self) -> int:
        """Gibt die Anzahl der benötigten Entities für diesen Constraint-Typ zurück."""
        return _REQUIRED_ENTITIES.get(self.type, 0)

    def is_valid(self) -> bool:
        """Prüft ob der Constraint genug Entities hat."""
        return len(self.entities) >= self.get_required_entities()

    def validation_error(self) -> Optional[str]:
        """Gibt eine Fehlermeldung zurück wenn der Constraint ungültig ist, sonst None."""
        required = self.get_required_entities()
        actual = len(self.entities)
        if actual < required:
            return f"{self.type.name} benötigt {required} Entities, hat aber nur {actual}"
        return None


# === Constraint-Factories ===

def make_coincident(p1_id: str, p2_id: str) -> Constraint:
    """Zwei Punkte zusammenfallen lassen"""
    return Constraint(type=ConstraintType.COINCIDENT, entities=[p1_id, p2_id])


def make_horizontal(line_id: str) -> Constraint:
    """Linie horizontal"""
    return Constraint(type=ConstraintType.HORIZONTAL, entities=[line_id])


def make_vertical(line_id: str) -> Constraint:
    """Linie vertikal"""
    return Constraint(type=ConstraintType.VERTICAL, entities=[line_id])


def make_parallel(reference_line_id: str, line_id: str) -> Constraint:
    """Zweite Linie parallel zur ersten"""
    return Constraint(type=ConstraintType.PARALLEL, entities=[reference_line_id, line_id])


def make_perpendicular(reference_line_id: str, line_id: str) -> Constraint:
    """Zweite Linie senkrecht zur ersten (erste bleibt unverändert)"""
    return Constraint(type=ConstraintType.PERPENDICULAR, entities=[reference_line_id, line_id])


def make_equal(reference_line_id: str, line_id: str) -> Constraint:
    """Zwei Linien gleich lang"""
    return Constraint(type=ConstraintType.EQUAL, entities=[reference_line_id, line_id])


def make_midpoint(point_id: str, line_id: str) -> Constraint:
    """Punkt auf Mittelpunkt der Linie"""
    return Constraint(type=ConstraintType.MIDPOINT, entities=[point_id, line_id])
