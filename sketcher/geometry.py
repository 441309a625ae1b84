"""
SketchCore Sketcher - Geometrie-Primitives
Punkte, Linien und Kreise als Arena-Einträge mit ID-Referenzen
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
import math
import uuid

import numpy as np


def new_id(prefix: str = "") -> str:
    """Kurze, stabile ID (8 Zeichen UUID)."""
    short = str(uuid.uuid4())[:8]
    return f"{prefix}{short}" if prefix else short


@dataclass
class SketchPoint:
    """2D-Punkt - Grundbaustein aller Geometrie"""
    x: float = 0.0
    y: float = 0.0
    id: str = field(default_factory=new_id)
    fixed: bool = False  # Wird nie von Solver/Dimensionen bewegt
    constraints: List[str] = field(default_factory=list)

    def __post_init__(self):
        # NumPy-Skalare (z.B. aus Vektor-Rechnungen) in native Floats wandeln
        self.x = float(self.x)
        self.y = float(self.y)

    def distance_to(self, other: 'SketchPoint') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def __repr__(self):
        flag = "F" if self.fixed else ""
        return f"P{flag}[{self.id}]({self.x:.2f}, {self.y:.2f})"


@dataclass
class SketchLine:
    """
    2D-Linie als schwache Referenz auf zwei Punkte.

    Die Linie besitzt ihre Punkte nicht - start_point_id/end_point_id
    werden erst über den Sketch aufgelöst.
    """
    start_point_id: str
    end_point_id: str
    id: str = field(default_factory=new_id)
    construction: bool = False  # Hilfslinien zählen nicht für Profile
    constraints: List[str] = field(default_factory=list)

    def other_point_id(self, point_id: str) -> str:
        """Gegenüberliegender Endpunkt"""
        return self.end_point_id if self.start_point_id == point_id else self.start_point_id

    def touches(self, point_id: str) -> bool:
        return self.start_point_id == point_id or self.end_point_id == point_id

    def __repr__(self):
        kind = "C" if self.construction else ""
        return f"L{kind}[{self.id}]({self.start_point_id}->{self.end_point_id})"


@dataclass
class SketchCircle:
    """Kreis um einen referenzierten Mittelpunkt"""
    center_point_id: str
    radius: float
    id: str = field(default_factory=new_id)
    constraints: List[str] = field(default_factory=list)

    def __repr__(self):
        return f"C[{self.id}](center={self.center_point_id}, r={self.radius:.2f})"


# === Geometrie-Hilfsfunktionen ===

def distance(p1: SketchPoint, p2: SketchPoint) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def midpoint(p1: SketchPoint, p2: SketchPoint) -> Tuple[float, float]:
    return ((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)


def segment_angle(start: SketchPoint, end: SketchPoint) -> float:
    """Winkel zur X-Achse in Radiant (atan2 auf aktuellen Koordinaten)"""
    return math.atan2(end.y - start.y, end.x - start.x)


def normalize_angle(angle: float) -> float:
    """Normalisiert auf (-pi, pi]"""
    angle = math.fmod(angle, 2 * math.pi)
    if angle <= -math.pi:
        angle += 2 * math.pi
    elif angle > math.pi:
        angle -= 2 * math.pi
    return angle


def point_in_polygon(point: Tuple[float, float], polygon: Sequence[Tuple[float, float]]) -> bool:
    """
    Even-Odd Ray-Casting: zählt Kanten, die ein Strahl nach +X schneidet.

    Args:
        point: (x, y) des Prüfpunkts
        polygon: Eckpunkte in Reihenfolge, geschlossen implizit

    Returns:
        True bei ungerader Anzahl Schnittpunkte
    """
    if len(polygon) < 3:
        return False

    px, py = point
    verts = np.asarray(polygon, dtype=np.float64)
    xi, yi = verts[:, 0], verts[:, 1]
    # j = i - 1 (Vorgänger-Ecke), wie im klassischen Algorithmus
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)

    straddles = (yi > py) != (yj > py)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
    hits = straddles & (px < x_cross)
    return bool(np.count_nonzero(hits) % 2 == 1)
