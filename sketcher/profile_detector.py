"""
Topologische Profile-Detection
==============================

Findet geschlossene Linien-Loops im Sketch-Graphen und ordnet Löcher zu.

Ablauf:
1. Für jede noch nicht verwendete, nicht-Construction Linie wird ein Walk
   über gemeinsame Punkt-IDs gestartet. Nur Walks, die zur Startlinie
   zurückkehren, werden Profile - offene Walks werden verworfen.
2. Jedes Profil-Paar wird auf Enthaltensein geprüft (O(n²)): liegt der
   erste Punkt von B im Polygon von A, ist B ein Loch von A.

Verwendung:
    detector = ProfileDetector()
    profiles = detector.detect_closed_profiles(sketch)
    # profiles ist eine Liste von ClosedProfile (Loch-Flag + Parent-ID)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple, TYPE_CHECKING
from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances
from .geometry import SketchLine, new_id, point_in_polygon

if TYPE_CHECKING:
    from .sketch import Sketch


@dataclass
class ClosedProfile:
    """Geschlossener Loop aus Linien-IDs - wird bei jeder Detection neu erzeugt"""
    entity_ids: List[str]
    id: str = field(default_factory=lambda: new_id("profile-"))
    is_hole: bool = False
    parent_profile_id: Optional[str] = None


class ProfileDetector:
    """
    Loop-Tracing über Punkt-IDs (nicht über Koordinaten).

    Hängende Referenzen (Linie zeigt auf gelöschten Punkt) werden still
    übersprungen - ein Sketch im Edit ist häufig kurzzeitig inkonsistent.
    """

    def __init__(self, max_steps: Optional[int] = None):
        self.max_steps = max_steps if max_steps is not None else Tolerances.PROFILE_TRACE_MAX_STEPS

    def detect_closed_profiles(self, sketch: 'Sketch') -> List[ClosedProfile]:
        """
        Findet alle geschlossenen Profile.

        Returns:
            Neue Liste von ClosedProfile (nie inkrementell gepatcht)
        """
        candidates = [line for line in sketch.lines.values() if self._is_traceable(line, sketch)]

        profiles: List[ClosedProfile] = []
        visited: Set[str] = set()

        for line in candidates:
            if line.id in visited:
                continue

            loop = self._trace_loop(line, candidates)
            if loop is None or len(loop) < Tolerances.PROFILE_MIN_LINES:
                continue

            profiles.append(ClosedProfile(entity_ids=loop))
            visited.update(loop)

        self._identify_holes(profiles, sketch)

        holes = sum(1 for p in profiles if p.is_hole)
        logger.info(f"Profile-Detection: {len(profiles)} Profile gefunden ({holes} Löcher)")
        return profiles

    @staticmethod
    def _is_traceable(line: SketchLine, sketch: 'Sketch') -> bool:
        if line.construction:
            return False
        return (sketch.get_point(line.start_point_id) is not None
                and sketch.get_point(line.end_point_id) is not None)

    def _trace_loop(self, start_line: SketchLine, candidates: List[SketchLine]) -> Optional[List[str]]:
        """
        Walk ab start_line.end bis zurück zur Startlinie.

        Returns:
            Linien-IDs des Loops oder None bei offenem Walk
        """
        path = [start_line.id]
        visited_in_loop = {start_line.id}
        current_point = start_line.end_point_id
        current_line = start_line

        for _ in range(self.max_steps):
            next_line = self._find_connected_line(current_point, current_line, start_line, candidates, visited_in_loop)

            if next_line is None:
                if is_enabled("profile_debug"):
                    logger.debug(f"[PROFILE] Walk ab {start_line.id} offen bei Punkt {current_point}, {len(path)} Linien verworfen")
                return None

            if next_line.id == start_line.id:
                return path

            path.append(next_line.id)
            visited_in_loop.add(next_line.id)
            current_point = next_line.other_point_id(current_point)
            current_line = next_line

        logger.debug(f"Profil-Trace abgebrochen: max_steps={self.max_steps} erreicht, {len(path)} Linien gesammelt")
        return None

    @staticmethod
    def _find_connected_line(point_id: str, exclude: SketchLine, start_line: SketchLine,
                             candidates: List[SketchLine], visited: Set[str]) -> Optional[SketchLine]:
        """Erste Linie am Punkt (Einfüge-Reihenfolge); die Startlinie schließt den Loop."""
        for line in candidates:
            if line.id == exclude.id:
                continue
            if line.id in visited and line.id != start_line.id:
                continue
            if line.touches(point_id):
                return line
        return None

    # === Loch-Erkennung ===

    def _identify_holes(self, profiles: List[ClosedProfile], sketch: 'Sketch') -> None:
        """
        B ist Loch von A, wenn B's erster Punkt in A liegt.
        Bei mehreren umschließenden Profilen gewinnt der letzte Treffer.
        """
        polygons = [self.profile_polygon(profile, sketch) for profile in profiles]

        for i, outer in enumerate(profiles):
            for j, inner in enumerate(profiles):
                if i == j or not polygons[j]:
                    continue
                if point_in_polygon(polygons[j][0], polygons[i]):
                    inner.is_hole = True
                    inner.parent_profile_id = outer.id
                    if is_enabled("profile_debug"):
                        logger.debug(f"[PROFILE] {inner.id} liegt in {outer.id}")

    @staticmethod
    def profile_polygon(profile: ClosedProfile, sketch: 'Sketch') -> List[Tuple[float, float]]:
        """
        Polygon aus den Startpunkten der Loop-Linien.
        Endpunkte ergeben sich implizit aus der nächsten Linie.
        """
        polygon = []
        for entity_id in profile.entity_ids:
            line = sketch.get_line(entity_id)
            if line is None:
                continue
            start = sketch.get_point(line.start_point_id)
            if start is not None:
                polygon.append(start.as_tuple())
        return polygon
