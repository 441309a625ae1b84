"""
SketchCore - Aluminium-Profil Parameter
=======================================

Geometrische Validierung und Schnitt-Layout für T-Nut-Strangpressprofile.
Der eigentliche Solid-Aufbau (Quader, Zylinder, Boolean) passiert im
Shape-Builder; hier entstehen nur die Zahlen, die er braucht.

Verwendung:
    layout = slot_layout(PROFILE_2020)
    layout.outer_slot_position  # -> 9.25
"""

from dataclasses import dataclass
from typing import List, Tuple


class ProfileValidationError(ValueError):
    """Profil-Parameter verletzen eine geometrische Randbedingung"""
    pass


@dataclass(frozen=True)
class ExtrusionProfile:
    """Alle Maße in mm"""
    size: float
    length: float
    center_hole_diameter: float
    outer_slot_width: float
    outer_slot_depth: float
    inner_channel_width: float
    inner_channel_depth: float
    trapezoid_top_width: float
    trapezoid_bottom_width: float
    trapezoid_base_from_center: float
    corner_radius: float


PROFILE_2020 = ExtrusionProfile(
    size=20.0,
    length=20.0,
    center_hole_diameter=4.19,
    outer_slot_width=5.26,
    outer_slot_depth=1.5,
    inner_channel_width=11.99,
    inner_channel_depth=1.5,
    trapezoid_top_width=11.99,
    trapezoid_bottom_width=5.26,
    trapezoid_base_from_center=6.34,
    corner_radius=1.0,
)

# Verhindert koplanare Flächen bei Boolean-Subtraktion
CUTTER_OVERSHOOT = 2.0


@dataclass(frozen=True)
class SlotLayout:
    """Schnitt-Positionen (Abstand von der Profilmitte) für eine Seite"""
    extrusion_length: float
    center_hole_radius: float
    outer_slot_position: float
    inner_channel_position: float
    trapezoid_outer_position: float
    trapezoid_inner_position: float
    corner_offset: float

    def cutter_positions(self) -> List[Tuple[str, int, float]]:
        """(Achse, Richtung, Position) für alle vier Seiten der Außen-Nut"""
        return [(axis, direction, direction * self.outer_slot_position)
                for axis in ('x', 'y') for direction in (1, -1)]


def validate_profile(profile: ExtrusionProfile) -> None:
    """
    Prüft das Profil vor dem Solid-Aufbau.

    Raises:
        ProfileValidationError: bei der ersten verletzten Bedingung
    """
    if profile.outer_slot_depth > profile.size / 2:
        raise ProfileValidationError("Außen-Nuttiefe zu groß für Profilgröße")
    if profile.inner_channel_depth > profile.size / 2:
        raise ProfileValidationError("Innenkanal-Tiefe zu groß für Profilgröße")
    if profile.corner_radius * 2 > profile.size:
        raise ProfileValidationError("Eckradius zu groß für Profilgröße")
    if profile.trapezoid_top_width > profile.size:
        raise ProfileValidationError("Trapez-Oberbreite zu groß für Profilgröße")
    if profile.center_hole_diameter > profile.size:
        raise ProfileValidationError("Mittelbohrung zu groß für Profilgröße")


def slot_layout(profile: ExtrusionProfile) -> SlotLayout:
    """Validiert das Profil und berechnet die Schnitt-Positionen"""
    validate_profile(profile)

    half_size = profile.size / 2
    face_inset = profile.outer_slot_depth + profile.inner_channel_depth

    return SlotLayout(
        extrusion_length=profile.length + CUTTER_OVERSHOOT,
        center_hole_radius=profile.center_hole_diameter / 2,
        outer_slot_position=half_size - profile.outer_slot_depth / 2,
        inner_channel_position=half_size - profile.outer_slot_depth - profile.inner_channel_depth / 2,
        trapezoid_outer_position=half_size - face_inset,
        trapezoid_inner_position=half_size - profile.trapezoid_base_from_center,
        corner_offset=half_size - profile.corner_radius,
    )
