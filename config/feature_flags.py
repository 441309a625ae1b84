"""
SketchCore - Feature Flags
==========================

Laufzeit-Schalter für Debug-Ausgaben der Kern-Algorithmen.
Alle Flags sind standardmäßig aus; Tests setzen sie über set_flag()
und die Fixture in test/conftest.py stellt die Defaults wieder her.
"""

from typing import Dict

FEATURE_FLAGS: Dict[str, bool] = {
    # Debug-Modi
    "solver_debug": False,  # Jede einzelne Constraint-Korrektur loggen (sehr verbose)
    "profile_debug": False,  # Loop-Walks und Loch-Zuordnung loggen
    "positioning_debug": False,  # Referenz-Ketten beim Auflösen loggen
}


def is_enabled(flag: str) -> bool:
    """
    Prüft ob ein Feature-Flag aktiviert ist.

    Args:
        flag: Name des Feature-Flags

    Returns:
        True wenn aktiviert, False wenn nicht aktiviert oder unbekannt
    """
    return FEATURE_FLAGS.get(flag, False)


def set_flag(flag: str, value: bool) -> None:
    """
    Setzt ein Feature-Flag zur Laufzeit.
    Nützlich für Tests und Debugging.

    Args:
        flag: Name des Feature-Flags
        value: Neuer Wert
    """
    FEATURE_FLAGS[flag] = value


def get_all_flags() -> Dict[str, bool]:
    """Gibt alle Feature-Flags zurück."""
    return FEATURE_FLAGS.copy()
