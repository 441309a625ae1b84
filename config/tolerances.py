"""
SketchCore - Zentralisierte Toleranz-Konfiguration
==================================================

Alle Toleranzen und Iterations-Grenzen an einem Ort.

Toleranz-Philosophie:
- Sketch-Relaxation: 0.01 - lokale Korrekturen, kein exakter Gleichungslöser
- Dimensionen: 0.01 - gleiche Größenordnung wie der Solver, sonst oszilliert
  der äußere Relaxations-Loop
- Mathematik: 1e-9 - nur gegen Division durch Null

Verwendung:
    from config.tolerances import Tolerances

    tol = Tolerances.SKETCH_SOLVER

    # Oder via Convenience-Funktionen
    from config.tolerances import solver_tolerance
    tol = solver_tolerance()
"""


class Tolerances:
    """
    Zentrale Toleranz-Konstanten.

    Kategorien:
    - SKETCH_*: Constraint-Solver und Dimensionen
    - SOLVER_*: Iterations-Grenzen
    - PROFILE_*: Profil-Erkennung
    - EPSILON_*: Numerische Stabilität
    """

    # =========================================================================
    # Sketch/2D Relaxation
    # =========================================================================

    # Fixpunkt-Toleranz: ein Durchlauf ohne Bewegung > 0.01 gilt als konvergiert
    SKETCH_SOLVER = 0.01

    # Dimension gilt als erfüllt wenn |ist - soll| < 0.01
    SKETCH_DIMENSION = 0.01

    # =========================================================================
    # Iterations-Grenzen
    # =========================================================================

    # Maximale Durchläufe über alle Constraints pro solve()
    SOLVER_MAX_ITERATIONS = 100

    # Äußere Runden (Dimensionen + Constraint-Solver) in Sketch.solve()
    SKETCH_RELAX_ROUNDS = 50

    # =========================================================================
    # Profil-Erkennung
    # =========================================================================

    # Sicherheitsgrenze für einen einzelnen Loop-Walk
    PROFILE_TRACE_MAX_STEPS = 1000

    # Mindestanzahl Linien für ein geschlossenes Profil
    PROFILE_MIN_LINES = 3

    # =========================================================================
    # Mathematische Epsilon-Werte
    # =========================================================================

    # Vermeidet Division durch Null
    EPSILON_MATH = 1e-9


# =============================================================================
# Convenience-Funktionen
# =============================================================================

def solver_tolerance() -> float:
    """Gibt die Fixpunkt-Toleranz des Constraint-Solvers zurück."""
    return Tolerances.SKETCH_SOLVER


def dimension_tolerance() -> float:
    """Gibt die Toleranz für erfüllte Dimensionen zurück."""
    return Tolerances.SKETCH_DIMENSION


# =============================================================================
# Toleranz-Validierung (für Debugging)
# =============================================================================

def validate_tolerances():
    """
    Validiert dass alle Toleranzen sinnvolle Werte haben.
    Nützlich für Tests und Debugging.
    """
    issues = []

    if not (Tolerances.EPSILON_MATH < Tolerances.SKETCH_SOLVER <= 1.0):
        issues.append(f"SKETCH_SOLVER außerhalb sinnvoller Grenzen: {Tolerances.SKETCH_SOLVER}")

    # Dimension strenger als Solver -> äußerer Loop kommt nie zur Ruhe
    if Tolerances.SKETCH_DIMENSION < Tolerances.SKETCH_SOLVER:
        issues.append(
            f"SKETCH_DIMENSION ({Tolerances.SKETCH_DIMENSION}) strenger als "
            f"SKETCH_SOLVER ({Tolerances.SKETCH_SOLVER})"
        )

    if Tolerances.SOLVER_MAX_ITERATIONS < 1:
        issues.append(f"SOLVER_MAX_ITERATIONS muss >= 1 sein: {Tolerances.SOLVER_MAX_ITERATIONS}")

    if Tolerances.PROFILE_MIN_LINES < 3:
        issues.append(f"PROFILE_MIN_LINES muss >= 3 sein: {Tolerances.PROFILE_MIN_LINES}")

    return issues


# Automatische Validierung beim Import (nur Warnung, kein Fehler)
_validation_issues = validate_tolerances()
if _validation_issues:
    from loguru import logger
    for issue in _validation_issues:
        logger.warning(f"Toleranz-Validierung: {issue}")
