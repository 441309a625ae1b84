"""
SketchCore - Configuration Module
=================================

Zentrale Konfiguration für Toleranzen und Debug-Schalter.
"""

from .tolerances import Tolerances, solver_tolerance, dimension_tolerance
from .feature_flags import is_enabled, set_flag, get_all_flags, FEATURE_FLAGS
