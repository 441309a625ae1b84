"""
SketchCore Sketcher Module
"""

from .geometry import (
    SketchPoint, SketchLine, SketchCircle,
    distance, midpoint, segment_angle, normalize_angle, point_in_polygon
)

from .constraints import (
    Constraint, ConstraintType,
    make_coincident, make_horizontal, make_vertical,
    make_parallel, make_perpendicular, make_equal, make_midpoint
)

from .dimensions import Dimension, DimensionType, DimensionManager

from .profile_detector import ClosedProfile, ProfileDetector

from .solver import ConstraintSolver, SolverResult

from .sketch import Sketch
