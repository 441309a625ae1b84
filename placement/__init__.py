"""
SketchCore Placement Module
Einheiten, Anker und relative Positionierung für Shape-Bäume
"""

from .units import (
    UNITS, UNIT_TO_MM, InvalidValueFormatError, ParsedValue,
    parse_value_with_unit, convert_to_mm, convert_from_mm, convert_between_units, format_value
)

from .anchors import (
    ANCHOR_PRESETS, ParsedAnchor, AnchorOffset,
    parse_anchor, calculate_anchor_offset, anchor_presets
)

from .positioning import (
    CircularDependencyError, MissingReferenceError, ResolvedPosition,
    build_shapes_map, resolve_position, resolve_all_positions
)

from .extrusion import (
    ExtrusionProfile, ProfileValidationError, SlotLayout, PROFILE_2020,
    validate_profile, slot_layout
)

from .pattern import extrusion_pattern
