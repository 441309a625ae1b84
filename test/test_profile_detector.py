"""
Tests für die topologische Profile-Detection (sketcher/profile_detector.py)
"""

import pytest

from config.feature_flags import set_flag
from sketcher import ProfileDetector, Sketch, point_in_polygon


@pytest.fixture
def detector():
    return ProfileDetector()


def test_single_rectangle_is_one_profile(detector):
    sketch = Sketch("rect")
    lines = sketch.add_rectangle(0, 0, 10, 10)

    profiles = detector.detect_closed_profiles(sketch)

    assert len(profiles) == 1
    assert profiles[0].entity_ids == [line.id for line in lines]
    assert profiles[0].is_hole is False
    assert profiles[0].parent_profile_id is None


def test_triangle_is_closed(detector):
    sketch = Sketch("triangle")
    sketch.add_polygon([(0, 0), (10, 0), (5, 8)])

    profiles = detector.detect_closed_profiles(sketch)
    assert len(profiles) == 1
    assert len(profiles[0].entity_ids) == 3


def test_nested_rectangle_is_hole(detector, log_messages):
    sketch = Sketch("hole")
    sketch.add_rectangle(0, 0, 10, 10)
    sketch.add_rectangle(3, 3, 4, 4)

    outer, inner = detector.detect_closed_profiles(sketch)

    assert outer.is_hole is False
    assert inner.is_hole is True
    assert inner.parent_profile_id == outer.id
    assert ("INFO", "Profile-Detection: 2 Profile gefunden (1 Löcher)") in log_messages


def test_separate_rectangles_are_not_holes(detector):
    sketch = Sketch("separate")
    sketch.add_rectangle(0, 0, 10, 10)
    sketch.add_rectangle(20, 0, 10, 10)

    profiles = detector.detect_closed_profiles(sketch)
    assert len(profiles) == 2
    assert not any(p.is_hole for p in profiles)


def test_last_containing_profile_wins(detector):
    """Bei mehreren umschließenden Profilen zählt der letzte Treffer in Einfüge-Reihenfolge"""
    sketch = Sketch("tie_break")
    sketch.add_rectangle(5, 5, 20, 20)      # mittleres Profil zuerst
    sketch.add_rectangle(0, 0, 30, 30)      # äußeres Profil
    sketch.add_rectangle(10, 10, 10, 10)    # innerstes Profil

    middle, outer, innermost = detector.detect_closed_profiles(sketch)

    assert middle.parent_profile_id == outer.id
    assert innermost.is_hole is True
    assert innermost.parent_profile_id == outer.id
    assert outer.is_hole is False


def test_open_polyline_is_discarded(detector):
    sketch = Sketch("open")
    a = sketch.add_point(0, 0)
    b = sketch.add_point(10, 0)
    c = sketch.add_point(10, 10)
    d = sketch.add_point(0, 10)
    sketch.add_line(a.id, b.id)
    sketch.add_line(b.id, c.id)
    sketch.add_line(c.id, d.id)

    assert detector.detect_closed_profiles(sketch) == []


def test_two_line_cycle_is_discarded(detector):
    """A->B, B->A schließt zwar, hat aber weniger als 3 Linien"""
    sketch = Sketch("two_lines")
    a = sketch.add_point(0, 0)
    b = sketch.add_point(10, 0)
    sketch.add_line(a.id, b.id)
    sketch.add_line(b.id, a.id)

    assert detector.detect_closed_profiles(sketch) == []


def test_max_steps_aborts_long_walk(log_messages):
    sketch = Sketch("step_limit")
    sketch.add_rectangle(0, 0, 10, 10)

    assert ProfileDetector(max_steps=2).detect_closed_profiles(sketch) == []
    assert any("max_steps=2" in text for _, text in log_messages)


def test_construction_lines_are_ignored(detector):
    sketch = Sketch("construction")
    sketch.add_rectangle(0, 0, 10, 10, construction=True)

    assert detector.detect_closed_profiles(sketch) == []


def test_construction_line_breaks_loop(detector):
    sketch = Sketch("construction_edge")
    lines = sketch.add_rectangle(0, 0, 10, 10)
    lines[2].construction = True

    assert detector.detect_closed_profiles(sketch) == []


def test_dangling_line_is_skipped(detector):
    sketch = Sketch("dangling")
    lines = sketch.add_rectangle(0, 0, 10, 10)
    sketch.add_line(lines[0].start_point_id, "p-deleted")

    profiles = detector.detect_closed_profiles(sketch)
    assert len(profiles) == 1
    assert len(profiles[0].entity_ids) == 4


def test_profile_polygon_follows_loop(detector):
    sketch = Sketch("polygon")
    sketch.add_rectangle(0, 0, 10, 5)

    profile = detector.detect_closed_profiles(sketch)[0]
    assert detector.profile_polygon(profile, sketch) == [(0, 0), (10, 0), (10, 5), (0, 5)]


def test_sketch_detection_replaces_previous_result():
    sketch = Sketch("redetect")
    sketch.add_rectangle(0, 0, 10, 10)

    first = sketch.detect_profiles()
    second = sketch.detect_profiles()

    assert sketch.profiles is second
    assert first[0].id != second[0].id
    assert first[0].entity_ids == second[0].entity_ids


def test_profile_debug_logs_hole_assignment(detector, log_messages):
    set_flag("profile_debug", True)
    sketch = Sketch("debug")
    sketch.add_rectangle(0, 0, 10, 10)
    sketch.add_rectangle(3, 3, 4, 4)

    detector.detect_closed_profiles(sketch)
    assert any(text.startswith("[PROFILE]") for _, text in log_messages)


@pytest.mark.parametrize("point,expected", [
    ((5, 5), True),
    ((15, 5), False),
    ((-1, 5), False),
    ((5, 11), False),
])
def test_point_in_polygon(point, expected):
    square = [(0, 0), (10, 0), (10, 10), (0, 10)]
    assert point_in_polygon(point, square) is expected


def test_point_in_polygon_needs_three_vertices():
    assert point_in_polygon((0, 0), [(0, 0), (1, 1)]) is False
