"""
Sketch.solve(): äußere Runden aus Dimensionen + Constraint-Solver
"""

import pytest

from sketcher import DimensionType, Sketch, SolverResult, distance


def test_empty_sketch_converges_immediately():
    result = Sketch("empty").solve()

    assert isinstance(result, SolverResult)
    assert result.success is True
    assert result.rounds == 1
    assert result.iterations == 1
    assert "Konvergiert" in result.message


def test_dimensioned_rectangle_settles():
    sketch = Sketch("rect_dim")
    bottom, right, top, left = sketch.add_rectangle(0, 0, 10, 5)
    sketch.add_horizontal(bottom.id)
    sketch.add_horizontal(top.id)
    sketch.add_vertical(right.id)
    sketch.add_vertical(left.id)
    sketch.add_dimension(DimensionType.LINEAR, [bottom.id], 20.0, name="breite")

    result = sketch.solve()

    assert result.success is True
    assert result.rounds > 1

    def points(line):
        return sketch.get_point(line.start_point_id), sketch.get_point(line.end_point_id)

    assert distance(*points(bottom)) == pytest.approx(20.0, abs=0.02)
    right_start, right_end = points(right)
    assert abs(right_start.x - right_end.x) < 0.01
    top_start, top_end = points(top)
    assert abs(top_start.y - top_end.y) < 0.01


def test_radial_dimension_through_sketch():
    sketch = Sketch("circle")
    circle = sketch.add_circle(5, 5, 2)
    sketch.add_dimension("radial", [circle.id], 3.5)

    result = sketch.solve()
    assert result.success is True
    assert circle.radius == 3.5


def test_non_convergence_is_reported_not_raised(log_messages):
    sketch = Sketch("conflict")
    left = sketch.add_point(0, 0, fixed=True)
    right = sketch.add_point(10, 0, fixed=True)
    free = sketch.add_point(5, 0)
    sketch.add_coincident(free.id, left.id)
    sketch.add_coincident(free.id, right.id)

    result = sketch.solve(max_rounds=2)

    assert result.success is False
    assert result.rounds == 2
    assert result.iterations == 200
    assert "Nicht konvergiert" in result.message
    assert any(level == "WARNING" and "Sketch 'conflict'" in text for level, text in log_messages)


def test_solve_then_detect_profiles():
    sketch = Sketch("solve_profile")
    outer = sketch.add_polygon([(0, 0), (10, 0.3), (10.2, 10), (0, 10)])
    sketch.add_rectangle(3, 3, 4, 4)
    sketch.add_horizontal(outer[0].id)
    sketch.add_vertical(outer[1].id)

    assert sketch.solve().success is True
    profiles = sketch.detect_profiles()

    assert [p.is_hole for p in profiles] == [False, True]
    assert profiles[1].parent_profile_id == profiles[0].id


def test_custom_point_and_line_ids():
    sketch = Sketch("ids")
    sketch.add_point(0, 0, point_id="origin")
    sketch.add_point(5, 0, point_id="tip")
    line = sketch.add_line("origin", "tip", line_id="axis")

    assert sketch.get_point("origin").as_tuple() == (0.0, 0.0)
    assert sketch.get_line("axis") is line
    assert sketch.get_point(None) is None
    assert sketch.get_circle("nope") is None
