"""
Tests für die relative Positionierung (placement/positioning.py)
"""

import pytest

from config.feature_flags import set_flag
from placement.positioning import (
    CircularDependencyError, MissingReferenceError, ResolvedPosition,
    build_shapes_map, resolve_all_positions, resolve_position
)
from placement.units import InvalidValueFormatError


def test_relative_to_adds_offset():
    positions = resolve_all_positions([
        {'id': 'base', 'x': '10', 'y': '20', 'unit': 'mm'},
        {'id': 'rel', 'x': '5', 'y': '3', 'unit': 'mm', 'relativeTo': 'base'},
    ])

    assert positions['base'] == ResolvedPosition(10.0, 20.0)
    assert positions['rel'] == ResolvedPosition(15.0, 23.0)


def test_chain_accumulates_in_any_order():
    positions = resolve_all_positions([
        {'id': 'c', 'x': 1, 'y': 1, 'relativeTo': 'b'},
        {'id': 'b', 'x': 1, 'y': 1, 'relativeTo': 'a'},
        {'id': 'a', 'x': 1, 'y': 1},
    ])

    assert list(positions) == ['c', 'b', 'a']
    assert positions['c'] == ResolvedPosition(3.0, 3.0)


def test_units_are_converted_to_mm():
    positions = resolve_all_positions([
        {'id': 'inch', 'x': 1, 'y': '2', 'unit': 'in'},
        {'id': 'mixed', 'x': '1cm', 'y': '0.5in', 'unit': 'mm'},
    ])

    assert positions['inch'].x == pytest.approx(25.4)
    assert positions['inch'].y == pytest.approx(50.8)
    assert positions['mixed'].x == pytest.approx(10.0)
    assert positions['mixed'].y == pytest.approx(12.7)


def test_params_coordinates_take_precedence():
    positions = resolve_all_positions([
        {'id': 'p', 'x': 99, 'params': {'x': '1cm', 'y': 2, 'unit': 'mm'}},
    ])
    assert positions['p'] == ResolvedPosition(10.0, 2.0)


def test_missing_coordinates_default_to_zero():
    positions = resolve_all_positions([{'id': 'origin'}])
    assert positions['origin'] == ResolvedPosition(0.0, 0.0)


def test_coordinate_reference_uses_axis_of_other_shape():
    positions = resolve_all_positions([
        {'id': 'follower', 'x': 'leader', 'y': '5'},
        {'id': 'leader', 'x': '12', 'y': '30'},
    ])
    assert positions['follower'] == ResolvedPosition(12.0, 5.0)


class TestErrors:

    def test_cycle_reports_chain(self):
        with pytest.raises(CircularDependencyError) as excinfo:
            resolve_all_positions([
                {'id': 'a', 'relativeTo': 'b'},
                {'id': 'b', 'relativeTo': 'a'},
            ])

        assert excinfo.value.chain == ['a', 'b', 'a']
        assert "a → b → a" in str(excinfo.value)

    def test_self_reference_is_a_cycle(self):
        with pytest.raises(CircularDependencyError) as excinfo:
            resolve_all_positions([{'id': 'loop', 'relativeTo': 'loop'}])
        assert excinfo.value.chain == ['loop', 'loop']

    def test_coordinate_reference_cycle(self):
        with pytest.raises(CircularDependencyError):
            resolve_all_positions([
                {'id': 'a', 'x': 'b'},
                {'id': 'b', 'y': 'a'},
            ])

    def test_missing_relative_to(self):
        with pytest.raises(MissingReferenceError) as excinfo:
            resolve_all_positions([{'id': 'lost', 'relativeTo': 'ghost'}])

        assert excinfo.value.shape_id == 'lost'
        assert excinfo.value.reference_id == 'ghost'

    def test_identifier_coordinate_without_target(self):
        with pytest.raises(MissingReferenceError) as excinfo:
            resolve_all_positions([{'id': 'lost', 'x': 'ghost'}])
        assert excinfo.value.reference_id == 'ghost'

    def test_malformed_coordinate(self):
        with pytest.raises(InvalidValueFormatError):
            resolve_all_positions([{'id': 'bad', 'x': '12 parsecs'}])


def test_nested_ops_are_indexed():
    tree = {
        'operation': 'subtract',
        'ops': [
            {'id': 'body', 'x': 10, 'y': 10},
            {'operation': 'union', 'ops': [
                {'id': 'hole', 'x': 2, 'y': 3, 'relativeTo': 'body'},
            ]},
        ],
    }

    assert list(build_shapes_map([tree])) == ['body', 'hole']
    positions = resolve_all_positions([tree])
    assert positions['hole'] == ResolvedPosition(12.0, 13.0)


def test_duplicate_id_warns(log_messages):
    shapes = build_shapes_map([{'id': 'twin', 'x': 1}, {'id': 'twin', 'x': 2}])

    assert shapes['twin']['x'] == 2
    assert any(level == "WARNING" and "twin" in text for level, text in log_messages)


def test_cache_is_scoped_to_one_call():
    node = {'id': 'moving', 'x': 1, 'y': 1}
    assert resolve_all_positions([node])['moving'] == ResolvedPosition(1.0, 1.0)

    node['x'] = 7
    assert resolve_all_positions([node])['moving'] == ResolvedPosition(7.0, 1.0)


def test_resolve_position_reuses_shared_cache():
    nodes = [{'id': 'a', 'x': 4}, {'id': 'b', 'relativeTo': 'a', 'y': 2}]
    shapes = build_shapes_map(nodes)
    cache = {}

    b = resolve_position(shapes['b'], shapes, cache)
    assert set(cache) == {'a', 'b'}
    assert resolve_position(shapes['b'], shapes, cache) is b


def test_positioning_debug_logs_chain(log_messages):
    set_flag("positioning_debug", True)
    resolve_all_positions([{'id': 'a'}, {'id': 'b', 'relativeTo': 'a'}])

    assert "[Positioning] a" in [text for _, text in log_messages]
