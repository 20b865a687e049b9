import math

import numpy as np
import pytest

from directions import direction_index
from gravity import EmitterKind, GravityField


def test_attract_emitter_east_of_particle():
    field = GravityField()
    field.add_emitter(EmitterKind.ATTRACT, 110, 100)
    strength = 200.0
    bias = field.bias_contribution(100, 100, strength)

    full = strength * 5.0 / 10.0
    assert bias[direction_index("E")] == pytest.approx(full)
    assert bias[direction_index("NE")] == pytest.approx(full * math.sqrt(0.5))
    assert bias[direction_index("SE")] == pytest.approx(full * math.sqrt(0.5))
    for name in ("N", "S", "W", "NW", "SW"):
        assert bias[direction_index(name)] == 0.0


def test_repel_emitter_pushes_away():
    field = GravityField()
    field.add_emitter(EmitterKind.REPEL, 110, 100)
    bias = field.bias_contribution(100, 100, 200.0)
    assert bias[direction_index("W")] == pytest.approx(100.0)
    assert bias[direction_index("E")] == 0.0


def test_distance_floor_on_coincident_emitter():
    field = GravityField()
    field.add_emitter(EmitterKind.ATTRACT, 50.5, 50)
    bias = field.bias_contribution(50, 50, 10.0)
    # dist 0.5 is floored to 1: strength 10 * 5 / 1, direction 0.5 / 1
    assert bias[direction_index("E")] == pytest.approx(25.0)
    assert np.all(np.isfinite(bias))


def test_emitters_accumulate_independent_of_order():
    a = GravityField()
    a.add_emitter(EmitterKind.ATTRACT, 0, 0)
    a.add_emitter(EmitterKind.REPEL, 40, 70)
    b = GravityField()
    b.add_emitter(EmitterKind.REPEL, 40, 70)
    b.add_emitter(EmitterKind.ATTRACT, 0, 0)
    assert np.allclose(a.bias_contribution(20, 20, 200.0), b.bias_contribution(20, 20, 200.0))


def test_no_emitters_no_bias():
    assert not GravityField().bias_contribution(10, 10, 200.0).any()


def test_remove_nearest_takes_first_match_in_list_order():
    field = GravityField()
    a = field.add_emitter(EmitterKind.ATTRACT, 10, 10)
    b = field.add_emitter(EmitterKind.REPEL, 10, 10)
    removed = field.remove_nearest(10, 10, 15)
    assert removed is a
    assert field.emitters == [b]


def test_remove_nearest_outside_radius_is_noop():
    field = GravityField()
    field.add_emitter(EmitterKind.ATTRACT, 10, 10)
    assert field.remove_nearest(30, 10, 15) is None
    assert len(field) == 1


def test_remove_nearest_boundary_is_inclusive():
    field = GravityField()
    field.add_emitter(EmitterKind.ATTRACT, 0, 0)
    assert field.remove_nearest(15, 0, 15) is not None


def test_drag_lifecycle():
    field = GravityField()
    emitter = field.add_emitter(EmitterKind.ATTRACT, 1, 1)
    field.begin_drag(emitter)
    assert emitter.dragging
    assert field.move_dragged(30, 40)
    assert (emitter.x, emitter.y) == (30.0, 40.0)
    field.end_drag()
    assert not emitter.dragging
    assert not field.move_dragged(0, 0)


def test_removing_dragged_emitter_ends_drag():
    field = GravityField()
    emitter = field.add_emitter(EmitterKind.ATTRACT, 1, 1)
    field.begin_drag(emitter)
    field.remove_nearest(1, 1)
    assert field.dragged is None


def test_snapshot_is_a_copy():
    field = GravityField()
    emitter = field.add_emitter(EmitterKind.REPEL, 5, 6)
    xy, sign = field.snapshot()
    emitter.x = 100
    assert xy.tolist() == [[5.0, 6.0]]
    assert sign.tolist() == [-1.0]
