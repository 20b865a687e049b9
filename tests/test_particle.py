import numpy as np
import pytest

from particle import ParticleStore


def test_initialize_within_canvas_and_integer_valued():
    store = ParticleStore(seed=1)
    store.initialize(10000, 64, 32)
    assert store.count() == 10000
    assert store.positions.dtype == np.float64
    assert store.positions[:, 0].min() >= 0
    assert store.positions[:, 0].max() <= 63
    assert store.positions[:, 1].max() <= 31
    assert np.all(store.positions == np.floor(store.positions))


def test_same_seed_same_layout():
    a = ParticleStore(seed=7)
    b = ParticleStore(seed=7)
    a.initialize(100, 50, 50)
    b.initialize(100, 50, 50)
    assert np.array_equal(a.positions, b.positions)


def test_get_and_set():
    store = ParticleStore(seed=0)
    store.initialize(3, 10, 10)
    store.set(1, 4.0, 5.0)
    assert store.get(1) == (4.0, 5.0)


@pytest.mark.parametrize("index", [-1, 3, 100])
def test_out_of_range_index_raises(index):
    store = ParticleStore(seed=0)
    store.initialize(3, 10, 10)
    with pytest.raises(IndexError):
        store.get(index)
    with pytest.raises(IndexError):
        store.set(index, 0.0, 0.0)


def test_snapshot_is_read_only_view():
    store = ParticleStore(seed=0)
    store.initialize(3, 10, 10)
    snapshot = store.snapshot()
    with pytest.raises(ValueError):
        snapshot[0, 0] = 1.0
    store.set(0, 9.0, 9.0)
    assert snapshot[0, 0] == 9.0
