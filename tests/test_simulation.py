import numpy as np
import pytest

from config import SimulationConfig
from directions import direction_index
from gravity import EmitterKind, GravityField
from grid import SpatialGrid
from particle import ParticleStore
from simulation import Simulation


def _make(n=500, width=60, height=40, seed=11):
    particles = ParticleStore(seed=seed)
    particles.initialize(n, width, height)
    field = GravityField()
    grid = SpatialGrid(width, height)
    return particles, field, grid, Simulation(particles, field, grid, seed=seed)


def test_bounds_hold_over_many_ticks():
    particles, field, grid, sim = _make()
    field.add_emitter(EmitterKind.ATTRACT, 0, 0)
    field.add_emitter(EmitterKind.REPEL, 59, 39)
    config = SimulationConfig(
        gravity_enabled=True, gravity_strength=500.0,
        particle_attract=True, particle_repel=True,
    )
    for _ in range(200):
        sim.step(config)
        assert particles.positions[:, 0].min() >= 0
        assert particles.positions[:, 0].max() <= 59
        assert particles.positions[:, 1].min() >= 0
        assert particles.positions[:, 1].max() <= 39
    assert sim.step_count == 200
    assert particles.count() == 500


def test_every_particle_moves_one_step_away_from_edges():
    particles, _, _, sim = _make(n=50, width=100, height=100)
    particles.positions[:] = 50.0
    sim.step(SimulationConfig())
    delta = np.abs(particles.positions - 50.0)
    assert np.all(delta <= 1.0)
    assert np.all(delta.sum(axis=1) > 0)


def test_corner_particle_is_clamped():
    particles, _, _, sim = _make(n=200, width=10, height=10)
    particles.positions[:] = 0.0
    sim.step(SimulationConfig())
    assert particles.positions.min() >= 0.0


def test_weights_never_below_base():
    particles, field, grid, sim = _make(n=2000, width=100, height=100)
    field.add_emitter(EmitterKind.REPEL, 30, 30)
    field.add_emitter(EmitterKind.ATTRACT, 70, 10)
    config = SimulationConfig(
        gravity_enabled=True, particle_attract=True, particle_repel=True
    )
    grid.rebuild(particles.positions)
    for x, y in particles.positions[:200]:
        weights = sim.weights_for(x, y, config)
        assert weights.min() >= 1.0


def test_uniform_weights_without_bias_sources():
    _, field, _, sim = _make()
    field.add_emitter(EmitterKind.ATTRACT, 10, 10)
    weights = sim.weights_for(30, 30, SimulationConfig(gravity_enabled=False))
    assert weights.tolist() == [1.0] * 8


def test_gravity_weights_match_field_bias():
    _, field, _, sim = _make()
    field.add_emitter(EmitterKind.ATTRACT, 40, 20)
    config = SimulationConfig(gravity_enabled=True, gravity_strength=200.0)
    weights = sim.weights_for(30, 20, config)
    assert weights[direction_index("E")] == pytest.approx(1.0 + 100.0)
    assert weights[direction_index("W")] == pytest.approx(1.0)


def test_strong_attractor_pulls_population():
    particles, field, _, sim = _make(n=1000, width=200, height=200)
    field.add_emitter(EmitterKind.ATTRACT, 199, 100)
    config = SimulationConfig(gravity_enabled=True, gravity_strength=2000.0)
    before = particles.positions[:, 0].mean()
    for _ in range(50):
        sim.step(config)
    assert particles.positions[:, 0].mean() > before + 20


def test_grid_rebuilt_only_when_interaction_enabled():
    particles, _, grid, sim = _make()
    sim.step(SimulationConfig())
    assert grid.total_count() == 0
    sim.step(SimulationConfig(particle_repel=True))
    assert grid.total_count() == particles.count()


def test_same_seed_same_trajectory():
    a_particles, _, _, a = _make(seed=3)
    b_particles, _, _, b = _make(seed=3)
    config = SimulationConfig(particle_attract=True)
    for _ in range(10):
        a.step(config)
        b.step(config)
    assert np.array_equal(a_particles.positions, b_particles.positions)


def test_weights_stay_above_base_with_negative_gravity_setting():
    _, field, _, sim = _make(width=100, height=100)
    field.add_emitter(EmitterKind.ATTRACT, 60, 50)
    config = SimulationConfig().with_changes(gravity_enabled=True, gravity_strength=-10.0)
    weights = sim.weights_for(50, 50, config)
    assert weights.min() >= 1.0


def test_weights_stay_above_base_with_negative_interaction_setting():
    _, _, grid, sim = _make(width=100, height=100)
    idx = grid.cell_index(*grid.cell_of(50, 50))
    grid.counts[idx] = 3
    grid.sum_x[idx] = 150.0
    grid.sum_y[idx] = 150.0
    config = SimulationConfig().with_changes(
        particle_attract=True, particle_repel=True, interaction_strength=-500.0
    )
    weights = sim.weights_for(40, 50, config)
    assert weights.min() >= 1.0
