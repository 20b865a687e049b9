# simulation.py
"""
Handles the per-tick stochastic step of every particle.

This module defines the Simulation class, which turns each particle's
position, the active emitters and the aggregated neighbour mass into an
8-way weight vector, samples one direction and moves the particle by one
pixel in that direction.
"""
import logging
import numpy as np
from numba import jit
from typing import Optional

from config import SimulationConfig
from constants import BASE_DIRECTION_WEIGHT
from directions import (
    DIRECTION_COUNT, DIRECTION_UNITS, STEP_OFFSETS, _select_direction_numba
)
from gravity import GravityField, _gravity_bias_numba
from grid import SpatialGrid
from interaction import InterParticleForces, _interaction_bias_numba
from particle import ParticleStore, SeedLike

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles, field, grid, forces=None, seed=None):
#     - Inputs:
#       - particles: An initialized ParticleStore.
#       - field: The GravityField holding user emitters.
#       - grid: A SpatialGrid sized to the same canvas as the particles.
#     - Side Effects: Creates a dedicated RNG for step draws.
#
#   - step(self, config: SimulationConfig) -> None:
#     - Side Effects: Moves every particle by exactly one offset and
#       writes the result back into particles.positions.
#     - Invariants:
#       - Particle count remains constant.
#       - Every coordinate stays within [0, width-1] x [0, height-1].
#       - The grid reflects pre-tick positions for the whole tick.

@jit(nopython=True)
def _direction_weights_numba(
    px, py, weights, units,
    gravity_on, emitter_xy, emitter_sign, gravity_strength,
    interaction_on, attract, repel, interaction_strength,
    counts, sum_x, sum_y, cols, rows, cell_size, radius
):
    weights[:] = BASE_DIRECTION_WEIGHT
    if gravity_on:
        _gravity_bias_numba(px, py, emitter_xy, emitter_sign, gravity_strength, units, weights)
    if interaction_on:
        _interaction_bias_numba(
            px, py, counts, sum_x, sum_y, cols, rows, cell_size, radius,
            attract, repel, interaction_strength, units, weights
        )


@jit(nopython=True)
def _step_particles_numba(
    positions, draws, width, height, units, offsets,
    gravity_on, emitter_xy, emitter_sign, gravity_strength,
    interaction_on, attract, repel, interaction_strength,
    counts, sum_x, sum_y, cols, rows, cell_size, radius
):
    """
    Numba-jitted loop advancing every particle by one weighted random step.

    draws holds one uniform [0, 1) sample per particle, scaled here by the
    particle's total weight.
    """
    weights = np.empty(units.shape[0])
    max_x = width - 1
    max_y = height - 1

    for i in range(positions.shape[0]):
        px = positions[i, 0]
        py = positions[i, 1]

        _direction_weights_numba(
            px, py, weights, units,
            gravity_on, emitter_xy, emitter_sign, gravity_strength,
            interaction_on, attract, repel, interaction_strength,
            counts, sum_x, sum_y, cols, rows, cell_size, radius
        )

        total = 0.0
        for k in range(weights.shape[0]):
            total += weights[k]
        if not total > 0.0:
            weights[:] = 1.0
            total = float(weights.shape[0])

        k = _select_direction_numba(weights, draws[i] * total)

        x = px + offsets[k, 0]
        y = py + offsets[k, 1]
        # Hard clamp, no reflection or wrap-around.
        if x < 0:
            x = 0.0
        elif x > max_x:
            x = max_x
        if y < 0:
            y = 0.0
        elif y > max_y:
            y = max_y

        positions[i, 0] = x
        positions[i, 1] = y


class Simulation:
    """
    Stochastic step scheduler. Stateless across ticks apart from its RNG.
    """
    def __init__(
        self,
        particles: ParticleStore,
        field: GravityField,
        grid: SpatialGrid,
        forces: Optional[InterParticleForces] = None,
        seed: SeedLike = None,
    ):
        self.particles = particles
        self.field = field
        self.grid = grid
        self.forces = forces if forces is not None else InterParticleForces()
        self.rng = np.random.default_rng(seed)
        self.step_count = 0

        logging.info("Stochastic step scheduler initialized.")

    def step(self, config: SimulationConfig) -> None:
        """
        Executes one tick for every particle.
        """
        # 1. Freeze the emitter set for the duration of the tick
        emitter_xy, emitter_sign = self.field.snapshot()
        gravity_on = config.gravity_enabled and emitter_xy.shape[0] > 0

        # 2. Aggregate pre-tick positions before any particle moves
        interaction_on = config.interaction_enabled
        if interaction_on:
            self.grid.rebuild(self.particles.positions)

        # 3. One uniform draw per particle
        draws = self.rng.random(self.particles.count())

        # 4. Weight, sample, move and clamp (using Numba)
        _step_particles_numba(
            self.particles.positions, draws,
            float(self.particles.width), float(self.particles.height),
            DIRECTION_UNITS, STEP_OFFSETS,
            gravity_on, emitter_xy, emitter_sign, float(config.gravity_strength),
            interaction_on, config.particle_attract, config.particle_repel,
            float(config.interaction_strength),
            self.grid.counts, self.grid.sum_x, self.grid.sum_y,
            self.grid.cols, self.grid.rows, self.grid.cell_size, self.forces.radius
        )
        self.step_count += 1

    def weights_for(self, x: float, y: float, config: SimulationConfig) -> np.ndarray:
        """
        Returns the weight vector a particle at (x, y) would sample from.

        Uses the grid as last rebuilt; it is not rebuilt here.
        """
        weights = np.empty(DIRECTION_COUNT, dtype=np.float64)
        emitter_xy, emitter_sign = self.field.snapshot()
        _direction_weights_numba(
            float(x), float(y), weights, DIRECTION_UNITS,
            config.gravity_enabled and emitter_xy.shape[0] > 0,
            emitter_xy, emitter_sign, float(config.gravity_strength),
            config.interaction_enabled, config.particle_attract, config.particle_repel,
            float(config.interaction_strength),
            self.grid.counts, self.grid.sum_x, self.grid.sum_y,
            self.grid.cols, self.grid.rows, self.grid.cell_size, self.forces.radius
        )
        return weights
