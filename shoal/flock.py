"""Double-buffered flock: the simulation context and its per-tick kernel."""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from numba import njit, prange

from config import shoal as config
from .behavior import MODE_AVOIDING, Mode, select_mode
from .boid import Boid
from .environment import Environment
from .integrator import advance
from .markers import pose_angles
from .neighbors import nearest
from .steering import avoid_environment, flock_heading
from .vector import direction_from_angles


# ============================================================================
# NUMBA JIT-COMPILED TICK KERNEL
# ============================================================================

@njit(parallel=True, cache=True)
def step_generation(
    prev_positions: np.ndarray,
    prev_headings: np.ndarray,
    positions: np.ndarray,
    headings: np.ndarray,
    modes: np.ndarray,
    k: int,
    radius: float,
    floor: float,
    ceiling: float,
    environment_trigger: float,
    environment_strength: float,
    separation_trigger: float,
    separation_strength: float,
    alignment_strength: float,
    cohesion_strength: float,
    epsilon: float,
    speed: float,
    num_boids: int
):
    """
    Advance every agent by one tick.

    Reads only the previous generation and writes only slot i of the
    current one, so iterations are independent and run in parallel.
    """
    for i in prange(num_boids):
        px = float(prev_positions[i, 0])
        py = float(prev_positions[i, 1])
        pz = float(prev_positions[i, 2])
        hx = float(prev_headings[i, 0])
        hy = float(prev_headings[i, 1])
        hz = float(prev_headings[i, 2])

        mode = select_mode(px, py, pz, radius, floor, ceiling, environment_trigger)
        if mode == MODE_AVOIDING:
            hx, hy, hz = avoid_environment(
                px, py, pz, hx, hy, hz,
                radius, floor, ceiling,
                environment_trigger, environment_strength, epsilon
            )
        else:
            hx, hy, hz = flock_heading(
                i, prev_positions, prev_headings, k,
                separation_trigger, separation_strength,
                alignment_strength, cohesion_strength, epsilon
            )

        px, py, pz = advance(px, py, pz, hx, hy, hz, speed)

        positions[i, 0] = px
        positions[i, 1] = py
        positions[i, 2] = pz
        headings[i, 0] = hx
        headings[i, 1] = hy
        headings[i, 2] = hz
        modes[i] = mode


# ============================================================================
# PARAMETERS
# ============================================================================

@dataclass(frozen=True)
class SpawnBounds:
    """Axis-aligned box that initial positions are drawn from."""
    low: Tuple[float, float, float]
    high: Tuple[float, float, float]

    def __post_init__(self):
        if len(self.low) != 3 or len(self.high) != 3:
            raise ValueError("spawn bounds need three components per corner")
        for lo, hi in zip(self.low, self.high):
            if lo > hi:
                raise ValueError(f"spawn bounds inverted: {self.low} > {self.high}")

    @classmethod
    def from_config(cls) -> "SpawnBounds":
        axes = (config.BOIDS["spawn_x"], config.BOIDS["spawn_y"], config.BOIDS["spawn_z"])
        return cls(
            low=tuple(float(a[0]) for a in axes),
            high=tuple(float(a[1]) for a in axes),
        )


def check_neighborhood(count: int, neighborhood_size: int):
    """Fail fast on a neighborhood the population cannot fill."""
    if neighborhood_size < 1:
        raise ValueError(f"neighborhood_size must be at least 1, got {neighborhood_size}")
    if neighborhood_size > count - 1:
        raise ValueError(
            f"neighborhood_size {neighborhood_size} needs at least "
            f"{neighborhood_size + 1} boids, got {count}"
        )


@dataclass(frozen=True)
class FlockParams:
    """Tuning for one flock; defaults come from config.shoal."""
    count: int = config.BOIDS["count"]
    speed: float = config.BOIDS["speed"]
    neighborhood_size: int = config.BOIDS["neighborhood_size"]
    trigger_separate: float = config.BEHAVIOR["trigger_separate"]
    trigger_environment: float = config.BEHAVIOR["trigger_environment"]
    environment_strength: float = config.BEHAVIOR["environment_strength"]
    separation_strength: float = config.BEHAVIOR["separation_strength"]
    alignment_strength: float = config.BEHAVIOR["alignment_strength"]
    cohesion_strength: float = config.BEHAVIOR["cohesion_strength"]
    epsilon: float = config.BEHAVIOR["epsilon"]

    def __post_init__(self):
        check_neighborhood(self.count, self.neighborhood_size)
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.speed < 0:
            raise ValueError(f"speed must not be negative, got {self.speed}")

    @classmethod
    def from_config(cls, **overrides) -> "FlockParams":
        values = {
            "count": config.BOIDS["count"],
            "speed": config.BOIDS["speed"],
            "neighborhood_size": config.BOIDS["neighborhood_size"],
        }
        values.update(config.BEHAVIOR)
        values.update(overrides)
        return cls(**values)


@njit(cache=True)
def headings_from_angles(pitch: np.ndarray, yaw: np.ndarray) -> np.ndarray:
    """Unit heading rows for paired pitch/yaw angles in radians."""
    n = pitch.shape[0]
    out = np.empty((n, 3), dtype=np.float32)
    for i in range(n):
        x, y, z = direction_from_angles(pitch[i], yaw[i])
        out[i, 0] = x
        out[i, 1] = y
        out[i, 2] = z
    return out


def random_headings(rng: np.random.Generator, count: int) -> np.ndarray:
    """Unit vectors drawn uniformly over the sphere."""
    # Uniform sin(pitch) gives equal area per band of latitude
    pitch = np.arcsin(rng.uniform(-1.0, 1.0, count))
    yaw = rng.uniform(-np.pi, np.pi, count)
    return headings_from_angles(pitch, yaw)


# ============================================================================
# FLOCK CLASS
# ============================================================================

class Flock:
    """
    Simulation context owning the current and previous generations.

    During a tick every neighbor and behavior query reads the previous
    generation while updates land in the current one; the tick ends by
    copying current into previous. Update order therefore never changes
    the result.
    """

    def __init__(
        self,
        params: Optional[FlockParams] = None,
        environment: Optional[Environment] = None,
        seed: Optional[int] = None
    ):
        self.params = params if params is not None else FlockParams.from_config()
        self.environment = environment if environment is not None else Environment.from_config()
        self._rng = np.random.default_rng(seed)

        self.num_boids = 0
        self.tick_count = 0

        # Generation buffers (float32, as the renderer consumes them)
        self._positions = None
        self._headings = None
        self._prev_positions = None
        self._prev_headings = None
        self._modes = None

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(self, count: Optional[int] = None, spawn_bounds: Optional[SpawnBounds] = None):
        """Scatter `count` boids through the spawn box with random headings."""
        count = self.params.count if count is None else int(count)
        check_neighborhood(count, self.params.neighborhood_size)
        bounds = spawn_bounds if spawn_bounds is not None else SpawnBounds.from_config()

        low = np.asarray(bounds.low, dtype=np.float64)
        high = np.asarray(bounds.high, dtype=np.float64)
        positions = self._rng.uniform(low, high, size=(count, 3)).astype(np.float32)
        headings = random_headings(self._rng, count)

        self._allocate(positions, headings)

    def set_state(self, positions, headings):
        """
        Replace both generations with the given positions and headings.

        Headings are normalized on the way in; a zero heading is rejected.
        """
        positions = np.array(positions, dtype=np.float32)
        headings = np.array(headings, dtype=np.float64)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (N, 3), got {positions.shape}")
        if headings.shape != positions.shape:
            raise ValueError(
                f"headings shape {headings.shape} does not match positions {positions.shape}"
            )
        check_neighborhood(positions.shape[0], self.params.neighborhood_size)

        norms = np.linalg.norm(headings, axis=1)
        if np.any(norms == 0.0):
            raise ValueError("headings must be non-zero vectors")

        self._allocate(positions, (headings / norms[:, None]).astype(np.float32))

    def _allocate(self, positions: np.ndarray, headings: np.ndarray):
        self.num_boids = positions.shape[0]
        self.tick_count = 0
        self._positions = positions
        self._headings = headings
        self._prev_positions = np.empty_like(positions)
        self._prev_headings = np.empty_like(headings)
        self._modes = np.zeros(self.num_boids, dtype=np.int8)
        self._commit()

    def _require_initialized(self):
        if self._positions is None:
            raise RuntimeError("Flock.initialize() must be called first")

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self, speed_scale: float = 1.0):
        """
        Advance the flock by exactly one frame.

        `speed_scale` multiplies the fixed per-tick displacement for callers
        that scale by elapsed time; the default moves `params.speed` per tick.
        """
        self._require_initialized()
        p = self.params
        env = self.environment

        step_generation(
            self._prev_positions,
            self._prev_headings,
            self._positions,
            self._headings,
            self._modes,
            p.neighborhood_size,
            float(env.radius),
            float(env.floor),
            float(env.ceiling),
            float(p.trigger_environment),
            float(p.environment_strength),
            float(p.trigger_separate),
            float(p.separation_strength),
            float(p.alignment_strength),
            float(p.cohesion_strength),
            float(p.epsilon),
            float(p.speed * speed_scale),
            self.num_boids
        )
        self._commit()
        self.tick_count += 1

    def _commit(self):
        """Snapshot the current generation into the previous one."""
        np.copyto(self._prev_positions, self._positions)
        np.copyto(self._prev_headings, self._headings)

    def warmup(self):
        """Pre-compile the JIT kernels on a throwaway flock."""
        scratch = Flock(
            FlockParams.from_config(count=8, neighborhood_size=3),
            self.environment,
            seed=0,
        )
        scratch.initialize()
        scratch.tick()
        scratch.poses()
        print("[Shoal] Numba kernels compiled")

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @staticmethod
    def _frozen(array: np.ndarray) -> np.ndarray:
        view = array.view()
        view.flags.writeable = False
        return view

    @property
    def positions(self) -> np.ndarray:
        """Current-generation positions, (N, 3), read-only."""
        self._require_initialized()
        return self._frozen(self._positions)

    @property
    def headings(self) -> np.ndarray:
        """Current-generation unit headings, (N, 3), read-only."""
        self._require_initialized()
        return self._frozen(self._headings)

    @property
    def previous_positions(self) -> np.ndarray:
        self._require_initialized()
        return self._frozen(self._prev_positions)

    @property
    def previous_headings(self) -> np.ndarray:
        self._require_initialized()
        return self._frozen(self._prev_headings)

    @property
    def modes(self) -> np.ndarray:
        """Mode each boid ran in the last tick (all FLOCKING before the first)."""
        self._require_initialized()
        return self._frozen(self._modes)

    def mode_of(self, index: int) -> Mode:
        self._require_initialized()
        return Mode(int(self._modes[index]))

    def boid(self, index: int) -> Boid:
        """Copy of one boid's current state."""
        self._require_initialized()
        return Boid(
            position=self._positions[index].copy(),
            heading=self._headings[index].copy(),
        )

    def __len__(self) -> int:
        return self.num_boids

    def __iter__(self):
        for i in range(self.num_boids):
            yield self.boid(i)

    def neighbors_of(self, index: int) -> list:
        """The K nearest boids to `index` in the previous generation."""
        self._require_initialized()
        return nearest(index, self._prev_positions, self.params.neighborhood_size)

    def poses(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Everything a renderer needs to place one marker per boid.

        Returns:
            (positions, yaw_degrees, pitch_degrees) for the current generation
        """
        self._require_initialized()
        yaw, pitch = pose_angles(self._headings)
        return self._positions.copy(), yaw, pitch
