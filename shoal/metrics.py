"""Flock-level statistics for headless runs."""

import math
import numpy as np
from numba import njit, prange

from .behavior import Mode


@njit(parallel=True, cache=True)
def nearest_distances(positions: np.ndarray) -> np.ndarray:
    """Distance from every boid to its closest peer."""
    n = positions.shape[0]
    out = np.empty(n, dtype=np.float64)
    for i in prange(n):
        best = math.inf
        for j in range(n):
            if i == j:
                continue
            dx = positions[j, 0] - positions[i, 0]
            dy = positions[j, 1] - positions[i, 1]
            dz = positions[j, 2] - positions[i, 2]
            d = math.sqrt(dx * dx + dy * dy + dz * dz)
            if d < best:
                best = d
        out[i] = best
    return out


def polarization(headings: np.ndarray) -> float:
    """Length of the mean heading: 1 when every boid swims the same way, ~0 when random."""
    return float(np.linalg.norm(np.asarray(headings, dtype=np.float64).mean(axis=0)))


def centroid(positions: np.ndarray) -> np.ndarray:
    return np.asarray(positions, dtype=np.float64).mean(axis=0)


def mode_counts(modes: np.ndarray) -> dict:
    counts = np.bincount(np.asarray(modes, dtype=np.int64), minlength=len(Mode))
    return {mode.name.lower(): int(counts[mode.value]) for mode in Mode}


def summarize(flock) -> dict:
    """Snapshot of the current generation for progress output."""
    positions = flock.positions
    gaps = nearest_distances(positions)
    center = centroid(positions)
    env = flock.environment
    clearances = [env.min_distance(p) for p in positions]
    summary = {
        "tick": flock.tick_count,
        "polarization": polarization(flock.headings),
        "centroid": tuple(float(c) for c in center),
        "mean_nearest": float(gaps.mean()),
        "min_nearest": float(gaps.min()),
        "min_clearance": float(min(clearances)),
    }
    summary.update(mode_counts(flock.modes))
    return summary
