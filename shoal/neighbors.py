"""Brute-force K-nearest-neighbor search over a generation snapshot."""

import math
from typing import NamedTuple

import numpy as np
from numba import njit


class Neighbor(NamedTuple):
    """
    One entry of a neighborhood.

    `index` points into the generation buffers, which are never resized
    after initialization, so it stays valid for the life of the flock.
    """
    distance: float
    index: int


@njit(cache=True)
def distance_between(positions: np.ndarray, a: int, b: int) -> float:
    dx = positions[b, 0] - positions[a, 0]
    dy = positions[b, 1] - positions[a, 1]
    dz = positions[b, 2] - positions[a, 2]
    return math.sqrt(dx * dx + dy * dy + dz * dz)


@njit(cache=True)
def find_neighbors(subject: int, positions: np.ndarray, k: int):
    """
    Find the k agents closest to `subject`, nearest first.

    Every agent in `positions` is measured and the (distance, index) pairs
    are stable-sorted by distance. The subject is skipped by index, so a
    peer sharing its exact position still counts as a neighbor while the
    subject itself never does. Requires k <= len(positions) - 1.

    Returns:
        (distances, indices) arrays of length k
    """
    n = positions.shape[0]
    all_distances = np.empty(n, dtype=np.float32)
    for j in range(n):
        all_distances[j] = distance_between(positions, subject, j)

    order = np.argsort(all_distances, kind="mergesort")

    distances = np.empty(k, dtype=np.float32)
    indices = np.empty(k, dtype=np.int64)
    found = 0
    for r in range(n):
        j = order[r]
        if j == subject:
            continue
        distances[found] = all_distances[j]
        indices[found] = j
        found += 1
        if found == k:
            break
    return distances, indices


def nearest(subject: int, positions: np.ndarray, k: int) -> list:
    """find_neighbors as a list of Neighbor records."""
    if k > positions.shape[0] - 1:
        raise ValueError(
            f"cannot take {k} neighbors from a population of {positions.shape[0]}"
        )
    distances, indices = find_neighbors(subject, positions, k)
    return [Neighbor(float(d), int(i)) for d, i in zip(distances, indices)]
