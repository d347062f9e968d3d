"""
Steering rules that turn an agent's heading.

Every rule takes the heading as three scalars and returns a new unit
heading. Zero vectors are never divided through: a rule whose target
direction vanishes leaves the heading as it was.
"""

import numpy as np
from numba import njit

from .environment import distance_to_wall, distance_to_floor, distance_to_ceiling
from .neighbors import find_neighbors
from .vector import normalize, is_zero_vector


@njit(cache=True)
def settle(nx: float, ny: float, nz: float,
           hx: float, hy: float, hz: float) -> tuple:
    """Normalize (nx, ny, nz), falling back to heading h if it collapsed to zero."""
    ux, uy, uz = normalize(nx, ny, nz)
    if is_zero_vector(ux, uy, uz):
        return float(hx), float(hy), float(hz)
    return ux, uy, uz


@njit(cache=True)
def blend(hx: float, hy: float, hz: float,
          tx: float, ty: float, tz: float,
          strength: float) -> tuple:
    """Turn heading h toward target delta t by `strength`, then renormalize."""
    tx, ty, tz = normalize(tx, ty, tz)
    if is_zero_vector(tx, ty, tz):
        return float(hx), float(hy), float(hz)
    return settle(
        hx + tx * strength,
        hy + ty * strength,
        hz + tz * strength,
        hx, hy, hz
    )


@njit(cache=True)
def avoid_environment(
    px: float, py: float, pz: float,
    hx: float, hy: float, hz: float,
    radius: float, floor: float, ceiling: float,
    trigger: float, strength: float, epsilon: float
) -> tuple:
    """
    Steer back into the volume from every surface closer than `trigger`.

    Each close surface pushes with strength / (d^2 + epsilon): the wall
    toward the vertical axis, the floor up, the ceiling down.
    """
    tx, ty, tz = 0.0, 0.0, 0.0

    wall = distance_to_wall(px, pz, radius)
    if wall < trigger:
        push = strength / (wall * wall + epsilon)
        tx -= px * push
        tz -= pz * push

    below = distance_to_floor(py, floor)
    if below < trigger:
        ty += strength / (below * below + epsilon)

    above = distance_to_ceiling(py, ceiling)
    if above < trigger:
        ty -= strength / (above * above + epsilon)

    return blend(hx, hy, hz, tx - hx, ty - hy, tz - hz, strength)


@njit(cache=True)
def align(
    hx: float, hy: float, hz: float,
    headings: np.ndarray, indices: np.ndarray,
    strength: float
) -> tuple:
    """Turn toward the mean heading of the neighbors."""
    k = indices.shape[0]
    sx, sy, sz = 0.0, 0.0, 0.0
    for n in range(k):
        j = indices[n]
        sx += headings[j, 0]
        sy += headings[j, 1]
        sz += headings[j, 2]

    return blend(hx, hy, hz, sx / k - hx, sy / k - hy, sz / k - hz, strength)


@njit(cache=True)
def separate(
    px: float, py: float, pz: float,
    hx: float, hy: float, hz: float,
    qx: float, qy: float, qz: float,
    distance: float, trigger: float, strength: float, epsilon: float
) -> tuple:
    """
    Push away from a single neighbor at q when it is closer than `trigger`.

    Coincident positions give no direction to push along and leave the
    heading unchanged.
    """
    if distance >= trigger:
        return float(hx), float(hy), float(hz)

    ax, ay, az = normalize(px - qx, py - qy, pz - qz)
    if is_zero_vector(ax, ay, az):
        return float(hx), float(hy), float(hz)

    push = strength / (distance * distance + epsilon)
    return settle(hx + ax * push, hy + ay * push, hz + az * push, hx, hy, hz)


@njit(cache=True)
def cohere(
    px: float, py: float, pz: float,
    hx: float, hy: float, hz: float,
    positions: np.ndarray, distances: np.ndarray, indices: np.ndarray,
    strength: float, epsilon: float
) -> tuple:
    """Turn toward the neighbors' centre, weighting each by strength / (d^2 + epsilon)."""
    sx, sy, sz = 0.0, 0.0, 0.0
    total = 0.0
    for n in range(indices.shape[0]):
        j = indices[n]
        d = distances[n]
        w = strength / (d * d + epsilon)
        sx += positions[j, 0] * w
        sy += positions[j, 1] * w
        sz += positions[j, 2] * w
        total += w

    if total == 0.0:
        return float(hx), float(hy), float(hz)

    return blend(
        hx, hy, hz,
        sx / total - px, sy / total - py, sz / total - pz,
        strength
    )


@njit(cache=True)
def flock_heading(
    subject: int,
    positions: np.ndarray, headings: np.ndarray, k: int,
    separation_trigger: float,
    separation_strength: float,
    alignment_strength: float,
    cohesion_strength: float,
    epsilon: float
) -> tuple:
    """
    Heading after alignment, separation and cohesion, in that order.

    Each rule starts from the previous rule's output. Peer data comes from
    `positions`/`headings`, the previous generation.
    """
    px = float(positions[subject, 0])
    py = float(positions[subject, 1])
    pz = float(positions[subject, 2])
    hx = float(headings[subject, 0])
    hy = float(headings[subject, 1])
    hz = float(headings[subject, 2])

    distances, indices = find_neighbors(subject, positions, k)

    hx, hy, hz = align(hx, hy, hz, headings, indices, alignment_strength)

    closest = indices[0]
    hx, hy, hz = separate(
        px, py, pz, hx, hy, hz,
        positions[closest, 0], positions[closest, 1], positions[closest, 2],
        distances[0], separation_trigger, separation_strength, epsilon
    )

    hx, hy, hz = cohere(
        px, py, pz, hx, hy, hz,
        positions, distances, indices,
        cohesion_strength, epsilon
    )
    return hx, hy, hz
