"""Per-tick choice between boundary avoidance and flocking."""

from enum import IntEnum

from numba import njit

from .environment import min_distance_to_environment


# Plain ints so kernels can compare against them
MODE_FLOCKING = 0
MODE_AVOIDING = 1


class Mode(IntEnum):
    """Behavior an agent ran during the last tick."""
    FLOCKING = MODE_FLOCKING
    AVOIDING = MODE_AVOIDING


@njit(cache=True)
def near_boundary(
    x: float, y: float, z: float,
    radius: float, floor: float, ceiling: float,
    trigger: float
) -> bool:
    return min_distance_to_environment(x, y, z, radius, floor, ceiling) < trigger


@njit(cache=True)
def select_mode(
    x: float, y: float, z: float,
    radius: float, floor: float, ceiling: float,
    trigger: float
) -> int:
    """
    Mode for an agent at (x, y, z).

    Recomputed from position alone every tick, so an agent hovering at the
    threshold may switch modes on consecutive frames.
    """
    if near_boundary(x, y, z, radius, floor, ceiling, trigger):
        return MODE_AVOIDING
    return MODE_FLOCKING
