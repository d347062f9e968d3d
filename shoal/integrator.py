"""Position update along the finalized heading."""

from numba import njit


@njit(cache=True)
def advance(px: float, py: float, pz: float,
            hx: float, hy: float, hz: float,
            speed: float) -> tuple:
    """Move one tick along the heading; position itself is unconstrained."""
    return px + hx * speed, py + hy * speed, pz + hz * speed
