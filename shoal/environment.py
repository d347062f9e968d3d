"""Cylindrical simulation volume: a wall around the y axis plus a floor and ceiling."""

import math
from dataclasses import dataclass

from numba import njit

from config import shoal as config


@njit(cache=True)
def distance_to_wall(x: float, z: float, radius: float) -> float:
    """Signed distance to the cylinder wall (negative once outside)."""
    return radius - math.sqrt(x * x + z * z)


@njit(cache=True)
def distance_to_floor(y: float, floor: float) -> float:
    return y - floor


@njit(cache=True)
def distance_to_ceiling(y: float, ceiling: float) -> float:
    return ceiling - y


@njit(cache=True)
def min_distance_to_environment(
    x: float, y: float, z: float,
    radius: float, floor: float, ceiling: float
) -> float:
    """Distance to whichever boundary surface is closest."""
    d = distance_to_wall(x, z, radius)
    d = min(d, distance_to_floor(y, floor))
    d = min(d, distance_to_ceiling(y, ceiling))
    return d


@dataclass(frozen=True)
class Environment:
    """
    Read-only boundary descriptor for one simulation run.

    Attributes:
        radius: Horizontal distance from the vertical axis to the wall
        floor: y coordinate of the floor
        ceiling: y coordinate of the ceiling
    """
    radius: float = config.ENVIRONMENT["radius"]
    floor: float = config.ENVIRONMENT["floor"]
    ceiling: float = config.ENVIRONMENT["ceiling"]

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"radius must be positive, got {self.radius}")
        if self.ceiling <= self.floor:
            raise ValueError(
                f"ceiling ({self.ceiling}) must be above floor ({self.floor})"
            )

    @classmethod
    def from_config(cls) -> "Environment":
        return cls(
            radius=float(config.ENVIRONMENT["radius"]),
            floor=float(config.ENVIRONMENT["floor"]),
            ceiling=float(config.ENVIRONMENT["ceiling"]),
        )

    def surface_distances(self, position) -> tuple:
        """(wall, floor, ceiling) distances for a single position."""
        x, y, z = float(position[0]), float(position[1]), float(position[2])
        return (
            distance_to_wall(x, z, self.radius),
            distance_to_floor(y, self.floor),
            distance_to_ceiling(y, self.ceiling),
        )

    def min_distance(self, position) -> float:
        x, y, z = float(position[0]), float(position[1]), float(position[2])
        return min_distance_to_environment(
            x, y, z, self.radius, self.floor, self.ceiling
        )

    def contains(self, position) -> bool:
        """True when the position lies inside (or on) every boundary surface."""
        return self.min_distance(position) >= 0.0
