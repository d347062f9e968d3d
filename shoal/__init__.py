"""Double-buffered 3D flocking inside a cylindrical volume."""

from .behavior import Mode
from .boid import Boid
from .environment import Environment
from .flock import Flock, FlockParams, SpawnBounds
from .neighbors import Neighbor

__all__ = ["Boid", "Environment", "Flock", "FlockParams", "Mode", "Neighbor", "SpawnBounds"]
