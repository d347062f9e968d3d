"""Individual boid state handed out to callers."""

import math
import numpy as np
from dataclasses import dataclass, field

from .environment import Environment
from .vector import pitch_degree, yaw_degree


@dataclass
class Boid:
    """
    A single boid (bird-oid object) snapshot.

    Attributes:
        position: 3D position vector
        heading: 3D unit direction of travel
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float32))
    heading: np.ndarray = field(
        default_factory=lambda: np.array([0.0, 0.0, 1.0], dtype=np.float32)
    )

    @property
    def yaw(self) -> float:
        """Heading rotation about the vertical axis, in degrees."""
        return yaw_degree(float(self.heading[0]), float(self.heading[1]), float(self.heading[2]))

    @property
    def pitch(self) -> float:
        """Heading elevation above the horizontal plane, in degrees."""
        return pitch_degree(float(self.heading[0]), float(self.heading[1]), float(self.heading[2]))

    def distance_to(self, other: "Boid") -> float:
        delta = np.asarray(other.position, dtype=np.float64) - np.asarray(self.position, dtype=np.float64)
        return math.sqrt(float(np.dot(delta, delta)))

    def clearance(self, environment: Environment) -> float:
        """Distance to the nearest boundary surface."""
        return environment.min_distance(self.position)
