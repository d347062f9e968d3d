"""Scalar 3D vector and angle helpers, JIT-compiled so kernels can inline them."""

import math
from numba import njit


@njit(cache=True)
def is_zero_vector(x: float, y: float, z: float) -> bool:
    """True when every component is exactly zero."""
    return x == 0.0 and y == 0.0 and z == 0.0


@njit(cache=True)
def length(x: float, y: float, z: float) -> float:
    return math.sqrt(x * x + y * y + z * z)


@njit(cache=True)
def normalize(x: float, y: float, z: float) -> tuple:
    """
    Scale a vector to unit length.

    A zero-length vector has no direction, so it comes back as (0, 0, 0)
    instead of dividing by zero. Callers treat that result as "no steer".
    """
    mag = math.sqrt(x * x + y * y + z * z)
    if mag == 0.0:
        return 0.0, 0.0, 0.0
    return x / mag, y / mag, z / mag


@njit(cache=True)
def cross(ax: float, ay: float, az: float,
          bx: float, by: float, bz: float) -> tuple:
    """Right-handed cross product a x b."""
    return (
        ay * bz - az * by,
        az * bx - ax * bz,
        ax * by - ay * bx,
    )


@njit(cache=True)
def degree_to_radian(degree: float) -> float:
    return degree * (math.pi / 180.0)


@njit(cache=True)
def radian_to_degree(radian: float) -> float:
    return radian * (180.0 / math.pi)


@njit(cache=True)
def pitch_degree(x: float, y: float, z: float) -> float:
    """Elevation of a unit vector above the horizontal (xz) plane."""
    # Clamp so float drift on a unit vector cannot leave asin's domain
    s = max(-1.0, min(1.0, float(y)))
    return radian_to_degree(math.asin(s))


@njit(cache=True)
def yaw_degree(x: float, y: float, z: float) -> float:
    """Rotation about the vertical axis, measured from +z toward +x."""
    return radian_to_degree(math.atan2(x, z))


@njit(cache=True)
def direction_from_angles(pitch: float, yaw: float) -> tuple:
    """
    Unit vector for a pitch/yaw pair given in radians.

    Inverse of pitch_degree/yaw_degree: yaw rotates +z toward +x, pitch
    lifts the result toward +y.
    """
    cp = math.cos(pitch)
    return normalize(cp * math.sin(yaw), math.sin(pitch), cp * math.cos(yaw))


@njit(cache=True)
def triangle_normal(p1, p2, p3) -> tuple:
    """Unit normal of triangle (p1, p2, p3), wound by the right-hand rule."""
    e1x = p2[0] - p1[0]
    e1y = p2[1] - p1[1]
    e1z = p2[2] - p1[2]
    e2x = p3[0] - p1[0]
    e2y = p3[1] - p1[1]
    e2z = p3[2] - p1[2]
    nx, ny, nz = cross(e1x, e1y, e1z, e2x, e2y, e2z)
    return normalize(nx, ny, nz)
