"""Pose helpers for the renderer: yaw/pitch per boid and pyramid marker meshes."""

import math
import numpy as np
from numba import njit, prange

from config import shoal as config
from .vector import degree_to_radian, pitch_degree, triangle_normal, yaw_degree


VERTS_PER_BOID = 18  # 6 triangles: 4 sides + 2 for the square base


@njit(parallel=True, cache=True)
def pose_angles(headings: np.ndarray):
    """Yaw and pitch (degrees) for every heading."""
    n = headings.shape[0]
    yaw = np.empty(n, dtype=np.float32)
    pitch = np.empty(n, dtype=np.float32)
    for i in prange(n):
        hx = float(headings[i, 0])
        hy = float(headings[i, 1])
        hz = float(headings[i, 2])
        yaw[i] = yaw_degree(hx, hy, hz)
        pitch[i] = pitch_degree(hx, hy, hz)
    return yaw, pitch


def model_triangles(apex: float, base: float) -> np.ndarray:
    """
    Marker mesh in model space, nose along +z.

    Faces wind counter-clockwise seen from outside, so right-hand normals
    point away from the body.
    """
    nose = (0.0, 0.0, apex)
    top_left = (base, base, -apex)
    top_right = (-base, base, -apex)
    bottom_left = (base, -base, -apex)
    bottom_right = (-base, -base, -apex)

    return np.array([
        # Top
        nose, top_left, top_right,
        # Left
        nose, bottom_left, top_left,
        # Bottom
        nose, bottom_right, bottom_left,
        # Right
        nose, top_right, bottom_right,
        # Base
        top_left, bottom_left, top_right,
        top_right, bottom_left, bottom_right,
    ], dtype=np.float64)


@njit(parallel=True, cache=True)
def build_markers_numba(
    positions: np.ndarray,
    yaw: np.ndarray,
    pitch: np.ndarray,
    model: np.ndarray,
    vertices: np.ndarray,
    normals: np.ndarray,
    scale: float,
    num_boids: int
):
    """Rotate (yaw, then -pitch), scale and translate the model for each boid."""
    verts = model.shape[0]
    for i in prange(num_boids):
        ya = degree_to_radian(float(yaw[i]))
        pa = degree_to_radian(float(pitch[i]))
        sy, cy = math.sin(ya), math.cos(ya)
        sp, cp = math.sin(pa), math.cos(pa)

        # Model axes expressed in world space
        side_x, side_y, side_z = cy, 0.0, -sy
        up_x, up_y, up_z = -sp * sy, cp, -sp * cy
        fwd_x, fwd_y, fwd_z = cp * sy, sp, cp * cy

        px = float(positions[i, 0])
        py = float(positions[i, 1])
        pz = float(positions[i, 2])

        base = i * verts
        for v in range(verts):
            mx = model[v, 0] * scale
            my = model[v, 1] * scale
            mz = model[v, 2] * scale
            vertices[base + v, 0] = px + mx * side_x + my * up_x + mz * fwd_x
            vertices[base + v, 1] = py + mx * side_y + my * up_y + mz * fwd_y
            vertices[base + v, 2] = pz + mx * side_z + my * up_z + mz * fwd_z

        for t in range(0, verts, 3):
            nx, ny, nz = triangle_normal(
                vertices[base + t], vertices[base + t + 1], vertices[base + t + 2]
            )
            for v in range(3):
                normals[base + t + v, 0] = nx
                normals[base + t + v, 1] = ny
                normals[base + t + v, 2] = nz


def build_markers(positions: np.ndarray, headings: np.ndarray,
                  apex: float = None, base: float = None, scale: float = None):
    """
    World-space triangle list for one pyramid marker per boid.

    Returns:
        (vertices, normals), each (N * VERTS_PER_BOID, 3) float32
    """
    apex = config.MARKER["apex"] if apex is None else apex
    base = config.MARKER["base"] if base is None else base
    scale = config.MARKER["scale"] if scale is None else scale

    num_boids = positions.shape[0]
    model = model_triangles(apex, base)
    vertices = np.zeros((num_boids * VERTS_PER_BOID, 3), dtype=np.float32)
    normals = np.zeros((num_boids * VERTS_PER_BOID, 3), dtype=np.float32)

    yaw, pitch = pose_angles(headings)
    build_markers_numba(
        positions, yaw, pitch, model, vertices, normals,
        float(scale), num_boids
    )
    return vertices, normals
