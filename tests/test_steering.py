import math

import numpy as np
import pytest

from shoal.neighbors import find_neighbors
from shoal.steering import align, avoid_environment, blend, cohere, flock_heading, separate
from shoal.vector import length

RADIUS, FLOOR, CEILING = 10.0, -1.0, 10.0
TRIGGER = 2.0
EPS = 1e-6
INV_SQRT2 = 1.0 / math.sqrt(2.0)


def is_unit(h):
    return length(*h) == pytest.approx(1.0, abs=1e-9)


def test_blend_turns_toward_target():
    h = blend(1.0, 0.0, 0.0, 0.0, 5.0, 0.0, 0.5)
    assert is_unit(h)
    assert h[1] > 0.0
    assert h[0] > h[1]


def test_blend_with_zero_target_keeps_heading():
    assert blend(0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.5) == (0.0, 0.0, 1.0)


def test_blend_that_cancels_heading_keeps_heading():
    # Target exactly opposite with strength 1 sums to zero
    assert blend(1.0, 0.0, 0.0, -1.0, 0.0, 0.0, 1.0) == (1.0, 0.0, 0.0)


def test_avoid_wall_turns_toward_axis():
    px, py, pz = 9.5, 5.0, 0.0
    hx, hy, hz = INV_SQRT2, 0.0, INV_SQRT2
    h = avoid_environment(px, py, pz, hx, hy, hz, RADIUS, FLOOR, CEILING, TRIGGER, 0.1, EPS)
    assert is_unit(h)
    assert h[0] < hx


def test_avoid_floor_turns_up():
    # Off-axis but well inside the wall, so only the floor pushes
    hx, hy, hz = 0.6, -0.64, 0.48
    h = avoid_environment(3.0, -0.5, 2.0, hx, hy, hz, RADIUS, FLOOR, CEILING, TRIGGER, 0.1, EPS)
    assert is_unit(h)
    assert h[1] > hy
    assert math.atan2(h[0], h[2]) == pytest.approx(math.atan2(hx, hz), abs=1e-12)
    assert math.hypot(h[0], h[2]) > 0.0


def test_avoid_ceiling_turns_down():
    hx, hy, hz = 0.6, 0.64, 0.48
    h = avoid_environment(3.0, 9.5, 2.0, hx, hy, hz, RADIUS, FLOOR, CEILING, TRIGGER, 0.1, EPS)
    assert is_unit(h)
    assert h[1] < hy
    assert math.atan2(h[0], h[2]) == pytest.approx(math.atan2(hx, hz), abs=1e-12)
    assert math.hypot(h[0], h[2]) > 0.0


def test_avoid_on_the_surface_stays_finite():
    h = avoid_environment(0.0, -1.0, 0.0, 0.0, -1.0, 0.0, RADIUS, FLOOR, CEILING, TRIGGER, 0.1, EPS)
    assert all(math.isfinite(c) for c in h)
    assert is_unit(h)


def test_align_turns_toward_neighbor_headings():
    headings = np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 1.0, 0.0],
    ], dtype=np.float32)
    indices = np.array([1, 2], dtype=np.int64)
    h = align(1.0, 0.0, 0.0, headings, indices, 0.1)
    assert is_unit(h)
    assert h[1] > 0.0


def test_align_with_matching_neighbors_changes_nothing():
    headings = np.array([[0.0, 0.0, 1.0]] * 3, dtype=np.float32)
    indices = np.array([1, 2], dtype=np.int64)
    assert align(0.0, 0.0, 1.0, headings, indices, 0.1) == (0.0, 0.0, 1.0)


def test_separate_pushes_away_from_close_neighbor():
    h = separate(0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.5, 0.0, 0.0, 0.5, 1.0, 0.005, EPS)
    assert is_unit(h)
    assert h[0] < 0.0


def test_separate_ignores_distant_neighbor():
    h = separate(0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 3.0, 0.0, 0.0, 3.0, 1.0, 0.005, EPS)
    assert h == (0.0, 0.0, 1.0)


def test_separate_from_colocated_neighbor_is_noop():
    h = separate(1.0, 1.0, 1.0, 0.0, 1.0, 0.0, 1.0, 1.0, 1.0, 0.0, 1.0, 0.005, EPS)
    assert h == (0.0, 1.0, 0.0)


def test_cohere_turns_toward_neighbors():
    positions = np.array([
        [0.0, 0.0, 0.0],
        [3.0, 0.0, 1.0],
        [3.0, 0.0, -1.0],
    ], dtype=np.float32)
    distances = np.array([math.sqrt(10.0)] * 2, dtype=np.float32)
    indices = np.array([1, 2], dtype=np.int64)
    h = cohere(0.0, 0.0, 0.0, 0.0, 0.0, 1.0, positions, distances, indices, 0.1, EPS)
    assert is_unit(h)
    assert h[0] > 0.0


def test_cohere_weights_closer_neighbors_more():
    positions = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [-4.0, 0.0, 0.0],
    ], dtype=np.float32)
    distances = np.array([1.0, 4.0], dtype=np.float32)
    indices = np.array([1, 2], dtype=np.int64)
    # Unweighted centre is at x = -1.5; the inverse-square weighting pulls it to +x
    h = cohere(0.0, 0.0, 0.0, 0.0, 0.0, 1.0, positions, distances, indices, 0.1, EPS)
    assert h[0] > 0.0


def test_cohere_with_colocated_neighbor_stays_finite():
    positions = np.array([[2.0, 2.0, 2.0], [2.0, 2.0, 2.0]], dtype=np.float32)
    distances = np.array([0.0], dtype=np.float32)
    indices = np.array([1], dtype=np.int64)
    h = cohere(2.0, 2.0, 2.0, 1.0, 0.0, 0.0, positions, distances, indices, 0.002, EPS)
    assert all(math.isfinite(c) for c in h)
    assert h == (1.0, 0.0, 0.0)


def test_flock_heading_is_unit_for_random_population():
    rng = np.random.default_rng(5)
    positions = rng.uniform(-3.0, 3.0, size=(20, 3)).astype(np.float32)
    raw = rng.standard_normal((20, 3))
    headings = (raw / np.linalg.norm(raw, axis=1)[:, None]).astype(np.float32)
    for i in range(20):
        h = flock_heading(i, positions, headings, 6, 1.0, 0.005, 0.00125, 0.002, EPS)
        assert length(*h) == pytest.approx(1.0, abs=1e-6)


def test_flock_heading_chains_align_separate_cohere():
    positions = np.array([
        [0.0, 0.0, 0.0],
        [0.5, 0.0, 0.0],
        [0.0, 2.0, 0.0],
        [0.0, 0.0, -3.0],
    ], dtype=np.float32)
    headings = np.array([
        [0.0, 0.0, 1.0],
        [0.0, 1.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
    ], dtype=np.float32)
    k, trigger = 3, 5.0
    align_s, separate_s, cohere_s = 0.3, 0.2, 0.3

    got = flock_heading(0, positions, headings, k, trigger, separate_s, align_s, cohere_s, EPS)

    distances, indices = find_neighbors(0, positions, k)
    closest = indices[0]
    assert closest == 1
    assert distances[0] < trigger

    h = align(0.0, 0.0, 1.0, headings, indices, align_s)
    aligned = h
    h = separate(
        0.0, 0.0, 0.0, *h,
        positions[closest, 0], positions[closest, 1], positions[closest, 2],
        distances[0], trigger, separate_s, EPS
    )
    # Separation actually fired: pushed along -x away from boid 1
    assert h[0] < aligned[0] - 0.1
    h = cohere(0.0, 0.0, 0.0, *h, positions, distances, indices, cohere_s, EPS)

    assert got == pytest.approx(h, abs=1e-12)

    # Applying each rule to the untouched heading and summing gives a different turn
    sep_only = separate(
        0.0, 0.0, 0.0, 0.0, 0.0, 1.0,
        positions[closest, 0], positions[closest, 1], positions[closest, 2],
        distances[0], trigger, separate_s, EPS
    )
    coh_only = cohere(0.0, 0.0, 0.0, 0.0, 0.0, 1.0, positions, distances, indices, cohere_s, EPS)
    summed = np.array(aligned) + np.array(sep_only) + np.array(coh_only) - 2.0 * np.array([0.0, 0.0, 1.0])
    summed /= np.linalg.norm(summed)
    assert np.max(np.abs(summed - np.array(got))) > 1e-3
