import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shoal import Environment, Flock, FlockParams  # noqa: E402


@pytest.fixture
def environment() -> Environment:
    return Environment(radius=10.0, floor=-1.0, ceiling=10.0)


@pytest.fixture
def flock(environment) -> Flock:
    f = Flock(FlockParams.from_config(count=40, neighborhood_size=6), environment, seed=1234)
    f.initialize()
    return f


def unit_rows(array) -> np.ndarray:
    return np.linalg.norm(np.asarray(array, dtype=np.float64), axis=1)
