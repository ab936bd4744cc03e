import math
import random
from datetime import date, timedelta
from typing import List, Sequence

import pytest

from pricecast.core.models import DataPoint

START_DATE = date(2024, 1, 1)


def build_series(values: Sequence[float], start: date = START_DATE) -> List[DataPoint]:
    return [
        DataPoint(date=start + timedelta(days=i), value=float(value))
        for i, value in enumerate(values)
    ]


@pytest.fixture
def make_series():
    return build_series


@pytest.fixture
def flat_series() -> List[DataPoint]:
    return build_series([100.0] * 30)


@pytest.fixture
def uptrend_series() -> List[DataPoint]:
    return build_series([100 + i * 0.5 for i in range(60)])


@pytest.fixture
def seasonal_series() -> List[DataPoint]:
    # Weekly cycle on a gentle upward drift
    return build_series([100 + i * 0.1 + 3 * math.sin(2 * math.pi * i / 7) for i in range(56)])


@pytest.fixture
def noisy_series() -> List[DataPoint]:
    rng = random.Random(42)
    return build_series([100 + rng.gauss(0, 2) for _ in range(90)])


@pytest.fixture
def volatile_series() -> List[DataPoint]:
    rng = random.Random(7)
    return build_series([max(1.0, 100 + rng.gauss(0, 25)) for _ in range(60)])
