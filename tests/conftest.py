"""
Shared pytest fixtures for the evaluation engine tests
"""
from typing import Callable, Dict, List

import pytest

T0_MS = 1_700_000_000_000  # 2023-11-14T22:13:20Z
MINUTE_MS = 60_000


def linear_samples(start: float, per_minute: float, n: int = 60, t0: int = T0_MS) -> List[Dict[str, float]]:
    return [{"ts": t0 + i * MINUTE_MS, "value": start + per_minute * i} for i in range(n)]


def flat_samples(value: float, n: int = 60, t0: int = T0_MS) -> List[Dict[str, float]]:
    return linear_samples(value, 0.0, n=n, t0=t0)


@pytest.fixture
def make_linear() -> Callable[..., List[Dict[str, float]]]:
    return linear_samples


@pytest.fixture
def make_flat() -> Callable[..., List[Dict[str, float]]]:
    return flat_samples


@pytest.fixture
def healthy_room() -> Dict[str, List[Dict[str, float]]]:
    """All five sensors inside their ideal ranges, flat."""
    return {
        "co2": flat_samples(550),
        "pm25": flat_samples(4),
        "tvoc": flat_samples(50),
        "temp": flat_samples(22),
        "rh": flat_samples(45),
    }


@pytest.fixture
def stuffy_room() -> Dict[str, List[Dict[str, float]]]:
    """Advice-producing values on four sensors, keyed by non-canonical aliases."""
    return {
        "CO2": flat_samples(1600),
        "PM2.5": flat_samples(40),
        "TVOC": flat_samples(300),
        "Temperatur": flat_samples(26),
        "humidity": flat_samples(45),
    }
