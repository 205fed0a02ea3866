from __future__ import annotations

from typing import Dict, Sequence, Tuple

Curve = Sequence[Tuple[float, float]]

# (value, score) anchors, ascending by value. Scores are flat beyond both ends.
SCORE_CURVES: Dict[str, Tuple[Tuple[float, float], ...]] = {
    "co2": ((600, 100), (1000, 50), (1400, 10), (2000, 0)),
    "pm25": ((5, 100), (12, 90), (35, 15), (55, 0)),
    "tvoc": ((65, 100), (220, 85), (660, 10)),
}

TEMP_IDEAL = 22.0
TEMP_PENALTY_PER_DEGREE = 12.0

RH_BAND = (40.0, 55.0)
RH_PENALTY_PER_PERCENT = 5.0


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * clamp(t, 0.0, 1.0)


def piecewise(value: float, points: Curve) -> float:
    if not points:
        return 0.0
    if value <= points[0][0]:
        return float(points[0][1])
    for (prev_x, prev_y), (x, y) in zip(points, points[1:]):
        if value <= x:
            return float(lerp(prev_y, y, (value - prev_x) / (x - prev_x)))
    return float(points[-1][1])


def score_temperature(value: float) -> float:
    return clamp(100.0 - abs(value - TEMP_IDEAL) * TEMP_PENALTY_PER_DEGREE, 0.0, 100.0)


def score_humidity(value: float) -> float:
    low, high = RH_BAND
    if low <= value <= high:
        return 100.0
    distance = low - value if value < low else value - high
    return clamp(100.0 - distance * RH_PENALTY_PER_PERCENT, 0.0, 100.0)


def score_sensor(key: str, value: float) -> float:
    """Health score in [0, 100] for the latest raw reading of one sensor."""
    if key in SCORE_CURVES:
        return piecewise(value, SCORE_CURVES[key])
    if key == "temp":
        return score_temperature(value)
    if key == "rh":
        return score_humidity(value)
    return 0.0
