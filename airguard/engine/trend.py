from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from airguard.engine.schemas import PreparedPoint, TrendLabel

MS_PER_MINUTE = 60_000


@dataclass(frozen=True)
class RegressionStats:
    slope: float  # value per ms
    intercept: float
    r2: float


@dataclass(frozen=True)
class TrendEstimate:
    slope_per_min: float
    r2: float


def linear_regression(points: Sequence[PreparedPoint]) -> RegressionStats:
    """
    Ordinary least squares of value against timestamp (ms).

    Degenerate inputs fall back instead of raising:
      - all timestamps equal -> slope 0
      - constant values      -> r2 0
    r2 is clamped into [0, 1]; rounding on near-duplicate timestamps can push it out.
    """
    xs = np.array([p.ts for p in points], dtype=float)
    ys = np.array([p.value for p in points], dtype=float)
    mean_x = float(xs.mean())
    mean_y = float(ys.mean())

    x_diff = xs - mean_x
    y_diff = ys - mean_y
    numerator = float(np.sum(x_diff * y_diff))
    denominator = float(np.sum(x_diff * x_diff))
    total_sq = float(np.sum(y_diff * y_diff))

    slope = 0.0 if denominator == 0 else numerator / denominator
    intercept = mean_y - slope * mean_x

    residuals = ys - (slope * xs + intercept)
    residual_sq = float(np.sum(residuals * residuals))

    r2 = 0.0 if total_sq == 0 else 1.0 - residual_sq / total_sq
    return RegressionStats(slope=slope, intercept=intercept, r2=min(max(r2, 0.0), 1.0))


def estimate_trend(smoothed: Sequence[PreparedPoint], window_points: int = 60) -> TrendEstimate:
    window = list(smoothed)[-window_points:]
    if len(window) < 2:
        return TrendEstimate(slope_per_min=0.0, r2=0.0)
    stats = linear_regression(window)
    return TrendEstimate(slope_per_min=stats.slope * MS_PER_MINUTE, r2=stats.r2)


def classify_trend(slope_per_min: float, r2: float, threshold: float, volatile_r2: float = 0.2) -> TrendLabel:
    # A weak fit is not a direction, whatever the slope says.
    if r2 < volatile_r2:
        return "volatile"
    if slope_per_min > threshold:
        return "rising"
    if slope_per_min < -threshold:
        return "falling"
    return "stable"
