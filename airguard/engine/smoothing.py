from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from airguard.engine.schemas import PreparedPoint


def apply_ema(points: Sequence[PreparedPoint], alpha: float = 0.3) -> List[PreparedPoint]:
    """
    Exponential moving average in chronological order.

    adjust=False gives the recursive form seeded with the first value:
      ema_0 = v_0
      ema_t = alpha * v_t + (1 - alpha) * ema_{t-1}
    """
    if not points:
        return []
    values = pd.Series([p.value for p in points], dtype="float64")
    smoothed = values.ewm(alpha=alpha, adjust=False).mean()
    return [PreparedPoint(ts=p.ts, value=float(v)) for p, v in zip(points, smoothed.to_numpy())]
