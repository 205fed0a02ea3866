from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timedelta, timezone
from numbers import Real
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from airguard.engine.schemas import PreparedPoint, RawSample, RawSeries

log = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SHAPE_PAIR = "pair"
SHAPE_TS = "ts"
SHAPE_TIMESTAMP = "timestamp"
SHAPE_XY = "xy"

# Leading float literal, like a lenient parseFloat: "412.5ppm" -> 412.5
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def pick_series(series: RawSeries, aliases: Sequence[str]) -> List[Any]:
    """First alias (in priority order) whose value is a list of samples."""
    for key in aliases:
        match = series.get(key)
        if isinstance(match, (list, tuple)):
            return list(match)
    return []


def classify_sample(sample: RawSample) -> Optional[str]:
    if isinstance(sample, (list, tuple)):
        return SHAPE_PAIR
    if isinstance(sample, Mapping):
        if "ts" in sample:
            return SHAPE_TS
        if "timestamp" in sample:
            return SHAPE_TIMESTAMP
        if "x" in sample:
            return SHAPE_XY
    return None


def _extract_fields(sample: Any, shape: str) -> Optional[Tuple[Any, Any]]:
    if shape == SHAPE_PAIR:
        if len(sample) < 2:
            return None
        return sample[0], sample[1]
    if shape == SHAPE_TS:
        return sample["ts"], sample.get("value")
    if shape == SHAPE_TIMESTAMP:
        return sample["timestamp"], sample.get("value")
    # x/y, with a generic "value" field as fallback
    return sample["x"], (sample["y"] if "y" in sample else sample.get("value"))


def _is_number(raw: Any) -> bool:
    return isinstance(raw, Real) and not isinstance(raw, bool)


def _to_float(raw: Real) -> float:
    try:
        return float(raw)
    except OverflowError:
        # ints beyond float range are not finite readings
        return math.nan


def _epoch_ms(ts: pd.Timestamp) -> float:
    try:
        return ts.value / 1e6
    except (OverflowError, ValueError):
        pass
    # outside datetime64[ns] (years 1677-2262): go through datetime, still millisecond exact
    try:
        return (ts.to_pydatetime() - _EPOCH) / timedelta(milliseconds=1)
    except (OverflowError, ValueError):
        return math.nan


def parse_time(raw: Any) -> float:
    """Epoch milliseconds, or NaN when the input is not a usable time."""
    if _is_number(raw):
        return _to_float(raw)
    if isinstance(raw, str):
        try:
            ts = pd.to_datetime(raw.strip(), utc=True, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return math.nan
        if pd.isna(ts):
            return math.nan
        return _epoch_ms(ts)
    return math.nan


def parse_value(raw: Any) -> float:
    if _is_number(raw):
        return _to_float(raw)
    if isinstance(raw, str):
        m = _FLOAT_PREFIX.match(raw)
        return float(m.group(1)) if m else math.nan
    return math.nan


def parse_sample(sample: RawSample) -> Optional[PreparedPoint]:
    """Classify the sample shape once, extract (time, value), drop on any failure."""
    shape = classify_sample(sample)
    if shape is None:
        return None
    fields = _extract_fields(sample, shape)
    if fields is None:
        return None

    ts = parse_time(fields[0])
    value = parse_value(fields[1])
    if not (math.isfinite(ts) and math.isfinite(value)):
        return None
    return PreparedPoint(ts=ts, value=value)


def prepare_points(samples: Sequence[RawSample]) -> List[PreparedPoint]:
    parsed = [parse_sample(s) for s in samples]
    points = [p for p in parsed if p is not None]
    dropped = len(parsed) - len(points)
    if dropped:
        log.debug("Dropped %d/%d invalid samples", dropped, len(parsed))
    # sorted() is stable, ties keep their input order
    return sorted(points, key=lambda p: p.ts)
