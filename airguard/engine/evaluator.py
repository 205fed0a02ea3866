from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from airguard.engine.advice import build_advice
from airguard.engine.normalizer import pick_series, prepare_points
from airguard.engine.profiles import DEFAULT_SETTINGS, EngineSettings, SensorProfile
from airguard.engine.schemas import EvalResponse, EvalStatus, RawSeries, SensorEvaluation
from airguard.engine.scoring import clamp, score_sensor
from airguard.engine.smoothing import apply_ema
from airguard.engine.trend import classify_trend, estimate_trend

log = logging.getLogger(__name__)

STATUS_BREAKPOINTS: Tuple[Tuple[float, EvalStatus], ...] = (
    (85, "Excellent"),
    (70, "Good"),
    (50, "Okay"),
    (0, "Weak"),
)

MAX_HIGHLIGHTS = 2


def resolve_status(overall: float) -> EvalStatus:
    for threshold, status in STATUS_BREAKPOINTS:
        if overall >= threshold:
            return status
    return "Weak"


def evaluate_sensor(
    series: RawSeries,
    profile: SensorProfile,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> Optional[SensorEvaluation]:
    """Runs normalize -> smooth -> trend and normalize -> score for one sensor. None if no usable data."""
    prepared = prepare_points(pick_series(series, profile.aliases))
    if not prepared:
        return None

    value = prepared[-1].value
    smoothed = apply_ema(prepared, settings.alpha)
    trend_est = estimate_trend(smoothed, settings.window_points)
    trend = classify_trend(
        trend_est.slope_per_min,
        trend_est.r2,
        profile.trend_threshold,
        settings.volatile_r2,
    )
    return SensorEvaluation(
        value=value,
        score=score_sensor(profile.key, value),
        trend=trend,
        slope_per_min=trend_est.slope_per_min,
        r2=trend_est.r2,
        advice=build_advice(profile.key, value, trend),
    )


def collect_highlights(advice_lists: Sequence[List[str]], limit: int = MAX_HIGHLIGHTS) -> List[str]:
    """First `limit` distinct strings in the given order. Later entries are skipped, not truncated."""
    highlights: List[str] = []
    for advice in advice_lists:
        for item in advice:
            if len(highlights) < limit and item not in highlights:
                highlights.append(item)
    return highlights


def evaluate(series: RawSeries, settings: EngineSettings = DEFAULT_SETTINGS) -> EvalResponse:
    """
    Evaluates a raw series snapshot into one overall air quality score.

    Sensors are visited in declaration order. Missing sensors and malformed
    samples degrade to "no data" and never raise; with no data at all the
    result is overall=0 / Weak.
    """
    sensors: Dict[str, SensorEvaluation] = {}
    weighted_score = 0.0
    total_weight = 0.0

    for profile in settings.sensors:
        result = evaluate_sensor(series, profile, settings)
        if result is None:
            continue
        sensors[profile.key] = result
        weighted_score += result.score * profile.weight
        total_weight += profile.weight
        log.debug(
            "%s: value=%.2f score=%.1f trend=%s slope/min=%.3f r2=%.3f",
            profile.key, result.value, result.score, result.trend, result.slope_per_min, result.r2,
        )

    overall = clamp(weighted_score / total_weight, 0.0, 100.0) if total_weight > 0 else 0.0
    highlights = collect_highlights([ev.advice for ev in sensors.values()])

    return EvalResponse(
        overall=overall,
        status=resolve_status(overall),
        highlights=highlights,
        sensors=sensors,
    )
