from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from airguard.data_processing.envelope import normalize_series
from airguard.engine.evaluator import evaluate
from airguard.engine.profiles import DEFAULT_SETTINGS, EngineSettings
from airguard.engine.schemas import EvalResponse
from airguard.utils.timer import timed

log = logging.getLogger(__name__)

UNAVAILABLE_BODY = {"error": "data_unavailable"}


class SnapshotUnavailableError(RuntimeError):
    """The snapshot file is missing, unreadable or not valid JSON."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Snapshot unavailable: {path} ({reason})")
        self.path = path
        self.reason = reason


def load_snapshot(path: Union[str, Path]) -> Any:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.warning("Snapshot file not found: %s", path.as_posix())
        raise SnapshotUnavailableError(path, "not found") from None
    except OSError as e:
        log.warning("Snapshot file unreadable: %s (%s)", path.as_posix(), e)
        raise SnapshotUnavailableError(path, str(e)) from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        log.warning("Snapshot is not valid JSON: %s (%s)", path.as_posix(), e)
        raise SnapshotUnavailableError(path, f"invalid JSON: {e.msg}") from e


def evaluate_snapshot(
    path: Union[str, Path],
    settings: EngineSettings = DEFAULT_SETTINGS,
    timings: Optional[Dict[str, float]] = None,
) -> EvalResponse:
    """Load -> unwrap envelope -> evaluate. Raises SnapshotUnavailableError."""
    with timed("load", timings):
        raw = load_snapshot(path)
    with timed("evaluate", timings):
        result = evaluate(normalize_series(raw), settings)
    log.info(
        "Evaluated %s: overall=%.1f status=%s sensors=%s",
        Path(path).name, result.overall, result.status, list(result.sensors),
    )
    return result
