from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from airguard.data_processing.snapshot import UNAVAILABLE_BODY, SnapshotUnavailableError, evaluate_snapshot
from airguard.engine.profiles import DEFAULT_SETTINGS, EngineSettings, settings_from_config
from airguard.utils.config import load_config
from airguard.utils.logging import setup_logging

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNAVAILABLE = 3


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Evaluate air quality snapshot files into a scored summary.")
    p.add_argument("--input", required=True, nargs="+", help="Snapshot JSON file(s), e.g. data_24h.json.")
    p.add_argument("--config", default=None, help="Path to YAML config (supports extends). Defaults built in.")
    p.add_argument("--out", default=None, help="Write JSON here instead of stdout.")
    p.add_argument("--log-level", default=None, help="Overrides logging.level from the config.")
    return p.parse_args(argv)


def _evaluate_one(path: str, settings: EngineSettings) -> Dict[str, Any]:
    timings: Dict[str, float] = {}
    try:
        result = evaluate_snapshot(path, settings, timings=timings)
    except SnapshotUnavailableError:
        return dict(UNAVAILABLE_BODY)
    finally:
        log.debug("%s timings: %s", path, {k: round(v, 4) for k, v in timings.items()})
    return result.to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = load_config(args.config) if args.config else {}
    setup_logging(level=args.log_level or (cfg.get("logging") or {}).get("level", "INFO"))

    settings = settings_from_config(cfg) if args.config else DEFAULT_SETTINGS

    results: Dict[str, Dict[str, Any]] = {}
    inputs = args.input
    for path in tqdm(inputs, desc="Evaluating snapshots", disable=len(inputs) < 2):
        results[path] = _evaluate_one(path, settings)

    payload: Any = results[inputs[0]] if len(inputs) == 1 else results
    text = json.dumps(payload, indent=2, ensure_ascii=False)

    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text + "\n", encoding="utf-8")
        log.info("Saved evaluation JSON: %s", out.as_posix())
    else:
        sys.stdout.write(text + "\n")

    unavailable = [p for p, body in results.items() if body.get("error")]
    if unavailable:
        log.warning("%d/%d snapshot(s) unavailable: %s", len(unavailable), len(inputs), unavailable)
        return EXIT_UNAVAILABLE
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
