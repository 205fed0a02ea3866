from __future__ import annotations

from typing import Any, Dict, List, Mapping

NAME_CANDS = ["name", "metric", "key"]
SAMPLE_CANDS = ["values", "series", "samples"]


def _first_present(entry: Mapping[str, Any], candidates: List[str]) -> Any:
    for c in candidates:
        if entry.get(c):
            return entry[c]
    return None


def map_series_array(entries: List[Any]) -> Dict[str, List[Any]]:
    """
    [{"name": "CO2", "values": [...]}, ...] -> {"CO2": [...]}

    Entries without a name or without a sample list are skipped.
    """
    out: Dict[str, List[Any]] = {}
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        name = _first_present(entry, NAME_CANDS)
        if not name:
            continue
        samples = None
        for c in SAMPLE_CANDS:
            if isinstance(entry.get(c), list):
                samples = entry[c]
                break
        if samples is None:
            continue
        out[str(name)] = samples
    return out


def normalize_series(raw: Any) -> Dict[str, List[Any]]:
    """
    Unwraps the snapshot envelopes the relay writes into a flat alias -> samples mapping:
      {"series": [{name, values}, ...]}
      [{name, values}, ...]
      {"data": {...}}            (recursive)
      {"CO2": [...], "TVOC": [...], "meta": {...}}   (non-list values dropped)
    """
    if isinstance(raw, list):
        return map_series_array(raw)
    if not isinstance(raw, Mapping):
        return {}
    if isinstance(raw.get("series"), list):
        return map_series_array(raw["series"])
    if isinstance(raw.get("data"), (Mapping, list)):
        return normalize_series(raw["data"])
    return {str(k): v for k, v in raw.items() if isinstance(v, list)}
