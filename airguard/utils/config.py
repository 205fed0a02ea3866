from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

# Top-level sections read by the CLI and the engine settings; each must be a mapping.
SECTIONS = ("logging", "engine", "sensors")


def _check_sections(data: Dict[str, Any], path: Path) -> Dict[str, Any]:
    """
    `logging:` with nothing under it loads as None; treat that as absent so it
    neither crashes readers nor wipes a parent's section during `extends` merging.
    """
    out = dict(data)
    for key in SECTIONS:
        if key not in out:
            continue
        if out[key] is None:
            del out[key]
        elif not isinstance(out[key], dict):
            raise ValueError(f"Config section '{key}' must be a mapping, got {type(out[key]).__name__}: {path}")
    return out


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML root must be a mapping, got {type(data).__name__}: {path}")
    return _check_sections(data, path)


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges override into base (override wins).
    Lists are replaced, not concatenated, so an alias list in a child config
    fully replaces the parent's.
    """
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, Mapping):
            out[k] = _deep_merge(out[k], v)  # type: ignore[arg-type]
        else:
            out[k] = v
    return out


def _parent_paths(extends: Any, child: Path) -> List[Path]:
    if isinstance(extends, (str, Path)):
        parents = [extends]
    elif isinstance(extends, list):
        parents = extends
    else:
        raise ValueError("Config key 'extends' must be a string or a list of strings.")

    out: List[Path] = []
    for parent in parents:
        parent_path = Path(parent)
        if not parent_path.is_absolute():
            parent_path = (child.parent / parent_path).resolve()
        out.append(parent_path)
    return out


def load_config(path: Union[str, Path], _seen: Optional[List[Path]] = None) -> Dict[str, Any]:
    """
    Loads a YAML config file with optional inheritance via:
      extends: "default.yaml"
    or
      extends:
        - "default.yaml"
        - "sensors-de.yaml"

    Paths in 'extends' are resolved relative to the current config file.
    Later parents win over earlier ones, the file itself wins over all parents.
    """
    path = Path(path)
    seen = list(_seen or [])
    resolved = path.resolve()
    if resolved in seen:
        chain = " -> ".join(p.name for p in seen + [resolved])
        raise ValueError(f"Circular 'extends' in config: {chain}")
    seen.append(resolved)

    cfg = load_yaml(path)

    merged: Dict[str, Any] = {}
    extends = cfg.get("extends")
    if extends:
        for parent_path in _parent_paths(extends, path):
            merged = _deep_merge(merged, load_config(parent_path, seen))

    cfg_no_extends = dict(cfg)
    cfg_no_extends.pop("extends", None)
    merged = _deep_merge(merged, cfg_no_extends)

    for key in SECTIONS:
        merged.setdefault(key, {})
    merged.setdefault("_meta", {})
    merged["_meta"]["config_path"] = str(resolved)

    return merged
