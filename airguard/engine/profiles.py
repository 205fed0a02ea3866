from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

SENSOR_ORDER: Tuple[str, ...] = ("co2", "pm25", "tvoc", "temp", "rh")


@dataclass(frozen=True)
class SensorProfile:
    key: str
    aliases: Tuple[str, ...]
    trend_threshold: float  # per minute
    weight: float


@dataclass(frozen=True)
class EngineSettings:
    """
    Everything the evaluation engine needs besides the raw series.

    `sensors` is kept in declaration order; that order decides which advice
    strings win the two highlight slots.
    """
    sensors: Tuple[SensorProfile, ...]
    alpha: float = 0.3
    window_points: int = 60
    volatile_r2: float = 0.2
    _by_key: Mapping[str, SensorProfile] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_key", MappingProxyType({p.key: p for p in self.sensors}))

    def profile(self, key: str) -> SensorProfile:
        return self._by_key[key]


DEFAULT_PROFILES: Tuple[SensorProfile, ...] = (
    SensorProfile("co2", ("co2", "CO2", "co₂"), trend_threshold=6.0, weight=0.4),
    SensorProfile("pm25", ("pm25", "PM2.5", "pm2_5"), trend_threshold=0.4, weight=0.25),
    SensorProfile("tvoc", ("tvoc", "TVOC"), trend_threshold=8.0, weight=0.2),
    SensorProfile("temp", ("temp", "Temperatur", "temperature"), trend_threshold=0.05, weight=0.075),
    SensorProfile("rh", ("rh", "rel. Feuchte", "humidity"), trend_threshold=0.25, weight=0.075),
)

DEFAULT_SETTINGS = EngineSettings(sensors=DEFAULT_PROFILES)


def _as_aliases(key: str, raw: Any) -> Tuple[str, ...]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ValueError(f"sensors.{key}.aliases must be a non-empty list of strings.")
    aliases = tuple(str(a) for a in raw)
    if any(not a for a in aliases):
        raise ValueError(f"sensors.{key}.aliases contains an empty alias.")
    return aliases


def _non_negative(name: str, raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def settings_from_config(cfg: Mapping[str, Any], base: EngineSettings = DEFAULT_SETTINGS) -> EngineSettings:
    """
    Builds EngineSettings from a loaded config dict.

    Expected layout (every key optional):
      engine:
        alpha: 0.3
        window_points: 60
        volatile_r2: 0.2
      sensors:
        co2:
          aliases: ["co2", "CO2"]
          trend_threshold: 6
          weight: 0.4
    """
    engine_cfg = cfg.get("engine", {}) or {}
    sensors_cfg = cfg.get("sensors", {}) or {}
    if not isinstance(engine_cfg, Mapping):
        raise ValueError("Config key 'engine' must be a mapping.")
    if not isinstance(sensors_cfg, Mapping):
        raise ValueError("Config key 'sensors' must be a mapping.")

    unknown = sorted(set(sensors_cfg) - set(SENSOR_ORDER))
    if unknown:
        raise ValueError(f"Unknown sensor keys in config: {unknown}. Known: {list(SENSOR_ORDER)}")

    profiles = []
    for profile in base.sensors:
        override = sensors_cfg.get(profile.key) or {}
        if not isinstance(override, Mapping):
            raise ValueError(f"sensors.{profile.key} must be a mapping.")
        changes: Dict[str, Any] = {}
        if "aliases" in override:
            changes["aliases"] = _as_aliases(profile.key, override["aliases"])
        if "trend_threshold" in override:
            changes["trend_threshold"] = _non_negative(
                f"sensors.{profile.key}.trend_threshold", override["trend_threshold"]
            )
        if "weight" in override:
            changes["weight"] = _non_negative(f"sensors.{profile.key}.weight", override["weight"])
        profiles.append(replace(profile, **changes) if changes else profile)

    alpha = float(engine_cfg.get("alpha", base.alpha))
    if not 0.0 < alpha <= 1.0:
        raise ValueError(f"engine.alpha must be in (0, 1], got {alpha}")

    window_points = int(engine_cfg.get("window_points", base.window_points))
    if window_points < 2:
        raise ValueError(f"engine.window_points must be >= 2, got {window_points}")

    volatile_r2 = float(engine_cfg.get("volatile_r2", base.volatile_r2))
    if not 0.0 <= volatile_r2 <= 1.0:
        raise ValueError(f"engine.volatile_r2 must be in [0, 1], got {volatile_r2}")

    return EngineSettings(
        sensors=tuple(profiles),
        alpha=alpha,
        window_points=window_points,
        volatile_r2=volatile_r2,
    )
