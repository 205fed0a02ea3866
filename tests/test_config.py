import dataclasses
from pathlib import Path

import pytest

from airguard.engine.profiles import DEFAULT_SETTINGS, SENSOR_ORDER, settings_from_config
from airguard.utils.config import load_config, load_yaml

CONFIG_DIR = Path(__file__).resolve().parent.parent / "configs"


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_default_settings_table():
    assert tuple(p.key for p in DEFAULT_SETTINGS.sensors) == SENSOR_ORDER
    assert sum(p.weight for p in DEFAULT_SETTINGS.sensors) == pytest.approx(1.0)
    assert DEFAULT_SETTINGS.profile("pm25").aliases == ("pm25", "PM2.5", "pm2_5")
    assert DEFAULT_SETTINGS.profile("temp").trend_threshold == 0.05
    assert (DEFAULT_SETTINGS.alpha, DEFAULT_SETTINGS.window_points, DEFAULT_SETTINGS.volatile_r2) == (0.3, 60, 0.2)


def test_settings_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_SETTINGS.alpha = 0.5  # type: ignore[misc]
    with pytest.raises(TypeError):
        DEFAULT_SETTINGS._by_key["co2"] = None  # type: ignore[index]


def test_empty_config_gives_defaults():
    assert settings_from_config({}) == DEFAULT_SETTINGS


def test_shipped_default_config_matches_builtin_table():
    assert settings_from_config(load_config(CONFIG_DIR / "default.yaml")) == DEFAULT_SETTINGS


def test_shipped_night_config_extends_default():
    cfg = load_config(CONFIG_DIR / "night.yaml")
    assert cfg["logging"]["level"] == "WARNING"
    settings = settings_from_config(cfg)
    assert settings.profile("co2").weight == 0.55
    assert settings.profile("co2").aliases == ("co2", "CO2", "co₂")
    assert "temperatur__bme_kalibriert_" in settings.profile("temp").aliases
    assert settings.profile("rh").weight == 0.075


def test_extends_deep_merges_and_child_wins(tmp_path):
    _write(tmp_path / "base.yaml", "engine:\n  alpha: 0.5\n  window_points: 30\nsensors:\n  co2:\n    weight: 0.1\n")
    child = _write(tmp_path / "child.yaml", "extends: base.yaml\nengine:\n  alpha: 0.2\n")
    cfg = load_config(child)
    assert cfg["engine"] == {"alpha": 0.2, "window_points": 30}
    assert cfg["sensors"]["co2"]["weight"] == 0.1
    assert "extends" not in cfg
    assert cfg["_meta"]["config_path"] == str(child.resolve())


def test_extends_list_later_parent_wins(tmp_path):
    _write(tmp_path / "a.yaml", "engine:\n  alpha: 0.1\n")
    _write(tmp_path / "b.yaml", "engine:\n  alpha: 0.9\n")
    child = _write(tmp_path / "c.yaml", "extends: [a.yaml, b.yaml]\n")
    assert load_config(child)["engine"]["alpha"] == 0.9


def test_circular_extends_is_rejected(tmp_path):
    _write(tmp_path / "a.yaml", "extends: b.yaml\n")
    _write(tmp_path / "b.yaml", "extends: a.yaml\n")
    with pytest.raises(ValueError, match="Circular"):
        load_config(tmp_path / "a.yaml")


def test_bad_extends_type(tmp_path):
    with pytest.raises(ValueError, match="extends"):
        load_config(_write(tmp_path / "x.yaml", "extends: 3\n"))


def test_missing_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "nope.yaml")


def test_non_mapping_root(tmp_path):
    with pytest.raises(ValueError, match="mapping"):
        load_yaml(_write(tmp_path / "list.yaml", "- 1\n- 2\n"))


def test_empty_yaml_is_empty_dict(tmp_path):
    assert load_yaml(_write(tmp_path / "empty.yaml", "")) == {}


@pytest.mark.parametrize(
    "cfg",
    [
        {"sensors": {"lux": {"weight": 1}}},
        {"sensors": {"co2": {"weight": -1}}},
        {"sensors": {"co2": {"weight": "heavy"}}},
        {"sensors": {"co2": {"trend_threshold": -0.1}}},
        {"sensors": {"co2": {"aliases": []}}},
        {"sensors": {"co2": {"aliases": [""]}}},
        {"sensors": {"co2": [1, 2]}},
        {"sensors": ["co2"]},
        {"engine": {"alpha": 0}},
        {"engine": {"alpha": 1.5}},
        {"engine": {"window_points": 1}},
        {"engine": {"volatile_r2": 2}},
        {"engine": "fast"},
    ],
)
def test_invalid_settings_are_rejected(cfg):
    with pytest.raises(ValueError):
        settings_from_config(cfg)


def test_single_string_alias_is_accepted():
    settings = settings_from_config({"sensors": {"tvoc": {"aliases": "voc_index"}}})
    assert settings.profile("tvoc").aliases == ("voc_index",)


def test_empty_sections_load_as_empty_mappings(tmp_path):
    cfg = load_config(_write(tmp_path / "bare.yaml", "logging:\nengine:\n"))
    assert cfg["logging"] == {}
    assert cfg["engine"] == {}
    assert cfg["sensors"] == {}
    assert settings_from_config(cfg) == DEFAULT_SETTINGS


def test_empty_section_in_child_keeps_parent_values(tmp_path):
    _write(tmp_path / "base.yaml", "logging:\n  level: DEBUG\nsensors:\n  co2:\n    weight: 0.3\n")
    child = _write(tmp_path / "child.yaml", "extends: base.yaml\nlogging:\nsensors:\n")
    cfg = load_config(child)
    assert cfg["logging"] == {"level": "DEBUG"}
    assert cfg["sensors"]["co2"]["weight"] == 0.3


@pytest.mark.parametrize("text", ["logging: loud\n", "engine: [0.3]\n", "sensors: 5\n"])
def test_non_mapping_section_is_rejected(tmp_path, text):
    with pytest.raises(ValueError, match="must be a mapping"):
        load_config(_write(tmp_path / "bad.yaml", text))
