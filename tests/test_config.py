from __future__ import annotations

import logging

import pytest

from pdflayout.config import LayoutConfig, load_config
from pdflayout.model.geometry import CoordinateSpace


def test_defaults_without_file_or_env(tmp_path) -> None:
    config = load_config(tmp_path / "absent.yaml", environ={})

    assert config == LayoutConfig()
    assert config.coordinate_space is CoordinateSpace.PERCENT
    assert config.clamp_positions is False


def test_yaml_then_env_then_overrides(tmp_path) -> None:
    path = tmp_path / "pdflayout.yaml"
    path.write_text("zoom: 2.0\npage_gap: 4\ncoordinate_space: pixel\n", encoding="utf-8")
    environ = {"PDFLAYOUT_PAGE_GAP": "8", "PDFLAYOUT_CLAMP_POSITIONS": "yes"}

    config = load_config(path, environ=environ, handle_size=12)

    assert config.zoom == 2.0
    assert config.page_gap == 8
    assert config.coordinate_space is CoordinateSpace.PIXEL
    assert config.clamp_positions is True
    assert config.handle_size == 12


def test_config_path_from_environment(tmp_path) -> None:
    path = tmp_path / "custom.yaml"
    path.write_text("export_filename: fields.json\n", encoding="utf-8")

    config = load_config(environ={"PDFLAYOUT_CONFIG": str(path)})

    assert config.export_filename == "fields.json"


def test_bad_yaml_falls_back_with_warning(tmp_path, caplog) -> None:
    path = tmp_path / "pdflayout.yaml"
    path.write_text("zoom: [unterminated\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="pdflayout.config"):
        config = load_config(path, environ={})

    assert config == LayoutConfig()
    assert "Failed to parse config file" in caplog.text


def test_bad_env_value_is_ignored(tmp_path, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="pdflayout.config"):
        config = load_config(tmp_path / "absent.yaml", environ={"PDFLAYOUT_ZOOM": "huge"})

    assert config.zoom == LayoutConfig().zoom
    assert "PDFLAYOUT_ZOOM" in caplog.text


def test_invalid_values_fall_back_to_defaults(tmp_path) -> None:
    config = load_config(tmp_path / "absent.yaml", environ={"PDFLAYOUT_ZOOM": "-1"})

    assert config == LayoutConfig()


@pytest.mark.parametrize(
    "kwargs",
    [{"zoom": 0}, {"page_gap": -1}, {"handle_size": 0}, {"coordinate_space": "inches"}],
)
def test_layout_config_validates(kwargs) -> None:
    with pytest.raises(ValueError):
        LayoutConfig(**kwargs)


def test_log_level_is_normalised(tmp_path) -> None:
    assert LayoutConfig(log_level="debug").log_level == "DEBUG"
    config = load_config(tmp_path / "absent.yaml", environ={}, log_level="warning", unknown=1)
    assert config.log_level == "WARNING"
