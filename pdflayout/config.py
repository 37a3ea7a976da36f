"""Layout designer configuration.

Sources, highest precedence first:
1. Constructor / ``load_config`` overrides
2. ``PDFLAYOUT_*`` environment variables
3. YAML file (``PDFLAYOUT_CONFIG`` or ``./pdflayout.yaml``)
4. Dataclass defaults
"""

from __future__ import annotations

from dataclasses import dataclass, fields
import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from pdflayout.model.geometry import CoordinateSpace

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "pdflayout.yaml"
ENV_PREFIX = "PDFLAYOUT_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True, frozen=True)
class LayoutConfig:
    zoom: float = 1.25
    zoom_step: float = 0.25
    page_gap: int = 16
    handle_size: int = 10
    cell_handle_size: int = 4
    coordinate_space: CoordinateSpace = CoordinateSpace.PERCENT
    clamp_positions: bool = False
    export_filename: str = "pdf_box_locations.json"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive, got {self.zoom}")
        if self.zoom_step <= 0:
            raise ValueError(f"zoom_step must be positive, got {self.zoom_step}")
        if self.page_gap < 0:
            raise ValueError(f"page_gap cannot be negative, got {self.page_gap}")
        if self.handle_size < 1 or self.cell_handle_size < 1:
            raise ValueError("handle sizes must be at least 1 pixel")
        object.__setattr__(self, "coordinate_space", CoordinateSpace(self.coordinate_space))
        object.__setattr__(self, "log_level", str(self.log_level).upper())


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> LayoutConfig:
    environ = os.environ if environ is None else environ
    config_path = Path(path or environ.get(f"{ENV_PREFIX}CONFIG") or DEFAULT_CONFIG_FILE)

    values: dict[str, Any] = {}
    values.update(_known(_load_yaml_config(config_path)))
    values.update(_env_values(environ))
    values.update(_known(overrides))

    try:
        return LayoutConfig(**values)
    except (TypeError, ValueError) as exc:
        logger.warning("Invalid configuration %s, using defaults: %s", values, exc)
        return LayoutConfig()


def configure_logging(level: str | int = "INFO") -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    root.setLevel(level)


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    try:
        if config_path.exists():
            with open(config_path, encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if not isinstance(data, dict):
                logger.warning("Config file %s is not a mapping, ignoring it", config_path)
                return {}
            return data
        logger.debug("Config file not found: %s", config_path)
        return {}
    except yaml.YAMLError as exc:
        logger.warning("Failed to parse config file %s: %s", config_path, exc)
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read config file %s: %s", config_path, exc)
        return {}


def _env_values(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for item in fields(LayoutConfig):
        raw = environ.get(f"{ENV_PREFIX}{item.name.upper()}")
        if raw is None:
            continue
        try:
            values[item.name] = _coerce(item.name, raw)
        except ValueError as exc:
            logger.warning("Ignoring %s%s=%r: %s", ENV_PREFIX, item.name.upper(), raw, exc)
    return values


def _coerce(name: str, raw: str) -> Any:
    default = getattr(LayoutConfig(), name)
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError("expected a boolean")
    if isinstance(default, CoordinateSpace):
        return CoordinateSpace(raw.strip().lower())
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, int):
        return int(raw)
    return raw


def _known(values: Mapping[str, Any]) -> dict[str, Any]:
    names = {item.name for item in fields(LayoutConfig)}
    unknown = set(values) - names
    if unknown:
        logger.warning("Ignoring unknown config key(s): %s", ", ".join(sorted(unknown)))
    return {key: value for key, value in values.items() if key in names}
