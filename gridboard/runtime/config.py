"""Layout configuration validation and environment overrides."""

from __future__ import annotations

import numbers
import os
from collections.abc import Sequence
from dataclasses import replace

from gridboard.api.errors import ConfigurationError
from gridboard.api.layout import LayoutConfig


def _flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def resolve_log_level_name(default: str = "INFO") -> str:
    """Resolve log level with layout-prefixed override."""
    value = os.getenv("GRIDBOARD_LOG_LEVEL")
    if value is None:
        value = os.getenv("LOG_LEVEL", default)
    return value.strip().upper()


def load_layout_env_config(base: LayoutConfig | None = None) -> LayoutConfig:
    """Apply GRIDBOARD_* environment overrides on top of a base config."""
    config = base or LayoutConfig()
    debounce_ms = _float("GRIDBOARD_RESIZE_DEBOUNCE_MS", config.resize_debounce_seconds * 1000.0)
    return replace(
        config,
        min_cell_size=max(1, _int("GRIDBOARD_MIN_CELL_PX", config.min_cell_size)),
        resize_debounce_seconds=max(0.0, debounce_ms / 1000.0),
        editable=_flag("GRIDBOARD_START_EDITABLE", config.editable),
    )


def _pair(value: object, name: str) -> tuple[float, float]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) != 2:
        raise ConfigurationError(f"{name} must be a sequence of 2 elements, got {value!r}")
    first, second = value
    for item in (first, second):
        if isinstance(item, bool) or not isinstance(item, numbers.Real):
            raise ConfigurationError(f"{name} entries must be numbers, got {value!r}")
    return first, second


def validate_grid_spec(value: object) -> tuple[int, int]:
    """Return `(cols, rows)` or raise ConfigurationError."""
    cols, rows = _pair(value, "grid")
    if int(cols) != cols or int(rows) != rows or cols < 1 or rows < 1:
        raise ConfigurationError(f"grid entries must be positive integers, got {value!r}")
    return int(cols), int(rows)


def validate_gutter_spec(value: object) -> tuple[float, float]:
    """Return `(w, h)` or raise ConfigurationError."""
    width, height = _pair(value, "gutter")
    if width < 0 or height < 0:
        raise ConfigurationError(f"gutter entries must be >= 0, got {value!r}")
    return width, height
