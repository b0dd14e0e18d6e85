"""Public layout logging API."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LayoutLoggingConfig:
    """Handlers installed on the `gridboard` package logger."""

    level_name: str = "INFO"
    console_format: str = "text"  # text|json
    file_path: str | None = None
    file_format: str = "json"  # text|json
    propagate: bool = False  # also pass records on to the root logger


__all__ = ["LayoutLoggingConfig"]
