"""Shared exception policy helpers."""

from __future__ import annotations

import logging

from gridboard.api.errors import OutOfBoundsRequest

# Failures a layout tolerates per block while restoring records.
RECOVERABLE_RECORD_ERRORS: tuple[type[BaseException], ...] = (
    OutOfBoundsRequest,
    KeyError,
    ValueError,
    TypeError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *,
    level: int = logging.WARNING,
) -> None:
    """Emit observability for a tolerated exception; call from an except block."""
    logger.log(level, message, exc_info=True)
