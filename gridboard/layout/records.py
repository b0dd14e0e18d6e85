"""Positional record shape exchanged with hosts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from gridboard.api.events import PositionalRecord
from gridboard.api.geometry import BlockRect, Stretch
from gridboard.runtime.json_codec import dumps_bytes, loads

RECORD_FIELDS: tuple[str, ...] = ("top", "left", "width", "height")


def to_record(rect: BlockRect, stretch: Stretch = Stretch.NONE) -> dict[str, int | str]:
    """Format a block placement; `stretch` is omitted when none."""
    record: dict[str, int | str] = {
        "top": rect.top,
        "left": rect.left,
        "width": rect.width,
        "height": rect.height,
    }
    if stretch is not Stretch.NONE:
        record["stretch"] = stretch.value
    return record


def parse_record(record: PositionalRecord) -> tuple[BlockRect, Stretch]:
    """Parse a positional record without bounds checking.

    Raises KeyError for missing fields and ValueError/TypeError for values
    that are not integers or not a known stretch code.
    """
    if not isinstance(record, Mapping):
        raise TypeError(f"positional record must be a mapping, got {type(record).__name__}")
    values: list[int] = []
    for name in RECORD_FIELDS:
        value = record[name]
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"record field {name!r} must be an integer, got {value!r}")
        values.append(value)
    raw_stretch = record.get("stretch") or ""
    if not isinstance(raw_stretch, str):
        raise ValueError(f"record stretch must be a string, got {raw_stretch!r}")
    top, left, width, height = values
    return BlockRect(top=top, left=left, width=width, height=height), Stretch(raw_stretch)


def dumps_records(records: Iterable[PositionalRecord], *, pretty: bool = False) -> bytes:
    return dumps_bytes([dict(record) for record in records], pretty=pretty)


def loads_records(data: bytes | str) -> list[PositionalRecord]:
    """Decode a JSON array of records; fields are validated later by `parse_record`."""
    payload = loads(data)
    if not isinstance(payload, list):
        raise ValueError("records payload must be a JSON array")
    return payload
