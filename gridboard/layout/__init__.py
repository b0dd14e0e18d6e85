"""Grid, block and coordinator models."""

from gridboard.layout.block import BlockModel
from gridboard.layout.coordinator import LayoutCoordinator
from gridboard.layout.grid import Cell, CellState, GridModel
from gridboard.layout.records import dumps_records, loads_records, parse_record, to_record

__all__ = [
    "BlockModel",
    "Cell",
    "CellState",
    "GridModel",
    "LayoutCoordinator",
    "dumps_records",
    "loads_records",
    "parse_record",
    "to_record",
]
