from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from blaster.components.bubble import BubbleKind
from blaster.components.frame import Frame
from blaster.components.layout import Layout


@dataclass(frozen=True, slots=True)
class GridPosition:
    """Fixed (row, col) of a cell entity."""
    row: int
    col: int


@dataclass(slots=True)
class Occupant:
    """Per-cell occupancy; ``bubble`` is None when the cell is empty."""
    bubble: Optional[BubbleKind] = None


@dataclass(slots=True)
class CellFrame:
    frame: Frame


@dataclass(slots=True)
class Grid:
    """Singleton component owning the cell entities, indexed by row then column."""

    layout: Layout
    cells: List[List[int]] = field(default_factory=list)

    def row_count(self) -> int:
        return len(self.cells)

    def column_count(self, row: int) -> int:
        if not 0 <= row < len(self.cells):
            return 0
        return len(self.cells[row])

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < len(self.cells) and 0 <= col < len(self.cells[row])

    def entity_at(self, row: int, col: int) -> int | None:
        if not self.contains(row, col):
            return None
        return self.cells[row][col]


@dataclass(frozen=True, slots=True)
class CellSnapshot:
    """Read-only view of one cell handed to presentation and storage."""
    row: int
    col: int
    bubble: Optional[BubbleKind]
    frame: Frame
