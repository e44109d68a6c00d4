from __future__ import annotations

import math
from enum import Enum
from typing import List, Tuple

from blaster.components.frame import Frame
from blaster.constants import GRID_COLS, GRID_ROWS

Position = Tuple[int, int]


class Layout(Enum):
    """Grid layout policy: row widths, adjacency and cell geometry.

    Isometric grids shift every odd row right by half a cell and drop its last
    column, so each cell touches two cells in the rows above and below.
    """
    ISOMETRIC = "isometric"
    RECTANGULAR = "rectangular"

    def row_count(self) -> int:
        return GRID_ROWS

    def column_count(self, row: int) -> int:
        if self is Layout.ISOMETRIC and row % 2 == 1:
            return GRID_COLS - 1
        return GRID_COLS

    def adjacent_positions(self, row: int, col: int) -> List[Position]:
        """All potential neighbours of (row, col), in or out of bounds."""
        positions = [
            (row, col + 1),
            (row, col - 1),
            (row + 1, col),
            (row - 1, col),
        ]
        if self is Layout.ISOMETRIC:
            diagonal = col - 1 if row % 2 == 0 else col + 1
            positions.append((row + 1, diagonal))
            positions.append((row - 1, diagonal))
        return positions

    def frame_for(self, row: int, col: int, width: float) -> Frame:
        """Frame of the cell at (row, col) in a game area of the given width."""
        radius = (width / GRID_COLS) / 2
        center_x = radius + col * radius * 2
        if self is Layout.ISOMETRIC:
            if row % 2 == 1:
                center_x += 2 * radius * math.cos(math.pi / 3)
            center_y = radius + row * 2 * radius * math.sin(math.pi / 3)
        else:
            center_y = radius + row * radius * 2
        return Frame(x=center_x - radius, y=center_y - radius, width=radius * 2, height=radius * 2)
