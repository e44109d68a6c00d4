"""Conversion between grid state and plain JSON-compatible data.

A level document looks like::

    {
      "layout": "isometric",
      "shooter_count": 1,
      "cells": [[{"row": 0, "col": 0, "frame": [x, y, w, h],
                  "bubble_type": "normal", "color": "red"}, ...], ...]
    }

Empty cells simply omit ``bubble_type``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from esper import World

from blaster.components.bubble import BubbleKind, Color, PlainColor, Special, SpecialKind
from blaster.components.frame import Frame
from blaster.components.layout import Layout
from blaster.constants import MAX_SHOOTERS
from blaster.errors import InvalidValueError, MissingValueError
from blaster.events.bus import EVENT_LEVEL_LOADED, EventBus
from blaster.systems.grid_ops import create_grid, get_grid, grid_snapshot, place_bubble, set_cell_frame
from blaster.utils.session import get_session, reset_session

BUBBLE_TYPE_NORMAL = "normal"
BUBBLE_TYPE_SPECIAL = "special"


@dataclass(frozen=True, slots=True)
class CellRecord:
    row: int
    col: int
    bubble: Optional[BubbleKind]
    frame: Frame


@dataclass(slots=True)
class LevelState:
    """Decoded level: everything needed to rebuild a grid and its session settings."""

    layout: Layout
    shooter_count: int = 1
    cells: List[List[CellRecord]] = field(default_factory=list)

    def occupants(self) -> Dict[Tuple[int, int], Optional[BubbleKind]]:
        return {(cell.row, cell.col): cell.bubble for row in self.cells for cell in row}


# Bubbles -----------------------------------------------------------------

def encode_bubble(bubble: Optional[BubbleKind]) -> Dict[str, str]:
    match bubble:
        case None:
            return {}
        case PlainColor(color=color):
            return {"bubble_type": BUBBLE_TYPE_NORMAL, "color": color.value}
        case Special(kind=kind):
            return {"bubble_type": BUBBLE_TYPE_SPECIAL, "kind": kind.value}
    raise InvalidValueError(f"Unsupported bubble {bubble!r}", field="bubble_type")


def decode_bubble(payload: Mapping[str, Any]) -> Optional[BubbleKind]:
    bubble_type = payload.get("bubble_type")
    if bubble_type is None:
        return None
    if bubble_type == BUBBLE_TYPE_NORMAL:
        value = _require(payload, "color")
        try:
            return PlainColor(Color(value))
        except ValueError as exc:
            raise InvalidValueError(f"Invalid color {value!r}", field="color") from exc
    if bubble_type == BUBBLE_TYPE_SPECIAL:
        value = _require(payload, "kind")
        try:
            return Special(SpecialKind(value))
        except ValueError as exc:
            raise InvalidValueError(f"Invalid special kind {value!r}", field="kind") from exc
    raise InvalidValueError(f"Invalid bubble type {bubble_type!r}", field="bubble_type")


# Levels ------------------------------------------------------------------

def encode_level(state: LevelState) -> Dict[str, Any]:
    return {
        "layout": state.layout.value,
        "shooter_count": state.shooter_count,
        "cells": [
            [
                {
                    "row": cell.row,
                    "col": cell.col,
                    "frame": cell.frame.as_list(),
                    **encode_bubble(cell.bubble),
                }
                for cell in row
            ]
            for row in state.cells
        ],
    }


def decode_level(payload: Any) -> LevelState:
    if not isinstance(payload, Mapping):
        raise InvalidValueError("Level document must be an object")
    layout_value = _require(payload, "layout")
    try:
        layout = Layout(layout_value)
    except ValueError as exc:
        raise InvalidValueError(f"Invalid layout {layout_value!r}", field="layout") from exc

    shooter_count = _require_int(payload, "shooter_count")
    if not 1 <= shooter_count <= MAX_SHOOTERS:
        raise InvalidValueError(f"Invalid shooter count {shooter_count}", field="shooter_count")

    rows = _require(payload, "cells")
    if not isinstance(rows, list) or len(rows) != layout.row_count():
        raise InvalidValueError(f"Expected {layout.row_count()} rows of cells", field="cells")

    cells: List[List[CellRecord]] = []
    for row_index, row in enumerate(rows):
        expected = layout.column_count(row_index)
        if not isinstance(row, list) or len(row) != expected:
            raise InvalidValueError(f"Row {row_index} must hold {expected} cells", field="cells")
        cells.append([_decode_cell(item, row_index, col_index) for col_index, item in enumerate(row)])
    return LevelState(layout=layout, shooter_count=shooter_count, cells=cells)


def _decode_cell(payload: Any, row: int, col: int) -> CellRecord:
    if not isinstance(payload, Mapping):
        raise InvalidValueError(f"Cell ({row}, {col}) must be an object", field="cells")
    if _require_int(payload, "row") != row or _require_int(payload, "col") != col:
        raise InvalidValueError(f"Cell at ({row}, {col}) has mismatched indices", field="cells")
    frame = _decode_frame(_require(payload, "frame"))
    return CellRecord(row=row, col=col, bubble=decode_bubble(payload), frame=frame)


def _decode_frame(value: Any) -> Frame:
    if (
        not isinstance(value, list)
        or len(value) != 4
        or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
    ):
        raise InvalidValueError(f"Invalid frame {value!r}", field="frame")
    x, y, width, height = (float(v) for v in value)
    return Frame(x=x, y=y, width=width, height=height)


def _require(payload: Mapping[str, Any], key: str) -> Any:
    if key not in payload or payload[key] is None:
        raise MissingValueError(f"Missing {key} value", field=key)
    return payload[key]


def _require_int(payload: Mapping[str, Any], key: str) -> int:
    value = _require(payload, key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidValueError(f"{key} must be an integer", field=key)
    return value


# World boundary ------------------------------------------------------------

def level_state_from_world(world: World) -> LevelState:
    grid = get_grid(world)
    cells = [
        [CellRecord(row=cell.row, col=cell.col, bubble=cell.bubble, frame=cell.frame) for cell in row]
        for row in grid_snapshot(world)
    ]
    return LevelState(layout=grid.layout, shooter_count=get_session(world).shooter_count, cells=cells)


def apply_level(
    world: World,
    state: LevelState,
    *,
    name: str | None = None,
    event_bus: EventBus | None = None,
) -> None:
    """Replace the world's grid with the decoded level and start the session over.

    Queued and in-flight bubbles are discarded along with the previous layout.
    """
    session = get_session(world)
    reset_session(world, event_bus, shooter_count=state.shooter_count)
    create_grid(world, state.layout, width=session.width, event_bus=event_bus)
    for row in state.cells:
        for cell in row:
            set_cell_frame(world, cell.row, cell.col, cell.frame)
            if cell.bubble is not None:
                place_bubble(world, cell.row, cell.col, cell.bubble, event_bus=event_bus)
    if event_bus is not None:
        event_bus.emit(
            EVENT_LEVEL_LOADED,
            level=name,
            layout=state.layout,
            shooter_count=state.shooter_count,
        )
