from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from esper import World

from blaster.components.bubble import BubbleKind
from blaster.components.frame import Frame
from blaster.components.grid import CellFrame, CellSnapshot, Grid, GridPosition, Occupant
from blaster.components.layout import Layout
from blaster.components.removal import RemovalReason
from blaster.constants import GAME_WIDTH
from blaster.errors import OutOfBoundsError
from blaster.events.bus import EVENT_CELL_CLEARED, EVENT_CELL_PLACED, EVENT_GRID_RESET, EventBus

Position = Tuple[int, int]


def get_grid(world: World) -> Grid:
    for _, grid in world.get_component(Grid):
        return grid
    raise RuntimeError("Grid not found")


def create_grid(
    world: World,
    layout: Layout,
    *,
    width: float = GAME_WIDTH,
    event_bus: EventBus | None = None,
) -> Grid:
    """Create (or recreate) the grid with every cell empty."""
    for entity, _ in list(world.get_component(Grid)):
        _delete_cells(world, world.component_for_entity(entity, Grid))
        world.delete_entity(entity, immediate=True)
    grid = Grid(layout=layout)
    for row in range(layout.row_count()):
        row_entities: List[int] = []
        for col in range(layout.column_count(row)):
            entity = world.create_entity(
                GridPosition(row=row, col=col),
                Occupant(),
                CellFrame(frame=layout.frame_for(row, col, width)),
            )
            row_entities.append(entity)
        grid.cells.append(row_entities)
    world.create_entity(grid)
    if event_bus is not None:
        event_bus.emit(EVENT_GRID_RESET, layout=layout, rows=grid.row_count())
    return grid


def _delete_cells(world: World, grid: Grid) -> None:
    for row_entities in grid.cells:
        for entity in row_entities:
            world.delete_entity(entity, immediate=True)


def get_cell(world: World, row: int, col: int) -> Optional[CellSnapshot]:
    """Bounds-checked read; missing cells return None rather than raising."""
    entity = get_grid(world).entity_at(row, col)
    if entity is None:
        return None
    return _snapshot(world, entity, row, col)


def bubble_at(world: World, row: int, col: int) -> Optional[BubbleKind]:
    entity = get_grid(world).entity_at(row, col)
    if entity is None:
        return None
    return world.component_for_entity(entity, Occupant).bubble


def place_bubble(
    world: World,
    row: int,
    col: int,
    bubble: BubbleKind,
    *,
    event_bus: EventBus | None = None,
) -> None:
    """Put ``bubble`` in the cell, replacing whatever was there."""
    entity = get_grid(world).entity_at(row, col)
    if entity is None:
        raise OutOfBoundsError(row, col)
    world.component_for_entity(entity, Occupant).bubble = bubble
    if event_bus is not None:
        event_bus.emit(EVENT_CELL_PLACED, row=row, col=col, bubble=bubble)


def remove_bubble(
    world: World,
    row: int,
    col: int,
    reason: RemovalReason | None = None,
    *,
    event_bus: EventBus | None = None,
) -> Optional[BubbleKind]:
    """Empty the cell and return what it held. Empty or missing cells are a no-op."""
    entity = get_grid(world).entity_at(row, col)
    if entity is None:
        return None
    occupant: Occupant = world.component_for_entity(entity, Occupant)
    removed = occupant.bubble
    if removed is None:
        return None
    occupant.bubble = None
    if event_bus is not None:
        event_bus.emit(EVENT_CELL_CLEARED, row=row, col=col, bubble=removed, reason=reason)
    return removed


def neighbors(world: World, row: int, col: int) -> List[Position]:
    grid = get_grid(world)
    return [
        (r, c)
        for r, c in grid.layout.adjacent_positions(row, col)
        if grid.contains(r, c)
    ]


def can_hold_bubble(world: World, row: int, col: int) -> bool:
    """Row 0 always can; any other cell needs at least one occupied neighbour."""
    if row == 0:
        return True
    return any(bubble_at(world, r, c) is not None for r, c in neighbors(world, row, col))


def bubble_map(world: World) -> Dict[Position, BubbleKind]:
    """Mapping of occupied positions to their bubbles."""
    grid = get_grid(world)
    mapping: Dict[Position, BubbleKind] = {}
    for row, row_entities in enumerate(grid.cells):
        for col, entity in enumerate(row_entities):
            bubble = world.component_for_entity(entity, Occupant).bubble
            if bubble is not None:
                mapping[(row, col)] = bubble
    return mapping


def occupied_positions(world: World) -> List[Position]:
    return sorted(bubble_map(world).keys())


def is_grid_empty(world: World) -> bool:
    return not bubble_map(world)


def clear_grid(world: World, *, event_bus: EventBus | None = None) -> None:
    for row, col in occupied_positions(world):
        remove_bubble(world, row, col, None, event_bus=event_bus)


def set_cell_frame(world: World, row: int, col: int, frame: Frame) -> None:
    entity = get_grid(world).entity_at(row, col)
    if entity is None:
        raise OutOfBoundsError(row, col)
    world.component_for_entity(entity, CellFrame).frame = frame


def grid_snapshot(world: World) -> List[List[CellSnapshot]]:
    """Rows of read-only cell views, valid until the next engine mutation."""
    grid = get_grid(world)
    return [
        [_snapshot(world, entity, row, col) for col, entity in enumerate(row_entities)]
        for row, row_entities in enumerate(grid.cells)
    ]


def _snapshot(world: World, entity: int, row: int, col: int) -> CellSnapshot:
    return CellSnapshot(
        row=row,
        col=col,
        bubble=world.component_for_entity(entity, Occupant).bubble,
        frame=world.component_for_entity(entity, CellFrame).frame,
    )
