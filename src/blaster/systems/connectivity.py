"""Connectivity pruning and same-colour combo resolution.

Both traversals use an explicit work list so stack depth stays constant no
matter how large the grid is.
"""
from __future__ import annotations

import logging
from typing import List, Set, Tuple

from esper import World

from blaster.components.bubble import can_combo_with
from blaster.components.removal import RemovalReason
from blaster.constants import COMBO_THRESHOLD
from blaster.events.bus import EVENT_BUBBLES_PRUNED, EVENT_COMBO_RESOLVED, EventBus
from blaster.systems.grid_ops import bubble_at, bubble_map, get_grid, neighbors, remove_bubble

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


def find_disconnected(world: World) -> List[Position]:
    """Occupied cells that cannot reach row 0 through occupied neighbours."""
    grid = get_grid(world)
    if grid.row_count() == 0:
        return []
    occupied = bubble_map(world)
    visited = [[False] * grid.column_count(row) for row in range(grid.row_count())]

    for start_col in range(grid.column_count(0)):
        if visited[0][start_col]:
            continue
        to_visit: List[Position] = [(0, start_col)]
        while to_visit:
            row, col = to_visit.pop()
            if not grid.contains(row, col) or visited[row][col] or (row, col) not in occupied:
                continue
            visited[row][col] = True
            to_visit.extend(neighbors(world, row, col))

    return [(row, col) for row, col in sorted(occupied) if not visited[row][col]]


def prune_disconnected(world: World, *, event_bus: EventBus | None = None) -> List[Position]:
    """Remove every bubble no longer attached to the top row.

    The full set is computed before the first removal, so listeners never see a
    grid that is half-way through a pass.
    """
    disconnected = find_disconnected(world)
    if not disconnected:
        return []
    reason = RemovalReason.disconnected_from_top()
    for row, col in disconnected:
        remove_bubble(world, row, col, reason, event_bus=event_bus)
    logger.debug("Pruned %d disconnected bubbles", len(disconnected))
    if event_bus is not None:
        event_bus.emit(EVENT_BUBBLES_PRUNED, positions=disconnected)
    return disconnected


def find_combo(world: World, row: int, col: int) -> List[Position]:
    """Connected component of cells that combo with the bubble at (row, col).

    Every candidate is compared with the anchor bubble, not with the cell it was
    reached from.
    """
    anchor = bubble_at(world, row, col)
    if anchor is None:
        return []
    component: Set[Position] = {(row, col)}
    to_visit: List[Position] = [(row, col)]
    while to_visit:
        current_row, current_col = to_visit.pop()
        for position in neighbors(world, current_row, current_col):
            if position in component:
                continue
            if can_combo_with(bubble_at(world, *position), anchor):
                component.add(position)
                to_visit.append(position)
    return sorted(component)


def resolve_combo(world: World, row: int, col: int, *, event_bus: EventBus | None = None) -> List[Position]:
    """Remove the combo anchored at (row, col) if it is large enough."""
    combo = find_combo(world, row, col)
    if len(combo) < COMBO_THRESHOLD:
        return []
    reason = RemovalReason.combo(len(combo))
    for position in combo:
        remove_bubble(world, position[0], position[1], reason, event_bus=event_bus)
    logger.debug("Combo of %d anchored at %s", len(combo), (row, col))
    if event_bus is not None:
        event_bus.emit(EVENT_COMBO_RESOLVED, anchor=(row, col), positions=combo, size=len(combo))
    return combo
