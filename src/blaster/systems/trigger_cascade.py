from __future__ import annotations

import logging
from typing import FrozenSet, List, Optional, Set, Tuple

from esper import World

from blaster.components.bubble import BubbleKind, TriggerEvent, can_combo_with, trigger_on_snap
from blaster.components.removal import RemovalReason
from blaster.events.bus import EVENT_CASCADE_TRIGGERED, EventBus
from blaster.systems.grid_ops import bubble_at, get_grid, neighbors, remove_bubble

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


class TriggerCascadeDispatcher:
    """Resolves special-bubble effects fired by a bubble snapping into the grid.

    Ignore sets accumulate down the recursion: once a row removal is under way
    no cell reached from it can start another row removal. Each source cell is
    dispatched at most once per cascade.
    """

    def __init__(self, world: World, event_bus: EventBus | None = None):
        self.world = world
        self.event_bus = event_bus
        self._dispatched: Set[Position] = set()
        self._removed: List[Position] = []
        self._depth = 0

    def trigger_adjacent(self, row: int, col: int, bubble: BubbleKind) -> List[Position]:
        """Fire the triggers of every special next to (row, col); return cleared cells."""
        self._dispatched = set()
        self._removed = []
        self._depth = 0
        for position in neighbors(self.world, row, col):
            event = trigger_on_snap(bubble_at(self.world, *position))
            if event is None:
                continue
            self._handle(event, position, bubble, frozenset())
        return list(self._removed)

    def _handle(
        self,
        event: TriggerEvent,
        source: Position,
        triggering: Optional[BubbleKind],
        ignore: FrozenSet[TriggerEvent],
    ) -> None:
        if source in self._dispatched:
            return
        self._dispatched.add(source)
        self._depth += 1
        logger.debug("Dispatching %s from %s (depth %d)", event.value, source, self._depth)
        if self.event_bus is not None:
            self.event_bus.emit(EVENT_CASCADE_TRIGGERED, event=event, source=source, depth=self._depth)
        try:
            match event:
                case TriggerEvent.EXPLODE_ADJACENT:
                    self._explode_adjacent(source, ignore)
                case TriggerEvent.REMOVE_ALL_MATCHING:
                    self._remove_all_matching(source, triggering)
                case TriggerEvent.REMOVE_ROW:
                    self._remove_row(source, ignore | {TriggerEvent.REMOVE_ROW})
        finally:
            self._depth -= 1

    def _explode_adjacent(self, source: Position, ignore: FrozenSet[TriggerEvent]) -> None:
        reason = RemovalReason.explode()
        self._remove(source, reason)
        for position in neighbors(self.world, *source):
            self._remove_with_triggers(position, reason, ignore)

    def _remove_all_matching(self, source: Position, triggering: Optional[BubbleKind]) -> None:
        reason = RemovalReason.color_purge()
        if triggering is not None:
            grid = get_grid(self.world)
            for row in range(grid.row_count()):
                for col in range(grid.column_count(row)):
                    if can_combo_with(triggering, bubble_at(self.world, row, col)):
                        self._remove((row, col), reason)
        self._remove(source, reason)

    def _remove_row(self, source: Position, ignore: FrozenSet[TriggerEvent]) -> None:
        row = source[0]
        grid = get_grid(self.world)
        for col in range(grid.column_count(row)):
            if (row, col) == source:
                continue
            self._remove_with_triggers((row, col), RemovalReason.remove_row(is_source=False), ignore)
        self._remove(source, RemovalReason.remove_row(is_source=True))

    def _remove_with_triggers(
        self,
        position: Position,
        reason: RemovalReason,
        ignore: FrozenSet[TriggerEvent],
    ) -> None:
        event = trigger_on_snap(bubble_at(self.world, *position))
        if event is not None and event not in ignore:
            self._handle(event, position, None, ignore)
        self._remove(position, reason)

    def _remove(self, position: Position, reason: RemovalReason) -> None:
        removed = remove_bubble(self.world, position[0], position[1], reason, event_bus=self.event_bus)
        if removed is not None:
            self._removed.append(position)
