"""Orchestrates attachment, per-tick updates and the session state machine.

Every grid mutation during play goes through this class. ``attach`` always
runs the same sequence to completion: place, combo, adjacent triggers,
disconnection pruning, end-of-game check.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from esper import World

from blaster.components.bubble import BubbleKind
from blaster.components.game_session import SessionStatus
from blaster.components.grid import CellSnapshot
from blaster.components.mobile_bubble import MobileBubble
from blaster.constants import BUBBLES_TO_DISPLAY, GAME_OVER_MOBILE_THRESHOLD, REFRESH_RATE
from blaster.errors import SessionOverError
from blaster.events.bus import (
    EVENT_BUBBLE_ATTACHED,
    EVENT_BUBBLE_MISSED,
    EVENT_GAME_OVER,
    EVENT_TICK,
    EventBus,
)
from blaster.storage.codec import LevelState, apply_level
from blaster.systems.connectivity import prune_disconnected, resolve_combo
from blaster.systems.grid_ops import can_hold_bubble, grid_snapshot, is_grid_empty, place_bubble
from blaster.systems.landing import interpret_events, pick_landing_cell
from blaster.systems.physics import CellCollision, PhysicsCollaborator, PhysicsEvent, PhysicsReaction
from blaster.systems.shooter import ShooterQueue
from blaster.systems.trigger_cascade import TriggerCascadeDispatcher
from blaster.utils.session import get_session, set_session_status

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


class BubbleEngine:
    def __init__(self, world: World, event_bus: EventBus, physics: PhysicsCollaborator):
        self.world = world
        self.event_bus = event_bus
        self.physics = physics
        self.dispatcher = TriggerCascadeDispatcher(world, event_bus)
        self.shooter = ShooterQueue(world, event_bus)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    # Queries ------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return get_session(self.world).status

    def can_hold_bubble(self, row: int, col: int) -> bool:
        return can_hold_bubble(self.world, row, col)

    def snapshot(self) -> List[List[CellSnapshot]]:
        return grid_snapshot(self.world)

    def pick_landing_cell(self, entity: int, candidates: Sequence[CellCollision]) -> Optional[Position]:
        mobile = self.world.component_for_entity(entity, MobileBubble)
        return pick_landing_cell(self.world, mobile.frame, candidates)

    # Operations ---------------------------------------------------------

    def attach(self, bubble: BubbleKind, row: int, col: int, *, entity: int | None = None) -> None:
        """Attach a landed bubble at (row, col) and resolve the grid to a stable state."""
        self._require_active()
        place_bubble(self.world, row, col, bubble, event_bus=self.event_bus)
        self.event_bus.emit(EVENT_BUBBLE_ATTACHED, entity=entity, row=row, col=col, bubble=bubble)
        resolve_combo(self.world, row, col, event_bus=self.event_bus)
        self.dispatcher.trigger_adjacent(row, col, bubble)
        prune_disconnected(self.world, event_bus=self.event_bus)
        self._check_game_over()

    def fire(self, shooter: int, direction: Tuple[float, float]) -> Optional[int]:
        """Launch the shooter's ready bubble and hand it to physics."""
        self._require_active()
        entity = self.shooter.fire(shooter, direction)
        if entity is None:
            return None
        session = get_session(self.world)
        session.in_flight.append(entity)
        self.physics.add(entity)
        set_session_status(self.world, self.event_bus, SessionStatus.IN_FLIGHT)
        return entity

    def load_level(self, state: LevelState, *, name: str | None = None) -> None:
        """Replace the grid with a decoded level, allowed even after game over."""
        for entity in get_session(self.world).in_flight:
            self.physics.remove(entity)
        apply_level(self.world, state, name=name, event_bus=self.event_bus)

    def handle_physics_events(self, entity: int, events: Sequence[PhysicsEvent]) -> Optional[PhysicsReaction]:
        """React to one tick of collision events reported for an in-flight bubble."""
        self._require_active()
        outcome = interpret_events(self.world, events)
        if not outcome.snap:
            return outcome.reaction

        mobile = self.world.component_for_entity(entity, MobileBubble)
        landing = pick_landing_cell(self.world, mobile.frame, outcome.cell_collisions)
        if landing is not None:
            self.attach(mobile.bubble, *landing, entity=entity)
        else:
            logger.debug("Bubble %s missed every landing cell", entity)
            self.event_bus.emit(EVENT_BUBBLE_MISSED, entity=entity, bubble=mobile.bubble)
        self._retire(entity)
        return outcome.reaction

    def update(self, dt: float) -> None:
        """Advance one tick of ``dt`` seconds."""
        self._require_active()
        session = get_session(self.world)
        step_ms = dt * 1000.0
        session.elapsed_ms += step_ms
        self.physics.update_positions(step_ms)
        if len(session.upcoming) < BUBBLES_TO_DISPLAY:
            self.shooter.add_upcoming()

    def on_tick(self, sender, **kwargs):
        self.update(kwargs.get("dt", 1 / REFRESH_RATE))

    # Internals ----------------------------------------------------------

    def _require_active(self) -> None:
        if get_session(self.world).is_over:
            raise SessionOverError("Session is over")

    def _retire(self, entity: int) -> None:
        session = get_session(self.world)
        if entity in session.in_flight:
            session.in_flight.remove(entity)
        self.physics.remove(entity)
        self.world.delete_entity(entity, immediate=True)
        if not session.is_over and not session.in_flight:
            set_session_status(self.world, self.event_bus, SessionStatus.IDLE)

    def _check_game_over(self) -> None:
        if not is_grid_empty(self.world):
            return
        if self.physics.mobile_count() >= GAME_OVER_MOBILE_THRESHOLD:
            return
        session = get_session(self.world)
        set_session_status(self.world, self.event_bus, SessionStatus.GAME_OVER)
        logger.debug("Game over after %d shots", session.shots_fired)
        self.event_bus.emit(EVENT_GAME_OVER, shots_fired=session.shots_fired)
