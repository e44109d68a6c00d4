from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from esper import World

from blaster.components.frame import Frame
from blaster.systems.grid_ops import bubble_at, can_hold_bubble, get_grid
from blaster.systems.physics import (
    BoundCollision,
    BoundSide,
    CellCollision,
    Disappear,
    MobileCollision,
    PhysicsEvent,
    PhysicsReaction,
    Reflect,
    ReflectOffMobile,
)

Position = Tuple[int, int]

_WALL_BOUNCES = {
    BoundSide.BOTTOM: BoundSide.TOP,
    BoundSide.LEFT: BoundSide.RIGHT,
    BoundSide.RIGHT: BoundSide.LEFT,
}


@dataclass(slots=True)
class FlightOutcome:
    """How an in-flight bubble responds to one tick of physics events."""
    reaction: Optional[PhysicsReaction] = None
    snap: bool = False
    cell_collisions: List[CellCollision] = field(default_factory=list)


def interpret_events(world: World, events: Sequence[PhysicsEvent]) -> FlightOutcome:
    """Walls reflect, other bubbles deflect, and the top wall or any occupied
    cell makes the bubble snap into the grid."""
    outcome = FlightOutcome()
    mobile_collisions: List[MobileCollision] = []
    for event in events:
        match event:
            case BoundCollision(side=BoundSide.TOP):
                outcome.snap = True
            case BoundCollision(side=side, at=at):
                outcome.reaction = Reflect(direction=_WALL_BOUNCES[side], at=at)
            case CellCollision():
                outcome.cell_collisions.append(event)
            case MobileCollision():
                mobile_collisions.append(event)
    if mobile_collisions:
        outcome.reaction = ReflectOffMobile(collision=mobile_collisions[0])
    if any(bubble_at(world, hit.row, hit.col) is not None for hit in outcome.cell_collisions):
        outcome.snap = True
    if outcome.snap:
        outcome.reaction = Disappear()
    return outcome


def pick_landing_cell(world: World, bubble_frame: Frame, candidates: Iterable[CellCollision]) -> Optional[Position]:
    """Closest candidate cell that is empty and allowed to hold a bubble."""
    grid = get_grid(world)
    closest: Optional[Position] = None
    min_distance = math.inf
    for candidate in candidates:
        if not grid.contains(candidate.row, candidate.col):
            continue
        distance = bubble_frame.center_distance(candidate.frame)
        if distance >= min_distance:
            continue
        if bubble_at(world, candidate.row, candidate.col) is not None:
            continue
        if not can_hold_bubble(world, candidate.row, candidate.col):
            continue
        min_distance = distance
        closest = (candidate.row, candidate.col)
    return closest
