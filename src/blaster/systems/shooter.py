from __future__ import annotations

import math
from typing import Optional, Tuple

from esper import World

from blaster.components.bubble import plain_bubbles
from blaster.components.frame import Frame
from blaster.components.mobile_bubble import MobileBubble
from blaster.constants import BUBBLE_SPEED
from blaster.events.bus import (
    EVENT_BUBBLE_FIRED,
    EVENT_BUBBLE_READY,
    EVENT_SHOTS_CHANGED,
    EVENT_UPCOMING_ADDED,
    EventBus,
)
from blaster.systems.grid_ops import get_grid
from blaster.utils.session import get_session

# Bubbles handed to the player, in the order they are dealt.
SHOOTING_BUBBLES = plain_bubbles()


class ShooterQueue:
    """Deals upcoming bubbles and moves them into the shooters' ready slots.

    Upcoming bubbles line up along the bottom edge; a free ready slot takes the
    head of the queue and the rest shift one place left.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    def add_upcoming(self) -> int:
        session = get_session(self.world)
        bubble = SHOOTING_BUBBLES[session.bubbles_synthesized % len(SHOOTING_BUBBLES)]
        size = self._bubble_size()
        x = round(session.width / 2 - size / 2 + len(session.upcoming) * size * 1.5)
        y = round(session.height - size - 20)
        frame = Frame(x=x, y=y, width=size, height=size)
        entity = self.world.create_entity(MobileBubble(bubble=bubble, frame=frame))
        session.upcoming.append(entity)
        session.bubbles_synthesized += 1
        self.event_bus.emit(EVENT_UPCOMING_ADDED, entity=entity, bubble=bubble, frame=frame)
        self.promote()
        return entity

    def promote(self) -> Optional[int]:
        """Move the head of the queue into the first free ready slot, if any."""
        session = get_session(self.world)
        try:
            index = session.ready.index(None)
        except ValueError:
            return None
        if index >= session.shooter_count or not session.upcoming:
            return None

        entity = session.upcoming.pop(0)
        mobile = self._mobile(entity)
        x = session.width / 2 - mobile.frame.width / 2
        if session.shooter_count == 2:
            x += (-session.width if index == 0 else session.width) / 4
        x = round(x)
        y = round(session.height * 3 / 4)
        mobile.displace(x - round(mobile.frame.x), y - round(mobile.frame.y))
        for waiting in session.upcoming:
            queued = self._mobile(waiting)
            queued.displace(-round(queued.frame.width * 1.5), 0)

        session.ready[index] = entity
        self.event_bus.emit(EVENT_BUBBLE_READY, entity=entity, shooter=index, frame=mobile.frame)
        return entity

    def fire(self, shooter: int, direction: Tuple[float, float]) -> Optional[int]:
        """Launch the bubble waiting in the shooter's slot at the fixed speed.

        Returns the launched entity, or None when the slot is empty or the
        direction has no length.
        """
        session = get_session(self.world)
        if not 0 <= shooter < session.shooter_count:
            raise ValueError(f"Shooter {shooter} does not exist")
        entity = session.ready[shooter]
        if entity is None:
            return None
        dx, dy = direction
        magnitude = math.hypot(dx, dy)
        if magnitude == 0:
            return None

        mobile = self._mobile(entity)
        mobile.velocity = (dx / magnitude * BUBBLE_SPEED, dy / magnitude * BUBBLE_SPEED)
        session.ready[shooter] = None
        session.shots_fired += 1
        self.event_bus.emit(EVENT_SHOTS_CHANGED, shots_fired=session.shots_fired)
        self.event_bus.emit(EVENT_BUBBLE_FIRED, entity=entity, shooter=shooter, velocity=mobile.velocity)
        self.promote()
        return entity

    def _mobile(self, entity: int) -> MobileBubble:
        return self.world.component_for_entity(entity, MobileBubble)

    def _bubble_size(self) -> float:
        session = get_session(self.world)
        return get_grid(self.world).layout.frame_for(0, 0, session.width).width
