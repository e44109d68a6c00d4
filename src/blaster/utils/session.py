from __future__ import annotations

from esper import World

from blaster.components.game_session import GameSession, SessionStatus
from blaster.constants import MAX_SHOOTERS
from blaster.events.bus import EVENT_SESSION_STATUS_CHANGED, EVENT_SHOTS_CHANGED, EventBus


def get_session(world: World) -> GameSession:
    for _, session in world.get_component(GameSession):
        return session
    raise RuntimeError("GameSession not found")


def set_session_status(world: World, event_bus: EventBus, status: SessionStatus) -> None:
    """Update the session status and emit a change event when it differs."""
    session = get_session(world)
    previous = session.status
    if previous is status:
        return
    session.status = status
    event_bus.emit(EVENT_SESSION_STATUS_CHANGED, previous=previous, status=status)


def reset_session(world: World, event_bus: EventBus | None, *, shooter_count: int) -> None:
    """Start the session over: delete every mobile bubble, zero the counters, go IDLE.

    In-flight bubbles must already have been released by the physics collaborator.
    """
    session = get_session(world)
    for entity in (*session.ready, *session.upcoming, *session.in_flight):
        if entity is not None and world.entity_exists(entity):
            world.delete_entity(entity, immediate=True)
    session.shooter_count = shooter_count
    session.shots_fired = 0
    session.bubbles_synthesized = 0
    session.elapsed_ms = 0.0
    session.ready = [None] * MAX_SHOOTERS
    session.upcoming = []
    session.in_flight = []
    if event_bus is None:
        session.status = SessionStatus.IDLE
        return
    set_session_status(world, event_bus, SessionStatus.IDLE)
    event_bus.emit(EVENT_SHOTS_CHANGED, shots_fired=0)
