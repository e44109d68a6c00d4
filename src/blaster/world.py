from esper import World

from blaster.components.game_session import GameSession
from blaster.components.layout import Layout
from blaster.constants import GAME_HEIGHT, GAME_WIDTH, MAX_SHOOTERS
from blaster.events.bus import EventBus
from blaster.systems.grid_ops import create_grid


def create_world(
    event_bus: EventBus,
    layout: Layout = Layout.ISOMETRIC,
    *,
    shooter_count: int = 1,
    width: float = GAME_WIDTH,
    height: float = GAME_HEIGHT,
) -> World:
    """Build a world holding a fresh session and an empty grid."""
    if not 1 <= shooter_count <= MAX_SHOOTERS:
        raise ValueError(f"shooter_count must be between 1 and {MAX_SHOOTERS}")
    world = World()
    world.create_entity(GameSession(shooter_count=shooter_count, width=width, height=height))
    create_grid(world, layout, width=width, event_bus=event_bus)
    return world
