from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from esper import World

from blaster.components.bubble import BubbleKind, Color, PlainColor, Special, SpecialKind
from blaster.components.layout import Layout
from blaster.events.bus import EventBus
from blaster.systems.engine import BubbleEngine
from blaster.systems.grid_ops import get_grid, place_bubble
from blaster.world import create_world

RED = PlainColor(Color.RED)
BLUE = PlainColor(Color.BLUE)
GREEN = PlainColor(Color.GREEN)
ORANGE = PlainColor(Color.ORANGE)
BOMB = Special(SpecialKind.BOMB)
STAR = Special(SpecialKind.STAR)
LIGHTNING = Special(SpecialKind.LIGHTNING)
INDESTRUCTIBLE = Special(SpecialKind.INDESTRUCTIBLE)


class FakePhysics:
    """Records what the engine asks of the motion engine.

    ``extra_mobile`` pads the reported mobile count, standing in for bubbles the
    collaborator owns that these tests never fired.
    """

    def __init__(self, extra_mobile: int = 0):
        self.mobile: List[int] = []
        self.steps: List[float] = []
        self.extra_mobile = extra_mobile

    def add(self, entity: int) -> None:
        self.mobile.append(entity)

    def remove(self, entity: int) -> None:
        if entity in self.mobile:
            self.mobile.remove(entity)

    def update_positions(self, elapsed_ms: float) -> None:
        self.steps.append(elapsed_ms)

    def mobile_count(self) -> int:
        return len(self.mobile) + self.extra_mobile


def build_engine(
    layout: Layout = Layout.RECTANGULAR,
    *,
    shooter_count: int = 1,
    extra_mobile: int = 0,
) -> Tuple[EventBus, World, BubbleEngine, FakePhysics]:
    bus = EventBus()
    world = create_world(bus, layout, shooter_count=shooter_count)
    physics = FakePhysics(extra_mobile=extra_mobile)
    engine = BubbleEngine(world, bus, physics)
    return bus, world, engine, physics


def place_all(world: World, placements: Dict[Tuple[int, int], BubbleKind]) -> None:
    for (row, col), bubble in placements.items():
        place_bubble(world, row, col, bubble)


def fill_row(world: World, row: int, bubbles: Iterable[BubbleKind]) -> None:
    """Fill a row cycling through ``bubbles``."""
    cycle = list(bubbles)
    for col in range(get_grid(world).column_count(row)):
        place_bubble(world, row, col, cycle[col % len(cycle)])


def capture(bus: EventBus, name: str) -> List[dict]:
    events: List[dict] = []
    bus.subscribe(name, lambda s, **k: events.append(k))
    return events
