import math

import pytest

from blaster.components.game_session import SessionStatus
from blaster.components.mobile_bubble import MobileBubble
from blaster.constants import BUBBLE_SPEED, BUBBLES_TO_DISPLAY
from blaster.events.bus import (
    EVENT_BUBBLE_FIRED,
    EVENT_SESSION_STATUS_CHANGED,
    EVENT_SHOTS_CHANGED,
    EVENT_TICK,
    EVENT_UPCOMING_ADDED,
    EventBus,
)
from blaster.utils.session import get_session
from blaster.world import create_world

from tests.helpers import BLUE, GREEN, ORANGE, RED, build_engine, capture


def _frame(world, entity):
    return world.component_for_entity(entity, MobileBubble).frame


def test_ticks_fill_ready_slot_then_queue():
    bus, world, engine, physics = build_engine()
    added = capture(bus, EVENT_UPCOMING_ADDED)

    for _ in range(10):
        engine.update(1 / 60)

    session = get_session(world)
    assert session.bubbles_synthesized == BUBBLES_TO_DISPLAY + 1
    assert len(session.upcoming) == BUBBLES_TO_DISPLAY
    assert session.ready[0] is not None
    assert [event["bubble"] for event in added] == [RED, BLUE, GREEN, ORANGE, RED, BLUE]
    assert len(physics.steps) == 10
    assert physics.steps[0] == pytest.approx(1000 / 60)
    assert session.elapsed_ms == pytest.approx(10 * 1000 / 60)


def test_tick_event_drives_update():
    bus, world, _, physics = build_engine()
    bus.emit(EVENT_TICK, dt=0.5)
    assert physics.steps == [500.0]
    assert get_session(world).elapsed_ms == 500.0


def test_ready_bubble_sits_above_the_queue():
    _, world, engine, _ = build_engine()
    engine.update(0.0)
    frame = _frame(world, get_session(world).ready[0])
    assert frame.x == 469
    assert frame.y == 1010


def test_two_shooters_are_offset_by_a_quarter_width():
    _, world, engine, _ = build_engine(shooter_count=2)
    engine.update(0.0)
    engine.update(0.0)
    left, right = get_session(world).ready
    assert _frame(world, left).x == 213
    assert _frame(world, right).x == 725


def test_fire_launches_and_promotes_next():
    bus, world, engine, physics = build_engine()
    shots = capture(bus, EVENT_SHOTS_CHANGED)
    fired = capture(bus, EVENT_BUBBLE_FIRED)
    statuses = capture(bus, EVENT_SESSION_STATUS_CHANGED)
    for _ in range(3):
        engine.update(0.0)
    session = get_session(world)
    ready = session.ready[0]
    head, tail = session.upcoming
    assert _frame(world, tail).x == 597

    entity = engine.fire(0, (3.0, -4.0))

    assert entity == ready
    mobile = world.component_for_entity(entity, MobileBubble)
    assert mobile.velocity == pytest.approx((600.0, -800.0))
    assert math.hypot(*mobile.velocity) == pytest.approx(BUBBLE_SPEED)
    assert session.shots_fired == 1
    assert shots == [{"shots_fired": 1}]
    assert fired[0]["shooter"] == 0
    assert session.ready[0] == head
    assert session.upcoming == [tail]
    assert _frame(world, tail).x == 469
    assert physics.mobile == [entity]
    assert session.in_flight == [entity]
    assert engine.status is SessionStatus.IN_FLIGHT
    assert statuses == [{"previous": SessionStatus.IDLE, "status": SessionStatus.IN_FLIGHT}]


def test_fire_without_a_ready_bubble_or_direction_does_nothing():
    _, world, engine, physics = build_engine()
    assert engine.fire(0, (0.0, -1.0)) is None
    engine.update(0.0)
    assert engine.fire(0, (0.0, 0.0)) is None
    assert get_session(world).shots_fired == 0
    assert physics.mobile == []
    assert engine.status is SessionStatus.IDLE


def test_fire_from_unknown_shooter_raises():
    _, _, engine, _ = build_engine()
    engine.update(0.0)
    with pytest.raises(ValueError):
        engine.fire(1, (0.0, -1.0))


def test_shooter_count_is_bounded():
    with pytest.raises(ValueError):
        create_world(EventBus(), shooter_count=3)
    with pytest.raises(ValueError):
        create_world(EventBus(), shooter_count=0)
