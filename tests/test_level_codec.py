import json

import pytest

from blaster.components.game_session import SessionStatus
from blaster.components.layout import Layout
from blaster.errors import DecodeError, InvalidValueError, MissingValueError
from blaster.events.bus import EVENT_LEVEL_LOADED, EVENT_SESSION_STATUS_CHANGED, EventBus
from blaster.storage.codec import (
    apply_level,
    decode_bubble,
    decode_level,
    encode_bubble,
    encode_level,
    level_state_from_world,
)
from blaster.systems.grid_ops import bubble_at, grid_snapshot
from blaster.utils.session import get_session
from blaster.world import create_world

from tests.helpers import BLUE, BOMB, INDESTRUCTIBLE, LIGHTNING, RED, STAR, build_engine, capture, place_all


def _contents(world):
    return [[(cell.row, cell.col, cell.bubble, cell.frame) for cell in row] for row in grid_snapshot(world)]


@pytest.mark.parametrize("layout", list(Layout))
def test_level_survives_json(layout):
    bus = EventBus()
    world = create_world(bus, layout, shooter_count=2)
    place_all(world, {(0, 0): RED, (0, 5): BOMB, (1, 3): STAR, (2, 2): LIGHTNING, (3, 1): INDESTRUCTIBLE, (8, 0): BLUE})

    payload = json.loads(json.dumps(encode_level(level_state_from_world(world))))
    state = decode_level(payload)

    target_bus = EventBus()
    loaded = capture(target_bus, EVENT_LEVEL_LOADED)
    target = create_world(target_bus, Layout.RECTANGULAR if layout is Layout.ISOMETRIC else Layout.ISOMETRIC)
    apply_level(target, state, name="roundtrip", event_bus=target_bus)

    assert _contents(target) == _contents(world)
    assert get_session(target).shooter_count == 2
    assert loaded == [{"level": "roundtrip", "layout": layout, "shooter_count": 2}]


def test_empty_cells_have_no_bubble_fields():
    world = create_world(EventBus(), Layout.ISOMETRIC)
    place_all(world, {(0, 1): RED})
    cells = encode_level(level_state_from_world(world))["cells"]
    assert "bubble_type" not in cells[0][0]
    assert cells[0][1]["bubble_type"] == "normal"
    assert cells[0][1]["color"] == "red"
    assert len(cells[1]) == 11


def test_bubble_fields():
    assert encode_bubble(BOMB) == {"bubble_type": "special", "kind": "bomb"}
    assert decode_bubble({"bubble_type": "special", "kind": "star"}) == STAR
    assert decode_bubble({}) is None


def test_missing_and_invalid_values_are_distinguished():
    with pytest.raises(MissingValueError) as missing:
        decode_bubble({"bubble_type": "normal"})
    assert missing.value.field == "color"

    with pytest.raises(InvalidValueError) as invalid:
        decode_bubble({"bubble_type": "normal", "color": "purple"})
    assert invalid.value.field == "color"

    with pytest.raises(InvalidValueError):
        decode_bubble({"bubble_type": "glowing"})
    with pytest.raises(MissingValueError):
        decode_bubble({"bubble_type": "special"})
    assert issubclass(MissingValueError, DecodeError)
    assert issubclass(InvalidValueError, ValueError)


def _document():
    world = create_world(EventBus(), Layout.ISOMETRIC)
    place_all(world, {(0, 0): RED})
    return json.loads(json.dumps(encode_level(level_state_from_world(world))))


def test_level_document_validation():
    document = _document()
    del document["layout"]
    with pytest.raises(MissingValueError):
        decode_level(document)

    document = _document()
    document["layout"] = "hexagonal"
    with pytest.raises(InvalidValueError):
        decode_level(document)

    document = _document()
    document["shooter_count"] = 3
    with pytest.raises(InvalidValueError):
        decode_level(document)

    document = _document()
    document["shooter_count"] = True
    with pytest.raises(InvalidValueError):
        decode_level(document)

    document = _document()
    document["cells"].pop()
    with pytest.raises(InvalidValueError):
        decode_level(document)

    document = _document()
    document["cells"][1].append(dict(document["cells"][1][0]))
    with pytest.raises(InvalidValueError):
        decode_level(document)

    document = _document()
    document["cells"][0][0]["frame"] = [0, 0, 10]
    with pytest.raises(InvalidValueError):
        decode_level(document)

    document = _document()
    document["cells"][0][0]["col"] = 3
    with pytest.raises(InvalidValueError):
        decode_level(document)

    with pytest.raises(InvalidValueError):
        decode_level([])


def test_loading_a_level_restarts_a_finished_session():
    bus, world, engine, physics = build_engine(Layout.RECTANGULAR, shooter_count=2)
    statuses = capture(bus, EVENT_SESSION_STATUS_CHANGED)
    level_world = create_world(EventBus(), Layout.ISOMETRIC)
    place_all(level_world, {(0, 0): BLUE, (0, 5): BOMB})
    state = level_state_from_world(level_world)

    for _ in range(3):
        engine.update(0.0)
    session = get_session(world)
    stale = [*session.ready, *session.upcoming]
    in_flight = engine.fire(1, (0.0, -1.0))
    physics.mobile.clear()
    place_all(world, {(0, 0): RED, (0, 1): RED})
    engine.attach(RED, 0, 2)
    assert engine.status is SessionStatus.GAME_OVER

    physics.mobile.append(in_flight)
    engine.load_level(state, name="restart")

    assert engine.status is SessionStatus.IDLE
    assert statuses[-1] == {"previous": SessionStatus.GAME_OVER, "status": SessionStatus.IDLE}
    assert session.shooter_count == 1
    assert session.shots_fired == 0
    assert session.ready == [None, None]
    assert session.upcoming == []
    assert session.in_flight == []
    assert physics.mobile == []
    assert not any(world.entity_exists(entity) for entity in stale)
    assert not world.entity_exists(in_flight)

    engine.attach(RED, 0, 3)
    assert bubble_at(world, 0, 3) == RED
    assert bubble_at(world, 0, 5) == BOMB
