"""Bubble catalog: the closed set of bubble kinds and their rules.

Plain bubbles only ever combo with a bubble of the same colour. Special bubbles
never combo; some of them carry a trigger that fires when a bubble snaps into an
adjacent cell.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union


class Color(Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    ORANGE = "orange"


class SpecialKind(Enum):
    INDESTRUCTIBLE = "indestructible"
    LIGHTNING = "lightning"
    STAR = "star"
    BOMB = "bomb"


class TriggerEvent(Enum):
    """Effects a special bubble fires when something snaps next to it."""
    EXPLODE_ADJACENT = "explode_adjacent"
    REMOVE_ROW = "remove_row"
    REMOVE_ALL_MATCHING = "remove_all_matching"


@dataclass(frozen=True, slots=True)
class PlainColor:
    color: Color


@dataclass(frozen=True, slots=True)
class Special:
    kind: SpecialKind


BubbleKind = Union[PlainColor, Special]

_SPECIAL_TRIGGERS = {
    SpecialKind.INDESTRUCTIBLE: None,
    SpecialKind.LIGHTNING: TriggerEvent.REMOVE_ROW,
    SpecialKind.STAR: TriggerEvent.REMOVE_ALL_MATCHING,
    SpecialKind.BOMB: TriggerEvent.EXPLODE_ADJACENT,
}


def image_identity(bubble: BubbleKind) -> str:
    """Opaque token identifying how a bubble looks; equal tokens mean equal bubbles."""
    match bubble:
        case PlainColor(color=color):
            return f"bubble-{color.value}"
        case Special(kind=kind):
            return f"bubble-{kind.value}"
    raise TypeError(f"Unknown bubble kind: {bubble!r}")


def same_image(a: Optional[BubbleKind], b: Optional[BubbleKind]) -> bool:
    if a is None or b is None:
        return a is b
    return image_identity(a) == image_identity(b)


def trigger_on_snap(bubble: Optional[BubbleKind]) -> Optional[TriggerEvent]:
    match bubble:
        case Special(kind=kind):
            return _SPECIAL_TRIGGERS[kind]
        case _:
            return None


def can_combo_with(a: Optional[BubbleKind], b: Optional[BubbleKind]) -> bool:
    if not isinstance(a, PlainColor) or not isinstance(b, PlainColor):
        return False
    return a.color == b.color


def plain_bubbles() -> List[BubbleKind]:
    return [PlainColor(color) for color in Color]


def special_bubbles() -> List[BubbleKind]:
    return [Special(kind) for kind in SpecialKind]


def all_bubbles() -> List[BubbleKind]:
    return plain_bubbles() + special_bubbles()
