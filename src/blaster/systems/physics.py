"""Boundary with the external 2-D motion engine.

The engine never integrates motion itself. Each tick the collaborator moves the
objects it owns and reports discretized events per in-flight bubble; the engine
answers with at most one reaction.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union

from blaster.components.frame import Frame


class BoundSide(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True, slots=True)
class BoundCollision:
    side: BoundSide
    at: float = 0.0


@dataclass(frozen=True, slots=True)
class CellCollision:
    """Overlap with a grid cell, occupied or not."""
    row: int
    col: int
    frame: Frame


@dataclass(frozen=True, slots=True)
class MobileCollision:
    """Overlap with another mobile object owned by the collaborator."""
    entity: int
    frame: Frame


PhysicsEvent = Union[BoundCollision, CellCollision, MobileCollision]


@dataclass(frozen=True, slots=True)
class Reflect:
    """Bounce off a wall; ``direction`` is the side the bubble now travels towards."""
    direction: BoundSide
    at: float


@dataclass(frozen=True, slots=True)
class ReflectOffMobile:
    collision: MobileCollision


@dataclass(frozen=True, slots=True)
class Disappear:
    """Drop the object from the simulation (it attached or missed)."""


PhysicsReaction = Union[Reflect, ReflectOffMobile, Disappear]


class PhysicsCollaborator(Protocol):
    """Interface the engine expects from the motion engine."""

    def add(self, entity: int) -> None:
        ...

    def remove(self, entity: int) -> None:
        ...

    def update_positions(self, elapsed_ms: float) -> None:
        ...

    def mobile_count(self) -> int:
        ...
