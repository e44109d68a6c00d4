from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Frame:
    """Axis-aligned rectangle used only for coordinate mapping."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def center_distance(self, other: "Frame") -> float:
        ax, ay = self.center
        bx, by = other.center
        return math.hypot(ax - bx, ay - by)

    def translated(self, dx: float, dy: float) -> "Frame":
        return Frame(x=self.x + dx, y=self.y + dy, width=self.width, height=self.height)

    def as_list(self) -> list[float]:
        return [self.x, self.y, self.width, self.height]
