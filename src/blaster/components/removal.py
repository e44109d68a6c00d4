from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RemovalKind(Enum):
    COMBO = "combo"
    DISCONNECTED_FROM_TOP = "disconnected_from_top"
    EXPLODE = "explode"
    REMOVE_ROW = "remove_row"
    COLOR_PURGE = "color_purge"


@dataclass(frozen=True, slots=True)
class RemovalReason:
    """Why a bubble left the grid, attached to every removal notification.

    ``size`` is only meaningful for combos and ``is_source`` only for row removals.
    Star-triggered removals use COLOR_PURGE rather than a zero-sized combo.
    """

    kind: RemovalKind
    size: int = 0
    is_source: bool = False

    @classmethod
    def combo(cls, size: int) -> "RemovalReason":
        return cls(RemovalKind.COMBO, size=size)

    @classmethod
    def disconnected_from_top(cls) -> "RemovalReason":
        return cls(RemovalKind.DISCONNECTED_FROM_TOP)

    @classmethod
    def explode(cls) -> "RemovalReason":
        return cls(RemovalKind.EXPLODE)

    @classmethod
    def remove_row(cls, is_source: bool) -> "RemovalReason":
        return cls(RemovalKind.REMOVE_ROW, is_source=is_source)

    @classmethod
    def color_purge(cls) -> "RemovalReason":
        return cls(RemovalKind.COLOR_PURGE)
