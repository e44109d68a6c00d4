from dataclasses import dataclass
from typing import Tuple

from blaster.components.bubble import BubbleKind
from blaster.components.frame import Frame


@dataclass(slots=True)
class MobileBubble:
    """A bubble not attached to the grid: queued, ready to shoot, or in flight.

    Once fired, position and velocity belong to the physics collaborator; the
    engine only reads the frame to pick a landing cell.
    """

    bubble: BubbleKind
    frame: Frame
    velocity: Tuple[float, float] = (0.0, 0.0)

    def displace(self, dx: float, dy: float) -> None:
        self.frame = self.frame.translated(dx, dy)
