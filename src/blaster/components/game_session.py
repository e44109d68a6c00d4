"""Session resource tracking shots, shooters and the flight state machine."""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from blaster.constants import GAME_HEIGHT, GAME_WIDTH, MAX_SHOOTERS


class SessionStatus(Enum):
    IDLE = auto()
    IN_FLIGHT = auto()
    GAME_OVER = auto()


@dataclass
class GameSession:
    """Singleton component; mutated only through the engine."""
    shooter_count: int = 1
    status: SessionStatus = SessionStatus.IDLE
    shots_fired: int = 0
    bubbles_synthesized: int = 0
    elapsed_ms: float = 0.0
    width: float = GAME_WIDTH
    height: float = GAME_HEIGHT
    # Mobile bubble entities: one ready slot per possible shooter, the queue
    # waiting behind them, and those currently owned by physics.
    ready: List[Optional[int]] = field(default_factory=lambda: [None] * MAX_SHOOTERS)
    upcoming: List[int] = field(default_factory=list)
    in_flight: List[int] = field(default_factory=list)

    @property
    def is_over(self) -> bool:
        return self.status is SessionStatus.GAME_OVER
