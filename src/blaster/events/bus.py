from blinker import Signal
from typing import Dict


class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems that are not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, /, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float (seconds)


# ============================================================================
# GRID MUTATION
# ============================================================================
EVENT_CELL_PLACED = "cell_placed"                  # payload: row, col, bubble=BubbleKind
EVENT_CELL_CLEARED = "cell_cleared"                # payload: row, col, bubble=BubbleKind, reason=RemovalReason
EVENT_GRID_RESET = "grid_reset"                    # payload: layout=Layout, rows=int


# ============================================================================
# RESOLUTION
# ============================================================================
EVENT_COMBO_RESOLVED = "combo_resolved"            # payload: anchor=(r,c), positions=[(r,c),...], size=int
EVENT_CASCADE_TRIGGERED = "cascade_triggered"      # payload: event=TriggerEvent, source=(r,c), depth=int
EVENT_BUBBLES_PRUNED = "bubbles_pruned"            # payload: positions=[(r,c),...]


# ============================================================================
# SHOOTING & FLIGHT
# ============================================================================
EVENT_UPCOMING_ADDED = "upcoming_added"            # payload: entity=int, bubble=BubbleKind, frame=Frame
EVENT_BUBBLE_READY = "bubble_ready"                # payload: entity=int, shooter=int, frame=Frame
EVENT_BUBBLE_FIRED = "bubble_fired"                # payload: entity=int, shooter=int, velocity=(vx,vy)
EVENT_BUBBLE_ATTACHED = "bubble_attached"          # payload: entity=int|None, row, col, bubble=BubbleKind
EVENT_BUBBLE_MISSED = "bubble_missed"              # payload: entity=int, bubble=BubbleKind
EVENT_SHOTS_CHANGED = "shots_changed"              # payload: shots_fired=int


# ============================================================================
# SESSION
# ============================================================================
EVENT_SESSION_STATUS_CHANGED = "session_status_changed"  # payload: previous=SessionStatus, status=SessionStatus
EVENT_GAME_OVER = "game_over"                            # payload: shots_fired=int


# ============================================================================
# STORAGE
# ============================================================================
EVENT_LEVEL_LOADED = "level_loaded"                # payload: level=str|None, layout=Layout, shooter_count=int
EVENT_LEVEL_SAVED = "level_saved"                  # payload: level=str, path=Path
