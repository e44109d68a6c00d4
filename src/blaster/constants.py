# ============================================================================
# GRID
# ============================================================================
GRID_ROWS = 9
GRID_COLS = 12


# ============================================================================
# GAME AREA & TIMING
# ============================================================================
GAME_WIDTH = 1024.0
GAME_HEIGHT = 1346.0
REFRESH_RATE = 60                        # Hz
BUBBLE_SPEED = 1000.0                    # pixels per second


# ============================================================================
# RULES
# ============================================================================
COMBO_THRESHOLD = 3
BUBBLES_TO_DISPLAY = 5
MAX_SHOOTERS = 2
# The landing bubble is still owned by physics while attach runs, so one
# remaining mobile object does not keep the session alive.
GAME_OVER_MOBILE_THRESHOLD = 2


# ============================================================================
# STORAGE
# ============================================================================
MAX_LEVEL_NAME_LENGTH = 10
LEVEL_FILE_SUFFIX = ".json"
