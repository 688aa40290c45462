"""
Game constants for the snake engine.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Unit offsets in screen coordinates: (0, 0) is the top left cell
DIRECTION_OFFSETS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

OPPOSITES = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Lifecycle states
START = "START"
RUNNING = "RUNNING"
PAUSED = "PAUSED"
GAME_OVER = "GAME_OVER"

# Engine events
STARTED = "started"
RESUMED = "resumed"
PAUSED_EVENT = "paused"
RESET = "reset"
FOOD_EATEN = "food_eaten"
MILESTONE = "milestone"
GAME_OVER_EVENT = "game_over"
ENGINE_EVENTS = {STARTED, RESUMED, PAUSED_EVENT, RESET, FOOD_EATEN, MILESTONE, GAME_OVER_EVENT}

# Game settings
GRID_SIZE = 15
INITIAL_SNAKE = [(0, 0)]
INITIAL_FOOD = (5, 5)
INITIAL_DIRECTION = RIGHT

# Tick interval in milliseconds
BASE_SPEED = 200
SPEED_DECREMENT = 5
MIN_SPEED = 40
MILESTONE_INTERVAL = 5

# Storage key for the persisted high score
HIGH_SCORE_KEY = "snakeHighScore"
