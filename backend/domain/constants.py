"""
Game constants for GridSnake.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Session states
IDLE = "IDLE"
RUNNING = "RUNNING"
GAME_OVER = "GAME_OVER"

# Tick outcomes
CONTINUE = "CONTINUE"
FOOD_EATEN = "FOOD_EATEN"

# Game settings
BOARD_SIZE = 15
INITIAL_SPEED = 500  # ms between ticks
MIN_SPEED = 200  # prevents excessive speed-up
SPEED_STEP = 20
START_FOOD_OFFSET = 5
