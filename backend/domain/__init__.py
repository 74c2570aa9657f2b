"""
Domain entities for the GridSnake game engine.

This module contains the core game entities that are independent of
presentation concerns (HTTP, rendering, timers).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES,
    IDLE, RUNNING, GAME_OVER, CONTINUE, FOOD_EATEN,
    BOARD_SIZE, INITIAL_SPEED, MIN_SPEED, SPEED_STEP, START_FOOD_OFFSET,
)
from .board import Board
from .snake import Segment, SnakeBody
from .game_state import GameState
from .movement import (
    vector_for,
    opposite,
    step,
    direction_between,
    resolve_input,
    apply_pending_direction,
)

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES',
    'IDLE', 'RUNNING', 'GAME_OVER', 'CONTINUE', 'FOOD_EATEN',
    'BOARD_SIZE', 'INITIAL_SPEED', 'MIN_SPEED', 'SPEED_STEP', 'START_FOOD_OFFSET',
    'Board',
    'Segment',
    'SnakeBody',
    'GameState',
    'vector_for',
    'opposite',
    'step',
    'direction_between',
    'resolve_input',
    'apply_pending_direction',
]
