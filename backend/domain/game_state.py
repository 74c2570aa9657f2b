"""
GameState entity - a snapshot of the game at a point in time.
"""

from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple

from .constants import RUNNING

FOOD = "food"
SNAKE = "snake"
EMPTY = "empty"


class GameState:
    """
    A read-only snapshot of one session at a specific tick.

    Attributes:
        tick: number of ticks played since the last start
        board_size: N for the N x N board
        snake_positions: list of (row, col) from head to tail
        snake_cells: frozenset of cell ids covered by the snake
        food: cell id of the food, None once the snake fills the board
        direction: direction in effect for the last tick
        score: foods eaten this session
        speed: current tick period in milliseconds
        status: IDLE, RUNNING or GAME_OVER
        death_reason: 'wall', 'self' or 'board_full' once the game is over
    """

    def __init__(
        self,
        tick: int,
        board_size: int,
        snake_positions: List[Tuple[int, int]],
        snake_cells: FrozenSet[int],
        food: Optional[int],
        direction: str,
        score: int,
        speed: int,
        status: str,
        death_reason: Optional[str] = None
    ):
        self.tick = tick
        self.board_size = board_size
        self.snake_positions = snake_positions
        self.snake_cells = snake_cells
        self.food = food
        self.direction = direction
        self.score = score
        self.speed = speed
        self.status = status
        self.death_reason = death_reason

    @property
    def is_over(self) -> bool:
        """True whenever no session is running, before the first start included."""
        return self.status != RUNNING

    def cell_class(self, cell: int) -> str:
        if cell == self.food:
            return FOOD
        if cell in self.snake_cells:
            return SNAKE
        return EMPTY

    def cell_classes(self) -> Iterator[str]:
        """Classification of every cell in row-major order."""
        for cell in range(1, self.board_size * self.board_size + 1):
            yield self.cell_class(cell)

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        O = snake head
        o = snake body
        Row 0 is printed first, column labels at the bottom.
        """
        board = [['.' for _ in range(self.board_size)] for _ in range(self.board_size)]

        if self.food is not None:
            food_row, food_col = divmod(self.food - 1, self.board_size)
            if 0 <= food_row < self.board_size:
                board[food_row][food_col] = 'F'

        for pos_idx, (row, col) in enumerate(self.snake_positions):
            board[row][col] = 'O' if pos_idx == 0 else 'o'

        result = []
        for row in range(self.board_size):
            result.append(f"{row:2d} {' '.join(board[row])}")

        # Single digit column labels keep the grid aligned on large boards
        result.append("   " + " ".join(str(i % 10) for i in range(self.board_size)))

        return "\n".join(result)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation used by the HTTP API."""
        return {
            "tick": self.tick,
            "board_size": self.board_size,
            "snake": [list(pos) for pos in self.snake_positions],
            "food": self.food,
            "direction": self.direction,
            "score": self.score,
            "speed": self.speed,
            "status": self.status,
            "is_over": self.is_over,
            "death_reason": self.death_reason,
            "cells": list(self.cell_classes()),
        }

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, status={self.status}, food={self.food}, "
            f"length={len(self.snake_positions)}, score={self.score}>"
        )
