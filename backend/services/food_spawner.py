"""
Food placement for GridSnake.

Food goes on a uniformly random free cell. Sampling is plain rejection
sampling over every cell id, which stays cheap while the snake covers a
small part of the board.
"""

import logging
import random
from typing import AbstractSet, Optional

from domain.board import Board

logger = logging.getLogger(__name__)


class BoardFullError(ValueError):
    """Raised when there is no cell left to put food on."""


class FoodSpawner:
    """Picks food cells that avoid the snake and the previous food cell."""

    def __init__(self, board: Board, rng: Optional[random.Random] = None):
        self.board = board
        self.rng = rng or random.Random()

    def spawn(self, occupied: AbstractSet[int], previous_food: Optional[int] = None) -> int:
        """
        Return a random cell that is neither occupied nor the previous food.

        Args:
            occupied: cells currently covered by the snake
            previous_food: the cell that was just eaten, if any

        Raises:
            BoardFullError: if every cell is excluded.
        """
        excluded = len(occupied)
        if previous_food is not None and previous_food not in occupied:
            excluded += 1
        if excluded >= self.board.num_cells:
            raise BoardFullError(
                f"No free cell left for food on a {self.board.size}x{self.board.size} board."
            )

        while True:
            cell = self.rng.randint(1, self.board.num_cells)
            if cell in occupied or cell == previous_food:
                continue
            logger.debug(f"Spawned food at cell {cell}")
            return cell
