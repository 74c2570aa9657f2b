import argparse
import logging
import os
import random
from typing import Callable, List, Optional

from dotenv import load_dotenv

from domain.board import Board
from domain.constants import (
    RIGHT,
    IDLE, RUNNING, GAME_OVER, CONTINUE, FOOD_EATEN,
    BOARD_SIZE, INITIAL_SPEED, MIN_SPEED, SPEED_STEP, START_FOOD_OFFSET,
)
from domain.game_state import GameState
from domain.movement import (
    apply_pending_direction,
    direction_between,
    opposite,
    resolve_input,
    step,
)
from domain.snake import SnakeBody
from services.food_spawner import BoardFullError, FoodSpawner

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[str], GameState], None]


class SnakeGame:
    """
    Manages:
      - Board (N x N)
      - Snake body and its occupancy set
      - Food
      - Direction and the pending direction slot
      - Score and speed
      - History of snapshots for rendering
    """
    def __init__(
        self,
        board_size: int = BOARD_SIZE,
        initial_speed: int = INITIAL_SPEED,
        min_speed: int = MIN_SPEED,
        speed_step: int = SPEED_STEP,
        rng: Optional[random.Random] = None
    ):
        if board_size < 2:
            raise ValueError(f"Board size must be at least 2 to hold the snake and food, got {board_size}.")
        self.board = Board(board_size)
        self.initial_speed = initial_speed
        self.min_speed = min_speed
        self.speed_step = speed_step
        self.spawner = FoodSpawner(self.board, rng)

        self.status = IDLE
        self.death_reason: Optional[str] = None
        self.tick_count = 0
        self.score = 0
        self.speed = initial_speed
        self.direction = RIGHT
        self.pending_direction: Optional[str] = None

        start_row, start_col = self.starting_coord()
        self.snake = SnakeBody((start_row, start_col), self.board.cell_at(start_row, start_col))
        self.food: Optional[int] = self._initial_food()

        self.history: List[GameState] = []
        self._listeners: List[Listener] = []

    def starting_coord(self):
        start = round(self.board.size / 3)
        return (start, start)

    def subscribe(self, listener: Listener):
        """Register a callback receiving (result, state) after every start and tick."""
        self._listeners.append(listener)

    def start(self) -> GameState:
        """
        Reset everything to the deterministic starting position and run.
        """
        start_coord = self.starting_coord()
        self.snake = SnakeBody(start_coord, self.board.cell_at(*start_coord))
        self.food = self._initial_food()
        self.score = 0
        self.speed = self.initial_speed
        self.direction = RIGHT
        self.pending_direction = None
        self.tick_count = 0
        self.death_reason = None
        self.status = RUNNING
        self.history = []

        logger.info(f"Game started at {start_coord}, food at cell {self.food}")
        return self._publish(None)

    def on_key(self, raw_key: str) -> bool:
        """
        Record a key press. The latest recognized key wins and is applied at
        the start of the next tick. Returns False for ignored keys.
        """
        direction = resolve_input(raw_key)
        if direction is None:
            logger.debug(f"Ignoring key {raw_key!r}")
            return False
        self.pending_direction = direction
        return True

    def tick(self) -> Optional[str]:
        """
        Execute one step:
          1) Apply the pending direction (reversals are dropped)
          2) Stop on a wall or on the snake itself
          3) Move the head forward and drop the tail
          4) On food: grow behind the tail, respawn food, score and speed up
          5) Stop once the snake covers the whole board
        Returns CONTINUE, FOOD_EATEN or GAME_OVER; None if no session is running.
        """
        if self.status != RUNNING:
            logger.debug(f"Tick ignored while {self.status}")
            return None

        self.direction = apply_pending_direction(self.direction, self.pending_direction)
        self.pending_direction = None

        next_coord = step(self.snake.head.coord, self.direction)

        if not self.board.in_bounds(next_coord):
            return self._game_over("wall")

        next_cell = self.board.cell_at(*next_coord)
        if self.snake.occupies(next_cell):
            return self._game_over("self")

        self.snake.advance_head(next_coord, next_cell)
        self.snake.remove_tail()
        self.tick_count += 1

        if next_cell == self.food:
            self.grow_snake()
            if not self.handle_food_consumption():
                return self._game_over("board_full")
            self._publish(FOOD_EATEN)
            return FOOD_EATEN

        self._publish(CONTINUE)
        return CONTINUE

    def grow_snake(self) -> bool:
        """
        Add a segment one step behind the tail, in line with the way the tail
        is heading. Returns False when that cell is off the board or taken, in
        which case the snake does not lengthen this tick.
        """
        tail = self.snake.tail
        successor = self.snake.tail_successor
        if successor is None:
            heading = self.direction
        else:
            heading = direction_between(tail.coord, successor.coord)

        growth_coord = step(tail.coord, opposite(heading))
        if not self.board.in_bounds(growth_coord):
            logger.debug(f"Growth skipped, {growth_coord} is off the board")
            return False

        growth_cell = self.board.cell_at(*growth_coord)
        if self.snake.occupies(growth_cell):
            logger.debug(f"Growth skipped, {growth_coord} is part of the snake")
            return False

        self.snake.grow_at_tail(growth_coord, growth_cell)
        return True

    def handle_food_consumption(self) -> bool:
        """
        Score the eaten food, speed up and place the next food.
        Returns False when the snake covers every cell and no food fits.
        """
        eaten = self.food
        self.score += 1
        self.speed = max(self.min_speed, self.speed - self.speed_step)

        try:
            self.food = self.spawner.spawn(self.snake.cells, previous_food=eaten)
        except BoardFullError:
            self.food = None
            logger.info(f"Food eaten at cell {eaten}. Score: {self.score}, board is full")
            return False

        logger.info(
            f"Food eaten at cell {eaten}. Score: {self.score}, speed: {self.speed}ms, "
            f"next food at cell {self.food}"
        )
        return True

    def snapshot(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        return GameState(
            tick=self.tick_count,
            board_size=self.board.size,
            snake_positions=self.snake.coords(),
            snake_cells=self.snake.cells,
            food=self.food,
            direction=self.direction,
            score=self.score,
            speed=self.speed,
            status=self.status,
            death_reason=self.death_reason
        )

    def print_board(self):
        """
        Prints a visual representation of the current board state.
        """
        print("\n" + self.snapshot().print_board() + "\n")

    def _initial_food(self) -> int:
        start_cell = self.snake.head.cell
        candidate = start_cell + START_FOOD_OFFSET
        if self.board.contains_cell(candidate) and not self.snake.occupies(candidate):
            return candidate
        return self.spawner.spawn(self.snake.cells)

    def _game_over(self, reason: str) -> str:
        self.status = GAME_OVER
        self.death_reason = reason
        logger.info(f"Game Over ({reason}) after {self.tick_count} ticks. Final score: {self.score}")
        self._publish(GAME_OVER)
        return GAME_OVER

    def _publish(self, result: Optional[str]) -> GameState:
        state = self.snapshot()
        self.history.append(state)
        for listener in self._listeners:
            listener(result, state)
        return state


# -------------------------------
# Headless Session
# -------------------------------

def run_session(game: SnakeGame, keys: List[Optional[str]], max_ticks: int, show_board: bool = True) -> GameState:
    """
    Play one session without a timer.

    Args:
        game: the SnakeGame instance
        keys: key pressed before each tick; None (or running out of keys) means no input
        max_ticks: stop after this many ticks even if the snake is alive
        show_board: print the board after every tick

    Returns:
        The final GameState.
    """
    game.start()
    if show_board:
        game.print_board()

    for tick in range(max_ticks):
        key = keys[tick] if tick < len(keys) else None
        if key is not None:
            game.on_key(key)

        result = game.tick()
        if show_board:
            print(f"Tick {game.tick_count} ({game.direction}): {result}, score {game.score}")
            game.print_board()

        if result == GAME_OVER:
            break

    return game.snapshot()


def parse_keys(raw: str) -> List[Optional[str]]:
    """
    Parse a comma separated key script. '-' or an empty entry means no key
    for that tick, e.g. "ArrowDown,-,-,ArrowLeft".
    """
    if not raw:
        return []
    keys: List[Optional[str]] = []
    for entry in raw.split(","):
        entry = entry.strip()
        keys.append(None if entry in ("", "-") else entry)
    return keys


# -------------------------------
# Example Usage (Main Entry Point)
# -------------------------------
def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Play a headless GridSnake session from a scripted key sequence."
    )
    parser.add_argument("--board-size", type=int, required=False,
                        default=int(os.getenv("SNAKE_BOARD_SIZE", BOARD_SIZE)),
                        help="Board is N x N")
    parser.add_argument("--keys", type=str, required=False, default="",
                        help="Comma separated key per tick, '-' for none (e.g. 'ArrowDown,-,ArrowLeft')")
    parser.add_argument("--max-ticks", type=int, required=False, default=100,
                        help="Maximum number of ticks")
    parser.add_argument("--seed", type=int, required=False, default=None,
                        help="Seed for food placement")
    parser.add_argument("--video", type=str, required=False, default=None,
                        help="Write an MP4 recording of the session to this path")
    parser.add_argument("--quiet", action="store_true",
                        help="Do not print the board after every tick")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    game = SnakeGame(board_size=args.board_size, rng=random.Random(args.seed))
    final_state = run_session(game, parse_keys(args.keys), args.max_ticks, show_board=not args.quiet)

    print(f"\nFinal score: {final_state.score} after {final_state.tick} ticks ({final_state.status})")

    if args.video:
        from services.video_generator import SnakeVideoGenerator

        path = SnakeVideoGenerator().generate_video(game.history, output_path=args.video)
        print(f"Video written to {path}")


if __name__ == "__main__":
    main()
