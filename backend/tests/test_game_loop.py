"""
Tests for the self-rescheduling game loop.
"""

import os
import random
import sys

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import SnakeGame
from domain.constants import RIGHT, RUNNING, GAME_OVER, INITIAL_SPEED, SPEED_STEP
from domain.snake import SnakeBody
from services.game_loop import GameAlreadyRunningError, GameLoop


class FakeTimer:
    """Stands in for threading.Timer; fired by hand from the test."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self):
        return self.timers[-1]


def make_loop():
    factory = FakeTimerFactory()
    game = SnakeGame(rng=random.Random(42))
    return GameLoop(game, timer_factory=factory), factory


class TestGameLoop:
    """Tests for GameLoop scheduling."""

    def test_start_schedules_first_tick_with_initial_speed(self):
        loop, factory = make_loop()
        state = loop.start()

        assert state.status == RUNNING
        assert loop.running is True
        assert len(factory.timers) == 1
        assert factory.last.interval == INITIAL_SPEED / 1000.0
        assert factory.last.started is True
        assert factory.last.daemon is True

    def test_each_tick_schedules_the_next(self):
        loop, factory = make_loop()
        loop.start()

        factory.last.fire()
        factory.last.fire()

        assert loop.game.tick_count == 2
        assert len(factory.timers) == 3

    def test_period_is_reread_after_speed_change(self):
        """After eating, the next tick is scheduled with the new speed."""
        loop, factory = make_loop()
        loop.start()
        loop.game.food = loop.game.board.cell_at(5, 6)

        factory.last.fire()

        assert loop.game.score == 1
        assert factory.last.interval == (INITIAL_SPEED - SPEED_STEP) / 1000.0

    def test_game_over_stops_scheduling(self):
        loop, factory = make_loop()
        loop.start()
        game = loop.game
        game.snake = SnakeBody((5, 14), game.board.cell_at(5, 14))

        factory.last.fire()

        assert game.status == GAME_OVER
        assert loop.running is False
        assert len(factory.timers) == 1

    def test_stop_cancels_pending_timer(self):
        loop, factory = make_loop()
        loop.start()
        timer = factory.last

        loop.stop()
        timer.fire()

        assert timer.cancelled is True
        assert loop.running is False
        assert loop.game.tick_count == 0

    def test_stale_timer_from_previous_session_does_not_tick(self):
        loop, factory = make_loop()
        loop.start()
        stale = factory.last

        loop.stop()
        loop.start()
        stale.fire()

        assert loop.game.tick_count == 0
        assert len(factory.timers) == 2

    def test_start_while_running_is_rejected(self):
        loop, factory = make_loop()
        loop.start()
        factory.last.fire()

        with pytest.raises(GameAlreadyRunningError):
            loop.start()

        # The running session keeps its state and its pending timer
        assert loop.game.tick_count == 1
        assert loop.running is True
        assert len(factory.timers) == 2
        assert factory.last.cancelled is False

    def test_full_board_stops_scheduling(self):
        factory = FakeTimerFactory()
        loop = GameLoop(SnakeGame(board_size=3, rng=random.Random(7)), timer_factory=factory)
        loop.start()
        game = loop.game
        # Tail to head; the last free cell (2, 2) holds the food
        coords = [(0, 0), (0, 1), (0, 2), (1, 2), (1, 1), (1, 0), (2, 0), (2, 1)]
        body = SnakeBody(coords[0], game.board.cell_at(*coords[0]))
        for coord in coords[1:]:
            body.advance_head(coord, game.board.cell_at(*coord))
        game.snake = body
        game.direction = RIGHT
        game.food = game.board.cell_at(2, 2)

        factory.last.fire()

        assert game.status == GAME_OVER
        assert game.death_reason == "board_full"
        assert loop.running is False
        assert len(factory.timers) == 1

    def test_keys_reach_the_game(self):
        loop, factory = make_loop()
        loop.start()

        assert loop.on_key("ArrowDown") is True
        factory.last.fire()

        assert loop.snapshot().snake_positions == [(6, 5)]
