"""
Timer host that drives a SnakeGame in real time.

Each tick is scheduled only after the previous one has finished, and the
period is re-read from the game every time because eating food makes the
game faster.
"""

import functools
import logging
import threading
from typing import Callable, Optional

from domain.constants import RUNNING
from domain.game_state import GameState

logger = logging.getLogger(__name__)


class GameAlreadyRunningError(RuntimeError):
    """Raised when start() is called while a session is still ticking."""


TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class GameLoop:
    """
    Runs game.tick() on a repeating, self-rescheduling timer.

    The lock serializes ticks with start() and snapshot() calls coming from
    other threads (e.g. HTTP request handlers). Key presses go straight to
    game.on_key(), which only overwrites the pending direction slot.
    """

    def __init__(self, game, timer_factory: Optional[TimerFactory] = None):
        self.game = game
        self._timer_factory = timer_factory or threading.Timer
        self._timer = None
        self._generation = 0
        self._lock = threading.RLock()

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start(self) -> GameState:
        """
        Start a fresh session and begin ticking.

        Raises:
            GameAlreadyRunningError: if the current session is still running.
        """
        with self._lock:
            if self.running:
                raise GameAlreadyRunningError("Game is already running")
            self._cancel_timer()
            state = self.game.start()
            self._schedule()
            return state

    def stop(self) -> None:
        with self._lock:
            self._cancel_timer()

    def on_key(self, raw_key: str) -> bool:
        return self.game.on_key(raw_key)

    def snapshot(self) -> GameState:
        with self._lock:
            return self.game.snapshot()

    def _schedule(self) -> None:
        period = self.game.speed / 1000.0
        timer = self._timer_factory(period, functools.partial(self._fire, self._generation))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # Timers from a stopped or restarted session must not tick
            if generation != self._generation or self._timer is None:
                return
            try:
                self.game.tick()
            except Exception:
                self._timer = None
                logger.exception("Tick failed, stopping game loop")
                raise
            if self.game.status == RUNNING:
                self._schedule()
            else:
                logger.info(f"Game loop stopped ({self.game.status})")
                self._timer = None

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
