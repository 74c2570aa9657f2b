"""
Direction arithmetic and keyboard input resolution.
"""

from typing import Dict, Optional, Tuple

from .board import Coordinate
from .constants import UP, DOWN, LEFT, RIGHT

VECTORS: Dict[str, Tuple[int, int]] = {
    UP: (-1, 0),
    RIGHT: (0, 1),
    DOWN: (1, 0),
    LEFT: (0, -1),
}

OPPOSITES: Dict[str, str] = {
    UP: DOWN,
    RIGHT: LEFT,
    DOWN: UP,
    LEFT: RIGHT,
}

KEY_BINDINGS: Dict[str, str] = {
    "ARROWUP": UP,
    "ARROWRIGHT": RIGHT,
    "ARROWDOWN": DOWN,
    "ARROWLEFT": LEFT,
    UP: UP,
    RIGHT: RIGHT,
    DOWN: DOWN,
    LEFT: LEFT,
}


def vector_for(direction: str) -> Tuple[int, int]:
    """Return the (d_row, d_col) unit vector for a direction."""
    try:
        return VECTORS[direction]
    except KeyError:
        raise ValueError(f"Unknown direction: {direction!r}") from None


def opposite(direction: str) -> str:
    try:
        return OPPOSITES[direction]
    except KeyError:
        raise ValueError(f"Unknown direction: {direction!r}") from None


def step(coord: Coordinate, direction: str) -> Coordinate:
    """Return the coordinate one cell away from coord in direction."""
    d_row, d_col = vector_for(direction)
    return (coord[0] + d_row, coord[1] + d_col)


def direction_between(from_coord: Coordinate, to_coord: Coordinate) -> Optional[str]:
    """
    Return the direction leading from one coordinate to an adjacent one.

    Returns None when the coordinates are not orthogonal neighbours.
    """
    delta = (to_coord[0] - from_coord[0], to_coord[1] - from_coord[1])
    for direction, vector in VECTORS.items():
        if vector == delta:
            return direction
    return None


def resolve_input(raw_key: Optional[str]) -> Optional[str]:
    """
    Map a raw key name (e.g. "ArrowUp") to a direction.

    Unrecognized keys yield None and are meant to be ignored by the caller.
    """
    if not raw_key:
        return None
    return KEY_BINDINGS.get(raw_key.strip().upper())


def apply_pending_direction(current: str, requested: Optional[str]) -> str:
    """
    Return the direction to use for the next tick.

    A request for the exact opposite of the direction in effect is dropped,
    otherwise the snake would bite its own neck.
    """
    if requested is None or requested == opposite(current):
        return current
    return requested
