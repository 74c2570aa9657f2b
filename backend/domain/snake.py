"""
Snake entity for the game engine.
"""

from collections import deque
from dataclasses import dataclass
from typing import FrozenSet, Iterator, List, Optional

from .board import Coordinate


@dataclass(frozen=True)
class Segment:
    coord: Coordinate
    cell: int


class SnakeBody:
    """
    Represents the snake on the board.

    Attributes:
        segments: deque of Segment from head at index 0 to tail at the end
        _cells: set of occupied cell ids, kept in step with segments so
            collision checks are O(1)
    """

    def __init__(self, start_coord: Coordinate, start_cell: int):
        self.segments = deque([Segment(start_coord, start_cell)])
        self._cells = {start_cell}

    @property
    def head(self) -> Segment:
        """Return the head segment (first element)."""
        return self.segments[0]

    @property
    def tail(self) -> Segment:
        """Return the tail segment (last element)."""
        return self.segments[-1]

    @property
    def tail_successor(self) -> Optional[Segment]:
        """Segment directly in front of the tail, None for a one-segment body."""
        if len(self.segments) < 2:
            return None
        return self.segments[-2]

    @property
    def cells(self) -> FrozenSet[int]:
        return frozenset(self._cells)

    def occupies(self, cell: int) -> bool:
        return cell in self._cells

    def advance_head(self, coord: Coordinate, cell: int) -> None:
        """Add a new head. The caller has already ruled out a collision."""
        self.segments.appendleft(Segment(coord, cell))
        self._cells.add(cell)

    def remove_tail(self) -> int:
        """Detach the tail segment and return its cell."""
        if len(self.segments) == 1:
            raise ValueError("Cannot remove the only segment of the snake.")
        removed = self.segments.pop()
        self._cells.discard(removed.cell)
        return removed.cell

    def grow_at_tail(self, coord: Coordinate, cell: int) -> None:
        """Attach a new segment behind the current tail."""
        self.segments.append(Segment(coord, cell))
        self._cells.add(cell)

    def coords(self) -> List[Coordinate]:
        """Coordinates from head to tail."""
        return [segment.coord for segment in self.segments]

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __repr__(self):
        return f"<SnakeBody length={len(self)}, head={self.head.coord}>"
