"""
Board entity - fixed numbering of an N x N grid.
"""

from typing import Iterator, Tuple

Coordinate = Tuple[int, int]


class Board:
    """
    Square grid whose cells are numbered row-major starting at 1.

    The numbering never changes for the lifetime of the board, so a single
    instance can be shared by every session played on it.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"Board size must be positive, got {size}.")
        self.size = size

    @property
    def num_cells(self) -> int:
        return self.size * self.size

    def cell_at(self, row: int, col: int) -> int:
        """Return the cell id of (row, col)."""
        return row * self.size + col + 1

    def coord_of(self, cell: int) -> Coordinate:
        """Return the (row, col) of a cell id."""
        return divmod(cell - 1, self.size)

    def in_bounds(self, coord: Coordinate) -> bool:
        row, col = coord
        return 0 <= row < self.size and 0 <= col < self.size

    def contains_cell(self, cell: int) -> bool:
        return 1 <= cell <= self.num_cells

    def cells(self) -> Iterator[int]:
        """Iterate every cell id in row-major order."""
        return iter(range(1, self.num_cells + 1))

    def __repr__(self):
        return f"<Board {self.size}x{self.size}>"
