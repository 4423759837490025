"""Monte Carlo site percolation on a square grid."""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from .grid import bottom_row, neighbors, top_row
from .structures import DisjointSet


class PercolationSimulator:
    """Open random cells of a ``side x side`` grid until top and bottom connect.

    The union-find index holds two extra nodes past the grid cells: ``top``,
    wired to every cell of the first row, and ``bottom``, wired to every cell
    of the last row. The grid percolates exactly when those two are
    connected.
    """

    def __init__(self, side: int, rng: Optional[np.random.Generator] = None) -> None:
        if side <= 0:
            raise ValueError(f"side must be positive, got {side}")
        self.side = side
        self.size = side * side
        self.top = self.size
        self.bottom = self.size + 1
        self.rng = rng if rng is not None else np.random.default_rng()
        self.marked: List[bool] = []
        self.open_count = 0
        self.connect = DisjointSet(self.size + 2)
        self.clear()

    def clear(self) -> None:
        """Close every cell and rebuild the index with the sentinel wiring."""

        self.marked = [False] * self.size
        self.open_count = 0
        self.connect = DisjointSet(self.size + 2)
        for index in top_row(self.side):
            self.connect.union(index, self.top)
        for index in bottom_row(self.side):
            self.connect.union(index, self.bottom)

    def is_open(self, index: int) -> bool:
        self._check(index)
        return self.marked[index]

    def mark(self, index: int) -> None:
        """Open cell `index` and join it with its open neighbours."""

        self._check(index)
        if self.marked[index]:
            return
        self.marked[index] = True
        self.open_count += 1
        for adjacent in neighbors(index, self.side):
            if self.marked[adjacent]:
                self.connect.union(index, adjacent)

    def percolates(self) -> bool:
        return self.connect.connected(self.top, self.bottom)

    def simulate(self, rng: Optional[np.random.Generator] = None) -> int:
        """Run one trial and return how many cells were opened to percolate."""

        self.clear()
        order = (rng if rng is not None else self.rng).permutation(self.size)
        for steps, index in enumerate(order.tolist(), start=1):
            self.mark(index)
            if self.percolates():
                return steps
        raise RuntimeError(
            f"opened all {self.size} cells of a {self.side}x{self.side} grid without percolating"
        )

    def render(self, open_char: str = ".", closed_char: str = "#") -> str:
        rows = []
        for start in range(0, self.size, self.side):
            cells = self.marked[start : start + self.side]
            rows.append("".join(open_char if cell else closed_char for cell in cells))
        return "\n".join(rows)

    def _check(self, index: int) -> None:
        if not 0 <= index < self.size:
            raise IndexError(f"cell {index} is outside [0, {self.size})")


__all__ = ["PercolationSimulator"]
