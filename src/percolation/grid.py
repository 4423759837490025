"""Square grid index helpers."""

from __future__ import annotations

from typing import List, Tuple


def _check_side(side: int) -> None:
    if side <= 0:
        raise ValueError(f"side must be positive, got {side}")


def to_index(row: int, col: int, side: int) -> int:
    """Return the linear index of the cell at (`row`, `col`)."""

    _check_side(side)
    if not (0 <= row < side and 0 <= col < side):
        raise IndexError(f"cell ({row}, {col}) is outside a {side}x{side} grid")
    return row * side + col


def to_coords(index: int, side: int) -> Tuple[int, int]:
    """Return the (row, col) pair of the cell at linear `index`."""

    _check_side(side)
    if not 0 <= index < side * side:
        raise IndexError(f"cell {index} is outside [0, {side * side})")
    return divmod(index, side)


def neighbors(index: int, side: int) -> List[int]:
    """Return the orthogonal neighbours of `index` that lie inside the grid."""

    row, col = to_coords(index, side)
    result = []
    if row > 0:
        result.append(index - side)
    if col > 0:
        result.append(index - 1)
    if col < side - 1:
        result.append(index + 1)
    if row < side - 1:
        result.append(index + side)
    return result


def top_row(side: int) -> range:
    _check_side(side)
    return range(0, side)


def bottom_row(side: int) -> range:
    _check_side(side)
    return range(side * (side - 1), side * side)
