"""List-of-groups connectivity, the quadratic baseline to :class:`DisjointSet`."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple


class GroupList:
    """Keep every group as a plain list and scan them on each query.

    Both ``connected`` and ``union`` are linear in the number of elements.
    """

    def __init__(self, groups: Iterable[Iterable[int]]) -> None:
        self.groups: List[List[int]] = [list(group) for group in groups]

    @classmethod
    def from_size(cls, size: int) -> "GroupList":
        if size <= 0:
            raise ValueError(f"size must be positive, got {size}")
        return cls([index] for index in range(size))

    def __len__(self) -> int:
        return len(self.groups)

    def find_group(self, element: int) -> Tuple[int, Optional[List[int]]]:
        """Return the position and members of the group holding `element`."""

        for position, group in enumerate(self.groups):
            if element in group:
                return position, group
        return -1, None

    def connected(self, left: int, right: int) -> bool:
        return any(left in group and right in group for group in self.groups)

    def union(self, left: int, right: int) -> None:
        position_left, group_left = self.find_group(left)
        position_right, group_right = self.find_group(right)
        if group_left is None or group_right is None:
            missing = left if group_left is None else right
            raise KeyError(f"element {missing} is not in any group")
        if position_left == position_right:
            return
        group_left.extend(group_right)
        del self.groups[position_right]


__all__ = ["GroupList"]
