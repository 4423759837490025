"""Basic data structures."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Protocol


class Connectivity(Protocol):
    """Anything that can answer and grow dynamic connectivity queries."""

    def connected(self, left: int, right: int) -> bool: ...

    def union(self, left: int, right: int) -> None: ...


@dataclass
class DisjointSet:
    """Weighted quick-union with path halving over the nodes ``0..size-1``.

    ``parent`` and ``weight`` are flat lists indexed by node id. ``weight``
    is only meaningful for roots, where it holds the number of nodes in the
    root's tree.
    """

    size: int
    parent: List[int] = field(init=False, repr=False)
    weight: List[int] = field(init=False, repr=False)
    count: int = field(init=False)

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"size must be positive, got {self.size}")
        self.parent = list(range(self.size))
        self.weight = [1] * self.size
        self.count = self.size

    def __len__(self) -> int:
        return self.size

    def _check(self, index: int) -> None:
        if not 0 <= index < self.size:
            raise IndexError(f"node {index} is outside [0, {self.size})")

    def find(self, index: int) -> int:
        self._check(index)
        parent = self.parent
        while index != parent[index]:
            parent[index] = parent[parent[index]]
            index = parent[index]
        return index

    def connected(self, left: int, right: int) -> bool:
        return self.find(left) == self.find(right)

    def union(self, left: int, right: int) -> None:
        """Merge the groups of `left` and `right`, lighter tree under heavier."""

        root_left = self.find(left)
        root_right = self.find(right)
        if root_left == root_right:
            return
        if self.weight[root_left] < self.weight[root_right]:
            self.parent[root_left] = root_right
            self.weight[root_right] += self.weight[root_left]
        else:
            self.parent[root_right] = root_left
            self.weight[root_left] += self.weight[root_right]
        self.count -= 1

    def component_size(self, index: int) -> int:
        return self.weight[self.find(index)]

    def roots(self) -> List[int]:
        return [index for index, parent in enumerate(self.parent) if index == parent]

    def groups(self) -> Dict[int, List[int]]:
        """Return a mapping of every root to the sorted members of its group."""

        members: Dict[int, List[int]] = defaultdict(list)
        for index in range(self.size):
            members[self.find(index)].append(index)
        return dict(members)


__all__ = ["Connectivity", "DisjointSet"]
