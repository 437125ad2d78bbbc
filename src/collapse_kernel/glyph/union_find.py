"""
Disjoint-set forest over dense integer ids.

Parent and rank live in flat lists; find() is iterative with full path
compression, union() is by rank with the first argument's root winning
ties.
"""

from typing import List


class UnionFind:

    __slots__ = ('parent', 'rank')

    def __init__(self, n: int):
        if n < 0:
            raise ValueError("UnionFind size must be non-negative")
        self.parent: List[int] = list(range(n))
        self.rank: List[int] = [0] * n

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # compress
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> bool:
        """Merge the sets of x and y. Returns False if already merged."""
        rx = self.find(x)
        ry = self.find(y)
        if rx == ry:
            return False
        if self.rank[rx] < self.rank[ry]:
            rx, ry = ry, rx
        self.parent[ry] = rx
        if self.rank[rx] == self.rank[ry]:
            self.rank[rx] += 1
        return True


__all__ = ['UnionFind']
