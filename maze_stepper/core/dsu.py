from array import array


class DisjointSet:
    """
    Union-Find over `size` elements (cell index = y * width + x).
    Path compression in find(), union by rank in union().
    """

    __slots__ = ('parent', 'rank')

    def __init__(self, size: int):
        self.parent = array('i', range(size))
        # Rank never exceeds log2(size), a byte is plenty
        self.rank = array('B', [0] * size)

    def __len__(self):
        return len(self.parent)

    def find(self, a: int) -> int:
        root = a
        while self.parent[root] != root:
            root = self.parent[root]

        # Second pass: point everything on the walk straight at the root
        while self.parent[a] != root:
            nxt = self.parent[a]
            self.parent[a] = root
            a = nxt
        return root

    def union(self, a: int, b: int) -> bool:
        """
        Joins the sets holding a and b.
        Returns False if they were already joined (the edge would close a cycle).
        """
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return False

        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)
