"""
Weighted grid graph: turns a dense grid of cell weights into an adjacency map.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from .config import BLOCKED, DIAGONAL_COST


class Point(NamedTuple):
    """Integer grid coordinates. Compares and hashes like the (x, y) tuple."""

    x: int
    y: int


class ConnectivityPolicy:
    """
    Neighbour enumeration and step cost rule shared by every node of a graph.
    Attributes:
        name: Label used in diagnostics ("Graph" or "DiagonalGraph").
        offsets: (dx, dy) steps to potential neighbours, in enumeration order.
        diagonal: Whether a step changing both coordinates costs DIAGONAL_COST times more.
    """

    def __init__(
        self, name: str, offsets: Sequence[Tuple[int, int]], diagonal: bool
    ) -> None:
        self.name = name
        self.offsets = tuple(offsets)
        self.diagonal = diagonal

    def potential_neighbors(self, point: Point) -> List[Point]:
        x, y = point
        return [Point(x + dx, y + dy) for dx, dy in self.offsets]

    def cost(self, source, target: GraphNode) -> float:
        """Cost of stepping from source onto target; assumes they are adjacent."""
        if self.diagonal and source.x != target.x and source.y != target.y:
            return target.weight * DIAGONAL_COST
        return target.weight

    def __repr__(self) -> str:
        return f"<ConnectivityPolicy {self.name}>"


ORTHOGONAL = ConnectivityPolicy(
    "Graph", ((-1, 0), (1, 0), (0, -1), (0, 1)), diagonal=False
)
DIAGONAL = ConnectivityPolicy(
    "DiagonalGraph",
    (
        (-1, -1), (0, -1), (1, -1),
        (-1, 0), (1, 0),
        (-1, 1), (0, 1), (1, 1),
    ),
    diagonal=True,
)


class GraphNode:
    """
    A traversable grid cell. Equal to (and hashed like) the Point at the same
    coordinates, so nodes can be looked up with plain points or tuples.
    """

    __slots__ = ("x", "y", "weight", "policy")

    def __init__(self, x: int, y: int, weight: float, policy: ConnectivityPolicy) -> None:
        self.x = x
        self.y = y
        self.weight = weight
        self.policy = policy

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)

    def cost_from(self, source) -> float:
        return self.policy.cost(source, self)

    def __eq__(self, other) -> bool:
        if isinstance(other, GraphNode):
            return self.x == other.x and self.y == other.y
        if isinstance(other, tuple) and len(other) == 2:
            return self.x == other[0] and self.y == other[1]
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __repr__(self) -> str:
        return f"<GraphNode x={self.x} y={self.y} weight={self.weight}>"


def unsafe_cost(source, target: GraphNode) -> float:
    """
    Cost of the step from source onto target.

    No validation is done: target must be a GraphNode and source must be
    adjacent to (or the same cell as) target. Only call it for a node and
    one of its neighbours.
    """
    return target.cost_from(source)


class Graph:
    """
    Undirected graph of the positive cells of a grid.

    grid: rows of non-negative weights (ragged rows allowed). A weight of 0
    (or less) leaves the cell out of the graph; any other value is the cost
    of stepping onto that cell.
    policy: ORTHOGONAL (4 neighbours) or DIAGONAL (8 neighbours).
    """

    def __init__(self, grid, policy: ConnectivityPolicy = ORTHOGONAL) -> None:
        self.policy = policy
        self._nodes: Dict[Point, GraphNode] = {}
        # dict values are unused, keys act as an insertion-ordered set
        self._adjacency: Dict[Point, Dict[Point, None]] = {}
        for y, row in enumerate(grid):
            for x, value in enumerate(row):
                if value > BLOCKED:
                    self._add_node(GraphNode(x, y, value, policy))

    def _add_node(self, node: GraphNode) -> None:
        point = node.point
        self._nodes[point] = node
        links = self._adjacency[point] = {}
        for neighbor in self.policy.potential_neighbors(point):
            neighbor_links = self._adjacency.get(neighbor)
            if neighbor_links is not None:
                links[neighbor] = None
                neighbor_links[point] = None

    def get(self, point) -> Optional[GraphNode]:
        """Return the node at the given coordinates, or None if not part of the graph."""
        return self._nodes.get(point)

    def neighbors_of(self, point) -> List[GraphNode]:
        """Return the nodes adjacent to point; empty if point is not a node."""
        links = self._adjacency.get(point)
        if not links:
            return []
        return [self._nodes[neighbor] for neighbor in links]

    def __contains__(self, point) -> bool:
        return point in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self._nodes.values())

    def __repr__(self) -> str:
        return f"<{self.policy.name} nodes={len(self._nodes)}>"
