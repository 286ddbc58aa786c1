"""
Pathfinding utilities: implements A* search over a weighted grid graph.
"""

from __future__ import annotations
import logging
import math
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from .config import ALLOW_DIAGONAL
from .graph import DIAGONAL, ORTHOGONAL, Graph, GraphNode, Point, unsafe_cost
from .heap import BinaryHeap

logger = logging.getLogger(__name__)

# Estimates the cost to reach goal from node.
# See https://theory.stanford.edu/~amitp/GameProgramming/Heuristics.html
Heuristic = Callable[[Point, Point], float]


def manhattan(node, goal) -> float:
    """Manhattan distance heuristic for 4-directional grids."""
    return abs(node.x - goal.x) + abs(node.y - goal.y)


def octile(node, goal) -> float:
    """Octile distance heuristic for 8-directional grids."""
    dx = abs(node.x - goal.x)
    dy = abs(node.y - goal.y)
    return (dx + dy) + (math.sqrt(2) - 2) * min(dx, dy)


def heuristic_for(allow_diagonal: bool) -> Heuristic:
    return octile if allow_diagonal else manhattan


class InvalidStartError(ValueError):
    """Raised when the start point of a search is not a traversable cell."""


class PathPoint:
    """
    Search state of one grid node during a single find() call.
    Attributes:
        node: The graph node this state belongs to.
        h: Heuristic estimate to the goal, computed once.
        g_score: Cheapest known cost from the start (None until discovered).
        previous: PathPoint through which g_score was reached.
        visited: Whether the node has been expanded.
    """

    __slots__ = ("node", "h", "g_score", "previous", "visited")

    def __init__(self, node: GraphNode, h: float) -> None:
        self.node = node
        self.h = h
        self.g_score: Optional[float] = None
        self.previous: Optional[PathPoint] = None
        self.visited = False

    @property
    def f_score(self) -> float:
        return self.g_score + self.h

    def updates_score_from(self, neighbor: PathPoint) -> bool:
        """
        Check whether reaching this point through neighbor is cheaper than the
        best known way. If so, record the new score and predecessor.
        Returns True if the score was updated.
        """
        g_score = neighbor.g_score + unsafe_cost(neighbor.node, self.node)
        if self.g_score is not None and g_score >= self.g_score:
            return False
        self.g_score = g_score
        self.previous = neighbor
        return True

    @staticmethod
    def closest(first: PathPoint, second: PathPoint) -> PathPoint:
        """Pick the point nearer the goal: lower h, then lower g_score, else second."""
        if first.h < second.h or (
            first.h == second.h and first.g_score < second.g_score
        ):
            return first
        return second

    def __repr__(self) -> str:
        return (
            f"<PathPoint x={self.node.x} y={self.node.y} "
            f"g={self.g_score} h={self.h:.2f}>"
        )


def _as_point(point) -> Point:
    """Accept a Point, a GraphNode or an (x, y) pair."""
    if hasattr(point, "x") and hasattr(point, "y"):
        return Point(point.x, point.y)
    if isinstance(point, (str, bytes, Mapping)):
        raise TypeError(f"Expected a point or an (x, y) pair, got {point!r}")
    try:
        x, y = point
    except (TypeError, ValueError):
        raise TypeError(
            f"Expected a point or an (x, y) pair, got {point!r}"
        ) from None
    return Point(x, y)


class Pathfinding:
    """
    A* search on a grid. The graph is built once and reused by every find() call.

    grid: rows of non-negative cell weights, 0 meaning impassable.
    allow_diagonal: use 8-directional movement (diagonal steps cost sqrt(2) times more).
    heuristic: callable (point, goal) -> estimate on Points; defaults to manhattan, or
        octile when diagonal movement is allowed.
    """

    def __init__(
        self,
        grid,
        allow_diagonal: bool = ALLOW_DIAGONAL,
        heuristic: Optional[Heuristic] = None,
    ) -> None:
        self.graph = Graph(grid, DIAGONAL if allow_diagonal else ORTHOGONAL)
        self.heuristic = heuristic or heuristic_for(allow_diagonal)

    def find(self, start, goal, closest: bool = False) -> List[Point]:
        """
        Find the cheapest path from start to goal.

        Returns the points after start up to and including goal, in walking
        order; [start] when start is the goal. An unreachable goal gives an
        empty list, or with closest=True the path to the reachable point
        nearest the goal (possibly just [start]).
        Raises InvalidStartError if start is not a traversable cell.
        """
        goal = _as_point(goal)
        start_node = self.graph.get(_as_point(start))
        if start_node is None:
            logger.warning("Search started outside the graph at %s", start)
            raise InvalidStartError(f"Invalid start point: {start}")

        converted: Dict[Point, PathPoint] = {}
        open_set = BinaryHeap(lambda path_point: path_point.f_score)
        closest_point = self._to_path_point(start_node, goal, converted)
        closest_point.g_score = 0
        open_set.push(closest_point)
        expanded = 0

        while open_set:
            current = open_set.pop()
            if current.node == goal:
                logger.debug(
                    "%s: reached %s from %s after %d expansions",
                    self, goal, start_node.point, expanded,
                )
                return self._reconstruct_path(current)
            current.visited = True
            expanded += 1
            for neighbor in self.graph.neighbors_of(current.node):
                path_point = self._to_path_point(neighbor, goal, converted)
                if path_point.visited:
                    continue
                if not path_point.updates_score_from(current):
                    continue
                if closest:
                    closest_point = PathPoint.closest(closest_point, path_point)
                if path_point in open_set:
                    open_set.update(path_point)
                else:
                    open_set.push(path_point)

        logger.debug(
            "%s: %s unreachable from %s after %d expansions",
            self, goal, start_node.point, expanded,
        )
        if closest:
            return self._reconstruct_path(closest_point)
        return []

    def _to_path_point(
        self, node: GraphNode, goal: Point, converted: Dict[Point, PathPoint]
    ) -> PathPoint:
        path_point = converted.get(node.point)
        if path_point is None:
            path_point = PathPoint(node, self.heuristic(node.point, goal))
            converted[node.point] = path_point
        return path_point

    @staticmethod
    def _reconstruct_path(target: PathPoint) -> List[Point]:
        path = [target.node.point]
        # stop before the start point, which has no predecessor
        while target.previous is not None and target.previous.previous is not None:
            target = target.previous
            path.append(target.node.point)
        path.reverse()
        return path

    def __str__(self) -> str:
        name = getattr(self.heuristic, "__name__", type(self.heuristic).__name__)
        return f"A* on {self.graph.policy.name} (with {name} heuristic)"


def find_path(
    start,
    goal,
    grid,
    allow_diagonal: bool = ALLOW_DIAGONAL,
    closest: bool = False,
) -> List[Point]:
    """
    One-shot search: build a Pathfinding for grid and run find() once.
    Prefer a Pathfinding instance when searching the same grid repeatedly.
    """
    return Pathfinding(grid, allow_diagonal=allow_diagonal).find(
        start, goal, closest=closest
    )


def path_cost(graph: Graph, start, path: Sequence) -> float:
    """Total cost of walking path (as returned by find()) from start."""
    start = _as_point(start)
    steps = list(path)
    if steps and _as_point(steps[0]) == start:
        steps = steps[1:]
    total = 0
    previous = graph.get(start)
    for point in steps:
        node = graph.get(_as_point(point))
        total += unsafe_cost(previous, node)
        previous = node
    return total
