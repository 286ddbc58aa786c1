from __future__ import annotations
import os
import json
import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from .config import ALLOW_DIAGONAL, BLOCKED, MAP_FILE
from .pathfinding import Heuristic, Pathfinding

logger = logging.getLogger(__name__)


def as_grid(grid) -> List[List[float]]:
    """
    Normalise grid input to a list of rows of plain Python numbers.
    Accepts nested sequences (ragged rows allowed) or a 2D numpy array.
    """
    if isinstance(grid, np.ndarray):
        if grid.ndim != 2:
            raise ValueError(f"Grid array must be 2D, got shape {grid.shape}")
        return grid.tolist()
    return [list(row) for row in grid]


class World:
    """World map loaded from an external JSON file (default) or provided grid."""

    def __init__(self, grid=None, map_file: Optional[str] = None) -> None:
        if grid is not None:
            self.map = as_grid(grid)
        else:
            # Load map from JSON file: {"map": [[...], ...]}
            map_path = map_file or os.path.join(os.path.dirname(__file__), MAP_FILE)
            try:
                with open(map_path, "r") as f:
                    data = json.load(f)
                rows = data["map"]
                if not isinstance(rows, list) or not all(
                    isinstance(row, list) for row in rows
                ):
                    raise ValueError("'map' must be a list of rows")
                self.map = as_grid(rows)
            except Exception as e:
                raise RuntimeError(
                    f"Failed to load world map from {map_path}: {e}"
                ) from e
        self.height = len(self.map)
        self.width = max((len(row) for row in self.map), default=0)
        if grid is None:
            logger.debug(
                "Loaded %dx%d map from %s", self.width, self.height, map_path
            )
        self._pathfinders: Dict[Tuple[bool, Optional[Heuristic]], Pathfinding] = {}

    def weight_at(self, x: int, y: int) -> float:
        """Return the cell weight, or 0 outside the grid (including ragged gaps)."""
        if x < 0 or y < 0 or y >= self.height:
            return 0
        row = self.map[y]
        if x >= len(row):
            return 0
        return row[x]

    def is_walkable(self, x: int, y: int) -> bool:
        """Return True if (x, y) is inside the grid and part of the graph."""
        return self.weight_at(x, y) > BLOCKED

    def pathfinding(
        self,
        allow_diagonal: bool = ALLOW_DIAGONAL,
        heuristic: Optional[Heuristic] = None,
    ) -> Pathfinding:
        """Return a Pathfinding for this map, built once per option combination."""
        key = (allow_diagonal, heuristic)
        pathfinder = self._pathfinders.get(key)
        if pathfinder is None:
            pathfinder = Pathfinding(
                self.map, allow_diagonal=allow_diagonal, heuristic=heuristic
            )
            self._pathfinders[key] = pathfinder
        return pathfinder
