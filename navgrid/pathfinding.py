"""
Pathfinding utilities: implements grid-based A* search.
"""

from __future__ import annotations
import logging
import time
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Sequence, Set

from .config import MAX_SEARCH_ITERATIONS, MOVE_COSTS, PRINT_TIME_FOR_PATH
from .heap import IndexedPriorityQueue
from .simplify import simplify_path

if TYPE_CHECKING:
    from .grid import GridSpace, WorldPosition

logger = logging.getLogger(__name__)


def get_distance(a: Sequence[int], b: Sequence[int]) -> int:
    """
    Integer move cost between two cell coordinates.

    The absolute per-axis deltas are sorted ascending. The smallest band is
    walked moving along every axis at once, the next along one axis fewer,
    and so on, each band charged from MOVE_COSTS: 14 * min + 10 * (max - min)
    in 2D, 17a + 14(b - a) + 10(c - b) in 3D. Used as both edge cost and
    heuristic, which keeps the heuristic admissible.
    """
    deltas = sorted(abs(pa - pb) for pa, pb in zip(a, b))
    try:
        costs = MOVE_COSTS[len(deltas)]
    except KeyError:
        raise ValueError(f"no move costs for {len(deltas)}D coordinates")
    distance = 0
    previous = 0
    for axes, delta in zip(range(len(deltas), 0, -1), deltas):
        distance += costs[axes - 1] * (delta - previous)
        previous = delta
    return distance


def retrace_path(parents: Sequence[int], start: int, goal: int) -> List[int]:
    """Follow parent links from goal back to start; returned start first."""
    path = []
    current = goal
    while current != start:
        path.append(current)
        current = parents[current]
    path.append(start)
    path.reverse()
    return path


class SearchStats(NamedTuple):
    """Outcome of the most recent search."""

    found: bool
    expanded: int
    elapsed_ms: float


class Pathfinder:
    """
    A* over a GridSpace.

    Open and closed sets plus the per-cell g/h/parent tables are allocated
    once for the grid and cleared on every call, so one instance serves many
    searches but only one at a time.
    """

    def __init__(
        self,
        grid: GridSpace,
        print_time_for_path: bool = PRINT_TIME_FOR_PATH,
        max_iterations: Optional[int] = MAX_SEARCH_ITERATIONS,
    ) -> None:
        if max_iterations is not None and max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        self.grid = grid
        self.print_time_for_path = print_time_for_path
        self.max_iterations = max_iterations
        size = grid.max_size
        self._g_cost: List[int] = [0] * size
        self._h_cost: List[int] = [0] * size
        self._parent: List[int] = [-1] * size
        self._open_set = IndexedPriorityQueue(size, self._compare)
        self._closed_set: Set[int] = set()
        self.last_search: Optional[SearchStats] = None

    @property
    def node_radius(self) -> float:
        return self.grid.node_radius

    def f_cost(self, cell: int) -> int:
        return self._g_cost[cell] + self._h_cost[cell]

    def _compare(self, a: int, b: int) -> int:
        # lower f first, then lower h
        g = self._g_cost
        h = self._h_cost
        fa = g[a] + h[a]
        fb = g[b] + h[b]
        if fa != fb:
            return 1 if fa < fb else -1
        if h[a] != h[b]:
            return 1 if h[a] < h[b] else -1
        return 0

    def find_path(
        self, start_pos: Sequence[float], target_pos: Sequence[float]
    ) -> List[WorldPosition]:
        """
        Waypoints from ``start_pos`` to ``target_pos`` in world coordinates.

        Only cells where the direction changes are returned, ending with the
        goal cell center. An empty list means the goal is unwalkable or
        unreachable (or start and goal share a cell). Positions outside the
        grid are clamped to the nearest boundary cell.
        """
        start = self.grid.locate(start_pos)
        goal = self.grid.locate(target_pos)
        return simplify_path(self.find_cell_path(start, goal), self.grid)

    def find_cell_path(self, start: int, goal: int) -> List[int]:
        """Raw start-first chain of cell ids, or an empty list if none."""
        started = time.perf_counter()
        grid = self.grid
        # start walkability is not checked: agents may stand in fresh rubble
        if not grid.is_walkable(goal):
            logger.debug("Goal cell %s is not walkable", grid.coords(goal))
            self._record(False, 0, started)
            return []

        open_set = self._open_set
        closed_set = self._closed_set
        g_cost = self._g_cost
        h_cost = self._h_cost
        parent = self._parent
        walkable = grid.walkable
        coords = grid.coords
        goal_coords = coords(goal)

        open_set.clear()
        closed_set.clear()
        g_cost[start] = 0
        h_cost[start] = get_distance(coords(start), goal_coords)
        parent[start] = -1
        open_set.add(start)

        expanded = 0
        while open_set.count > 0:
            if self.max_iterations is not None and expanded >= self.max_iterations:
                logger.warning(
                    "Search from %s to %s gave up after %d cells",
                    coords(start),
                    goal_coords,
                    expanded,
                )
                self._record(False, expanded, started)
                return []

            current = open_set.remove_first()
            closed_set.add(current)
            expanded += 1

            if current == goal:
                path = retrace_path(parent, start, goal)
                stats = self._record(True, expanded, started)
                if self.print_time_for_path:
                    logger.info("Time for found path: %.2f ms", stats.elapsed_ms)
                return path

            current_coords = coords(current)
            for neighbor in grid.neighbors(current):
                if not walkable[neighbor] or neighbor in closed_set:
                    continue
                neighbor_coords = coords(neighbor)
                new_cost = g_cost[current] + get_distance(
                    current_coords, neighbor_coords
                )
                in_open = open_set.contains(neighbor)
                if new_cost < g_cost[neighbor] or not in_open:
                    g_cost[neighbor] = new_cost
                    h_cost[neighbor] = get_distance(neighbor_coords, goal_coords)
                    parent[neighbor] = current
                    if in_open:
                        open_set.update_item(neighbor)
                    else:
                        open_set.add(neighbor)

        logger.debug(
            "No path from %s to %s (%d cells expanded)",
            coords(start),
            goal_coords,
            expanded,
        )
        self._record(False, expanded, started)
        return []

    def _record(self, found: bool, expanded: int, started: float) -> SearchStats:
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        self.last_search = SearchStats(found, expanded, elapsed_ms)
        return self.last_search
