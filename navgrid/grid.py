"""
Uniform 2D/3D lattice of cells: geometry, walkability and neighbor topology.
"""

from __future__ import annotations
import itertools
import logging
from typing import (
    Callable,
    Iterator,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
)

import numpy as np

from .config import (
    OBSTACLE_DETECTION_SCALE,
    OBSTACLE_DETECTION_SCALE_MIN,
    OBSTACLE_DETECTION_SCALE_MAX,
    PRECALCULATE_NEIGHBORS,
)

logger = logging.getLogger(__name__)

Coords = Tuple[int, ...]
WorldPosition = Tuple[float, ...]
ObstacleProbe = Callable[[WorldPosition, float], bool]


class Cell(NamedTuple):
    """Read-only snapshot of one grid cell."""

    id: int
    coords: Coords
    walkable: bool
    world_position: WorldPosition


class GridSpace:
    """
    Grid of ``round(world_size / (2 * node_radius))`` cells per axis centered
    on ``center``.

    Cells are addressed by a stable integer id: the row-major index of their
    coordinates with the x axis varying slowest. Walkability comes from the
    external ``is_blocked(center, radius)`` probe and can be refreshed in
    place; geometry and adjacency never change after construction.
    """

    def __init__(
        self,
        world_size: Sequence[float],
        node_radius: float,
        is_blocked: ObstacleProbe,
        center: Optional[Sequence[float]] = None,
        obstacle_detection_scale: float = OBSTACLE_DETECTION_SCALE,
        precalculate_neighbors: bool = PRECALCULATE_NEIGHBORS,
    ) -> None:
        size = np.asarray(world_size, dtype=float)
        if size.ndim != 1 or size.shape[0] not in (2, 3):
            raise ValueError(
                f"world_size must have 2 or 3 components, got {world_size!r}"
            )
        if np.any(size <= 0):
            raise ValueError(f"world_size must be positive, got {world_size!r}")
        if node_radius <= 0:
            raise ValueError(f"node_radius must be > 0, got {node_radius}")
        if not (
            OBSTACLE_DETECTION_SCALE_MIN
            < obstacle_detection_scale
            <= OBSTACLE_DETECTION_SCALE_MAX
        ):
            raise ValueError(
                "obstacle_detection_scale must be in "
                f"({OBSTACLE_DETECTION_SCALE_MIN}, {OBSTACLE_DETECTION_SCALE_MAX}], "
                f"got {obstacle_detection_scale}"
            )
        if center is None:
            origin = np.zeros_like(size)
        else:
            origin = np.asarray(center, dtype=float)
            if origin.shape != size.shape:
                raise ValueError(
                    f"center {center!r} does not match world_size {world_size!r}"
                )

        self.world_size = size
        self.center = origin
        self.node_radius = float(node_radius)
        self.node_diameter = self.node_radius * 2
        self.obstacle_detection_scale = float(obstacle_detection_scale)
        self.precalculate_neighbors = bool(precalculate_neighbors)
        self._is_blocked = is_blocked

        # round() is half-to-even, matching the cell counts of the Unity grid
        self.shape: Coords = tuple(
            int(round(float(axis) / self.node_diameter)) for axis in size
        )
        if any(count < 1 for count in self.shape):
            raise ValueError(
                f"world_size {world_size!r} holds no cells of radius {node_radius}"
            )
        self.dimensions = len(self.shape)
        self._strides: Coords = tuple(
            int(np.prod(self.shape[axis + 1:], dtype=np.int64))
            for axis in range(self.dimensions)
        )
        self._coords: List[Coords] = list(
            itertools.product(*(range(count) for count in self.shape))
        )

        # cell (0, 0[, 0]) sits node_radius inside the lower corner
        lower = self.center - self.world_size / 2.0
        self._positions = (
            lower
            + np.asarray(self._coords, dtype=float) * self.node_diameter
            + self.node_radius
        )
        self.walkable = np.ones(self.max_size, dtype=bool)
        self.refresh_walkability()

        self._offsets: List[Coords] = [
            offset
            for offset in itertools.product((-1, 0, 1), repeat=self.dimensions)
            if any(offset)
        ]
        self._neighbor_table: Optional[List[Tuple[int, ...]]] = None
        if self.precalculate_neighbors:
            self._precalculate_neighbors()

        logger.info(
            "Created %s grid: %d cells, %d unwalkable",
            "x".join(str(count) for count in self.shape),
            self.max_size,
            self.max_size - self.walkable_count(),
        )

    @classmethod
    def from_extent(
        cls,
        world_size: Sequence[float],
        node_radius: float,
        is_blocked: ObstacleProbe,
        **kwargs,
    ) -> GridSpace:
        """Build a grid from its world extent; keyword options as __init__."""
        return cls(world_size, node_radius, is_blocked, **kwargs)

    @property
    def max_size(self) -> int:
        """Total number of cells."""
        return len(self._coords)

    def __len__(self) -> int:
        return self.max_size

    def __iter__(self) -> Iterator[Cell]:
        for cell_id in range(self.max_size):
            yield self.cell(cell_id)

    def cell_id(self, coords: Sequence[int]) -> int:
        """Return the id of the cell at integer ``coords``."""
        if len(coords) != self.dimensions or not all(
            0 <= c < count for c, count in zip(coords, self.shape)
        ):
            raise IndexError(f"cell {tuple(coords)} outside grid {self.shape}")
        return sum(c * stride for c, stride in zip(coords, self._strides))

    def coords(self, cell: int) -> Coords:
        return self._coords[cell]

    def world_position(self, cell: int) -> WorldPosition:
        return tuple(self._positions[cell].tolist())

    def is_walkable(self, cell: int) -> bool:
        return bool(self.walkable[cell])

    def set_walkable(self, cell: int, walkable: bool) -> None:
        """Override one cell's flag until the next refresh."""
        self.walkable[cell] = walkable

    def cell(self, cell: int) -> Cell:
        return Cell(
            cell,
            self._coords[cell],
            bool(self.walkable[cell]),
            self.world_position(cell),
        )

    def walkable_count(self) -> int:
        return int(np.count_nonzero(self.walkable))

    def refresh_walkability(self) -> None:
        """
        Re-run the obstacle probe for every cell center in place.
        The neighbor table is topology only and is left as is.
        """
        radius = self.node_radius * self.obstacle_detection_scale
        probe = self._is_blocked
        for cell, center in enumerate(self._positions.tolist()):
            self.walkable[cell] = not probe(tuple(center), radius)

    def locate(self, world_position: Sequence[float]) -> int:
        """
        Return the cell nearest ``world_position``.

        Each axis is mapped to a 0..1 fraction of the grid extent and clamped,
        so positions outside the grid resolve to the closest boundary cell.
        """
        position = np.asarray(world_position, dtype=float)
        if position.shape != (self.dimensions,):
            raise ValueError(
                f"expected a {self.dimensions}D position, got {world_position!r}"
            )
        percent = np.clip(
            (position - self.center) / self.world_size + 0.5, 0.0, 1.0
        )
        coords = tuple(
            int(round((count - 1) * float(p)))
            for count, p in zip(self.shape, percent)
        )
        return self.cell_id(coords)

    def neighbors(self, cell: int) -> Tuple[int, ...]:
        """In-bounds Chebyshev-1 neighbors of ``cell`` (walkable or not)."""
        if not self.precalculate_neighbors:
            return self.neighbors_realtime(cell)
        return self.neighbors_precalculated(cell)

    def neighbors_realtime(self, cell: int) -> Tuple[int, ...]:
        # faster startup, cheaper for one-off requests
        coords = self._coords[cell]
        shape = self.shape
        strides = self._strides
        result = []
        for offset in self._offsets:
            check = [c + o for c, o in zip(coords, offset)]
            if all(0 <= c < count for c, count in zip(check, shape)):
                result.append(sum(c * s for c, s in zip(check, strides)))
        return tuple(result)

    def neighbors_precalculated(self, cell: int) -> Tuple[int, ...]:
        # slower startup, cheaper for many requests
        if self._neighbor_table is None:
            self._precalculate_neighbors()
        return self._neighbor_table[cell]

    def _precalculate_neighbors(self) -> None:
        self._neighbor_table = [
            self.neighbors_realtime(cell) for cell in range(self.max_size)
        ]
        logger.debug("Precalculated neighbors for %d cells", self.max_size)
