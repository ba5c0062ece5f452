from __future__ import annotations
import os
import json
import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .config import (
    WORLD_FILE,
    NODE_RADIUS,
    OBSTACLE_DETECTION_SCALE,
    AGENT_SPEED,
)
from .agent import Agent
from .grid import GridSpace

logger = logging.getLogger(__name__)

Vector = Tuple[float, ...]


def _vector(value: Any, dimensions: Optional[int] = None) -> Vector:
    """Convert a JSON list to a float tuple, checking its length."""
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        raise ValueError(f"expected a 2D or 3D vector, got {value!r}")
    if dimensions is not None and len(value) != dimensions:
        raise ValueError(f"expected a {dimensions}D vector, got {value!r}")
    return tuple(float(v) for v in value)


class SphereObstacle:
    """Solid ball (a disc in 2D)."""

    def __init__(self, center: Sequence[float], radius: float) -> None:
        self.center = _vector(center)
        self.radius = float(radius)
        if self.radius <= 0:
            raise ValueError(f"sphere radius must be > 0, got {radius}")

    @property
    def dimensions(self) -> int:
        return len(self.center)

    def overlaps(self, center: Sequence[float], radius: float) -> bool:
        return math.dist(self.center, center) < self.radius + radius

    def __repr__(self) -> str:
        return f"<SphereObstacle center={self.center} radius={self.radius}>"


class BoxObstacle:
    """Axis-aligned solid box given by its min and max corners."""

    def __init__(self, lower: Sequence[float], upper: Sequence[float]) -> None:
        lo = _vector(lower)
        hi = _vector(upper, len(lo))
        # accept corners in any order
        self.lower = tuple(min(a, b) for a, b in zip(lo, hi))
        self.upper = tuple(max(a, b) for a, b in zip(lo, hi))

    @property
    def dimensions(self) -> int:
        return len(self.lower)

    def overlaps(self, center: Sequence[float], radius: float) -> bool:
        # distance from the probe center to the closest point of the box
        closest = [
            min(max(c, lo), hi)
            for c, lo, hi in zip(center, self.lower, self.upper)
        ]
        return math.dist(closest, center) < radius

    def __repr__(self) -> str:
        return f"<BoxObstacle lower={self.lower} upper={self.upper}>"


Obstacle = Union[SphereObstacle, BoxObstacle]


class World:
    """
    Obstacle layout loaded from an external file (default) or given directly.

    ``is_blocked`` is the obstacle probe a GridSpace samples every cell with.
    """

    def __init__(
        self,
        size: Optional[Sequence[float]] = None,
        center: Optional[Sequence[float]] = None,
        node_radius: float = NODE_RADIUS,
        obstacle_detection_scale: float = OBSTACLE_DETECTION_SCALE,
        obstacles: Optional[List[Obstacle]] = None,
        agents: Optional[List[Agent]] = None,
        target: Optional[Sequence[float]] = None,
        world_file: Optional[str] = None,
    ) -> None:
        self.obstacles: List[Obstacle] = []
        self.agents: List[Agent] = list(agents or [])
        if size is None:
            # Load layout from JSON: the given file or the bundled default
            world_path = world_file or os.path.join(
                os.path.dirname(__file__), WORLD_FILE
            )
            self._load(world_path)
            return
        self.size = _vector(size)
        self.center = (
            _vector(center, self.dimensions)
            if center is not None
            else (0.0,) * self.dimensions
        )
        self.node_radius = float(node_radius)
        self.obstacle_detection_scale = float(obstacle_detection_scale)
        for obstacle in obstacles or []:
            self.add_obstacle(obstacle)
        self.target = (
            _vector(target, self.dimensions) if target is not None else None
        )

    @property
    def dimensions(self) -> int:
        return len(self.size)

    def _load(self, world_path: str) -> None:
        try:
            with open(world_path, "r") as f:
                data = json.load(f)
            self._parse(data)
        except Exception as e:
            raise RuntimeError(f"Failed to load world from {world_path}: {e}")

    def _parse(self, data: Dict[str, Any]) -> None:
        self.size = _vector(data["size"])
        center = data.get("center")
        self.center = (
            _vector(center, self.dimensions)
            if center is not None
            else (0.0,) * self.dimensions
        )
        self.node_radius = float(data.get("node_radius", NODE_RADIUS))
        self.obstacle_detection_scale = float(
            data.get("obstacle_detection_scale", OBSTACLE_DETECTION_SCALE)
        )
        target = data.get("target")
        self.target = (
            _vector(target, self.dimensions) if target is not None else None
        )

        obs = data.get("obstacles")
        if isinstance(obs, list):
            for entry in obs:
                try:
                    self.add_obstacle(self._parse_obstacle(entry))
                except (ValueError, TypeError, KeyError, AttributeError) as e:
                    logger.warning("Skipping obstacle %r: %s", entry, e)

        spawns = data.get("agents")
        if isinstance(spawns, list):
            for entry in spawns:
                # Parse position: support 'pos' or per-axis fields
                try:
                    pos = entry.get("pos")
                    if pos is None:
                        axes = ("x", "y", "z")[: self.dimensions]
                        pos = [entry[axis] for axis in axes]
                    position = _vector(pos, self.dimensions)
                except (ValueError, TypeError, KeyError, AttributeError) as e:
                    logger.warning("Skipping agent %r: %s", entry, e)
                    continue
                try:
                    speed = float(entry.get("speed", AGENT_SPEED))
                except (TypeError, ValueError):
                    speed = AGENT_SPEED
                self.agents.append(Agent(position, speed=speed))

    @staticmethod
    def _parse_obstacle(entry: Dict[str, Any]) -> Obstacle:
        kind = entry.get("type")
        if kind == "sphere":
            return SphereObstacle(entry["center"], entry["radius"])
        if kind == "box":
            return BoxObstacle(entry["min"], entry["max"])
        raise ValueError(f"unknown obstacle type {kind!r}")

    def add_obstacle(self, obstacle: Obstacle) -> None:
        if obstacle.dimensions != self.dimensions:
            raise ValueError(
                f"{obstacle!r} does not match a {self.dimensions}D world"
            )
        self.obstacles.append(obstacle)

    def remove_obstacle(self, obstacle: Obstacle) -> None:
        self.obstacles.remove(obstacle)

    def is_blocked(self, center: Sequence[float], radius: float) -> bool:
        """Return True if a probe sphere at ``center`` touches any obstacle."""
        return any(ob.overlaps(center, radius) for ob in self.obstacles)

    def build_grid(self, **kwargs) -> GridSpace:
        """Sample this world into a GridSpace; kwargs as GridSpace options."""
        return GridSpace(
            self.size,
            self.node_radius,
            self.is_blocked,
            center=self.center,
            obstacle_detection_scale=self.obstacle_detection_scale,
            **kwargs,
        )
