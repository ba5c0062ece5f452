"""
Agent module: moves an agent along waypoints produced by a Pathfinder.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .config import AGENT_SPEED

if TYPE_CHECKING:
    from .pathfinding import Pathfinder

Vector = Tuple[float, ...]


def move_towards(
    current: Sequence[float], target: Sequence[float], max_delta: float
) -> Vector:
    """Step from ``current`` toward ``target`` by at most ``max_delta``, landing exactly on it."""
    dist = math.dist(current, target)
    if dist <= max_delta or dist == 0.0:
        return tuple(float(t) for t in target)
    scale = max_delta / dist
    return tuple(c + (t - c) * scale for c, t in zip(current, target))


class Agent:
    """Represents an agent following a path toward a target."""

    def __init__(self, position: Sequence[float], speed: float = AGENT_SPEED):
        # Position in world coordinates
        self.position: Vector = tuple(float(p) for p in position)
        # Movement speed in map units per second
        self.speed = float(speed)
        # Remaining waypoints, next one first
        self.path: List[Vector] = []
        self._has_reached_next_node = True
        self._last_target: Optional[Vector] = None

    def __repr__(self):
        coords = " ".join(f"{p:.2f}" for p in self.position)
        return f"<Agent pos=({coords}) waypoints={len(self.path)}>"

    def follow(
        self, pathfinder: Pathfinder, target: Sequence[float], dt: float
    ) -> Vector:
        """
        Advance one frame toward ``target`` and return the new position.

        A new path is requested once the next waypoint has been reached (so a
        half-walked step never clips an obstacle), whenever no path is held,
        and whenever the target moved since the last request.
        """
        target = tuple(float(t) for t in target)
        if (
            self._has_reached_next_node
            or not self.path
            or target != self._last_target
        ):
            self.path = pathfinder.find_path(self.position, target)
            self._has_reached_next_node = False
            self._last_target = target

        if self.path:
            self.position = move_towards(
                self.position, self.path[0], self.speed * dt
            )
            if self.position == self.path[0]:
                self._has_reached_next_node = True
        return self.position
