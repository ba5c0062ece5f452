"""
Top-down pygame renderer for debug gizmos: grid cells, paths, agents, target.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

import pygame

from .config import (
    SCREEN_MARGIN,
    DISPLAY_GRID_GIZMOS,
    DISPLAY_ONLY_UNWALKABLE_GIZMOS,
    DISPLAY_PATH_GIZMOS,
    BACKGROUND_COLOR,
    WALKABLE_COLOR,
    UNWALKABLE_COLOR,
    PATH_COLOR,
    AGENT_COLOR,
    TARGET_COLOR,
)

if TYPE_CHECKING:
    from .agent import Agent
    from .grid import GridSpace

logger = logging.getLogger(__name__)


class Renderer:
    """
    Draws a GridSpace seen from above (first two axes, y up), scaled
    uniformly to fit the screen. 3D grids show a single z ``layer``.
    """

    def __init__(
        self,
        width: int,
        height: int,
        grid: GridSpace,
        margin: int = SCREEN_MARGIN,
    ) -> None:
        self.width = width
        self.height = height
        self.grid = grid
        size_x, size_y = (float(v) for v in grid.world_size[:2])
        self.scale = min(
            (width - 2 * margin) / size_x, (height - 2 * margin) / size_y
        )
        if self.scale <= 0:
            raise ValueError(f"screen {width}x{height} too small for margin {margin}")
        self.offset_x = (width - size_x * self.scale) / 2.0
        self.offset_y = (height - size_y * self.scale) / 2.0
        self._lower = [
            float(c - s / 2.0)
            for c, s in zip(grid.center[:2], grid.world_size[:2])
        ]
        self.layer = 0
        self.display_grid_gizmos = DISPLAY_GRID_GIZMOS
        self.display_only_unwalkable_gizmos = DISPLAY_ONLY_UNWALKABLE_GIZMOS
        self.display_path_gizmos = DISPLAY_PATH_GIZMOS
        logger.debug("Renderer scale %.2f px per unit", self.scale)

    def world_to_screen(self, position: Sequence[float]) -> Tuple[int, int]:
        """Map a world position to integer pixel coordinates."""
        x = self.offset_x + (position[0] - self._lower[0]) * self.scale
        y = self.height - self.offset_y - (position[1] - self._lower[1]) * self.scale
        return (int(round(x)), int(round(y)))

    def screen_to_world(self, point: Sequence[int]) -> Tuple[float, ...]:
        """Inverse of world_to_screen; 3D grids get the z of the shown layer."""
        x = (point[0] - self.offset_x) / self.scale + self._lower[0]
        y = (self.height - self.offset_y - point[1]) / self.scale + self._lower[1]
        if self.grid.dimensions == 3:
            z = float(self.grid.center[2] - self.grid.world_size[2] / 2.0)
            z += (self.layer + 0.5) * self.grid.node_diameter
            return (x, y, z)
        return (x, y)

    def render(
        self,
        screen: pygame.Surface,
        agents: Sequence[Agent],
        target: Optional[Sequence[float]],
    ) -> None:
        """Draw one frame and flip the display."""
        screen.fill(BACKGROUND_COLOR)
        if self.display_grid_gizmos:
            self._draw_grid(screen)
        if self.display_path_gizmos:
            for agent in agents:
                self._draw_path(screen, agent)
        marker = max(2, int(self.grid.node_radius * self.scale))
        for agent in agents:
            pygame.draw.circle(
                screen, AGENT_COLOR, self.world_to_screen(agent.position), marker
            )
        if target is not None:
            pygame.draw.circle(
                screen, TARGET_COLOR, self.world_to_screen(target), marker, 2
            )
        pygame.display.flip()

    def _draw_grid(self, screen: pygame.Surface) -> None:
        grid = self.grid
        # shrink a little so neighbouring outlines stay apart
        cell_px = max(1, int(grid.node_diameter * self.scale) - 2)
        for cell in grid:
            if grid.dimensions == 3 and cell.coords[2] != self.layer:
                continue
            if self.display_only_unwalkable_gizmos and cell.walkable:
                continue
            color = WALKABLE_COLOR if cell.walkable else UNWALKABLE_COLOR
            rect = pygame.Rect(0, 0, cell_px, cell_px)
            rect.center = self.world_to_screen(cell.world_position)
            pygame.draw.rect(screen, color, rect, 1)

    def _draw_path(self, screen: pygame.Surface, agent: Agent) -> None:
        if not agent.path:
            return
        points = [self.world_to_screen(agent.position)]
        points.extend(self.world_to_screen(p) for p in agent.path)
        pygame.draw.lines(screen, PATH_COLOR, False, points, 2)
        radius = max(2, int(self.grid.node_radius * self.scale * 0.5))
        for point in points[1:]:
            pygame.draw.circle(screen, PATH_COLOR, point, radius, 1)
