from __future__ import annotations
import logging
import pygame
from typing import Optional

from .world import World
from .pathfinding import Pathfinder
from .renderer import Renderer
from .input_handler import InputHandler
from .config import (
    SCREEN_WIDTH,
    SCREEN_HEIGHT,
    FPS,
    PRECALCULATE_NEIGHBORS,
    RECALCULATE_WALKABLE_NODES,
    PRINT_TIME_FOR_PATH,
    MAX_SEARCH_ITERATIONS,
)

logger = logging.getLogger(__name__)


class Simulation:
    """Host for the pathfinding core: grid lifecycle, agents, loop and drawing."""

    def __init__(
        self,
        world: Optional[World] = None,
        clock: Optional[pygame.time.Clock] = None,
    ) -> None:
        # Initialize Pygame and its subsystems
        pygame.init()
        self.screen_width = SCREEN_WIDTH
        self.screen_height = SCREEN_HEIGHT
        self.screen = pygame.display.set_mode(
            (self.screen_width, self.screen_height)
        )
        pygame.display.set_caption("navgrid")
        # Clock for frame rate (injectable for testing)
        self.clock = clock or pygame.time.Clock()
        self.fps = FPS
        # World, grid and search engine
        self.world = world if world is not None else World()
        self.grid = self.world.build_grid(
            precalculate_neighbors=PRECALCULATE_NEIGHBORS
        )
        self.pathfinder = Pathfinder(
            self.grid,
            print_time_for_path=PRINT_TIME_FOR_PATH,
            max_iterations=MAX_SEARCH_ITERATIONS,
        )
        self.recalculate_walkable_nodes = RECALCULATE_WALKABLE_NODES
        self.agents = list(self.world.agents)
        # Default target: the world's, else the grid center
        self.target = (
            self.world.target
            if self.world.target is not None
            else tuple(float(c) for c in self.grid.center)
        )
        self.renderer = Renderer(
            self.screen_width, self.screen_height, self.grid
        )
        self.input = InputHandler()
        self.paused = False
        self.running = True

    def handle_events(self) -> None:
        """Process input events via InputHandler and apply toggles and clicks."""
        self.input.process_events()
        if self.input.should_quit():
            self.running = False
        if self.input.pause_pressed():
            self.paused = not self.paused
        if self.input.toggle_grid_pressed():
            self.renderer.display_grid_gizmos = (
                not self.renderer.display_grid_gizmos
            )
        if self.input.toggle_unwalkable_only_pressed():
            self.renderer.display_only_unwalkable_gizmos = (
                not self.renderer.display_only_unwalkable_gizmos
            )
        if self.input.refresh_pressed():
            self.grid.refresh_walkability()
            logger.info(
                "Walkability refreshed: %d of %d cells walkable",
                self.grid.walkable_count(),
                self.grid.max_size,
            )
        click = self.input.target_click()
        if click is not None:
            self.target = self.renderer.screen_to_world(click)

    def update(self, dt: float) -> None:
        """Refresh walkability if enabled, then move every agent one frame."""
        if self.paused:
            return
        # Refresh before searching so no search sees a half-updated grid
        if self.recalculate_walkable_nodes:
            self.grid.refresh_walkability()
        for agent in self.agents:
            agent.follow(self.pathfinder, self.target, dt)

    def render(self) -> None:
        """Render the entire scene."""
        self.renderer.render(self.screen, self.agents, self.target)

    def run(self) -> None:
        """Main loop: handle events, update, and render."""
        while self.running:
            # Cap the frame rate and compute delta time in seconds
            dt = self.clock.tick(self.fps) / 1000.0
            self.handle_events()
            self.update(dt)
            self.render()
        pygame.quit()
