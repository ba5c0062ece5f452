"""
Input handling abstraction to decouple Pygame input from simulation logic.
"""

from __future__ import annotations
import pygame
from typing import Optional, Tuple


class InputHandler:
    """
    Abstraction for gathering input state. Processes Pygame events and
    provides per-frame action queries.
    """

    def __init__(self) -> None:
        self._quit = False
        # Toggle grid gizmos (G) and the unwalkable-only filter (U)
        self._toggle_grid = False
        self._toggle_unwalkable_only = False
        # Toggle pause state (P key)
        self._pause = False
        # One-shot walkability refresh (R key)
        self._refresh = False
        # Screen position of a left click this frame
        self._click: Optional[Tuple[int, int]] = None

    def process_events(self) -> None:
        """Poll Pygame events and update per-frame action flags."""
        self._quit = False
        self._toggle_grid = False
        self._toggle_unwalkable_only = False
        self._pause = False
        self._refresh = False
        self._click = None
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._quit = True
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_x, pygame.K_ESCAPE):
                    self._quit = True
                elif event.key == pygame.K_g:
                    self._toggle_grid = True
                elif event.key == pygame.K_u:
                    self._toggle_unwalkable_only = True
                elif event.key == pygame.K_p:
                    self._pause = True
                elif event.key == pygame.K_r:
                    self._refresh = True
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._click = tuple(event.pos)

    def should_quit(self) -> bool:
        """Return True if a quit command was issued this frame."""
        return self._quit

    def toggle_grid_pressed(self) -> bool:
        return self._toggle_grid

    def toggle_unwalkable_only_pressed(self) -> bool:
        return self._toggle_unwalkable_only

    def pause_pressed(self) -> bool:
        """Return True if P key was pressed this frame to toggle pause state."""
        return self._pause

    def refresh_pressed(self) -> bool:
        return self._refresh

    def target_click(self) -> Optional[Tuple[int, int]]:
        """Return the screen position clicked this frame, if any."""
        return self._click
