"""
Path simplification: keep only the cells where the walking direction changes.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from .grid import GridSpace, WorldPosition


def simplify_path(path: Sequence[int], grid: GridSpace) -> List[WorldPosition]:
    """
    Reduce a start-first chain of cell ids to turning-point waypoints.

    The chain is walked goal first. Each step's integer direction is compared
    with the previous one (initially zero) and the cell the step leaves from
    is kept on every change. The goal is therefore always kept and the start
    never is; a single-cell path gives no waypoints. Returned start-first, in
    world coordinates.
    """
    waypoints: List[WorldPosition] = []
    reverse = list(reversed(path))
    direction_old = (0,) * grid.dimensions
    for previous, current in zip(reverse, reverse[1:]):
        a = grid.coords(previous)
        b = grid.coords(current)
        direction_new = tuple(pa - pb for pa, pb in zip(a, b))
        if direction_new != direction_old:
            waypoints.append(grid.world_position(previous))
        direction_old = direction_new
    waypoints.reverse()
    return waypoints
