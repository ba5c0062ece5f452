import pytest

from navgrid.grid import Cell, GridSpace


def never_blocked(center, radius):
    return False


class DummyWorld:
    """Probe stub: cells are 1x1 with their lower corner at the origin."""

    def __init__(self, blocked=None):
        self.blocked = set(blocked or [])
        self.calls = []

    def is_blocked(self, center, radius):
        self.calls.append((center, radius))
        return tuple(int(c) for c in center) in self.blocked


def unit_grid(shape, blocked=None, **kwargs):
    """Grid with 1-unit cells whose cell (i, j) is centered at (i+.5, j+.5)."""
    world = DummyWorld(blocked)
    center = [s / 2.0 for s in shape]
    grid = GridSpace(shape, 0.5, world.is_blocked, center=center, **kwargs)
    return grid, world


def test_cell_counts_from_extent_and_radius():
    grid = GridSpace((10, 5), 0.25, never_blocked)
    assert grid.shape == (20, 10)
    assert grid.max_size == 200
    assert len(grid) == 200
    assert grid.dimensions == 2
    assert grid.node_diameter == 0.5


def test_cell_counts_round_half_to_even():
    grid = GridSpace((2.5, 3.5), 0.5, never_blocked)
    assert grid.shape == (2, 4)


def test_from_extent_builds_same_grid():
    grid = GridSpace.from_extent(
        (4, 4, 2), 0.5, never_blocked, precalculate_neighbors=False
    )
    assert grid.shape == (4, 4, 2)
    assert not grid.precalculate_neighbors


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(world_size=(10,), node_radius=0.5),
        dict(world_size=(1, 1, 1, 1), node_radius=0.5),
        dict(world_size=(10, -1), node_radius=0.5),
        dict(world_size=(10, 10), node_radius=0.0),
        dict(world_size=(0.4, 10), node_radius=0.5),
        dict(world_size=(10, 10), node_radius=0.5, obstacle_detection_scale=0.1),
        dict(world_size=(10, 10), node_radius=0.5, obstacle_detection_scale=10.5),
        dict(world_size=(10, 10), node_radius=0.5, center=(0, 0, 0)),
    ],
)
def test_invalid_construction_raises(kwargs):
    with pytest.raises(ValueError):
        GridSpace(is_blocked=never_blocked, **kwargs)


def test_cell_centers_offset_by_radius_from_lower_corner():
    grid = GridSpace((3, 3), 0.5, never_blocked)
    assert grid.world_position(grid.cell_id((0, 0))) == pytest.approx((-1.0, -1.0))
    assert grid.world_position(grid.cell_id((1, 1))) == pytest.approx((0.0, 0.0))
    assert grid.world_position(grid.cell_id((2, 0))) == pytest.approx((1.0, -1.0))


def test_cell_centers_follow_grid_center():
    grid = GridSpace((4, 2, 2), 0.5, never_blocked, center=(10, 5, -1))
    assert grid.world_position(0) == pytest.approx((8.5, 4.5, -1.5))


def test_cell_ids_are_row_major():
    grid = GridSpace((3, 4), 0.5, never_blocked)
    assert grid.cell_id((1, 2)) == 6
    assert grid.coords(6) == (1, 2)
    for cell in range(grid.max_size):
        assert grid.cell_id(grid.coords(cell)) == cell


@pytest.mark.parametrize("coords", [(3, 0), (0, 4), (-1, 0), (0, 0, 0)])
def test_cell_id_out_of_range_raises(coords):
    grid = GridSpace((3, 4), 0.5, never_blocked)
    with pytest.raises(IndexError):
        grid.cell_id(coords)


def test_probe_called_once_per_cell_with_scaled_radius():
    world = DummyWorld()
    grid = GridSpace(
        (2, 3), 0.5, world.is_blocked, obstacle_detection_scale=0.8
    )
    assert len(world.calls) == grid.max_size
    assert all(radius == pytest.approx(0.4) for _, radius in world.calls)
    assert all(isinstance(center, tuple) for center, _ in world.calls)


def test_walkability_is_negated_probe():
    grid, _ = unit_grid((3, 3), blocked={(1, 1)})
    assert not grid.is_walkable(grid.cell_id((1, 1)))
    assert grid.is_walkable(grid.cell_id((0, 0)))
    assert grid.walkable_count() == 8


def test_refresh_walkability_updates_flags_in_place():
    grid, world = unit_grid((4, 4), blocked={(1, 1)})
    neighbors_before = [grid.neighbors(c) for c in range(grid.max_size)]
    world.blocked = {(2, 2), (3, 3)}
    grid.refresh_walkability()
    assert grid.is_walkable(grid.cell_id((1, 1)))
    assert not grid.is_walkable(grid.cell_id((2, 2)))
    assert not grid.is_walkable(grid.cell_id((3, 3)))
    assert [grid.neighbors(c) for c in range(grid.max_size)] == neighbors_before


def test_set_walkable_overrides_until_refresh():
    grid, _ = unit_grid((2, 2))
    grid.set_walkable(0, False)
    assert not grid.is_walkable(0)
    grid.refresh_walkability()
    assert grid.is_walkable(0)


def test_locate_maps_to_nearest_cell():
    grid = GridSpace((3, 3), 0.5, never_blocked)
    assert grid.coords(grid.locate((0.0, 0.0))) == (1, 1)
    assert grid.coords(grid.locate((-1.0, -1.0))) == (0, 0)
    assert grid.coords(grid.locate((1.0, -1.0))) == (2, 0)


@pytest.mark.parametrize(
    "outside,boundary",
    [
        ((100.0, 0.0), (1.5, 0.0)),
        ((-50.0, -50.0), (-1.5, -1.5)),
        ((0.0, 1e9), (0.0, 1.5)),
    ],
)
def test_locate_clamps_out_of_bounds_to_boundary(outside, boundary):
    grid = GridSpace((3, 3), 0.5, never_blocked)
    assert grid.locate(outside) == grid.locate(boundary)


def test_locate_3d_clamps_each_axis():
    grid = GridSpace((4, 4, 4), 0.5, never_blocked)
    assert grid.coords(grid.locate((99.0, -99.0, 0.1))) == (3, 0, 2)


def test_locate_rejects_wrong_dimensionality():
    grid = GridSpace((3, 3), 0.5, never_blocked)
    with pytest.raises(ValueError):
        grid.locate((0.0, 0.0, 0.0))


@pytest.mark.parametrize(
    "coords,count",
    [((0, 0), 3), ((1, 0), 5), ((1, 1), 8), ((2, 2), 3)],
)
def test_neighbor_counts_2d(coords, count):
    grid = GridSpace((3, 3), 0.5, never_blocked)
    neighbors = grid.neighbors(grid.cell_id(coords))
    assert len(neighbors) == count
    assert grid.cell_id(coords) not in neighbors


@pytest.mark.parametrize(
    "coords,count",
    [((0, 0, 0), 7), ((1, 1, 1), 26), ((1, 0, 0), 11), ((1, 1, 0), 17)],
)
def test_neighbor_counts_3d(coords, count):
    grid = GridSpace((3, 3, 3), 0.5, never_blocked)
    assert len(grid.neighbors(grid.cell_id(coords))) == count


def test_neighbors_are_chebyshev_one():
    grid = GridSpace((4, 3, 2), 0.5, never_blocked)
    for cell in range(grid.max_size):
        a = grid.coords(cell)
        for neighbor in grid.neighbors(cell):
            b = grid.coords(neighbor)
            assert max(abs(x - y) for x, y in zip(a, b)) == 1


def test_neighbors_include_unwalkable_cells():
    grid, _ = unit_grid((3, 3), blocked={(1, 1)})
    assert grid.cell_id((1, 1)) in grid.neighbors(grid.cell_id((0, 0)))


@pytest.mark.parametrize("world_size", [(5, 4), (3, 4, 5), (1, 1), (1, 1, 3)])
def test_realtime_and_precalculated_neighbors_match(world_size):
    precalc = GridSpace(world_size, 0.5, never_blocked, precalculate_neighbors=True)
    realtime = GridSpace(world_size, 0.5, never_blocked, precalculate_neighbors=False)
    for cell in range(precalc.max_size):
        assert precalc.neighbors(cell) == realtime.neighbors(cell)
        assert precalc.neighbors_precalculated(cell) == precalc.neighbors_realtime(cell)


def test_iteration_yields_cell_views():
    grid, _ = unit_grid((2, 2), blocked={(1, 0)})
    cells = list(grid)
    assert len(cells) == 4
    assert all(isinstance(c, Cell) for c in cells)
    blocked = [c for c in cells if not c.walkable]
    assert [c.coords for c in blocked] == [(1, 0)]
    assert blocked[0].world_position == pytest.approx((1.5, 0.5))
    assert grid.cell(blocked[0].id) == blocked[0]
