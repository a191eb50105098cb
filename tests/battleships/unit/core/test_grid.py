import numpy as np
import pytest

from battleships.game.core.grid import SeaGrid
from battleships.game.core.models import (
    Coord,
    FleetPlacement,
    Orientation,
    ResultOfAttack,
    ShipPlacement,
    ShipType,
    TileView,
)


def test_grid_can_place_and_rejects_overlap_or_oob() -> None:
    grid = SeaGrid()
    carrier = ShipPlacement(ShipType.CARRIER, Coord(0, 0), Orientation.HORIZONTAL)
    assert grid.can_place(carrier)
    grid.place_ship(carrier)
    assert not grid.can_place(ShipPlacement(ShipType.DESTROYER, Coord(0, 4), Orientation.VERTICAL))
    assert not grid.can_place(ShipPlacement(ShipType.BATTLESHIP, Coord(0, 7), Orientation.HORIZONTAL))
    assert not grid.can_place(ShipPlacement(ShipType.BATTLESHIP, Coord(7, 0), Orientation.VERTICAL))
    with pytest.raises(ValueError):
        grid.place_ship(ShipPlacement(ShipType.DESTROYER, Coord(0, 1), Orientation.HORIZONTAL))


def test_place_ship_moves_an_already_placed_type() -> None:
    grid = SeaGrid()
    grid.place_ship(ShipPlacement(ShipType.DESTROYER, Coord(0, 0), Orientation.HORIZONTAL))
    grid.place_ship(ShipPlacement(ShipType.DESTROYER, Coord(0, 1), Orientation.HORIZONTAL))
    assert grid.ship_at(0, 0) is None
    assert grid.ship_at(0, 1) is ShipType.DESTROYER
    assert grid.ship_at(0, 2) is ShipType.DESTROYER
    assert list(grid.placements()) == [ShipType.DESTROYER]


def test_hit_tile_outcomes(valid_fleet: FleetPlacement) -> None:
    grid = SeaGrid()
    grid.deploy(valid_fleet)

    assert grid.hit_tile(1, 0) == (ResultOfAttack.MISS, None)
    assert grid.hit_tile(1, 0) == (ResultOfAttack.SHOT_ALREADY, None)
    assert grid.hit_tile(8, 0) == (ResultOfAttack.HIT, None)
    assert grid.tile_view(8, 0) is TileView.HIT
    assert grid.hit_tile(8, 1) == (ResultOfAttack.DESTROYED, ShipType.DESTROYER)
    assert grid.tile_view(8, 0) is TileView.SUNK
    assert ShipType.DESTROYER not in grid.ships_afloat()
    assert not grid.all_ships_sunk()
    with pytest.raises(ValueError):
        grid.hit_tile(10, 0)


def test_all_ships_sunk_after_every_ship_cell_is_hit(valid_fleet: FleetPlacement) -> None:
    grid = SeaGrid()
    assert not grid.all_ships_sunk()
    grid.deploy(valid_fleet)
    for placement in valid_fleet.ships:
        for offset in range(placement.ship_type.size):
            grid.hit_tile(placement.bow.row, placement.bow.col + offset)
    assert grid.all_ships_sunk()
    assert grid.ships_afloat() == ()


def test_change_listener_fires_on_deployment_but_not_on_shots(valid_fleet: FleetPlacement) -> None:
    changes: list[SeaGrid] = []
    grid = SeaGrid(on_changed=changes.append)
    grid.deploy(valid_fleet)
    grid.remove_ship(ShipType.DESTROYER)
    assert changes == [grid, grid]
    grid.hit_tile(9, 9)
    grid.hit_tile(0, 0)
    assert len(changes) == 2


def test_deploy_rolls_back_on_invalid_fleet(valid_fleet: FleetPlacement) -> None:
    grid = SeaGrid()
    grid.deploy(valid_fleet)
    bad = FleetPlacement(
        ships=[
            ShipPlacement(ShipType.CARRIER, Coord(0, 0), Orientation.HORIZONTAL),
            ShipPlacement(ShipType.BATTLESHIP, Coord(0, 1), Orientation.VERTICAL),
        ]
    )
    with pytest.raises(ValueError):
        grid.deploy(bad)
    assert grid.placements() == {ship.ship_type: ship for ship in valid_fleet.ships}
    assert grid.fleet_complete()


def test_locked_grid_rejects_redeployment_but_accepts_shots(valid_fleet: FleetPlacement) -> None:
    grid = SeaGrid()
    grid.deploy(valid_fleet)
    grid.lock()
    with pytest.raises(RuntimeError):
        grid.remove_ship(ShipType.CARRIER)
    with pytest.raises(RuntimeError):
        grid.deploy(valid_fleet)
    assert grid.hit_tile(0, 0) == (ResultOfAttack.HIT, None)


def test_target_view_marks_sunk_cells_and_remaining_lengths(valid_fleet: FleetPlacement) -> None:
    grid = SeaGrid()
    grid.deploy(valid_fleet)
    grid.hit_tile(8, 0)
    grid.hit_tile(8, 1)
    grid.hit_tile(0, 0)
    grid.hit_tile(1, 1)

    view = grid.target_view()
    assert view.cells[8, 0] == TileView.SUNK
    assert view.cells[0, 0] == TileView.HIT
    assert view.cells[1, 1] == TileView.MISS
    assert view.remaining_lengths == (5, 4, 3, 3)
    assert Coord(0, 0) not in view.unknown_cells()
    assert len(view.unknown_cells()) == 96
    assert not view.cells.flags.writeable
    assert np.count_nonzero(view.cells) == 4
