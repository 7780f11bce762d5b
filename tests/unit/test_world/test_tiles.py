"""
Unit tests for semantic tiles and the sparse grid.
"""

import pytest
from world.grid import SparseGrid
from world.tiles import (
    BUILDING_TILES,
    TILE_PROPERTIES,
    SemanticTile,
    TileLayer,
    blocks_movement,
    layer_for,
)


class TestTileProperties:
    """Tests for the tile -> layer/collision table."""

    def test_every_tile_has_properties(self):
        """Every semantic tile has a layer and collision flag."""
        for tile in SemanticTile:
            assert tile in TILE_PROPERTIES

    def test_door_is_walkable_building(self):
        """Doors sit on the building layer but never block."""
        assert layer_for(SemanticTile.DOOR) is TileLayer.BUILDING
        assert blocks_movement(SemanticTile.DOOR) is False

    def test_buildings_collide(self):
        """Test buildings collide."""
        for tile in BUILDING_TILES:
            assert layer_for(tile) is TileLayer.BUILDING
            assert blocks_movement(tile) is True

    @pytest.mark.parametrize("tile", [
        SemanticTile.GRASS,
        SemanticTile.PATH,
        SemanticTile.STONE,
        SemanticTile.PLAZA,
    ])
    def test_ground_is_walkable(self, tile):
        """Test ground is walkable."""
        assert layer_for(tile) is TileLayer.GROUND
        assert blocks_movement(tile) is False

    def test_water_blocks(self):
        """Test water is blocking ground."""
        assert layer_for(SemanticTile.WATER) is TileLayer.GROUND
        assert blocks_movement(SemanticTile.WATER) is True

    def test_decoration_collision(self):
        """Trees and fountains block; flowers and the quest board don't."""
        assert blocks_movement(SemanticTile.TREE1) is True
        assert blocks_movement(SemanticTile.FOUNTAIN) is True
        assert blocks_movement(SemanticTile.FLOWER2) is False
        assert blocks_movement(SemanticTile.QUEST_BOARD) is False
        assert layer_for(SemanticTile.TREE_BORDER) is TileLayer.DECORATION


class TestSparseGrid:
    """Tests for SparseGrid."""

    def test_unset_cells_are_empty(self):
        """Test unset cells are empty."""
        grid = SparseGrid(5, 5)
        assert grid.get((2, 2)) is SemanticTile.EMPTY
        assert (2, 2) not in grid
        assert len(grid) == 0

    def test_setting_empty_removes_entry(self):
        """Test setting empty removes entry."""
        grid = SparseGrid(5, 5)
        grid.set((1, 1), SemanticTile.GRASS)
        assert (1, 1) in grid
        grid.set((1, 1), SemanticTile.EMPTY)
        assert (1, 1) not in grid
        assert len(grid) == 0

    def test_fill_rect_clips_to_grid(self):
        """Test fill rect clips to grid."""
        grid = SparseGrid(4, 4)
        grid.fill_rect(2, 2, 5, 5, SemanticTile.STONE)
        assert len(grid) == 4
        assert grid.get((3, 3)) is SemanticTile.STONE
        assert (4, 4) not in grid

    def test_positions_of_sorted_south_first(self):
        """Test positions of sorted south first."""
        grid = SparseGrid(5, 5)
        grid.set((3, 2), SemanticTile.DOOR)
        grid.set((1, 4), SemanticTile.DOOR)
        grid.set((4, 0), SemanticTile.DOOR)
        grid.set((0, 2), SemanticTile.DOOR)
        assert grid.positions_of(SemanticTile.DOOR) == [(4, 0), (0, 2), (3, 2), (1, 4)]
        assert grid.first_of(SemanticTile.DOOR) == (4, 0)
        assert grid.first_of(SemanticTile.SHOP) is None

    def test_count_and_contains(self):
        """Test count and contains."""
        grid = SparseGrid(3, 3)
        grid.fill_rect(0, 0, 3, 1, SemanticTile.WALL)
        assert grid.count(SemanticTile.WALL) == 3
        assert grid.contains_tile(SemanticTile.WALL)
        assert not grid.contains_tile(SemanticTile.GRASS)

    def test_copy_is_independent(self):
        """Test copy is independent."""
        grid = SparseGrid(3, 3)
        grid.set((0, 0), SemanticTile.GRASS)
        clone = grid.copy()
        assert clone == grid
        clone.set((1, 1), SemanticTile.PATH)
        assert clone != grid
        assert (1, 1) not in grid
