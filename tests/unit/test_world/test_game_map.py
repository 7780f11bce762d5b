"""
Unit tests for VillageMap collision and preview drawing.
"""

import pygame
import pytest
from settings import COLOR_BG
from world.game_map import VillageMap
from world.grid import SparseGrid
from world.tiles import GRASS_COLOR, WALL_COLOR, SemanticTile, TileLayer
from world.village.autotile import TileVariantResolver
from world.village.rules import default_rule_table


@pytest.fixture
def small_map() -> VillageMap:
    grid = SparseGrid(3, 2)
    grid.set((0, 0), SemanticTile.GRASS)
    grid.set((1, 0), SemanticTile.WALL)
    grid.set((0, 1), SemanticTile.DOOR)
    return VillageMap(grid)


class TestVillageMap:
    """Tests for tile helpers."""

    def test_walkability(self, small_map):
        """Test walkable, blocked, empty and off-map tiles."""
        assert small_map.is_walkable_tile(0, 0)
        assert small_map.is_walkable_tile(0, 1)
        assert not small_map.is_walkable_tile(1, 0)
        assert not small_map.is_walkable_tile(2, 1)
        assert not small_map.is_walkable_tile(-1, 0)
        assert not small_map.is_walkable_tile(3, 0)

    def test_render_cells_order(self, small_map):
        """Test render cells order."""
        cells = small_map.render_cells()
        assert [c.position for c in cells] == [(0, 0), (1, 0), (0, 1)]
        assert cells[1].layer is TileLayer.BUILDING
        assert cells[1].collides

    def test_collision_cells(self, small_map):
        """Test collision cells."""
        assert small_map.collision_cells() == [(1, 0)]

    def test_injected_resolver(self):
        """Test injected resolver."""
        grid = SparseGrid(3, 3)
        grid.fill_rect(0, 0, 3, 3, SemanticTile.WALL)
        village = VillageMap(grid, TileVariantResolver(default_rule_table()))
        assert village.render_cell((1, 1)).tile_id == "wall_center"
        assert village.render_cell((0, 0)).tile_id == "wall_bottom_left"


class TestPreview:
    """Tests for the flat-color preview."""

    def test_screen_rect_flips_y(self, small_map):
        """Test screen rect flips y."""
        assert small_map.screen_rect(0, 0, 16) == pygame.Rect(0, 16, 16, 16)
        assert small_map.screen_rect(2, 1, 16) == pygame.Rect(32, 0, 16, 16)

    def test_preview_size(self, small_map):
        """Test preview size."""
        assert small_map.preview_size(4) == (12, 8)

    def test_preview_colors(self, small_map):
        """Test preview colors."""
        surface = small_map.render_preview(4)
        assert surface.get_size() == (12, 8)
        assert tuple(surface.get_at((1, 5)))[:3] == GRASS_COLOR
        assert tuple(surface.get_at((5, 5)))[:3] == WALL_COLOR
        assert tuple(surface.get_at((9, 1)))[:3] == COLOR_BG

    def test_draw_onto_surface(self, small_map, sample_surface):
        """Test draw onto surface."""
        small_map.draw(sample_surface, 16)
        assert tuple(sample_surface.get_at((8, 24)))[:3] == GRASS_COLOR
