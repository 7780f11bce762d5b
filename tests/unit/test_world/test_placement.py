"""
Unit tests for footprints and building placement.
"""

import math
import random

import pytest
from engine.error_handler import PlacementExhausted
from world.tiles import SemanticTile
from world.village.buildings import Footprint, PlacedBuilding
from world.village.placement import (
    MAX_PLACEMENT_ATTEMPTS,
    PlacementSampler,
    is_area_clear,
    within_margin,
)


class TestFootprint:
    """Tests for Footprint."""

    def test_edges_and_cells(self):
        """Test edges and cells."""
        fp = Footprint(2, 3, 4, 2)
        assert (fp.x2, fp.y2) == (6, 5)
        cells = list(fp.cells())
        assert len(cells) == 8
        assert (2, 3) in cells and (5, 4) in cells
        assert fp.contains_tile(5, 4)
        assert not fp.contains_tile(6, 4)

    def test_door_below_horizontal_center(self):
        """Test door below horizontal center."""
        assert Footprint(4, 5, 3, 3).door_position() == (5, 4)
        assert Footprint(4, 5, 4, 3).door_position() == (6, 4)

    def test_no_door_off_map(self):
        """Test no door off map."""
        assert Footprint(4, 0, 3, 3).door_position() is None

    def test_touching_edges_do_not_intersect(self):
        """Test touching edges do not intersect."""
        a = Footprint(0, 0, 3, 3)
        assert not a.intersects(Footprint(3, 0, 3, 3))
        assert not a.intersects(Footprint(0, 3, 3, 3))
        assert a.intersects(Footprint(2, 2, 3, 3))

    def test_placed_building_kind(self):
        """Test placed building kind."""
        building = PlacedBuilding(SemanticTile.SHOP, Footprint(0, 0, 1, 1))
        assert building.kind == "shop"


class TestMargin:
    """Tests for within_margin and is_area_clear."""

    def test_near_edge(self):
        """Test the inset on the west and south edges."""
        assert within_margin(Footprint(3, 3, 4, 3), 50, 50, 2)
        assert not within_margin(Footprint(2, 3, 4, 3), 50, 50, 2)
        assert not within_margin(Footprint(3, 2, 4, 3), 50, 50, 2)

    def test_far_edge(self):
        """Test the inset on the east and north edges."""
        assert within_margin(Footprint(42, 10, 4, 3), 50, 50, 2)
        assert not within_margin(Footprint(43, 10, 4, 3), 50, 50, 2)
        assert within_margin(Footprint(10, 43, 4, 3), 50, 50, 2)
        assert not within_margin(Footprint(10, 44, 4, 3), 50, 50, 2)

    def test_area_clear(self):
        """Test overlap checks against occupied footprints."""
        occupied = [Footprint(10, 10, 5, 5)]
        assert is_area_clear(Footprint(15, 10, 2, 2), occupied)
        assert not is_area_clear(Footprint(14, 14, 2, 2), occupied)
        assert is_area_clear(Footprint(0, 0, 2, 2), [])


class TestPlacementSampler:
    """Tests for PlacementSampler."""

    def test_candidates_stay_in_distance_band(self):
        """Test candidates stay in distance band."""
        sampler = PlacementSampler(random.Random(3))
        for _ in range(200):
            fp = sampler.candidate((25, 25), 6.0, 12.0, (3, 3))
            distance = math.hypot(fp.x - 25, fp.y - 25)
            assert 6.0 - 1.0 <= distance <= 12.0 + 1.0
            assert (fp.width, fp.height) == (3, 3)

    def test_same_seed_same_candidates(self):
        """Test same seed same candidates."""
        a = PlacementSampler(random.Random(11))
        b = PlacementSampler(random.Random(11))
        for _ in range(10):
            assert a.candidate((25, 25), 5.0, 15.0, (4, 3)) == b.candidate((25, 25), 5.0, 15.0, (4, 3))

    def test_place_returns_valid_footprint(self):
        """Test place returns valid footprint."""
        sampler = PlacementSampler(random.Random(5))
        occupied = [Footprint(20, 20, 10, 10)]
        fp = sampler.place(SemanticTile.SHOP, (25, 25), 7.0, 16.0, (4, 3), occupied, 50, 50, 2)
        assert is_area_clear(fp, occupied)
        assert within_margin(fp, 50, 50, 2)

    def test_exhaustion_raises(self):
        """Test exhaustion raises."""
        sampler = PlacementSampler(random.Random(5))
        occupied = [Footprint(0, 0, 50, 50)]
        with pytest.raises(PlacementExhausted) as exc:
            sampler.place(SemanticTile.GUILD, (25, 25), 5.0, 10.0, (3, 3), occupied, 50, 50, 2)
        assert exc.value.attempts == MAX_PLACEMENT_ATTEMPTS
        assert str(exc.value) == "Failed to place guild after 100 attempts"

    def test_custom_attempt_cap(self):
        """Test custom attempt cap."""
        sampler = PlacementSampler(random.Random(5), max_attempts=3)
        with pytest.raises(PlacementExhausted) as exc:
            sampler.place(SemanticTile.SHOP, (25, 25), 5.0, 10.0, (3, 3), [Footprint(0, 0, 50, 50)], 50, 50, 2)
        assert exc.value.attempts == 3
