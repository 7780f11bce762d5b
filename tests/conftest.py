"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test files.
"""

from pathlib import Path
from typing import Generator

import pytest
import pygame

from world.generation.config import BuildingSpec, GenerationSettings
from world.grid import SparseGrid
from world.tiles import SemanticTile


PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session", autouse=True)
def pygame_init() -> Generator[None, None, None]:
    """
    Initialize pygame for the test session.
    This runs once before all tests and cleans up after.
    """
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def sample_surface() -> pygame.Surface:
    """
    Create an off-screen surface for preview drawing tests.
    """
    return pygame.Surface((320, 320))


@pytest.fixture
def small_settings() -> GenerationSettings:
    """
    30x30 village with the three required buildings and no decoration,
    so connectivity does not depend on where trees land.
    """
    return GenerationSettings(
        map_width=30,
        map_height=30,
        border_thickness=2,
        square_size=(6, 6),
        buildings=[
            BuildingSpec(SemanticTile.PLAYER_HOUSE, (3, 3), 1, 5.0, 9.0),
            BuildingSpec(SemanticTile.SHOP, (3, 3), 1, 5.0, 9.0),
            BuildingSpec(SemanticTile.CHIEF_HOUSE, (3, 3), 1, 5.0, 9.0),
        ],
        tree_density=0.0,
        flower_density=0.0,
        seed=7,
    )


@pytest.fixture
def grass_grid():
    """
    Factory for a grid filled with grass.
    """
    def _make(width: int = 10, height: int = 10) -> SparseGrid:
        grid = SparseGrid(width, height)
        grid.fill_rect(0, 0, width, height, SemanticTile.GRASS)
        return grid
    return _make


@pytest.fixture
def first_village_path() -> Path:
    """
    The shipped sample layout.
    """
    return PROJECT_ROOT / "config" / "layouts" / "first_village.json"
