"""
Rejection sampling of building footprints around the town center.
"""

import math
import random
from typing import Sequence, Tuple

from engine.error_handler import PlacementExhausted
from .buildings import Footprint
from ..tiles import SemanticTile


MAX_PLACEMENT_ATTEMPTS = 100


def within_margin(footprint: Footprint, map_width: int, map_height: int, border_thickness: int) -> bool:
    """
    Fixed inset check: one cell inside the border on every side.

    The far-edge test does not scale with footprint size.
    """
    inset = border_thickness + 1
    return (
        footprint.x >= inset
        and footprint.x2 < map_width - inset
        and footprint.y >= inset
        and footprint.y2 < map_height - inset
    )


def is_area_clear(footprint: Footprint, occupied: Sequence[Footprint]) -> bool:
    return not any(footprint.intersects(other) for other in occupied)


class PlacementSampler:
    """
    Samples candidate footprints at a random angle and distance from a center.

    The only state is the caller's RNG stream.
    """

    def __init__(self, rng: random.Random, max_attempts: int = MAX_PLACEMENT_ATTEMPTS) -> None:
        self.rng = rng
        self.max_attempts = max_attempts

    def candidate(
        self,
        center: Tuple[int, int],
        min_distance: float,
        max_distance: float,
        size: Tuple[int, int],
    ) -> Footprint:
        angle = self.rng.random() * math.pi * 2
        t = self.rng.random()
        distance = min_distance + (max_distance - min_distance) * t
        x = center[0] + round(math.cos(angle) * distance)
        y = center[1] + round(math.sin(angle) * distance)
        return Footprint(x, y, size[0], size[1])

    def place(
        self,
        tile: SemanticTile,
        center: Tuple[int, int],
        min_distance: float,
        max_distance: float,
        size: Tuple[int, int],
        occupied: Sequence[Footprint],
        map_width: int,
        map_height: int,
        border_thickness: int,
    ) -> Footprint:
        """
        Return the first candidate that is clear of ``occupied`` and inside the margin.

        Raises:
            PlacementExhausted: every one of ``max_attempts`` candidates was rejected
        """
        for _ in range(self.max_attempts):
            footprint = self.candidate(center, min_distance, max_distance, size)
            if is_area_clear(footprint, occupied) and within_margin(
                footprint, map_width, map_height, border_thickness
            ):
                return footprint
        raise PlacementExhausted(tile.value, self.max_attempts)
