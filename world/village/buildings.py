"""
Village building footprints.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import pygame

from ..tiles import Position, SemanticTile


@dataclass
class Footprint:
    """Axis-aligned block of cells; (x, y) is the south-west corner."""
    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        """East edge (exclusive)."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """North edge (exclusive)."""
        return self.y + self.height

    def rect(self) -> pygame.Rect:
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def center(self) -> Tuple[int, int]:
        """Get center tile coordinates."""
        return (self.x + self.width // 2, self.y + self.height // 2)

    def intersects(self, other: "Footprint") -> bool:
        """Overlap test; footprints that only share an edge do not intersect."""
        return self.rect().colliderect(other.rect())

    def contains_tile(self, tx: int, ty: int) -> bool:
        """Check if a tile is inside this footprint."""
        return self.x <= tx < self.x2 and self.y <= ty < self.y2

    def cells(self) -> Iterator[Position]:
        for dy in range(self.height):
            for dx in range(self.width):
                yield self.x + dx, self.y + dy

    def door_position(self) -> Optional[Position]:
        """Door cell: horizontal center, one row south. None if that row is off the map."""
        door_y = self.y - 1
        if door_y < 0:
            return None
        return self.x + self.width // 2, door_y


@dataclass
class PlacedBuilding:
    """A building accepted by the placement stage."""
    tile: SemanticTile
    footprint: Footprint
    door: Optional[Position] = None

    @property
    def kind(self) -> str:
        return self.tile.value
