# world/game_map.py

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

import pygame

from settings import COLOR_BG, COLOR_MARKER_OUTLINE, TILE_SIZE
from world.grid import SparseGrid
from world.tiles import Position, TileLayer, tile_properties

if TYPE_CHECKING:
    from world.village.autotile import TileVariantResolver
    from world.village.layout import Marker


@dataclass(frozen=True)
class RenderCell:
    """What the rendering collaborator needs for one occupied cell."""
    position: Position
    tile_id: str
    layer: TileLayer
    collides: bool


class VillageMap:
    """
    A committed village: semantic grid, NPC markers and the resolver used
    to turn cells into render tiles. Provides collision and drawing helpers.
    """

    def __init__(
        self,
        grid: SparseGrid,
        resolver: Optional["TileVariantResolver"] = None,
        markers: Optional[List["Marker"]] = None,
        name: str = "",
    ) -> None:
        self.grid: SparseGrid = grid
        if resolver is None:
            from world.village.autotile import TileVariantResolver
            resolver = TileVariantResolver()
        self.resolver = resolver
        self.markers: List["Marker"] = markers if markers is not None else []
        self.name: str = name
        self.width: int = grid.width
        self.height: int = grid.height

    # ------------------------------------------------------------------
    # Tile helpers
    # ------------------------------------------------------------------

    def in_bounds(self, tile_x: int, tile_y: int) -> bool:
        """Return True if the tile coordinate is inside the map."""
        return 0 <= tile_x < self.width and 0 <= tile_y < self.height

    def is_walkable_tile(self, tile_x: int, tile_y: int) -> bool:
        """Check if a tile is walkable. Outside the map or empty = not walkable."""
        if not self.in_bounds(tile_x, tile_y):
            return False
        if (tile_x, tile_y) not in self.grid:
            return False
        return tile_properties(self.grid.get((tile_x, tile_y))).walkable

    def render_cell(self, pos: Position) -> RenderCell:
        props = tile_properties(self.grid.get(pos))
        return RenderCell(
            position=pos,
            tile_id=self.resolver.resolve(self.grid, pos),
            layer=props.layer,
            collides=props.collides,
        )

    def render_cells(self) -> List[RenderCell]:
        """Every occupied cell, south row first."""
        positions = sorted((pos for pos, _ in self.grid.items()), key=lambda p: (p[1], p[0]))
        return [self.render_cell(pos) for pos in positions]

    def collision_cells(self) -> List[Position]:
        return [cell.position for cell in self.render_cells() if cell.collides]

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def screen_rect(self, tile_x: int, tile_y: int, tile_size: int = TILE_SIZE) -> pygame.Rect:
        """Screen rectangle for a tile; the map's north row is drawn at the top."""
        sx = tile_x * tile_size
        sy = (self.height - 1 - tile_y) * tile_size
        return pygame.Rect(sx, sy, tile_size, tile_size)

    def draw(self, surface: pygame.Surface, tile_size: int = TILE_SIZE) -> None:
        """
        Debug preview: flat tile colors, ground first, then buildings, then
        decoration, with NPC markers outlined on top.
        """
        surface.fill(COLOR_BG)

        for layer in (TileLayer.GROUND, TileLayer.BUILDING, TileLayer.DECORATION):
            for pos, tile in self.grid.items():
                props = tile_properties(tile)
                if props.layer is not layer:
                    continue
                pygame.draw.rect(surface, props.color, self.screen_rect(pos[0], pos[1], tile_size))

        for marker in self.markers:
            rect = self.screen_rect(marker.position[0], marker.position[1], tile_size)
            pygame.draw.rect(surface, tile_properties(marker.kind).color, rect.inflate(-tile_size // 2, -tile_size // 2))
            pygame.draw.rect(surface, COLOR_MARKER_OUTLINE, rect, 1)

    def preview_size(self, tile_size: int = TILE_SIZE) -> Tuple[int, int]:
        return self.width * tile_size, self.height * tile_size

    def render_preview(self, tile_size: int = TILE_SIZE) -> pygame.Surface:
        surface = pygame.Surface(self.preview_size(tile_size))
        self.draw(surface, tile_size)
        return surface
