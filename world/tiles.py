# world/tiles.py

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple

from engine.error_handler import ConfigurationError


class SemanticTile(Enum):
    """Every cell category a village grid can hold."""
    # Sentinel for "no entry"; never stored in a grid
    EMPTY = "empty"

    # Terrain
    GRASS = "grass"
    PATH = "path"
    STONE = "stone"
    PLAZA = "plaza"
    WATER = "water"

    # Border
    WALL = "wall"
    TREE_BORDER = "tree_border"

    # Buildings
    PLAYER_HOUSE = "player_house"
    HOUSE1 = "house1"
    HOUSE2 = "house2"
    SHOP = "shop"
    GUILD = "guild"
    CHIEF_HOUSE = "chief_house"
    DOOR = "door"

    # Nature
    TREE1 = "tree1"
    TREE2 = "tree2"
    FLOWER1 = "flower1"
    FLOWER2 = "flower2"
    FLOWER3 = "flower3"
    CROPS = "crops"

    # Special
    FOUNTAIN = "fountain"
    QUEST_BOARD = "quest_board"

    # NPC spawn markers (extracted by the parser, never grid entries)
    NPC_MERCHANT = "npc_merchant"
    NPC_CHIEF = "npc_chief"
    NPC_FARMER = "npc_farmer"
    NPC_CHILD = "npc_child"


class TileLayer(Enum):
    """Render layer a tile is painted on."""
    GROUND = "ground"
    BUILDING = "building"
    DECORATION = "decoration"


@dataclass(frozen=True)
class Tile:
    """Render/collision classification of a semantic tile."""
    layer: TileLayer
    collides: bool
    color: Tuple[int, int, int]

    @property
    def walkable(self) -> bool:
        return not self.collides


Position = Tuple[int, int]

BUILDING_TILES: FrozenSet[SemanticTile] = frozenset({
    SemanticTile.PLAYER_HOUSE,
    SemanticTile.HOUSE1,
    SemanticTile.HOUSE2,
    SemanticTile.SHOP,
    SemanticTile.GUILD,
    SemanticTile.CHIEF_HOUSE,
})

MARKER_TILES: FrozenSet[SemanticTile] = frozenset({
    SemanticTile.NPC_MERCHANT,
    SemanticTile.NPC_CHIEF,
    SemanticTile.NPC_FARMER,
    SemanticTile.NPC_CHILD,
})

TREE_TILES: Tuple[SemanticTile, ...] = (SemanticTile.TREE1, SemanticTile.TREE2)
FLOWER_TILES: Tuple[SemanticTile, ...] = (
    SemanticTile.FLOWER1,
    SemanticTile.FLOWER2,
    SemanticTile.FLOWER3,
)

# Tile base colors (used by the debug preview only)
GRASS_COLOR = (60, 100, 60)
PATH_COLOR = (120, 100, 80)
STONE_COLOR = (100, 100, 100)
PLAZA_COLOR = (100, 120, 100)
WATER_COLOR = (50, 80, 150)
WALL_COLOR = (90, 90, 120)
TREE_BORDER_COLOR = (30, 60, 30)
BUILDING_COLOR = (100, 90, 80)
DOOR_COLOR = (60, 60, 60)
TREE_COLOR = (40, 80, 40)
FLOWER_COLOR = (200, 120, 160)
CROPS_COLOR = (170, 150, 60)
FOUNTAIN_COLOR = (80, 100, 120)
QUEST_BOARD_COLOR = (140, 110, 70)
MARKER_COLOR = (220, 210, 90)

_G = TileLayer.GROUND
_B = TileLayer.BUILDING
_D = TileLayer.DECORATION

TILE_PROPERTIES: Dict[SemanticTile, Tile] = {
    SemanticTile.EMPTY: Tile(_G, False, (0, 0, 0)),

    SemanticTile.GRASS: Tile(_G, False, GRASS_COLOR),
    SemanticTile.PATH: Tile(_G, False, PATH_COLOR),
    SemanticTile.STONE: Tile(_G, False, STONE_COLOR),
    SemanticTile.PLAZA: Tile(_G, False, PLAZA_COLOR),
    SemanticTile.WATER: Tile(_G, True, WATER_COLOR),

    SemanticTile.WALL: Tile(_B, True, WALL_COLOR),
    SemanticTile.TREE_BORDER: Tile(_D, True, TREE_BORDER_COLOR),

    SemanticTile.PLAYER_HOUSE: Tile(_B, True, (150, 110, 80)),
    SemanticTile.HOUSE1: Tile(_B, True, BUILDING_COLOR),
    SemanticTile.HOUSE2: Tile(_B, True, (110, 95, 75)),
    SemanticTile.SHOP: Tile(_B, True, (130, 90, 60)),
    SemanticTile.GUILD: Tile(_B, True, (90, 80, 110)),
    SemanticTile.CHIEF_HOUSE: Tile(_B, True, (120, 70, 70)),
    SemanticTile.DOOR: Tile(_B, False, DOOR_COLOR),

    SemanticTile.TREE1: Tile(_D, True, TREE_COLOR),
    SemanticTile.TREE2: Tile(_D, True, (35, 70, 45)),
    SemanticTile.FLOWER1: Tile(_D, False, FLOWER_COLOR),
    SemanticTile.FLOWER2: Tile(_D, False, (220, 200, 90)),
    SemanticTile.FLOWER3: Tile(_D, False, (150, 140, 220)),
    SemanticTile.CROPS: Tile(_D, False, CROPS_COLOR),

    SemanticTile.FOUNTAIN: Tile(_D, True, FOUNTAIN_COLOR),
    SemanticTile.QUEST_BOARD: Tile(_D, False, QUEST_BOARD_COLOR),

    SemanticTile.NPC_MERCHANT: Tile(_D, False, MARKER_COLOR),
    SemanticTile.NPC_CHIEF: Tile(_D, False, MARKER_COLOR),
    SemanticTile.NPC_FARMER: Tile(_D, False, MARKER_COLOR),
    SemanticTile.NPC_CHILD: Tile(_D, False, MARKER_COLOR),
}


def _check_exhaustive() -> None:
    missing = [tile.name for tile in SemanticTile if tile not in TILE_PROPERTIES]
    if missing:
        raise ConfigurationError(f"No layer mapping for tiles: {', '.join(missing)}")


_check_exhaustive()


def tile_properties(tile: SemanticTile) -> Tile:
    return TILE_PROPERTIES[tile]


def layer_for(tile: SemanticTile) -> TileLayer:
    """Render layer for a semantic tile."""
    return TILE_PROPERTIES[tile].layer


def blocks_movement(tile: SemanticTile) -> bool:
    """Collision flag for a semantic tile."""
    return TILE_PROPERTIES[tile].collides
