"""
Symbolic village layouts: text <-> sparse semantic grid.

Authored layouts are newline-delimited rows of single characters. Row 0 of
the text is the northernmost row (y = height - 1), so parsing flips the
vertical axis relative to grid storage.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from engine.error_handler import ConfigurationError
from ..grid import SparseGrid
from ..tiles import MARKER_TILES, Position, SemanticTile


# Stock symbol set (one character per tile)
DEFAULT_SYMBOL_PAIRS: List[Tuple[str, SemanticTile]] = [
    ("#", SemanticTile.WALL),
    ("T", SemanticTile.TREE_BORDER),
    (".", SemanticTile.GRASS),
    ("=", SemanticTile.STONE),
    ("-", SemanticTile.PATH),
    ("H", SemanticTile.HOUSE1),
    ("h", SemanticTile.HOUSE2),
    ("S", SemanticTile.SHOP),
    ("G", SemanticTile.GUILD),
    ("C", SemanticTile.CHIEF_HOUSE),
    ("P", SemanticTile.PLAYER_HOUSE),
    ("D", SemanticTile.DOOR),
    ("c", SemanticTile.CROPS),
    ("t", SemanticTile.TREE1),
    ("y", SemanticTile.TREE2),
    ("f", SemanticTile.FLOWER1),
    ("F", SemanticTile.FLOWER2),
    ("Y", SemanticTile.FLOWER3),
    ("~", SemanticTile.WATER),
    ("*", SemanticTile.PLAZA),
    ("@", SemanticTile.FOUNTAIN),
    ("Q", SemanticTile.QUEST_BOARD),
    # NPC markers
    ("1", SemanticTile.NPC_MERCHANT),
    ("2", SemanticTile.NPC_CHIEF),
    ("3", SemanticTile.NPC_FARMER),
    ("4", SemanticTile.NPC_CHILD),
]


class SymbolTable:
    """Bijection between layout characters and semantic tiles."""

    def __init__(self, pairs: Iterable[Tuple[str, SemanticTile]]) -> None:
        self._by_symbol: Dict[str, SemanticTile] = {}
        self._by_tile: Dict[SemanticTile, str] = {}
        for symbol, tile in pairs:
            if len(symbol) != 1:
                raise ConfigurationError(f"Layout symbol must be one character, got {symbol!r}")
            if tile is SemanticTile.EMPTY:
                # Empty is the implicit default, never mapped
                continue
            if symbol in self._by_symbol:
                raise ConfigurationError(f"Symbol {symbol!r} is mapped twice")
            if tile in self._by_tile:
                raise ConfigurationError(f"Tile {tile.value} has two symbols")
            self._by_symbol[symbol] = tile
            self._by_tile[tile] = symbol

    def tile_for(self, symbol: str) -> SemanticTile:
        return self._by_symbol.get(symbol, SemanticTile.EMPTY)

    def symbol_for(self, tile: SemanticTile) -> str:
        return self._by_tile.get(tile, " ")

    def has_symbol(self, tile: SemanticTile) -> bool:
        return tile in self._by_tile

    def pairs(self) -> List[Tuple[str, SemanticTile]]:
        return list(self._by_symbol.items())

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "SymbolTable":
        """Build from {"#": "wall", ...}."""
        try:
            return cls((symbol, SemanticTile(name)) for symbol, name in data.items())
        except ValueError as e:
            raise ConfigurationError(f"Unknown tile in symbol table: {e}") from e

    def to_dict(self) -> Dict[str, str]:
        return {symbol: tile.value for symbol, tile in self._by_symbol.items()}


DEFAULT_SYMBOLS = SymbolTable(DEFAULT_SYMBOL_PAIRS)


@dataclass(frozen=True)
class Marker:
    """An out-of-band grid annotation (NPC spawn point)."""
    position: Position
    kind: SemanticTile


@dataclass
class ParsedLayout:
    grid: SparseGrid
    markers: List[Marker] = field(default_factory=list)


def parse_layout(
    text: str,
    symbols: SymbolTable,
    width: int,
    height: int,
) -> ParsedLayout:
    """
    Parse authored layout text into a sparse grid plus extracted markers.

    Unknown characters and whitespace leave the cell empty. Short rows and
    missing rows are not errors; anything beyond width/height is ignored.
    Marker cells are recorded out of band and become grass underneath.
    """
    grid = SparseGrid(width, height)
    markers: List[Marker] = []

    lines = text.split("\n")
    for row, line in enumerate(lines[:height]):
        line = line.rstrip("\r")
        y = height - row - 1
        for x, symbol in enumerate(line[:width]):
            tile = symbols.tile_for(symbol)
            if tile is SemanticTile.EMPTY:
                continue
            if tile in MARKER_TILES:
                markers.append(Marker((x, y), tile))
                tile = SemanticTile.GRASS
            grid.set((x, y), tile)

    return ParsedLayout(grid=grid, markers=markers)


def serialize_layout(grid: SparseGrid, symbols: SymbolTable) -> str:
    """
    Render a grid back to layout text (debug export).

    Tiles without a symbol come out as spaces. Markers are not grid entries,
    so a parse/serialize round trip drops them.
    """
    rows = []
    for y in range(grid.height - 1, -1, -1):
        rows.append("".join(symbols.symbol_for(grid.get((x, y))) for x in range(grid.width)))
    return "\n".join(rows)


@dataclass
class LayoutDocument:
    """An authored village map: name, extent, layout text and its symbols."""
    map_name: str = "First Village"
    width: int = 50
    height: int = 50
    layout_text: str = ""
    symbols: SymbolTable = field(default_factory=lambda: DEFAULT_SYMBOLS)

    def parse(self) -> ParsedLayout:
        return parse_layout(self.layout_text, self.symbols, self.width, self.height)

    @classmethod
    def from_dict(cls, data: Dict) -> "LayoutDocument":
        layout = data.get("layout", "")
        if isinstance(layout, list):
            layout = "\n".join(layout)
        symbols = DEFAULT_SYMBOLS
        if "symbols" in data:
            symbols = SymbolTable.from_dict(data["symbols"])
        return cls(
            map_name=data.get("map_name", "First Village"),
            width=int(data.get("width", 50)),
            height=int(data.get("height", 50)),
            layout_text=layout,
            symbols=symbols,
        )

    @classmethod
    def load(cls, path: Path) -> "LayoutDocument":
        """
        Load an authored layout from a JSON file.

        The "layout" key may be a single string or a list of row strings.
        """
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read layout file {path}: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict:
        return {
            "map_name": self.map_name,
            "width": self.width,
            "height": self.height,
            "symbols": self.symbols.to_dict(),
            "layout": self.layout_text.split("\n"),
        }


def layout_from_grid(
    grid: SparseGrid,
    map_name: str = "Generated Village",
    symbols: Optional[SymbolTable] = None,
) -> LayoutDocument:
    """Wrap a grid's serialized text in a LayoutDocument for saving."""
    symbols = symbols or DEFAULT_SYMBOLS
    return LayoutDocument(
        map_name=map_name,
        width=grid.width,
        height=grid.height,
        layout_text=serialize_layout(grid, symbols),
        symbols=symbols,
    )
