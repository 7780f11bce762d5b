# world/grid.py

from typing import Dict, Iterator, List, Optional, Tuple

from world.tiles import Position, SemanticTile


class SparseGrid:
    """
    Sparse semantic tile grid.

    Unset cells read as SemanticTile.EMPTY. Coordinates are (x, y) with
    y = 0 on the southern edge. Each generation run owns one grid.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width: int = width
        self.height: int = height
        self._cells: Dict[Position, SemanticTile] = {}

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, pos: Position) -> SemanticTile:
        return self._cells.get(pos, SemanticTile.EMPTY)

    def set(self, pos: Position, tile: SemanticTile) -> None:
        """Set a cell. Writing EMPTY removes the entry."""
        if tile is SemanticTile.EMPTY:
            self._cells.pop(pos, None)
        else:
            self._cells[pos] = tile

    def fill_rect(self, x: int, y: int, width: int, height: int, tile: SemanticTile) -> None:
        """Fill a rectangle, clipped to the grid."""
        for dy in range(height):
            for dx in range(width):
                tx = x + dx
                ty = y + dy
                if self.in_bounds(tx, ty):
                    self.set((tx, ty), tile)

    def __contains__(self, pos: Position) -> bool:
        return pos in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def items(self) -> Iterator[Tuple[Position, SemanticTile]]:
        return iter(self._cells.items())

    def positions_of(self, tile: SemanticTile) -> List[Position]:
        """All cells holding a tile, sorted south-to-north then west-to-east."""
        found = [pos for pos, t in self._cells.items() if t is tile]
        found.sort(key=lambda p: (p[1], p[0]))
        return found

    def first_of(self, tile: SemanticTile) -> Optional[Position]:
        found = self.positions_of(tile)
        return found[0] if found else None

    def contains_tile(self, tile: SemanticTile) -> bool:
        return any(t is tile for t in self._cells.values())

    def count(self, tile: SemanticTile) -> int:
        return sum(1 for t in self._cells.values() if t is tile)

    def neighbors4(self, pos: Position) -> Iterator[Position]:
        x, y = pos
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            yield x + dx, y + dy

    # ------------------------------------------------------------------
    # Comparison / copies
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[Position, SemanticTile]:
        return dict(self._cells)

    def copy(self) -> "SparseGrid":
        clone = SparseGrid(self.width, self.height)
        clone._cells = dict(self._cells)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseGrid):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self._cells == other._cells
        )

    def __repr__(self) -> str:
        return f"SparseGrid({self.width}x{self.height}, {len(self._cells)} cells)"
