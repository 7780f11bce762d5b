"""
Structural validation of a finished village grid.

Two read-only checks:
- required presence of key buildings and a boundary exit door
- breadth-first reachability from the player house to every Shop, Guild
  and ChiefHouse cell
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set

from ..grid import SparseGrid
from ..tiles import BUILDING_TILES, Position, SemanticTile, blocks_movement


MISSING_BUILDING = "missing_building"
MISSING_EXIT = "missing_exit"
UNREACHABLE = "unreachable"

MUST_REACH_TILES = (SemanticTile.SHOP, SemanticTile.GUILD, SemanticTile.CHIEF_HOUSE)

_BUILDING_LABELS = {
    SemanticTile.PLAYER_HOUSE: "player house",
    SemanticTile.HOUSE1: "house",
    SemanticTile.HOUSE2: "house",
    SemanticTile.SHOP: "shop",
    SemanticTile.GUILD: "guild",
    SemanticTile.CHIEF_HOUSE: "chief house",
}


@dataclass(frozen=True)
class Violation:
    code: str
    message: str
    tile: Optional[SemanticTile] = None
    position: Optional[Position] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationReport:
    violations: List[Violation] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]

    def only_missing(self, tile: SemanticTile) -> bool:
        """True if the sole problem is that ``tile`` is absent."""
        return len(self.violations) == 1 and (
            self.violations[0].code == MISSING_BUILDING and self.violations[0].tile is tile
        )


def is_boundary(grid: SparseGrid, pos: Position) -> bool:
    """Within one cell of any map edge."""
    x, y = pos
    return x <= 1 or y <= 1 or x >= grid.width - 2 or y >= grid.height - 2


def has_boundary_door(grid: SparseGrid) -> bool:
    return any(is_boundary(grid, pos) for pos in grid.positions_of(SemanticTile.DOOR))


def find_reachable(grid: SparseGrid, start: Position) -> Set[Position]:
    """
    Breadth-first flood over 4-connected cells from ``start``.

    Walkable cells (no collision) are always entered. A building cell is
    entered when stepped to from a walkable cell, then its footprint floods
    through same-tile neighbours only, so a building is reached when any
    side of it is. The start footprint may step out onto walkable ground.
    Empty cells are never entered.
    """
    start_tile = grid.get(start)
    visited: Set[Position] = {start}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        tile = grid.get(current)
        current_blocked = blocks_movement(tile)
        exits_allowed = not current_blocked or tile is start_tile

        for nxt in grid.neighbors4(current):
            if nxt in visited or nxt not in grid:
                continue
            nxt_tile = grid.get(nxt)
            if not blocks_movement(nxt_tile):
                if not exits_allowed:
                    continue
            elif nxt_tile in BUILDING_TILES:
                if current_blocked and nxt_tile is not tile:
                    continue
            else:
                continue
            visited.add(nxt)
            queue.append(nxt)

    return visited


class ConnectivityValidator:
    """Checks a grid for required buildings, an exit, and reachability."""

    def __init__(
        self,
        required: Sequence[SemanticTile] = (
            SemanticTile.PLAYER_HOUSE,
            SemanticTile.SHOP,
            SemanticTile.CHIEF_HOUSE,
        ),
        must_reach: Iterable[SemanticTile] = MUST_REACH_TILES,
    ) -> None:
        self.required = list(required)
        self.must_reach = tuple(must_reach)

    def check_presence(self, grid: SparseGrid) -> List[Violation]:
        violations: List[Violation] = []
        for tile in self.required:
            if not grid.contains_tile(tile):
                label = _BUILDING_LABELS.get(tile, tile.value)
                violations.append(Violation(MISSING_BUILDING, f"No {label} found", tile=tile))
        if not has_boundary_door(grid):
            violations.append(Violation(
                MISSING_EXIT,
                "No exit door found near map borders",
                tile=SemanticTile.DOOR,
            ))
        return violations

    def check_reachability(self, grid: SparseGrid) -> List[Violation]:
        anchor = grid.first_of(SemanticTile.PLAYER_HOUSE)
        if anchor is None:
            return []

        reached = find_reachable(grid, anchor)
        violations: List[Violation] = []
        for tile in self.must_reach:
            label = _BUILDING_LABELS.get(tile, tile.value)
            for pos in grid.positions_of(tile):
                if pos not in reached:
                    violations.append(Violation(
                        UNREACHABLE,
                        f"{label.capitalize()} cell at {pos} is unreachable from the player house",
                        tile=tile,
                        position=pos,
                    ))
        return violations

    def validate(self, grid: SparseGrid) -> ValidationReport:
        """Run both checks; violations are listed presence first."""
        violations = self.check_presence(grid)
        violations.extend(self.check_reachability(grid))
        return ValidationReport(violations)
