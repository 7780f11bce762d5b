"""
Tile variant resolution.

Picks a concrete render-tile id for a cell by evaluating its tile's rule
family against the neighbourhood.
"""

from typing import Dict, List, Optional

from engine.error_handler import RuleAuthoringAmbiguity, logger
from ..grid import SparseGrid
from ..tiles import Position, SemanticTile
from .rules import NeighborRule, RuleFamily, RuleTable, TileVariant


log = logger.getChild("autotile")

# Fixed ids for tiles without a family (TreeBorder reuses the first tree art)
DEFAULT_TILE_IDS: Dict[SemanticTile, str] = {
    tile: tile.value for tile in SemanticTile
}
DEFAULT_TILE_IDS[SemanticTile.TREE_BORDER] = SemanticTile.TREE1.value


def rule_matches(grid: SparseGrid, position: Position, own: SemanticTile, rule: NeighborRule) -> bool:
    dx, dy = rule.offset
    neighbor = grid.get((position[0] + dx, position[1] + dy))
    required = own if rule.required is SemanticTile.EMPTY else rule.required
    return (neighbor is required) == rule.must_match


def variant_matches(grid: SparseGrid, position: Position, own: SemanticTile, variant: TileVariant) -> bool:
    return all(rule_matches(grid, position, own, rule) for rule in variant.rules)


def ordered_variants(family: RuleFamily) -> List[TileVariant]:
    """Descending priority; equal priorities keep authoring order."""
    return sorted(family.variants, key=lambda v: v.priority, reverse=True)


class TileVariantResolver:
    """
    Resolves semantic cells to render-tile ids.

    The rule table is injected and never modified; families are pre-sorted
    once at construction.
    """

    def __init__(
        self,
        rule_table: Optional[RuleTable] = None,
        default_ids: Optional[Dict[SemanticTile, str]] = None,
    ) -> None:
        self.rule_table: RuleTable = dict(rule_table or {})
        self.default_ids: Dict[SemanticTile, str] = dict(DEFAULT_TILE_IDS)
        if default_ids:
            self.default_ids.update(default_ids)
        self._ordered: Dict[SemanticTile, List[TileVariant]] = {
            tile: ordered_variants(family) for tile, family in self.rule_table.items()
        }

    def fixed_id(self, tile: SemanticTile) -> str:
        return self.default_ids[tile]

    def resolve_strict(self, grid: SparseGrid, position: Position) -> str:
        """
        Resolve one cell.

        Raises:
            RuleAuthoringAmbiguity: the family matched nothing and has no default id
        """
        tile = grid.get(position)
        family = self.rule_table.get(tile)
        if family is None:
            return self.fixed_id(tile)

        for variant in self._ordered[tile]:
            if variant_matches(grid, position, tile, variant):
                return variant.tile_id

        if family.default_id:
            return family.default_id

        raise RuleAuthoringAmbiguity(
            f"No variant of {tile.value} matched at {position} and the family has no default"
        )

    def resolve(self, grid: SparseGrid, position: Position) -> str:
        """Resolve one cell, degrading to the tile's fixed id on ambiguity."""
        try:
            return self.resolve_strict(grid, position)
        except RuleAuthoringAmbiguity as e:
            log.warning(str(e))
            return self.fixed_id(grid.get(position))
