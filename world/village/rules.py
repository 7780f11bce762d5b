"""
Auto-tiling rule families.

A rule family lists the render variants of one semantic tile. Each variant
carries neighbor rules that must all hold for it to apply; higher priority
variants are tried first. Families are plain data, loaded from JSON and
handed to the resolver.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from engine.error_handler import ConfigurationError
from ..tiles import SemanticTile


@dataclass(frozen=True)
class NeighborRule:
    """
    Condition on the tile at ``offset`` from the evaluated cell.

    A required tile of EMPTY means "the same tile as the evaluated cell".
    ``must_match`` False inverts the test.
    """
    offset: Tuple[int, int]
    required: SemanticTile = SemanticTile.EMPTY
    must_match: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NeighborRule":
        dx, dy = data["offset"]
        return cls(
            offset=(int(dx), int(dy)),
            required=SemanticTile(data.get("required", SemanticTile.EMPTY.value)),
            must_match=bool(data.get("must_match", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offset": list(self.offset),
            "required": self.required.value,
            "must_match": self.must_match,
        }


@dataclass
class TileVariant:
    tile_id: str
    priority: int = 0
    rules: List[NeighborRule] = field(default_factory=list)
    name: str = ""  # debug label

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TileVariant":
        return cls(
            tile_id=data["tile_id"],
            priority=int(data.get("priority", 0)),
            rules=[NeighborRule.from_dict(r) for r in data.get("rules", [])],
            name=data.get("name", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tile_id": self.tile_id,
            "priority": self.priority,
            "rules": [r.to_dict() for r in self.rules],
            "name": self.name,
        }


@dataclass
class RuleFamily:
    tile: SemanticTile
    default_id: Optional[str] = None
    variants: List[TileVariant] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleFamily":
        return cls(
            tile=SemanticTile(data["tile"]),
            default_id=data.get("default_id"),
            variants=[TileVariant.from_dict(v) for v in data.get("variants", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tile": self.tile.value,
            "default_id": self.default_id,
            "variants": [v.to_dict() for v in self.variants],
        }


RuleTable = Dict[SemanticTile, RuleFamily]


# ----------------------------------------------------------------------
# 9-slice helpers
# ----------------------------------------------------------------------

def nine_slice_rules(
    top_left: bool = False,
    top: bool = False,
    top_right: bool = False,
    left: bool = False,
    right: bool = False,
    bottom_left: bool = False,
    bottom: bool = False,
    bottom_right: bool = False,
) -> List[NeighborRule]:
    """Same-tile rules for each requested direction (north is +y)."""
    wanted = [
        (top_left, (-1, 1)),
        (top, (0, 1)),
        (top_right, (1, 1)),
        (left, (-1, 0)),
        (right, (1, 0)),
        (bottom_left, (-1, -1)),
        (bottom, (0, -1)),
        (bottom_right, (1, -1)),
    ]
    return [NeighborRule(offset) for enabled, offset in wanted if enabled]


def _edge_rules(north: bool, south: bool, east: bool, west: bool) -> List[NeighborRule]:
    """Match/mismatch on all four sides: True means the side continues the same tile."""
    return [
        NeighborRule((0, 1), must_match=north),
        NeighborRule((0, -1), must_match=south),
        NeighborRule((1, 0), must_match=east),
        NeighborRule((-1, 0), must_match=west),
    ]


def nine_slice_family(tile: SemanticTile, prefix: Optional[str] = None) -> RuleFamily:
    """
    Center, edge and corner variants for a blob-shaped tile.

    Variant ids are ``<prefix>_<part>``; the prefix defaults to the tile value.
    """
    prefix = prefix or tile.value
    variants = [
        TileVariant(f"{prefix}_center", 1, _edge_rules(True, True, True, True), "Center"),
        TileVariant(f"{prefix}_top", 2, _edge_rules(False, True, True, True), "Top Edge"),
        TileVariant(f"{prefix}_bottom", 2, _edge_rules(True, False, True, True), "Bottom Edge"),
        TileVariant(f"{prefix}_left", 2, _edge_rules(True, True, True, False), "Left Edge"),
        TileVariant(f"{prefix}_right", 2, _edge_rules(True, True, False, True), "Right Edge"),
        TileVariant(f"{prefix}_top_left", 3, _edge_rules(False, True, True, False), "Top Left Corner"),
        TileVariant(f"{prefix}_top_right", 3, _edge_rules(False, True, False, True), "Top Right Corner"),
        TileVariant(f"{prefix}_bottom_left", 3, _edge_rules(True, False, True, False), "Bottom Left Corner"),
        TileVariant(f"{prefix}_bottom_right", 3, _edge_rules(True, False, False, True), "Bottom Right Corner"),
    ]
    return RuleFamily(tile=tile, default_id=prefix, variants=variants)


def default_rule_table() -> RuleTable:
    """Stock families: 9-slice water, plaza and building walls."""
    families = [
        nine_slice_family(SemanticTile.WATER),
        nine_slice_family(SemanticTile.PLAZA),
        nine_slice_family(SemanticTile.WALL),
    ]
    return {family.tile: family for family in families}


# ----------------------------------------------------------------------
# JSON
# ----------------------------------------------------------------------

def rule_table_from_list(data: List[Dict[str, Any]]) -> RuleTable:
    table: RuleTable = {}
    try:
        for entry in data:
            family = RuleFamily.from_dict(entry)
            if family.tile in table:
                raise ConfigurationError(f"Duplicate rule family for {family.tile.value}")
            table[family.tile] = family
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid rule family: {e}") from e
    return table


def load_rule_table(path: Path) -> RuleTable:
    """Load rule families from a JSON list."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read tile rules {path}: {e}") from e
    return rule_table_from_list(data)


def save_rule_table(table: RuleTable, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump([family.to_dict() for family in table.values()], f, indent=2)
