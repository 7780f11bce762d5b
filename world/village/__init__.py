"""
Village system: layout parsing, generation, validation and auto-tiling.
"""

from .layout import (
    DEFAULT_SYMBOLS,
    LayoutDocument,
    Marker,
    ParsedLayout,
    SymbolTable,
    parse_layout,
    serialize_layout,
)
from .rules import (
    NeighborRule,
    RuleFamily,
    TileVariant,
    default_rule_table,
    load_rule_table,
    nine_slice_family,
    nine_slice_rules,
)
from .autotile import TileVariantResolver
from .buildings import Footprint, PlacedBuilding
from .placement import PlacementSampler
from .validation import ConnectivityValidator, ValidationReport, Violation
from .generation import GenerationResult, VillageGenerator, generate_village
from .npcs import NpcSpawnPoint, RecordingSpawner, spawn_markers
from .builder import BuildResult, build_map

__all__ = [
    # Layout
    "DEFAULT_SYMBOLS",
    "LayoutDocument",
    "Marker",
    "ParsedLayout",
    "SymbolTable",
    "parse_layout",
    "serialize_layout",
    # Rules
    "NeighborRule",
    "RuleFamily",
    "TileVariant",
    "default_rule_table",
    "load_rule_table",
    "nine_slice_family",
    "nine_slice_rules",
    "TileVariantResolver",
    # Placement
    "Footprint",
    "PlacedBuilding",
    "PlacementSampler",
    # Validation
    "ConnectivityValidator",
    "ValidationReport",
    "Violation",
    # Generation
    "GenerationResult",
    "VillageGenerator",
    "generate_village",
    # NPCs
    "NpcSpawnPoint",
    "RecordingSpawner",
    "spawn_markers",
    # Building
    "BuildResult",
    "build_map",
]
