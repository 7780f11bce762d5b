"""
Building a village map from an authored layout.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from engine.error_handler import ValidationFailure, logger
from ..game_map import RenderCell, VillageMap
from .autotile import TileVariantResolver
from .layout import LayoutDocument
from .npcs import MarkerSpawner, spawn_markers
from .validation import ConnectivityValidator, ValidationReport


log = logger.getChild("builder")


@dataclass
class BuildResult:
    village: Optional[VillageMap] = None
    report: Optional[ValidationReport] = None
    cells: List[RenderCell] = field(default_factory=list)
    spawned: List[Any] = field(default_factory=list)
    error: Optional[ValidationFailure] = None

    @property
    def success(self) -> bool:
        return self.village is not None


def build_map(
    document: LayoutDocument,
    resolver: Optional[TileVariantResolver] = None,
    spawner: Optional[MarkerSpawner] = None,
    validate: bool = True,
    validator: Optional[ConnectivityValidator] = None,
) -> BuildResult:
    """
    Parse an authored layout, validate it, and produce its render cells.

    Nothing is rendered or spawned when validation fails; the report is
    returned instead.
    """
    parsed = document.parse()
    result = BuildResult()

    if validate:
        validator = validator or ConnectivityValidator()
        result.report = validator.validate(parsed.grid)
        if not result.report.passed:
            result.error = ValidationFailure(result.report.messages)
            for message in result.report.messages:
                log.error(f"Map validation ({document.map_name}): {message}")
            return result

    village = VillageMap(parsed.grid, resolver, parsed.markers, name=document.map_name)
    result.village = village
    result.cells = village.render_cells()
    if spawner is not None:
        result.spawned = spawn_markers(parsed.markers, spawner)

    log.info(f"Map '{document.map_name}' built with {len(result.cells)} cells")
    return result
