"""
Village map generation.

A run executes fixed stages over one grid and one RNG stream:
init -> border -> town square -> buildings -> paths -> decoration ->
validation -> commit.
"""

import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from engine.error_handler import (
    ConfigurationError,
    GenerationError,
    PlacementExhausted,
    ValidationFailure,
    log_error,
    logger,
)
from telemetry.logger import telemetry
from ..game_map import VillageMap
from ..generation.config import BuildingSpec, GenerationSettings
from ..grid import SparseGrid
from ..tiles import FLOWER_TILES, TREE_TILES, Position, SemanticTile
from .buildings import Footprint, PlacedBuilding
from .autotile import TileVariantResolver
from .placement import PlacementSampler, is_area_clear, within_margin
from .validation import ConnectivityValidator, ValidationReport, Violation


log = logger.getChild("generation")

BASE_TERRAIN = SemanticTile.GRASS
DEFAULT_PLAYER_HOUSE_SIZE = (3, 3)

# Cells the fallback player house may be built over
_CLEARABLE = frozenset({BASE_TERRAIN, *TREE_TILES, *FLOWER_TILES})


@dataclass
class GenerationResult:
    """Outcome of one run. ``grid`` is only set when the map was committed."""
    seed: Optional[int]
    grid: Optional[SparseGrid] = None
    buildings: List[PlacedBuilding] = field(default_factory=list)
    square: Optional[Footprint] = None
    violations: List[Violation] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    error: Optional[GenerationError] = None

    @property
    def success(self) -> bool:
        return self.error is None and self.grid is not None

    def footprints(self) -> List[Footprint]:
        """Every accepted rectangle, town square first."""
        rects = [self.square] if self.square is not None else []
        rects.extend(b.footprint for b in self.buildings)
        return rects

    def to_map(self, resolver: Optional[TileVariantResolver] = None) -> VillageMap:
        """Hand the committed grid to the render side."""
        if self.grid is None:
            raise ValueError("Generation failed; there is no map to render")
        return VillageMap(self.grid, resolver, name=f"Village {self.seed}")


def greedy_path(start: Position, end: Position) -> List[Position]:
    """
    Cells stepped through from ``start`` to ``end``, start excluded.

    All of the x offset is resolved before any of the y offset; this is an
    axis-priority stepper, not a shortest or obstacle-aware route.
    """
    x, y = start
    path: List[Position] = []
    while (x, y) != end:
        if x < end[0]:
            x += 1
        elif x > end[0]:
            x -= 1
        elif y < end[1]:
            y += 1
        else:
            y -= 1
        path.append((x, y))
    return path


def carve_path(grid: SparseGrid, start: Position, end: Position) -> int:
    """Turn base terrain along the greedy path into Path. Returns cells changed."""
    carved = 0
    for pos in greedy_path(start, end):
        if grid.get(pos) is BASE_TERRAIN:
            grid.set(pos, SemanticTile.PATH)
            carved += 1
    return carved


def decorate(
    grid: SparseGrid,
    rng: random.Random,
    tree_density: float,
    flower_density: float,
) -> Tuple[List[Position], List[Position]]:
    """
    Scatter trees, then flowers, over cells still at base terrain.

    Cells are drawn without replacement from one shrinking pool, so no cell
    is picked twice across the two passes.
    """
    pool = grid.positions_of(BASE_TERRAIN)

    trees: List[Position] = []
    tree_count = round(len(pool) * tree_density)
    for _ in range(tree_count):
        if not pool:
            break
        pos = pool.pop(rng.randrange(len(pool)))
        grid.set(pos, TREE_TILES[rng.randrange(len(TREE_TILES))])
        trees.append(pos)

    flowers: List[Position] = []
    flower_count = round(len(pool) * flower_density)
    for _ in range(flower_count):
        if not pool:
            break
        pos = pool.pop(rng.randrange(len(pool)))
        grid.set(pos, FLOWER_TILES[rng.randrange(len(FLOWER_TILES))])
        flowers.append(pos)

    return trees, flowers


class VillageGenerator:
    """
    One generation run. Owns its grid and RNG; not reentrant.

    Use generate_village() unless individual stages are needed.
    """

    def __init__(
        self,
        settings: GenerationSettings,
        seed: int,
        validator: Optional[ConnectivityValidator] = None,
    ) -> None:
        self.settings = settings
        self.seed = seed
        self.rng = random.Random(seed)
        self.validator = validator or ConnectivityValidator(required=settings.required_buildings)
        self.sampler = PlacementSampler(self.rng)

        self.width = settings.map_width
        self.height = settings.map_height
        self.center: Position = (self.width // 2, self.height // 2)
        self.exit_door: Position = (self.width // 2, 0)
        self.exit_point: Position = (self.width // 2, 1)

        self.grid = SparseGrid(self.width, self.height)
        self.square: Optional[Footprint] = None
        self.buildings: List[PlacedBuilding] = []
        self.diagnostics: List[str] = []
        self.dropped = 0

    @property
    def occupied(self) -> List[Footprint]:
        rects = [self.square] if self.square is not None else []
        rects.extend(b.footprint for b in self.buildings)
        return rects

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def init_map(self) -> None:
        self.grid.fill_rect(0, 0, self.width, self.height, BASE_TERRAIN)

    def create_border(self) -> None:
        """Tree ring outside, one wall ring inside it, and the southern exit."""
        thickness = self.settings.border_thickness
        for y in range(self.height):
            for x in range(self.width):
                ring = min(x, y, self.width - 1 - x, self.height - 1 - y)
                if ring >= thickness:
                    continue
                if ring == thickness - 1:
                    self.grid.set((x, y), SemanticTile.WALL)
                else:
                    self.grid.set((x, y), SemanticTile.TREE_BORDER)

        self.grid.set(self.exit_door, SemanticTile.DOOR)
        self.grid.set(self.exit_point, SemanticTile.PATH)

    def create_town_square(self) -> None:
        if not self.settings.center_square:
            return

        cx, cy = self.center
        sw, sh = self.settings.square_size
        square = Footprint(cx - sw // 2, cy - sh // 2, sw, sh)

        for x, y in square.cells():
            if not self.grid.in_bounds(x, y):
                continue
            on_edge = x in (square.x, square.x2 - 1) or y in (square.y, square.y2 - 1)
            self.grid.set((x, y), SemanticTile.STONE if on_edge else SemanticTile.PLAZA)

        self.grid.set((cx, cy), SemanticTile.FOUNTAIN)
        self.grid.set((cx, cy - 1), SemanticTile.QUEST_BOARD)
        self.square = square

    def place_buildings(self) -> None:
        for spec in self.settings.buildings:
            for _ in range(spec.count):
                try:
                    footprint = self._sample_footprint(spec)
                except PlacementExhausted as e:
                    log.warning(str(e))
                    self.diagnostics.append(str(e))
                    self.dropped += 1
                    continue
                self.stamp_building(spec.tile, footprint)

    def _sample_footprint(self, spec: BuildingSpec) -> Footprint:
        return self.sampler.place(
            spec.tile,
            self.center,
            spec.min_distance,
            spec.max_distance,
            spec.size,
            self.occupied,
            self.width,
            self.height,
            self.settings.border_thickness,
        )

    def stamp_building(self, tile: SemanticTile, footprint: Footprint) -> PlacedBuilding:
        for pos in footprint.cells():
            self.grid.set(pos, tile)

        door = footprint.door_position()
        if door is not None:
            self.grid.set(door, SemanticTile.DOOR)

        building = PlacedBuilding(tile, footprint, door)
        self.buildings.append(building)
        log.debug(f"Placed {tile.value} at ({footprint.x}, {footprint.y}) door={door}")
        return building

    def key_points(self) -> List[Position]:
        points = self.grid.positions_of(SemanticTile.DOOR)
        points.append(self.exit_point)
        return points

    def generate_paths(self) -> None:
        for point in self.key_points():
            carve_path(self.grid, point, self.center)

    def add_decorations(self) -> None:
        trees, flowers = decorate(
            self.grid,
            self.rng,
            self.settings.tree_density,
            self.settings.flower_density,
        )
        log.debug(f"Decorated with {len(trees)} trees and {len(flowers)} flowers")

    def validate(self) -> ValidationReport:
        """Validate, inserting a fallback player house once if that is all that's missing."""
        report = self.validator.validate(self.grid)
        if report.only_missing(SemanticTile.PLAYER_HOUSE):
            house = self.insert_default_player_house()
            if house is not None:
                self.diagnostics.append(
                    f"Inserted default player house at ({house.footprint.x}, {house.footprint.y})"
                )
                report = self.validator.validate(self.grid)
        return report

    def insert_default_player_house(self) -> Optional[PlacedBuilding]:
        """
        Build a 3x3 player house on the free spot whose door is closest to the exit.

        Only base terrain and decoration are built over; the new door gets a
        carved path toward the center.
        """
        width, height = DEFAULT_PLAYER_HOUSE_SIZE
        ex, ey = self.exit_door
        candidates = []
        for y in range(self.height):
            for x in range(self.width):
                footprint = Footprint(x, y, width, height)
                if not within_margin(footprint, self.width, self.height, self.settings.border_thickness):
                    continue
                door = footprint.door_position()
                distance = abs(door[0] - ex) + abs(door[1] - ey)
                candidates.append((distance, y, x, footprint))
        candidates.sort(key=lambda c: c[:3])

        for _, _, _, footprint in candidates:
            door = footprint.door_position()
            cells = list(footprint.cells()) + [door]
            if not all(self.grid.get(pos) in _CLEARABLE for pos in cells):
                continue
            if not is_area_clear(footprint, self.occupied):
                continue
            house = self.stamp_building(SemanticTile.PLAYER_HOUSE, footprint)
            carve_path(self.grid, door, self.center)
            log.info(f"Inserted default player house at ({footprint.x}, {footprint.y})")
            return house

        log.warning("No room for a default player house")
        return None

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> GenerationResult:
        log.debug(f"Generating {self.width}x{self.height} village with seed {self.seed}")
        self.init_map()
        self.create_border()
        self.create_town_square()
        self.place_buildings()
        self.generate_paths()
        self.add_decorations()
        report = self.validate()

        result = GenerationResult(
            seed=self.seed,
            buildings=list(self.buildings),
            square=self.square,
            violations=list(report.violations),
            diagnostics=list(self.diagnostics),
        )

        if not report.passed:
            result.error = ValidationFailure(report.messages)
            log.error(str(result.error))
            telemetry.log(
                "village_rejected",
                seed=self.seed,
                violations=len(report.violations),
            )
            return result

        result.grid = self.grid
        telemetry.log(
            "village_generated",
            seed=self.seed,
            width=self.width,
            height=self.height,
            buildings=len(self.buildings),
            dropped=self.dropped,
        )
        return result


def resolve_seed(settings: GenerationSettings, seed: Optional[int] = None) -> int:
    """Explicit seed wins, then a fresh random seed if requested, then the configured one."""
    if seed is not None:
        return seed
    if settings.use_random_seed:
        return random.SystemRandom().randrange(0, 2**31 - 1)
    return settings.seed


def generate_village(
    settings: Optional[GenerationSettings],
    seed: Optional[int] = None,
    validator: Optional[ConnectivityValidator] = None,
) -> GenerationResult:
    """
    Generate a complete village layout.

    Args:
        settings: Generation settings (required)
        seed: Overrides the seed stored in settings
        validator: Optional validator replacing the one built from settings

    Returns:
        GenerationResult; ``success`` is False on configuration or
        validation errors, with the reason in ``error``
    """
    try:
        if settings is None:
            raise ConfigurationError("Generation settings are missing")
        settings.validate()
    except ConfigurationError as e:
        log_error(e, "generate_village")
        return GenerationResult(seed=seed, error=e)

    used_seed = resolve_seed(settings, seed)
    generator = VillageGenerator(settings, used_seed, validator)
    return generator.run()
