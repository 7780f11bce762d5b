"""
Village generation configuration loader.

Loads and validates generation settings from a JSON config file.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, List, Tuple
from dataclasses import dataclass, field

from engine.error_handler import ConfigurationError, logger
from ..tiles import BUILDING_TILES, SemanticTile


# Config file location
CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"
GENERATION_CONFIG_FILE = CONFIG_DIR / "village_settings.json"

log = logger.getChild("config")


@dataclass
class BuildingSpec:
    """One kind of building to place around the town center."""
    tile: SemanticTile
    size: Tuple[int, int]
    count: int = 1
    min_distance: float = 5.0
    max_distance: float = 20.0
    requires_path: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildingSpec":
        try:
            tile = SemanticTile(data["tile"])
            width, height = data["size"]
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid building entry {data!r}: {e}") from e
        return cls(
            tile=tile,
            size=(int(width), int(height)),
            count=int(data.get("count", 1)),
            min_distance=float(data.get("min_distance", 5.0)),
            max_distance=float(data.get("max_distance", 20.0)),
            requires_path=bool(data.get("requires_path", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tile": self.tile.value,
            "size": list(self.size),
            "count": self.count,
            "min_distance": self.min_distance,
            "max_distance": self.max_distance,
            "requires_path": self.requires_path,
        }


DEFAULT_REQUIRED_BUILDINGS: Tuple[SemanticTile, ...] = (
    SemanticTile.PLAYER_HOUSE,
    SemanticTile.SHOP,
    SemanticTile.CHIEF_HOUSE,
)


@dataclass
class GenerationSettings:
    """Complete settings for one village generation run."""
    map_width: int = 50
    map_height: int = 50
    border_thickness: int = 2

    # Town square
    square_size: Tuple[int, int] = (10, 10)
    center_square: bool = True

    # Buildings, placed in list order
    buildings: List[BuildingSpec] = field(default_factory=list)
    required_buildings: List[SemanticTile] = field(
        default_factory=lambda: list(DEFAULT_REQUIRED_BUILDINGS)
    )

    # Paths (reserved, the greedy carver ignores both)
    path_density: float = 0.15
    path_width: int = 1

    # Decoration
    tree_density: float = 0.1
    flower_density: float = 0.05

    # Seed
    seed: int = 12345
    use_random_seed: bool = False

    @classmethod
    def default_village(cls) -> "GenerationSettings":
        """The stock village: player house, homes, shop, guild and chief house."""
        return cls(buildings=[
            BuildingSpec(SemanticTile.PLAYER_HOUSE, (4, 3), 1, 6.0, 14.0),
            BuildingSpec(SemanticTile.CHIEF_HOUSE, (5, 4), 1, 8.0, 16.0),
            BuildingSpec(SemanticTile.SHOP, (4, 3), 1, 7.0, 16.0),
            BuildingSpec(SemanticTile.GUILD, (5, 4), 1, 8.0, 18.0),
            BuildingSpec(SemanticTile.HOUSE1, (3, 3), 3, 8.0, 20.0),
            BuildingSpec(SemanticTile.HOUSE2, (3, 3), 2, 8.0, 20.0),
        ])

    def square_fits(self) -> bool:
        """
        True if the centered town square lies inside the border ring and
        clear of the exit cell just north of the southern door.
        """
        sw, sh = self.square_size
        x = self.map_width // 2 - sw // 2
        y = self.map_height // 2 - sh // 2
        t = self.border_thickness
        return (
            x >= t
            and x + sw <= self.map_width - t
            and y >= max(t, 2)
            and y + sh <= self.map_height - t
        )

    def validate(self) -> None:
        """Raise ConfigurationError if these settings cannot drive a run."""
        problems: List[str] = []
        if self.map_width <= 0 or self.map_height <= 0:
            problems.append(f"map size must be positive, got {self.map_width}x{self.map_height}")
        if self.border_thickness < 1:
            problems.append("border_thickness must be at least 1")
        elif min(self.map_width, self.map_height) <= 2 * self.border_thickness:
            problems.append("map is too small for its border")
        if self.center_square:
            sw, sh = self.square_size
            if sw < 3 or sh < 3:
                problems.append(f"square_size must be at least 3x3, got {sw}x{sh}")
            elif not self.square_fits():
                problems.append(
                    f"square_size {sw}x{sh} does not fit inside the border of a "
                    f"{self.map_width}x{self.map_height} map"
                )
        for name in ("tree_density", "flower_density", "path_density"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                problems.append(f"{name} must be within [0, 1], got {value}")
        for spec in self.buildings:
            if spec.tile not in BUILDING_TILES:
                problems.append(f"{spec.tile.value} is not a building tile")
            if spec.size[0] <= 0 or spec.size[1] <= 0:
                problems.append(f"{spec.tile.value} has non-positive size {spec.size}")
            if spec.count < 0:
                problems.append(f"{spec.tile.value} has negative count")
            if spec.min_distance < 0 or spec.min_distance > spec.max_distance:
                problems.append(
                    f"{spec.tile.value} distance band [{spec.min_distance}, {spec.max_distance}] is invalid"
                )
        for tile in self.required_buildings:
            if tile not in BUILDING_TILES:
                problems.append(f"required building {tile.value} is not a building tile")

        if problems:
            raise ConfigurationError("Invalid generation settings: " + "; ".join(problems))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationSettings":
        defaults = cls()
        try:
            buildings = [BuildingSpec.from_dict(b) for b in data.get("buildings", [])]
            required = [
                SemanticTile(name)
                for name in data.get("required_buildings", [t.value for t in defaults.required_buildings])
            ]
            square = data.get("square_size", list(defaults.square_size))
            return cls(
                map_width=int(data.get("map_width", defaults.map_width)),
                map_height=int(data.get("map_height", defaults.map_height)),
                border_thickness=int(data.get("border_thickness", defaults.border_thickness)),
                square_size=(int(square[0]), int(square[1])),
                center_square=bool(data.get("center_square", defaults.center_square)),
                buildings=buildings,
                required_buildings=required,
                path_density=float(data.get("path_density", defaults.path_density)),
                path_width=int(data.get("path_width", defaults.path_width)),
                tree_density=float(data.get("tree_density", defaults.tree_density)),
                flower_density=float(data.get("flower_density", defaults.flower_density)),
                seed=int(data.get("seed", defaults.seed)),
                use_random_seed=bool(data.get("use_random_seed", defaults.use_random_seed)),
            )
        except (TypeError, ValueError, IndexError) as e:
            raise ConfigurationError(f"Invalid generation settings: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "map_width": self.map_width,
            "map_height": self.map_height,
            "border_thickness": self.border_thickness,
            "square_size": list(self.square_size),
            "center_square": self.center_square,
            "buildings": [b.to_dict() for b in self.buildings],
            "required_buildings": [t.value for t in self.required_buildings],
            "path_density": self.path_density,
            "path_width": self.path_width,
            "tree_density": self.tree_density,
            "flower_density": self.flower_density,
            "seed": self.seed,
            "use_random_seed": self.use_random_seed,
        }

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "GenerationSettings":
        """
        Load settings from file, writing the stock village if the file doesn't exist.

        Args:
            config_file: Optional path to config file (defaults to standard location)

        Returns:
            GenerationSettings instance

        Raises:
            ConfigurationError: the file exists but cannot be read or parsed
        """
        if config_file is None:
            config_file = GENERATION_CONFIG_FILE

        if not config_file.exists():
            log.info(f"Village settings not found at {config_file}, using defaults.")
            config = cls.default_village()
            config.save(config_file)
            return config

        try:
            with config_file.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read village settings {config_file}: {e}") from e

        return cls.from_dict(data)

    def save(self, config_file: Optional[Path] = None) -> bool:
        """
        Save settings to file.

        Returns:
            True if saved successfully, False otherwise
        """
        if config_file is None:
            config_file = GENERATION_CONFIG_FILE

        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with config_file.open("w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            return True
        except OSError as e:
            log.warning(f"Error saving village settings: {e}")
            return False


def load_generation_settings(config_file: Optional[Path] = None) -> GenerationSettings:
    """
    Convenience function to load generation settings.

    Args:
        config_file: Optional path to config file

    Returns:
        GenerationSettings instance
    """
    return GenerationSettings.load(config_file)
