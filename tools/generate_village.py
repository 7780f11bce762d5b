#!/usr/bin/env python3
"""
Generate a village from settings and dump it for inspection.

Usage:
    # Stock settings (config/village_settings.json), configured seed
    python tools/generate_village.py

    # Explicit seed, ASCII dump and PNG preview
    python tools/generate_village.py --seed 42 --ascii --png village.png

    # Build an authored layout instead of generating one
    python tools/generate_village.py --layout config/layouts/first_village.json --png first.png
"""

import argparse
import sys
from pathlib import Path

import pygame

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from engine.error_handler import GenerationError, log_error  # noqa: E402
from settings import TILE_SIZE  # noqa: E402
from telemetry.logger import telemetry  # noqa: E402
from world.game_map import VillageMap  # noqa: E402
from world.generation.config import GenerationSettings  # noqa: E402
from world.village import (  # noqa: E402
    DEFAULT_SYMBOLS,
    LayoutDocument,
    RecordingSpawner,
    TileVariantResolver,
    build_map,
    default_rule_table,
    generate_village,
    load_rule_table,
    serialize_layout,
)


def _save_png(village: VillageMap, path: Path, tile_size: int) -> None:
    pygame.init()
    try:
        surface = village.render_preview(tile_size)
        pygame.image.save(surface, str(path))
    finally:
        pygame.quit()
    print(f"Preview written to {path}")


def _run_generate(args, resolver: TileVariantResolver) -> int:
    settings = GenerationSettings.load(Path(args.settings) if args.settings else None)
    result = generate_village(settings, seed=args.seed)

    for line in result.diagnostics:
        print(f"note: {line}")

    if not result.success:
        print(f"Generation failed (seed {result.seed}): {result.error}")
        for violation in result.violations:
            print(f"  - {violation}")
        return 1

    print(f"Generated village with seed {result.seed}: {len(result.buildings)} buildings")
    village = result.to_map(resolver)
    if args.ascii:
        print(serialize_layout(result.grid, DEFAULT_SYMBOLS))
    if args.png:
        _save_png(village, Path(args.png), args.tile_size)
    return 0


def _run_layout(args, resolver: TileVariantResolver) -> int:
    document = LayoutDocument.load(Path(args.layout))
    spawner = RecordingSpawner()
    result = build_map(document, resolver, spawner, validate=not args.no_validate)

    if not result.success:
        print(f"Layout '{document.map_name}' failed validation:")
        for message in result.report.messages:
            print(f"  - {message}")
        return 1

    print(f"Built '{document.map_name}': {len(result.cells)} cells, {len(spawner.points)} NPC spawn points")
    if args.ascii:
        print(serialize_layout(result.village.grid, document.symbols))
    if args.png:
        _save_png(result.village, Path(args.png), args.tile_size)
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate or build a village map")
    parser.add_argument("--settings", help="Generation settings JSON (default: config/village_settings.json)")
    parser.add_argument("--layout", help="Authored layout JSON to build instead of generating")
    parser.add_argument("--rules", help="Tile rule families JSON (default: stock 9-slice rules)")
    parser.add_argument("--seed", type=int, help="Override the configured seed")
    parser.add_argument("--ascii", action="store_true", help="Print the map as layout text")
    parser.add_argument("--png", help="Write a flat-color preview image")
    parser.add_argument("--tile-size", type=int, default=TILE_SIZE, help="Preview pixels per tile")
    parser.add_argument("--no-validate", action="store_true", help="Skip validation for --layout")
    parser.add_argument("--telemetry", help="Append JSON-lines generation events to this file")
    args = parser.parse_args()

    if args.telemetry:
        telemetry.init(Path(args.telemetry))

    try:
        rule_table = load_rule_table(Path(args.rules)) if args.rules else default_rule_table()
        resolver = TileVariantResolver(rule_table)
        if args.layout:
            return _run_layout(args, resolver)
        return _run_generate(args, resolver)
    except GenerationError as e:
        log_error(e, "generate_village_cli")
        print(f"Error: {e.user_message}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
