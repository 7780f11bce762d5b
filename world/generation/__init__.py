"""
Generation configuration.

Provides configurable settings for procedural village generation.
"""

from .config import (
    BuildingSpec,
    GenerationSettings,
    DEFAULT_REQUIRED_BUILDINGS,
    load_generation_settings,
)

__all__ = [
    "BuildingSpec",
    "GenerationSettings",
    "DEFAULT_REQUIRED_BUILDINGS",
    "load_generation_settings",
]
