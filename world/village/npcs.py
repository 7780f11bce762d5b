"""
Village NPC spawn points.

Parsed layouts carry NPC markers out of band. Turning them into live
entities is the host game's job, so spawning goes through an injected
MarkerSpawner instead of a global prefab lookup.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from engine.error_handler import logger
from settings import TILE_SIZE
from ..tiles import SemanticTile
from .layout import Marker


log = logger.getChild("npcs")

NPC_ROLES: Dict[SemanticTile, str] = {
    SemanticTile.NPC_MERCHANT: "merchant",
    SemanticTile.NPC_CHIEF: "chief",
    SemanticTile.NPC_FARMER: "farmer",
    SemanticTile.NPC_CHILD: "child",
}


@dataclass(frozen=True)
class NpcSpawnPoint:
    """Where and what to spawn, in tile and world coordinates."""
    role: str
    tile_x: int
    tile_y: int
    world_x: float
    world_y: float
    npc_id: str


class MarkerSpawner(Protocol):
    def spawn(self, point: NpcSpawnPoint) -> Optional[Any]:
        """Create the entity for a spawn point, or None to skip it."""
        ...


def spawn_point_for(marker: Marker, tile_size: int = TILE_SIZE) -> NpcSpawnPoint:
    """Center of the marker's tile in world units."""
    role = NPC_ROLES[marker.kind]
    tx, ty = marker.position
    return NpcSpawnPoint(
        role=role,
        tile_x=tx,
        tile_y=ty,
        world_x=tx * tile_size + tile_size / 2,
        world_y=ty * tile_size + tile_size / 2,
        npc_id=f"npc_{role}_{tx}_{ty}",
    )


def spawn_markers(markers: Sequence[Marker], spawner: MarkerSpawner) -> List[Any]:
    """Hand each marker to the spawner; returns whatever it created."""
    spawned: List[Any] = []
    for marker in markers:
        point = spawn_point_for(marker)
        entity = spawner.spawn(point)
        if entity is None:
            log.debug(f"Spawner skipped {point.npc_id}")
            continue
        spawned.append(entity)
    return spawned


class RecordingSpawner:
    """Spawner that just keeps the spawn points (debug dumps, tests)."""

    def __init__(self) -> None:
        self.points: List[NpcSpawnPoint] = []

    def spawn(self, point: NpcSpawnPoint) -> NpcSpawnPoint:
        self.points.append(point)
        return point
