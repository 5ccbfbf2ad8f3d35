from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from realmgrid.model.colors import resolve_region_color
from realmgrid.model.overrides import COUNTY, DUCHY, EMPIRE, KINGDOM, resolve_override
from realmgrid.model.partition import Tile, WorldMap


@dataclass(frozen=True)
class RegionInfo:
    """Read-only projection of one region; computed per query, never stored."""

    region_id: str
    level: str
    tile_count: int
    parent_id: str | None
    name: str | None = None
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "region_id": self.region_id,
            "level": self.level,
            "tile_count": self.tile_count,
            "parent_id": self.parent_id,
            "name": self.name,
            "color": self.color,
        }


def region_id_of(tile: Tile, level: str) -> str:
    if level == DUCHY:
        return tile.duchy_id
    if level == KINGDOM:
        return tile.kingdom_id
    if level == EMPIRE:
        return tile.empire_id
    return tile.county_id


def _county_tile_count(world_map: WorldMap, county_id: str) -> int:
    county = world_map.counties.get(county_id)
    return len(county.tile_ids) if county is not None else 0


def _duchy_tile_count(world_map: WorldMap, duchy_id: str) -> int:
    duchy = world_map.duchies.get(duchy_id)
    if duchy is None:
        return 0
    return sum(_county_tile_count(world_map, county_id) for county_id in duchy.county_ids)


def _tile_count_and_parent(world_map: WorldMap, level: str, region_id: str) -> tuple[str, int, str | None] | None:
    if level == COUNTY:
        county = world_map.counties.get(region_id)
        if county is None:
            return None
        return (county.county_id, len(county.tile_ids), county.duchy_id)
    if level == DUCHY:
        duchy = world_map.duchies.get(region_id)
        if duchy is None:
            return None
        return (duchy.duchy_id, _duchy_tile_count(world_map, duchy.duchy_id), duchy.kingdom_id)
    if level == KINGDOM:
        kingdom = world_map.kingdoms.get(region_id)
        if kingdom is None:
            return None
        tile_count = sum(_duchy_tile_count(world_map, duchy_id) for duchy_id in kingdom.duchy_ids)
        return (kingdom.kingdom_id, tile_count, kingdom.empire_id)
    if level == EMPIRE:
        return (world_map.empire.empire_id, world_map.width * world_map.height, None)
    return None


def region_info(world_map: WorldMap, level: str, region_id: str, overrides: Any = None) -> RegionInfo | None:
    resolved = _tile_count_and_parent(world_map, level, region_id)
    if resolved is None:
        return None
    resolved_id, tile_count, parent_id = resolved
    meta = resolve_override(level, resolved_id, overrides)
    return RegionInfo(
        region_id=resolved_id,
        level=level,
        tile_count=tile_count,
        parent_id=parent_id,
        name=meta.name if meta is not None else None,
        color=resolve_region_color(level, resolved_id, overrides, world_map),
    )


def region_tiles(world_map: WorldMap, level: str, region_id: str) -> list[Tile]:
    return [tile for tile in world_map.tiles if region_id_of(tile, level) == region_id]


def region_ids(world_map: WorldMap, level: str) -> list[str]:
    if level == COUNTY:
        return list(world_map.counties)
    if level == DUCHY:
        return list(world_map.duchies)
    if level == KINGDOM:
        return list(world_map.kingdoms)
    if level == EMPIRE:
        return [world_map.empire.empire_id]
    return []
