from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from realmgrid.model.overrides import (
    COUNTY,
    DUCHY,
    PARENT_NONE,
    PARENT_VALUE,
    ParentRef,
    resolve_override,
)

DUCHY_SIZE = 2
KINGDOM_SIZE = 4
EMPIRE_ID = "e-0"
DEFAULT_WIDTH = 8
DEFAULT_HEIGHT = 8

COUNTY_PREFIX = "c-"
DUCHY_PREFIX = "d-"
KINGDOM_PREFIX = "k-"
EMPIRE_PREFIX = "e-"


def tile_id_for(x: int, y: int) -> str:
    return f"t-{y}-{x}"


def county_id_for(x: int, y: int) -> str:
    return f"c-{y}-{x}"


def natural_duchy_id(x: int, y: int) -> str:
    return f"d-{y // DUCHY_SIZE}-{x // DUCHY_SIZE}"


def natural_kingdom_id(x: int, y: int) -> str:
    return f"k-{y // KINGDOM_SIZE}-{x // KINGDOM_SIZE}"


def orphan_duchy_id(county_id: str) -> str:
    return f"d-orphan-{county_id}"


def orphan_kingdom_id(duchy_id: str) -> str:
    return f"k-orphan-{duchy_id}"


@dataclass(frozen=True)
class Tile:
    tile_id: str
    x: int
    y: int
    county_id: str
    duchy_id: str
    kingdom_id: str
    empire_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "tile_id": self.tile_id,
            "x": self.x,
            "y": self.y,
            "county_id": self.county_id,
            "duchy_id": self.duchy_id,
            "kingdom_id": self.kingdom_id,
            "empire_id": self.empire_id,
        }


@dataclass(frozen=True)
class County:
    county_id: str
    tile_ids: tuple[str, ...]
    duchy_id: str


@dataclass(frozen=True)
class Duchy:
    duchy_id: str
    county_ids: tuple[str, ...]
    kingdom_id: str


@dataclass(frozen=True)
class Kingdom:
    kingdom_id: str
    duchy_ids: tuple[str, ...]
    empire_id: str


@dataclass(frozen=True)
class Empire:
    empire_id: str
    kingdom_ids: tuple[str, ...]


@dataclass(frozen=True)
class WorldMap:
    """Built partition for one (width, height, overrides) input.

    Never mutated after construction; an override change means a new build.
    """

    width: int
    height: int
    tiles: tuple[Tile, ...]
    counties: dict[str, County]
    duchies: dict[str, Duchy]
    kingdoms: dict[str, Kingdom]
    empire: Empire

    def tile_at(self, x: int, y: int) -> Tile | None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return None
        return self.tiles[y * self.width + x]

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "tiles": [tile.to_dict() for tile in self.tiles],
            "counties": {
                county_id: {"tile_ids": list(county.tile_ids), "duchy_id": county.duchy_id}
                for county_id, county in self.counties.items()
            },
            "duchies": {
                duchy_id: {"county_ids": list(duchy.county_ids), "kingdom_id": duchy.kingdom_id}
                for duchy_id, duchy in self.duchies.items()
            },
            "kingdoms": {
                kingdom_id: {"duchy_ids": list(kingdom.duchy_ids), "empire_id": kingdom.empire_id}
                for kingdom_id, kingdom in self.kingdoms.items()
            },
            "empire": {"empire_id": self.empire.empire_id, "kingdom_ids": list(self.empire.kingdom_ids)},
        }


def _grid_dimension(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)


def _resolve_group_parent(
    parent: ParentRef | None,
    *,
    child_id: str,
    natural_id: str,
    orphan_id: str,
    parent_prefix: str,
) -> str:
    if parent is None or parent.kind not in (PARENT_NONE, PARENT_VALUE):
        return natural_id
    if parent.kind == PARENT_NONE:
        return orphan_id
    target = parent.region_id or ""
    if target == child_id:
        return orphan_id
    foreign_prefixes = {COUNTY_PREFIX, DUCHY_PREFIX, KINGDOM_PREFIX, EMPIRE_PREFIX} - {parent_prefix}
    if any(target.startswith(prefix) for prefix in foreign_prefixes):
        return orphan_id
    return target


def build_world_map(width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT, overrides: Any = None) -> WorldMap:
    width = _grid_dimension(width)
    height = _grid_dimension(height)

    county_tiles: dict[str, list[str]] = {}
    natural_parent: dict[str, tuple[str, str]] = {}
    natural_duchy_kingdom: dict[str, str] = {}
    for y in range(height):
        for x in range(width):
            county_id = county_id_for(x, y)
            county_tiles.setdefault(county_id, []).append(tile_id_for(x, y))
            duchy_id = natural_duchy_id(x, y)
            kingdom_id = natural_kingdom_id(x, y)
            natural_parent.setdefault(county_id, (duchy_id, kingdom_id))
            natural_duchy_kingdom.setdefault(duchy_id, kingdom_id)

    county_duchy: dict[str, str] = {}
    duchy_members: dict[str, list[str]] = {}
    duchy_default_kingdom: dict[str, str] = {}
    for county_id in county_tiles:
        default_duchy, default_kingdom = natural_parent[county_id]
        meta = resolve_override(COUNTY, county_id, overrides)
        duchy_id = _resolve_group_parent(
            meta.parent if meta is not None else None,
            child_id=county_id,
            natural_id=default_duchy,
            orphan_id=orphan_duchy_id(county_id),
            parent_prefix=DUCHY_PREFIX,
        )
        county_duchy[county_id] = duchy_id
        duchy_members.setdefault(duchy_id, []).append(county_id)
        duchy_default_kingdom.setdefault(duchy_id, natural_duchy_kingdom.get(duchy_id, default_kingdom))

    duchy_kingdom: dict[str, str] = {}
    kingdom_members: dict[str, list[str]] = {}
    for duchy_id in duchy_members:
        meta = resolve_override(DUCHY, duchy_id, overrides)
        kingdom_id = _resolve_group_parent(
            meta.parent if meta is not None else None,
            child_id=duchy_id,
            natural_id=duchy_default_kingdom[duchy_id],
            orphan_id=orphan_kingdom_id(duchy_id),
            parent_prefix=KINGDOM_PREFIX,
        )
        duchy_kingdom[duchy_id] = kingdom_id
        kingdom_members.setdefault(kingdom_id, []).append(duchy_id)

    tiles: list[Tile] = []
    for y in range(height):
        for x in range(width):
            county_id = county_id_for(x, y)
            duchy_id = county_duchy[county_id]
            tiles.append(
                Tile(
                    tile_id=tile_id_for(x, y),
                    x=x,
                    y=y,
                    county_id=county_id,
                    duchy_id=duchy_id,
                    kingdom_id=duchy_kingdom[duchy_id],
                    empire_id=EMPIRE_ID,
                )
            )

    return WorldMap(
        width=width,
        height=height,
        tiles=tuple(tiles),
        counties={
            county_id: County(county_id=county_id, tile_ids=tuple(tile_ids), duchy_id=county_duchy[county_id])
            for county_id, tile_ids in county_tiles.items()
        },
        duchies={
            duchy_id: Duchy(duchy_id=duchy_id, county_ids=tuple(members), kingdom_id=duchy_kingdom[duchy_id])
            for duchy_id, members in duchy_members.items()
        },
        kingdoms={
            kingdom_id: Kingdom(kingdom_id=kingdom_id, duchy_ids=tuple(members), empire_id=EMPIRE_ID)
            for kingdom_id, members in kingdom_members.items()
        },
        empire=Empire(empire_id=EMPIRE_ID, kingdom_ids=tuple(kingdom_members)),
    )
