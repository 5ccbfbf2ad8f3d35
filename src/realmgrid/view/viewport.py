from __future__ import annotations

import math
from dataclasses import dataclass

from realmgrid.model.partition import WorldMap
from realmgrid.model.regions import region_id_of

DEFAULT_TILE_SIZE = 20
DEFAULT_MIN_SCALE = 0.6
DEFAULT_MAX_SCALE = 3.0
ZOOM_STEP = 1.1

Segment = tuple[tuple[float, float], tuple[float, float]]


@dataclass
class Viewport:
    """Pan/zoom state. ``screen = offset + world * scale`` in CSS-style pixels."""

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    tile_size: int = DEFAULT_TILE_SIZE
    min_scale: float = DEFAULT_MIN_SCALE
    max_scale: float = DEFAULT_MAX_SCALE

    def __post_init__(self) -> None:
        if self.tile_size <= 0:
            self.tile_size = DEFAULT_TILE_SIZE
        if self.min_scale <= 0:
            self.min_scale = DEFAULT_MIN_SCALE
        if self.max_scale <= 0:
            self.max_scale = DEFAULT_MAX_SCALE
        if self.min_scale > self.max_scale:
            self.min_scale, self.max_scale = self.max_scale, self.min_scale
        self.scale = self.clamp_scale(self.scale)

    def clamp_scale(self, scale: float) -> float:
        return max(self.min_scale, min(self.max_scale, scale))

    @property
    def offset(self) -> tuple[float, float]:
        return (self.offset_x, self.offset_y)

    def world_to_screen(self, world_x: float, world_y: float) -> tuple[float, float]:
        return (self.offset_x + world_x * self.scale, self.offset_y + world_y * self.scale)

    def screen_to_world(self, screen_x: float, screen_y: float) -> tuple[float, float]:
        return ((screen_x - self.offset_x) / self.scale, (screen_y - self.offset_y) / self.scale)

    def zoom_at(self, screen_x: float, screen_y: float, factor: float) -> bool:
        """Scale by ``factor`` keeping the world point under the cursor fixed."""
        world_x, world_y = self.screen_to_world(screen_x, screen_y)
        new_scale = self.clamp_scale(self.scale * factor)
        if new_scale == self.scale:
            return False
        self.scale = new_scale
        self.offset_x = screen_x - world_x * new_scale
        self.offset_y = screen_y - world_y * new_scale
        return True

    def zoom_steps(self, screen_x: float, screen_y: float, steps: float) -> bool:
        return self.zoom_at(screen_x, screen_y, ZOOM_STEP**steps)

    def pan_from(self, start_offset: tuple[float, float], delta_x: float, delta_y: float) -> bool:
        new_offset = (start_offset[0] + delta_x, start_offset[1] + delta_y)
        if new_offset == self.offset:
            return False
        self.offset_x, self.offset_y = new_offset
        return True

    def center_on(self, width: int, height: int, container_size: tuple[int, int]) -> None:
        world_width = width * self.tile_size * self.scale
        world_height = height * self.tile_size * self.scale
        self.offset_x = (container_size[0] - world_width) / 2.0
        self.offset_y = (container_size[1] - world_height) / 2.0

    def tile_at(self, screen_x: float, screen_y: float, width: int, height: int) -> tuple[int, int] | None:
        world_x, world_y = self.screen_to_world(screen_x, screen_y)
        tile_x = math.floor(world_x / self.tile_size)
        tile_y = math.floor(world_y / self.tile_size)
        if not (0 <= tile_x < width and 0 <= tile_y < height):
            return None
        return (tile_x, tile_y)

    def hit_test(self, world_map: WorldMap, level: str, screen_x: float, screen_y: float) -> str | None:
        coord = self.tile_at(screen_x, screen_y, world_map.width, world_map.height)
        if coord is None:
            return None
        tile = world_map.tile_at(coord[0], coord[1])
        return region_id_of(tile, level) if tile is not None else None


def boundary_segments(world_map: WorldMap, level: str, tile_size: float = DEFAULT_TILE_SIZE) -> list[Segment]:
    """World-space edges between tiles of different regions.

    Only the right and bottom neighbours are compared, so a shared edge is
    emitted once and the outer grid border never is.
    """
    width = world_map.width
    height = world_map.height
    region_ids = [region_id_of(tile, level) for tile in world_map.tiles]
    segments: list[Segment] = []
    for y in range(height):
        for x in range(width):
            index = y * width + x
            region_id = region_ids[index]
            if x + 1 < width and region_ids[index + 1] != region_id:
                edge_x = (x + 1) * tile_size
                segments.append(((edge_x, y * tile_size), (edge_x, (y + 1) * tile_size)))
            if y + 1 < height and region_ids[index + width] != region_id:
                edge_y = (y + 1) * tile_size
                segments.append(((x * tile_size, edge_y), ((x + 1) * tile_size, edge_y)))
    return segments
