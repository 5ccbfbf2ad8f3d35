from __future__ import annotations

import math
import re
from functools import lru_cache
from typing import Any

import pygame

from realmgrid.model.colors import oklch_to_rgb, parse_oklch, resolve_region_color
from realmgrid.model.partition import WorldMap
from realmgrid.model.regions import region_id_of
from realmgrid.view.viewport import Viewport, boundary_segments

BACKGROUND_RGB = (17, 18, 25)
BOUNDARY_RGB = (24, 24, 30)
HIGHLIGHT_RGBA = (255, 255, 255, 90)
NEUTRAL_RGB = (128, 128, 128)
BOUNDARY_WIDTH_RATIO = 0.08

HSL_PATTERN = re.compile(
    r"^hsla?\(\s*([0-9]+(?:\.[0-9]+)?)\s*,\s*([0-9]+(?:\.[0-9]+)?)%\s*,\s*([0-9]+(?:\.[0-9]+)?)%\s*\)$",
    re.IGNORECASE,
)


@lru_cache(maxsize=4096)
def color_to_rgb(value: Any) -> tuple[int, int, int]:
    """Convert a region color string (oklch, hsl, named or hex) into sRGB."""
    if not isinstance(value, str) or not value.strip():
        return NEUTRAL_RGB
    text = value.strip()
    oklch = parse_oklch(text)
    if oklch is not None:
        return oklch_to_rgb(oklch)

    match = HSL_PATTERN.match(text)
    if match is not None:
        color = pygame.Color(0, 0, 0)
        color.hsla = (
            float(match.group(1)) % 360.0,
            min(100.0, float(match.group(2))),
            min(100.0, float(match.group(3))),
            100.0,
        )
        return (color.r, color.g, color.b)

    try:
        parsed = pygame.Color(text)
    except ValueError:
        return NEUTRAL_RGB
    return (parsed.r, parsed.g, parsed.b)


class RegionMapRenderer:
    """Immediate-mode render pass onto a backing surface scaled by pixel ratio."""

    def __init__(self) -> None:
        self.surface: pygame.Surface | None = None
        self.container_size: tuple[int, int] = (0, 0)
        self.pixel_ratio = 1.0

    def resize(self, container_size: tuple[int, int], pixel_ratio: float = 1.0) -> bool:
        self.container_size = (max(0, int(container_size[0])), max(0, int(container_size[1])))
        self.pixel_ratio = pixel_ratio if pixel_ratio > 0 else 1.0
        backing_size = (
            int(round(self.container_size[0] * self.pixel_ratio)),
            int(round(self.container_size[1] * self.pixel_ratio)),
        )
        if backing_size[0] <= 0 or backing_size[1] <= 0:
            self.surface = None
            return False
        if self.surface is None or self.surface.get_size() != backing_size:
            self.surface = pygame.Surface(backing_size)
        return True

    def detach(self) -> None:
        self.surface = None
        self.container_size = (0, 0)

    def redraw(
        self,
        world_map: WorldMap,
        level: str,
        overrides: Any,
        viewport: Viewport,
        selected_region_id: str | None = None,
    ) -> bool:
        surface = self.surface
        if surface is None:
            return False

        ratio = self.pixel_ratio
        pixel_scale = viewport.scale * ratio
        origin_x = viewport.offset_x * ratio
        origin_y = viewport.offset_y * ratio
        tile_size = viewport.tile_size

        def to_pixel(world_x: float, world_y: float) -> tuple[int, int]:
            return (math.floor(origin_x + world_x * pixel_scale), math.floor(origin_y + world_y * pixel_scale))

        def tile_rect(x: int, y: int) -> pygame.Rect:
            left, top = to_pixel(x * tile_size, y * tile_size)
            right, bottom = to_pixel((x + 1) * tile_size, (y + 1) * tile_size)
            return pygame.Rect(left, top, max(1, right - left), max(1, bottom - top))

        surface.fill(BACKGROUND_RGB)

        colors: dict[str, tuple[int, int, int]] = {}
        for tile in world_map.tiles:
            region_id = region_id_of(tile, level)
            rgb = colors.get(region_id)
            if rgb is None:
                rgb = color_to_rgb(resolve_region_color(level, region_id, overrides, world_map))
                colors[region_id] = rgb
            pygame.draw.rect(surface, rgb, tile_rect(tile.x, tile.y))

        if selected_region_id is not None:
            overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
            for tile in world_map.tiles:
                if region_id_of(tile, level) == selected_region_id:
                    overlay.fill(HIGHLIGHT_RGBA, tile_rect(tile.x, tile.y))
            surface.blit(overlay, (0, 0))

        line_width = max(1, int(round(tile_size * BOUNDARY_WIDTH_RATIO * pixel_scale)))
        # pygame has no path object; segments are disjoint, so one stroke each with the same pen.
        for start, end in boundary_segments(world_map, level, tile_size):
            pygame.draw.line(surface, BOUNDARY_RGB, to_pixel(*start), to_pixel(*end), line_width)
        return True

    def blit_to(self, target: pygame.Surface, position: tuple[int, int] = (0, 0)) -> None:
        if self.surface is None:
            return
        if self.surface.get_size() == self.container_size:
            target.blit(self.surface, position)
            return
        target.blit(pygame.transform.smoothscale(self.surface, self.container_size), position)
