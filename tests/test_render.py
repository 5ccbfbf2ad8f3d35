import pygame

from realmgrid.model.colors import hash_color, resolve_region_color
from realmgrid.model.partition import build_world_map
from realmgrid.view.render import BOUNDARY_RGB, NEUTRAL_RGB, RegionMapRenderer, color_to_rgb
from realmgrid.view.viewport import Viewport


def _rgb(surface: pygame.Surface, pos: tuple[int, int]) -> tuple[int, int, int]:
    color = surface.get_at(pos)
    return (color.r, color.g, color.b)


def test_color_to_rgb_handles_supported_formats() -> None:
    assert color_to_rgb("oklch(100% 0 0)") == (255, 255, 255)
    assert color_to_rgb("hsl(0, 100%, 50%)") == (255, 0, 0)
    assert color_to_rgb("#00ff00") == (0, 255, 0)
    assert color_to_rgb("blue") == (0, 0, 255)
    assert color_to_rgb("definitely not a color") == NEUTRAL_RGB
    assert color_to_rgb("") == NEUTRAL_RGB


def test_redraw_without_surface_is_a_no_op() -> None:
    renderer = RegionMapRenderer()
    world = build_world_map(8, 8, {})

    assert renderer.redraw(world, "county", {}, Viewport()) is False
    assert renderer.resize((0, 120)) is False
    assert renderer.redraw(world, "county", {}, Viewport()) is False


def test_resize_scales_backing_surface_by_pixel_ratio() -> None:
    renderer = RegionMapRenderer()

    assert renderer.resize((80, 60), 2.0) is True
    assert renderer.surface.get_size() == (160, 120)
    renderer.detach()
    assert renderer.surface is None


def test_tiles_are_filled_with_resolved_region_colors() -> None:
    overrides = {"counties": {"c-0-0": {"color": "#ff0000"}}}
    world = build_world_map(8, 8, overrides)
    renderer = RegionMapRenderer()
    renderer.resize((160, 160))

    assert renderer.redraw(world, "county", overrides, Viewport(tile_size=20)) is True

    assert _rgb(renderer.surface, (10, 10)) == (255, 0, 0)
    expected = color_to_rgb(resolve_region_color("county", "c-3-3", overrides, world))
    assert _rgb(renderer.surface, (70, 70)) == expected


def test_boundaries_are_stroked_between_regions_only() -> None:
    world = build_world_map(8, 8, {})
    renderer = RegionMapRenderer()
    renderer.resize((160, 160))

    renderer.redraw(world, "county", {}, Viewport(tile_size=20))
    assert _rgb(renderer.surface, (20, 10)) == BOUNDARY_RGB

    renderer.redraw(world, "empire", {}, Viewport(tile_size=20))
    empire_rgb = color_to_rgb(hash_color("e-0"))
    assert _rgb(renderer.surface, (20, 10)) == empire_rgb
    assert _rgb(renderer.surface, (10, 10)) == empire_rgb


def test_selected_region_is_highlighted() -> None:
    overrides = {"counties": {"c-0-0": {"color": "#000000"}, "c-0-1": {"color": "#000000"}}}
    world = build_world_map(8, 8, overrides)
    renderer = RegionMapRenderer()
    renderer.resize((160, 160))

    renderer.redraw(world, "county", overrides, Viewport(tile_size=20), selected_region_id="c-0-0")

    highlighted = _rgb(renderer.surface, (10, 10))
    assert highlighted[0] > 0 and highlighted == (highlighted[0],) * 3
    assert _rgb(renderer.surface, (30, 10)) == (0, 0, 0)


def test_pixel_ratio_maps_css_pixels_to_backing_pixels() -> None:
    overrides = {"counties": {"c-0-0": {"color": "#ff0000"}}}
    world = build_world_map(8, 8, overrides)
    renderer = RegionMapRenderer()
    renderer.resize((80, 80), 2.0)

    renderer.redraw(world, "county", overrides, Viewport(tile_size=20))

    assert _rgb(renderer.surface, (30, 30)) == (255, 0, 0)
    assert _rgb(renderer.surface, (50, 10)) != (255, 0, 0)


def test_viewport_offset_moves_the_map() -> None:
    overrides = {"counties": {"c-0-0": {"color": "#ff0000"}}}
    world = build_world_map(8, 8, overrides)
    renderer = RegionMapRenderer()
    renderer.resize((200, 200))

    renderer.redraw(world, "county", overrides, Viewport(scale=2.0, offset_x=50.0, offset_y=50.0, tile_size=20))

    assert _rgb(renderer.surface, (20, 20)) == (17, 18, 25)
    assert _rgb(renderer.surface, (70, 70)) == (255, 0, 0)


def test_blit_to_copies_frame_onto_target() -> None:
    overrides = {"counties": {"c-0-0": {"color": "#ff0000"}}}
    renderer = RegionMapRenderer()
    renderer.resize((40, 40))
    renderer.redraw(build_world_map(2, 2, overrides), "county", overrides, Viewport(tile_size=20))
    target = pygame.Surface((40, 40))

    renderer.blit_to(target)

    assert _rgb(target, (5, 5)) == (255, 0, 0)
