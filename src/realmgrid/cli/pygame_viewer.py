from __future__ import annotations

import argparse
import importlib.metadata
import os
import platform
import sys
from typing import Any

from realmgrid.content.io import DEFAULT_REGION_OVERRIDES_PATH, load_default_region_overrides, save_region_overrides_json
from realmgrid.model.hash import world_hash
from realmgrid.model.overrides import COUNTY, DUCHY, EMPIRE, KINGDOM, LEVELS
from realmgrid.model.partition import DEFAULT_HEIGHT, DEFAULT_WIDTH
from realmgrid.model.session import MapSession
from realmgrid.view.pointer import PointerController
from realmgrid.view.viewport import DEFAULT_MAX_SCALE, DEFAULT_MIN_SCALE, DEFAULT_TILE_SIZE, Viewport

WINDOW_SIZE = (960, 720)
FRAME_RATE = 60
HUD_MARGIN = 12
HUD_LINE_HEIGHT = 22
DEFAULT_EXPORT_PATH = "exports/region_overrides.json"

pygame: Any | None = None


def _level_hotkeys() -> dict[int, str]:
    return {
        pygame.K_1: COUNTY,
        pygame.K_2: DUCHY,
        pygame.K_3: KINGDOM,
        pygame.K_4: EMPIRE,
    }


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {raw}")
    return value


def _positive_float(raw: str) -> float:
    value = float(raw)
    if not value > 0:
        raise argparse.ArgumentTypeError(f"must be a positive number, got {raw}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m realmgrid.cli.pygame_viewer",
        description="Inspect the region hierarchy of a tile grid in a pygame window.",
    )
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Grid width in tiles.")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="Grid height in tiles.")
    parser.add_argument(
        "--overrides-path",
        default=DEFAULT_REGION_OVERRIDES_PATH,
        help="Region overrides JSON used as the seed payload.",
    )
    parser.add_argument(
        "--export-path",
        default=DEFAULT_EXPORT_PATH,
        help="Path written by F5 with the pruned overrides snapshot.",
    )
    parser.add_argument("--level", choices=LEVELS, default=COUNTY, help="Initial map level.")
    parser.add_argument("--tile-size", type=_positive_int, default=DEFAULT_TILE_SIZE, help="Tile size in world pixels.")
    parser.add_argument("--min-scale", type=_positive_float, default=DEFAULT_MIN_SCALE, help="Minimum zoom scale.")
    parser.add_argument("--max-scale", type=_positive_float, default=DEFAULT_MAX_SCALE, help="Maximum zoom scale.")
    parser.add_argument(
        "--pixel-ratio",
        type=float,
        default=1.0,
        help="Backing surface density relative to window pixels.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Force SDL dummy video driver for CI/testing and exit after one frame.",
    )
    return parser


def _env_flag_enabled(var_name: str) -> bool:
    return os.environ.get(var_name, "").strip().lower() in {"1", "true", "yes", "on"}


def _print_startup_banner() -> None:
    try:
        pygame_version = importlib.metadata.version("pygame")
    except importlib.metadata.PackageNotFoundError:
        pygame_version = "not-installed"
    print(
        "[realmgrid.viewer] startup "
        f"python={platform.python_version()} "
        f"pygame={pygame_version} "
        f"platform={platform.platform()}"
    )
    for name in ("SDL_VIDEODRIVER", "SDL_AUDIODRIVER"):
        value = os.environ.get(name, "<unset>")
        print(f"[realmgrid.viewer] env {name}={value}")


def _ensure_pygame_imported() -> Any:
    global pygame
    if pygame is None:
        import pygame as pygame_module

        pygame = pygame_module
    return pygame


def _build_session(width: int, height: int, overrides_path: str, level: str) -> MapSession:
    session = MapSession(
        width=width,
        height=height,
        seed_overrides=load_default_region_overrides(overrides_path),
        level=level,
    )
    print(
        "[realmgrid.viewer] built "
        f"size={session.width}x{session.height} "
        f"counties={len(session.world_map.counties)} "
        f"duchies={len(session.world_map.duchies)} "
        f"kingdoms={len(session.world_map.kingdoms)} "
        f"world_hash={world_hash(session.world_map)}"
    )
    return session


def _export_snapshot(session: MapSession, export_path: str) -> str:
    try:
        snapshot = save_region_overrides_json(export_path, session.overrides)
    except (OSError, ValueError) as exc:
        print(f"[realmgrid.viewer] export failed path={export_path}: {exc}", file=sys.stderr)
        return f"export failed: {exc}"
    print(f"[realmgrid.viewer] exported path={export_path} entries={sum(len(v) for v in snapshot.values())}")
    return f"exported {export_path}"


def _hud_lines(session: MapSession, viewport: Viewport, status_message: str | None) -> list[str]:
    lines = [
        f"level={session.level} | size={session.width}x{session.height} | scale={viewport.scale:.2f}",
        "1-4 level | LMB select/drag | wheel zoom | F5 export | R reset | ESC quit",
    ]
    info = session.info()
    if info is not None:
        label = info.name if info.name else info.region_id
        lines.append(f"selected={label} ({info.region_id}) tiles={info.tile_count} parent={info.parent_id or '-'}")
    if status_message:
        lines.append(f"status: {status_message}")
    return lines


def _draw_hud(screen: Any, font: Any, lines: list[str]) -> None:
    y = HUD_MARGIN
    for line in lines:
        surface = font.render(line, True, (240, 240, 240))
        screen.blit(surface, (HUD_MARGIN, y))
        y += HUD_LINE_HEIGHT


def run_region_viewer(
    *,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    overrides_path: str = DEFAULT_REGION_OVERRIDES_PATH,
    export_path: str = DEFAULT_EXPORT_PATH,
    level: str = COUNTY,
    tile_size: int = DEFAULT_TILE_SIZE,
    min_scale: float = DEFAULT_MIN_SCALE,
    max_scale: float = DEFAULT_MAX_SCALE,
    pixel_ratio: float = 1.0,
    headless: bool = False,
) -> int:
    if headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        print("[realmgrid.viewer] warning: headless mode active; no window will open.")

    _print_startup_banner()
    pygame_module = _ensure_pygame_imported()

    try:
        pygame_module.init()
    except Exception as exc:
        print(
            "[realmgrid.viewer] failed during pygame.init(): "
            f"{exc}. Hint: verify a working SDL video driver (set SDL_VIDEODRIVER=dummy for headless mode).",
            file=sys.stderr,
        )
        return 1

    try:
        session = _build_session(width, height, overrides_path, level)
    except (OSError, ValueError) as exc:
        print(f"[realmgrid.viewer] failed to load overrides: {exc}", file=sys.stderr)
        pygame_module.quit()
        return 1

    try:
        pygame_module.display.set_caption("Realm Grid Viewer")
        screen = pygame_module.display.set_mode(WINDOW_SIZE, pygame_module.RESIZABLE)
    except Exception as exc:
        print(
            "[realmgrid.viewer] failed during pygame.display.set_mode(...): "
            f"{exc}. Hint: GUI sessions require a valid display; use --headless or REALMGRID_HEADLESS=1.",
            file=sys.stderr,
        )
        pygame_module.quit()
        return 1

    from realmgrid.view.render import RegionMapRenderer

    print(f"[realmgrid.viewer] display initialized: {pygame_module.display.get_driver()}, window size={WINDOW_SIZE}")

    viewport = Viewport(tile_size=tile_size, min_scale=min_scale, max_scale=max_scale)
    viewport.center_on(session.width, session.height, screen.get_size())
    renderer = RegionMapRenderer()
    renderer.resize(screen.get_size(), pixel_ratio)

    def handle_select(region_id: str) -> None:
        session.select(region_id)
        print(f"[realmgrid.viewer] selected level={session.level} region={region_id}")

    controller = PointerController(viewport=viewport, on_select=handle_select)

    if headless:
        drawn = renderer.redraw(session.world_map, session.level, session.overrides, viewport, session.selected_region_id)
        print(f"[realmgrid.viewer] headless frame drawn={drawn}")
        renderer.detach()
        pygame_module.quit()
        return 0

    clock = pygame_module.time.Clock()
    font = pygame_module.font.SysFont("consolas", 18)
    status_message: str | None = None
    drawn_revision = -1
    needs_redraw = True
    running = True

    def release_capture() -> None:
        if controller.pointer_leave():
            pygame_module.event.set_grab(False)

    while running:
        for event in pygame_module.event.get():
            if event.type == pygame_module.QUIT:
                running = False
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_ESCAPE:
                running = False
            elif event.type == pygame_module.VIDEORESIZE:
                screen = pygame_module.display.set_mode(event.size, pygame_module.RESIZABLE)
                renderer.resize(event.size, pixel_ratio)
                needs_redraw = True
            elif event.type == pygame_module.KEYDOWN and event.key in _level_hotkeys():
                session.set_level(_level_hotkeys()[event.key])
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_F5:
                status_message = _export_snapshot(session, export_path)
                needs_redraw = True
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_r:
                session.reset_overrides()
                status_message = "overrides reset"
            elif event.type == pygame_module.MOUSEBUTTONDOWN and event.button == 1:
                controller.pointer_down(event.pos)
                pygame_module.event.set_grab(True)
            elif event.type == pygame_module.MOUSEMOTION and controller.captured:
                needs_redraw = controller.pointer_move(event.pos) or needs_redraw
            elif event.type == pygame_module.MOUSEBUTTONUP and event.button == 1:
                controller.pointer_up(event.pos, session.world_map, session.level)
                pygame_module.event.set_grab(False)
            elif event.type == pygame_module.WINDOWLEAVE:
                release_capture()
            elif event.type == pygame_module.MOUSEWHEEL:
                needs_redraw = controller.wheel(pygame_module.mouse.get_pos(), event.y) or needs_redraw

        if needs_redraw or drawn_revision != session.revision:
            screen.fill((17, 18, 25))
            if renderer.redraw(session.world_map, session.level, session.overrides, viewport, session.selected_region_id):
                renderer.blit_to(screen)
            _draw_hud(screen, font, _hud_lines(session, viewport, status_message))
            pygame_module.display.flip()
            drawn_revision = session.revision
            needs_redraw = False

        clock.tick(FRAME_RATE)

    release_capture()
    renderer.detach()
    pygame_module.quit()
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    headless = args.headless or _env_flag_enabled("REALMGRID_HEADLESS")
    raise SystemExit(
        run_region_viewer(
            width=args.width,
            height=args.height,
            overrides_path=args.overrides_path,
            export_path=args.export_path,
            level=args.level,
            tile_size=args.tile_size,
            min_scale=args.min_scale,
            max_scale=args.max_scale,
            pixel_ratio=args.pixel_ratio,
            headless=headless,
        )
    )


if __name__ == "__main__":
    main()
