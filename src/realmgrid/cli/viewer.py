from __future__ import annotations

from realmgrid.content.io import DEFAULT_REGION_OVERRIDES_PATH, load_default_region_overrides, save_region_overrides_json
from realmgrid.model.overrides import LEVELS, ParentRef, resolve_override
from realmgrid.model.regions import region_id_of
from realmgrid.model.session import MapSession

LEVEL_ALIASES = {"c": "county", "d": "duchy", "k": "kingdom", "e": "empire"}


class AsciiRegionViewer:
    """Read-only projection of the region map for terminal display."""

    def render(self, session: MapSession) -> str:
        world_map = session.world_map
        lines = [f"level={session.level} size={world_map.width}x{world_map.height}"]
        if not world_map.tiles:
            return "\n".join(lines + ["<empty grid>"])

        labels = [region_id_of(tile, session.level) for tile in world_map.tiles]
        cell_width = max(len(label) for label in labels)
        for y in range(world_map.height):
            row = labels[y * world_map.width : (y + 1) * world_map.width]
            lines.append(" ".join(label.ljust(cell_width) for label in row))

        if session.selected_region_id is not None:
            lines.append(f"selected={session.selected_region_id}")
        return "\n".join(lines)

    def render_info(self, session: MapSession, level: str, region_id: str) -> str:
        info = session.info(level, region_id)
        if info is None:
            return f"unknown {level} {region_id}"
        return (
            f"{info.level}[{info.region_id}] name={info.name or '-'} tiles={info.tile_count} "
            f"parent={info.parent_id or '-'} color={info.color}"
        )


class RegionEditController:
    """Stand-in for the override editing form; writes through the session."""

    def __init__(self, session: MapSession) -> None:
        self.session = session

    def _current(self, level: str, region_id: str) -> tuple[str | None, str | None, ParentRef]:
        meta = resolve_override(level, region_id, self.session.overrides)
        if meta is None:
            return (None, None, ParentRef.unspecified())
        return (meta.name, meta.color, meta.parent)

    def set_name(self, level: str, region_id: str, name: str | None) -> None:
        _, color, parent = self._current(level, region_id)
        self.session.edit_region(level, region_id, name=name, color=color, parent=parent)

    def set_color(self, level: str, region_id: str, color: str | None) -> None:
        name, _, parent = self._current(level, region_id)
        self.session.edit_region(level, region_id, name=name, color=color, parent=parent)

    def set_parent(self, level: str, region_id: str, raw_parent: str) -> None:
        name, color, _ = self._current(level, region_id)
        if raw_parent == "none":
            parent = ParentRef.none()
        elif raw_parent == "clear":
            parent = ParentRef.unspecified()
        else:
            parent = ParentRef.to(raw_parent)
        self.session.edit_region(level, region_id, name=name, color=color, parent=parent)


def _parse_level(raw: str) -> str | None:
    level = LEVEL_ALIASES.get(raw, raw)
    return level if level in LEVELS else None


def run_demo(overrides_path: str = DEFAULT_REGION_OVERRIDES_PATH) -> None:
    session = MapSession(seed_overrides=load_default_region_overrides(overrides_path))
    view = AsciiRegionViewer()
    controller = RegionEditController(session)

    print(
        "Realm grid demo. Commands: show [level] | info <level> <id> | select <x> <y> | "
        "name <level> <id> <text> | color <level> <id> <color> | parent <level> <id> <id|none|clear> | "
        "export <path> | reset | quit"
    )
    print(view.render(session))

    while True:
        raw = input("> ").strip()
        if raw in {"quit", "exit"}:
            break
        parts = raw.split()
        if not parts:
            continue

        if parts[0] == "show":
            if len(parts) == 2:
                level = _parse_level(parts[1])
                if level is None:
                    print("unknown level")
                    continue
                session.set_level(level)
            print(view.render(session))
            continue
        if parts[0] == "reset":
            session.reset_overrides()
            print(view.render(session))
            continue
        if len(parts) == 2 and parts[0] == "export":
            try:
                save_region_overrides_json(parts[1], session.overrides)
            except (OSError, ValueError) as exc:
                print(f"export failed: {exc}")
                continue
            print(f"exported {parts[1]}")
            continue
        if len(parts) == 3 and parts[0] == "select":
            tile = session.world_map.tile_at(int(parts[1]), int(parts[2]))
            if tile is None:
                print("outside grid")
                continue
            session.select(region_id_of(tile, session.level))
            print(view.render_info(session, session.level, session.selected_region_id or ""))
            continue

        level = _parse_level(parts[1]) if len(parts) >= 3 else None
        if level is None:
            print("unknown command")
            continue
        region_id = parts[2]
        if parts[0] == "info" and len(parts) == 3:
            print(view.render_info(session, level, region_id))
            continue
        if parts[0] == "name":
            controller.set_name(level, region_id, " ".join(parts[3:]) or None)
        elif parts[0] == "color":
            controller.set_color(level, region_id, " ".join(parts[3:]) or None)
        elif parts[0] == "parent" and len(parts) == 4:
            controller.set_parent(level, region_id, parts[3])
        else:
            print("unknown command")
            continue
        print(view.render_info(session, level, region_id))


if __name__ == "__main__":
    run_demo()
