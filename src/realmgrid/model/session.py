from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from realmgrid.model.overrides import COUNTY, LEVELS, ParentRef, clone_overrides, prune_overrides, with_region_edit
from realmgrid.model.partition import DEFAULT_HEIGHT, DEFAULT_WIDTH, WorldMap, build_world_map
from realmgrid.model.regions import RegionInfo, region_info


@dataclass
class MapSession:
    """Owner of the reactive inputs; the world map is rebuilt on every change.

    ``revision`` increases on any change a renderer must react to.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    seed_overrides: dict[str, Any] = field(default_factory=dict)
    level: str = COUNTY
    selected_region_id: str | None = None
    overrides: dict[str, Any] = field(init=False)
    world_map: WorldMap = field(init=False)
    revision: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.seed_overrides = clone_overrides(self.seed_overrides)
        self.overrides = clone_overrides(self.seed_overrides)
        if self.level not in LEVELS:
            self.level = COUNTY
        self._rebuild()

    def _rebuild(self) -> None:
        self.world_map = build_world_map(self.width, self.height, self.overrides)
        self.revision += 1

    def set_dimensions(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.selected_region_id = None
        self._rebuild()

    def set_overrides(self, overrides: Any) -> None:
        self.overrides = clone_overrides(overrides)
        self._rebuild()

    def reset_overrides(self) -> None:
        self.set_overrides(self.seed_overrides)

    def edit_region(
        self,
        level: str,
        region_id: str,
        *,
        name: str | None = None,
        color: str | None = None,
        parent: ParentRef = ParentRef(),
    ) -> None:
        self.overrides = with_region_edit(self.overrides, level, region_id, name=name, color=color, parent=parent)
        self._rebuild()

    def set_level(self, level: str) -> None:
        if level not in LEVELS or level == self.level:
            return
        self.level = level
        self.selected_region_id = None
        self.revision += 1

    def select(self, region_id: str | None) -> None:
        if region_id == self.selected_region_id:
            return
        self.selected_region_id = region_id
        self.revision += 1

    def info(self, level: str | None = None, region_id: str | None = None) -> RegionInfo | None:
        target_level = level if level is not None else self.level
        target_id = region_id if region_id is not None else self.selected_region_id
        if target_id is None:
            return None
        return region_info(self.world_map, target_level, target_id, self.overrides)

    def snapshot(self) -> dict[str, Any]:
        return prune_overrides(self.overrides)
