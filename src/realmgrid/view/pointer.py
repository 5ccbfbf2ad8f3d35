from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from realmgrid.model.partition import WorldMap
from realmgrid.view.viewport import Viewport

DEFAULT_DRAG_THRESHOLD = 4.0


@dataclass(frozen=True)
class DragState:
    start_x: float
    start_y: float
    start_offset: tuple[float, float]
    travelled: float = 0.0


@dataclass
class PointerController:
    """Turns pointer and wheel input into viewport changes and selection events.

    Handlers return True when the viewport changed and the map needs a redraw.
    """

    viewport: Viewport
    on_select: Callable[[str], None] | None = None
    drag_threshold: float = DEFAULT_DRAG_THRESHOLD
    drag: DragState | None = None

    @property
    def captured(self) -> bool:
        return self.drag is not None

    def pointer_down(self, pos: tuple[float, float]) -> bool:
        self.drag = DragState(start_x=pos[0], start_y=pos[1], start_offset=self.viewport.offset)
        return False

    def pointer_move(self, pos: tuple[float, float]) -> bool:
        if self.drag is None:
            return False
        delta_x = pos[0] - self.drag.start_x
        delta_y = pos[1] - self.drag.start_y
        travelled = max(self.drag.travelled, math.hypot(delta_x, delta_y))
        self.drag = DragState(
            start_x=self.drag.start_x,
            start_y=self.drag.start_y,
            start_offset=self.drag.start_offset,
            travelled=travelled,
        )
        return self.viewport.pan_from(self.drag.start_offset, delta_x, delta_y)

    def pointer_up(self, pos: tuple[float, float], world_map: WorldMap, level: str) -> str | None:
        drag = self.drag
        self.drag = None
        if drag is None:
            return None
        travelled = max(drag.travelled, math.hypot(pos[0] - drag.start_x, pos[1] - drag.start_y))
        if travelled > self.drag_threshold:
            return None
        region_id = self.viewport.hit_test(world_map, level, pos[0], pos[1])
        if region_id is not None and self.on_select is not None:
            self.on_select(region_id)
        return region_id

    def pointer_leave(self) -> bool:
        released = self.drag is not None
        self.drag = None
        return released

    def wheel(self, pos: tuple[float, float], steps: float) -> bool:
        return self.viewport.zoom_steps(pos[0], pos[1], steps)
