from __future__ import annotations

import hashlib
import json
from typing import Any

from realmgrid.model.overrides import prune_overrides
from realmgrid.model.partition import WorldMap


def _digest(payload: Any) -> str:
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def world_hash(world_map: WorldMap) -> str:
    return _digest(world_map.to_dict())


def overrides_hash(overrides: Any) -> str:
    return _digest(prune_overrides(overrides))
