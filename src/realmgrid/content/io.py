from __future__ import annotations

import json
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from realmgrid.content.schema import validate_region_overrides_payload
from realmgrid.model.overrides import clone_overrides, prune_overrides

DEFAULT_REGION_OVERRIDES_PATH = "content/overrides/region_overrides.json"
CANONICAL_JSON_INDENT = 2
CANONICAL_JSON_SEPARATORS = (",", ": ")


def _canonical_json(payload: dict[str, Any]) -> str:
    return json.dumps(
        payload,
        indent=CANONICAL_JSON_INDENT,
        separators=CANONICAL_JSON_SEPARATORS,
        sort_keys=True,
    )


def _write_atomic_json(path: str | Path, payload: dict[str, Any]) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    serialized = _canonical_json(payload)

    temp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=destination.parent,
            delete=False,
            suffix=".tmp",
        ) as temp_file:
            temp_file.write(serialized)
            temp_file.flush()
            os.fsync(temp_file.fileno())
            temp_path = Path(temp_file.name)
        os.replace(temp_path, destination)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


def export_region_overrides(overrides: Any) -> dict[str, Any]:
    snapshot = prune_overrides(overrides)
    validate_region_overrides_payload(snapshot)
    return snapshot


def dumps_region_overrides(overrides: Any) -> str:
    return _canonical_json(export_region_overrides(overrides))


def load_region_overrides_json(path: str | Path) -> dict[str, Any]:
    """Load an override payload as a working copy.

    Only the top-level shape is enforced here; malformed entries stay in the
    payload and are ignored by the model when the map is built.
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"region overrides file must contain an object: {path}")
    return clone_overrides(payload)


def save_region_overrides_json(path: str | Path, overrides: Any) -> dict[str, Any]:
    snapshot = export_region_overrides(overrides)
    _write_atomic_json(path, snapshot)
    return snapshot


def load_default_region_overrides(path: str | Path = DEFAULT_REGION_OVERRIDES_PATH) -> dict[str, Any]:
    if not Path(path).exists():
        return {}
    return load_region_overrides_json(path)
