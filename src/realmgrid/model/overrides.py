from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

COUNTY = "county"
DUCHY = "duchy"
KINGDOM = "kingdom"
EMPIRE = "empire"
LEVELS: tuple[str, ...] = (COUNTY, DUCHY, KINGDOM, EMPIRE)

OVERRIDE_TABLE_KEYS: dict[str, str] = {
    COUNTY: "counties",
    DUCHY: "duchies",
    KINGDOM: "kingdoms",
}
EMPIRE_OVERRIDE_KEY = "empire"
PARENT_ID_KEY = "parentId"

PARENT_UNSPECIFIED = "unspecified"
PARENT_NONE = "none"
PARENT_VALUE = "value"


@dataclass(frozen=True)
class ParentRef:
    """Tri-state parent override: unspecified, explicit orphan, or explicit id."""

    kind: str = PARENT_UNSPECIFIED
    region_id: str | None = None

    @classmethod
    def unspecified(cls) -> "ParentRef":
        return cls()

    @classmethod
    def none(cls) -> "ParentRef":
        return cls(kind=PARENT_NONE)

    @classmethod
    def to(cls, region_id: str) -> "ParentRef":
        return cls(kind=PARENT_VALUE, region_id=region_id)

    @property
    def is_specified(self) -> bool:
        return self.kind != PARENT_UNSPECIFIED

    @classmethod
    def from_entry(cls, entry: dict[str, Any]) -> "ParentRef":
        if PARENT_ID_KEY not in entry:
            return cls.unspecified()
        value = entry[PARENT_ID_KEY]
        if value is None:
            return cls.none()
        if isinstance(value, str) and value.strip():
            return cls.to(value.strip())
        return cls.unspecified()


@dataclass(frozen=True)
class RegionMeta:
    name: str | None = None
    color: str | None = None
    parent: ParentRef = ParentRef()

    @classmethod
    def from_dict(cls, data: Any) -> "RegionMeta | None":
        if not isinstance(data, dict):
            return None
        return cls(
            name=_clean_text(data.get("name")),
            color=_clean_text(data.get("color")),
            parent=ParentRef.from_entry(data),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.name:
            payload["name"] = self.name
        if self.color:
            payload["color"] = self.color
        if self.parent.kind == PARENT_NONE:
            payload[PARENT_ID_KEY] = None
        elif self.parent.kind == PARENT_VALUE:
            payload[PARENT_ID_KEY] = self.parent.region_id
        return payload


def _clean_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def has_override(meta: RegionMeta | None) -> bool:
    if meta is None:
        return False
    return bool(meta.name) or bool(meta.color) or meta.parent.is_specified


def _level_table(overrides: Any, level: str) -> dict[str, Any]:
    if not isinstance(overrides, dict):
        return {}
    table = overrides.get(OVERRIDE_TABLE_KEYS.get(level, ""))
    return table if isinstance(table, dict) else {}


def resolve_override(level: str, region_id: str, overrides: Any) -> RegionMeta | None:
    if level == EMPIRE:
        raw = overrides.get(EMPIRE_OVERRIDE_KEY) if isinstance(overrides, dict) else None
    elif level in OVERRIDE_TABLE_KEYS:
        raw = _level_table(overrides, level).get(region_id)
    else:
        return None
    meta = RegionMeta.from_dict(raw)
    return meta if has_override(meta) else None


def clone_overrides(overrides: Any) -> dict[str, Any]:
    if not isinstance(overrides, dict):
        return {}
    return copy.deepcopy(overrides)


def prune_overrides(overrides: Any) -> dict[str, Any]:
    """Serializable snapshot with malformed, empty and no-op entries removed."""
    snapshot: dict[str, Any] = {}
    for level, table_key in OVERRIDE_TABLE_KEYS.items():
        table: dict[str, Any] = {}
        region_ids = [key for key in _level_table(overrides, level) if isinstance(key, str) and key]
        for region_id in sorted(region_ids):
            meta = resolve_override(level, region_id, overrides)
            if meta is not None:
                table[region_id] = meta.to_dict()
        if table:
            snapshot[table_key] = table
    empire = resolve_override(EMPIRE, "", overrides)
    if empire is not None:
        snapshot[EMPIRE_OVERRIDE_KEY] = empire.to_dict()
    return snapshot


def with_region_edit(
    overrides: Any,
    level: str,
    region_id: str,
    *,
    name: str | None = None,
    color: str | None = None,
    parent: ParentRef = ParentRef(),
) -> dict[str, Any]:
    """Return a copy of ``overrides`` with one region's entry replaced.

    The entry is dropped entirely when the edit carries no name, no color and
    an unspecified parent, so no-op entries never reach an exported snapshot.
    """
    updated = clone_overrides(overrides)
    if level not in LEVELS:
        return updated
    meta = RegionMeta(name=_clean_text(name), color=_clean_text(color), parent=parent)
    if level == EMPIRE:
        if has_override(meta):
            updated[EMPIRE_OVERRIDE_KEY] = meta.to_dict()
        else:
            updated.pop(EMPIRE_OVERRIDE_KEY, None)
        return updated

    table_key = OVERRIDE_TABLE_KEYS[level]
    table = updated.get(table_key)
    table = dict(table) if isinstance(table, dict) else {}
    if has_override(meta):
        table[region_id] = meta.to_dict()
    else:
        table.pop(region_id, None)
    if table:
        updated[table_key] = table
    else:
        updated.pop(table_key, None)
    return updated
