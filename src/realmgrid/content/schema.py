from __future__ import annotations

from typing import Any

REGION_TABLE_KEYS = ("counties", "duchies", "kingdoms")
EMPIRE_KEY = "empire"
REGION_META_FIELDS = {"name", "color", "parentId"}


def _validate_region_meta(meta: Any, *, field_name: str) -> None:
    if not isinstance(meta, dict):
        raise ValueError(f"{field_name} must be an object")
    unknown = set(meta.keys()) - REGION_META_FIELDS
    if unknown:
        raise ValueError(f"{field_name} has unsupported fields: {sorted(unknown)}")
    for key in ("name", "color"):
        if key in meta and not isinstance(meta[key], str):
            raise ValueError(f"{field_name}.{key} must be a string")
    if "parentId" in meta:
        parent_id = meta["parentId"]
        if parent_id is not None and (not isinstance(parent_id, str) or not parent_id):
            raise ValueError(f"{field_name}.parentId must be a non-empty string or null")


def validate_region_overrides_payload(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise ValueError("region overrides payload must be an object")
    unknown = set(payload.keys()) - set(REGION_TABLE_KEYS) - {EMPIRE_KEY}
    if unknown:
        raise ValueError(f"region overrides payload has unsupported keys: {sorted(unknown)}")

    for table_key in REGION_TABLE_KEYS:
        table = payload.get(table_key, {})
        if not isinstance(table, dict):
            raise ValueError(f"{table_key} must be an object when present")
        for region_id, meta in table.items():
            if not isinstance(region_id, str) or not region_id:
                raise ValueError(f"{table_key} keys must be non-empty strings")
            _validate_region_meta(meta, field_name=f"{table_key}[{region_id}]")

    if EMPIRE_KEY in payload:
        _validate_region_meta(payload[EMPIRE_KEY], field_name=EMPIRE_KEY)
