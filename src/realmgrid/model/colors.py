from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Any

from realmgrid.model.overrides import COUNTY, DUCHY, EMPIRE, KINGDOM, resolve_override
from realmgrid.model.partition import WorldMap

UINT32_MASK = 0xFFFFFFFF
GOLDEN_RATIO_32 = 0x9E3779B9
LIGHTNESS_JITTER = 12.0
CHROMA_JITTER = 0.045
HUE_JITTER = 24.0
FALLBACK_SATURATION = 55
FALLBACK_LIGHTNESS = 55

OKLCH_PATTERN = re.compile(
    r"^oklch\(\s*([0-9]+(?:\.[0-9]+)?)%\s+([0-9]+(?:\.[0-9]+)?)\s+([0-9]+(?:\.[0-9]+)?)"
    r"(?:\s*/\s*([0-9]+(?:\.[0-9]+)?%?))?\s*\)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class OklchColor:
    lightness: float
    chroma: float
    hue: float
    alpha: str | None = None

    def format(self) -> str:
        alpha = f" / {self.alpha}" if self.alpha else ""
        return f"oklch({self.lightness:.2f}% {self.chroma:.3f} {self.hue:.2f}{alpha})"


def parse_oklch(value: Any) -> OklchColor | None:
    if not isinstance(value, str):
        return None
    match = OKLCH_PATTERN.match(value.strip())
    if match is None:
        return None
    return OklchColor(
        lightness=float(match.group(1)),
        chroma=float(match.group(2)),
        hue=float(match.group(3)),
        alpha=match.group(4),
    )


def _to_int32(value: int) -> int:
    value &= UINT32_MASK
    return value - 0x100000000 if value & 0x80000000 else value


def hash_string(value: str) -> int:
    """31-multiplier rolling hash over UTF-16 code units, signed 32-bit."""
    encoded = value.encode("utf-16-le", "surrogatepass")
    result = 0
    for index in range(0, len(encoded), 2):
        unit = encoded[index] | (encoded[index + 1] << 8)
        result = (result * 31 + unit) & UINT32_MASK
    return _to_int32(result)


def unit_random(seed_hash: int, salt: int) -> float:
    x = ((seed_hash & UINT32_MASK) ^ ((salt * GOLDEN_RATIO_32) & UINT32_MASK)) & UINT32_MASK
    x = (x ^ (x << 13)) & UINT32_MASK
    x ^= x >> 17
    x = (x ^ (x << 5)) & UINT32_MASK
    return x / UINT32_MASK


def perturb_oklch(base: OklchColor, seed: str) -> OklchColor:
    seed_hash = hash_string(seed)
    delta_l = (unit_random(seed_hash, 1) * 2 - 1) * LIGHTNESS_JITTER
    delta_c = (unit_random(seed_hash, 2) * 2 - 1) * CHROMA_JITTER
    delta_h = (unit_random(seed_hash, 3) * 2 - 1) * HUE_JITTER
    return replace(
        base,
        lightness=min(100.0, max(0.0, base.lightness + delta_l)),
        chroma=max(0.0, base.chroma + delta_c),
        hue=(base.hue + delta_h) % 360.0,
    )


def hash_color(region_id: str) -> str:
    hue = abs(hash_string(region_id)) % 360
    return f"hsl({hue}, {FALLBACK_SATURATION}%, {FALLBACK_LIGHTNESS}%)"


def _structural_parent(level: str, region_id: str, world_map: WorldMap) -> tuple[str, str] | None:
    if level == COUNTY:
        county = world_map.counties.get(region_id)
        return (DUCHY, county.duchy_id) if county is not None else None
    if level == DUCHY:
        duchy = world_map.duchies.get(region_id)
        return (KINGDOM, duchy.kingdom_id) if duchy is not None else None
    if level == KINGDOM:
        kingdom = world_map.kingdoms.get(region_id)
        return (EMPIRE, kingdom.empire_id) if kingdom is not None else None
    return None


def resolve_region_color(level: str, region_id: str, overrides: Any = None, world_map: WorldMap | None = None) -> str:
    meta = resolve_override(level, region_id, overrides)
    if meta is not None and meta.color:
        return meta.color

    if world_map is not None:
        parent = _structural_parent(level, region_id, world_map)
        if parent is not None:
            parent_level, parent_id = parent
            base = parse_oklch(resolve_region_color(parent_level, parent_id, overrides, world_map))
            if base is not None:
                return perturb_oklch(base, region_id).format()

    return hash_color(region_id)


def _linear_to_srgb(channel: float) -> int:
    if channel <= 0.0031308:
        encoded = 12.92 * channel
    else:
        encoded = 1.055 * (channel ** (1.0 / 2.4)) - 0.055
    return int(round(min(1.0, max(0.0, encoded)) * 255))


def oklch_to_rgb(color: OklchColor) -> tuple[int, int, int]:
    lightness = color.lightness / 100.0
    hue = math.radians(color.hue)
    a = color.chroma * math.cos(hue)
    b = color.chroma * math.sin(hue)

    l_ = (lightness + 0.3963377774 * a + 0.2158037573 * b) ** 3
    m_ = (lightness - 0.1055613458 * a - 0.0638541728 * b) ** 3
    s_ = (lightness - 0.0894841775 * a - 1.2914855480 * b) ** 3

    red = 4.0767416621 * l_ - 3.3077115913 * m_ + 0.2309699292 * s_
    green = -1.2684380046 * l_ + 2.6097574011 * m_ - 0.3413193965 * s_
    blue = -0.0041960863 * l_ - 0.7034186147 * m_ + 1.7076147010 * s_
    return (_linear_to_srgb(red), _linear_to_srgb(green), _linear_to_srgb(blue))

