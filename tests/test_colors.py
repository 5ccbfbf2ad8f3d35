from realmgrid.model.colors import (
    OklchColor,
    hash_color,
    hash_string,
    oklch_to_rgb,
    parse_oklch,
    perturb_oklch,
    resolve_region_color,
    unit_random,
)
from realmgrid.model.partition import build_world_map

BASE_COLOR = "oklch(60% 0.1 200)"


def test_hash_string_matches_signed_32_bit_rolling_hash() -> None:
    assert hash_string("") == 0
    assert hash_string("abc") == 96354
    assert hash_string("hello") == 99162322
    assert hash_string("e-0") == 98504
    assert hash_string("polygenelubricants") == -2147483648


def test_hash_color_uses_absolute_hash_as_hue() -> None:
    assert hash_color("e-0") == "hsl(224, 55%, 55%)"
    assert hash_color("polygenelubricants") == "hsl(128, 55%, 55%)"


def test_unit_random_is_bounded_and_stable() -> None:
    values = [unit_random(hash_string(f"c-{i}-0"), salt) for i in range(20) for salt in (1, 2, 3)]

    assert all(0.0 <= value <= 1.0 for value in values)
    assert values == [unit_random(hash_string(f"c-{i}-0"), salt) for i in range(20) for salt in (1, 2, 3)]


def test_parse_oklch_accepts_alpha_and_rejects_other_formats() -> None:
    assert parse_oklch(BASE_COLOR) == OklchColor(lightness=60.0, chroma=0.1, hue=200.0)
    assert parse_oklch("OKLCH(50.5% 0.2 10 / 50%)") == OklchColor(lightness=50.5, chroma=0.2, hue=10.0, alpha="50%")
    assert parse_oklch("rgb(1, 2, 3)") is None
    assert parse_oklch("oklch(60 0.1 200)") is None
    assert parse_oklch(None) is None


def test_perturbation_stays_within_jitter_bounds_and_keeps_alpha() -> None:
    base = OklchColor(lightness=60.0, chroma=0.1, hue=200.0, alpha="80%")
    for index in range(50):
        derived = perturb_oklch(base, f"c-{index}-{index}")
        hue_delta = abs((derived.hue - base.hue + 180.0) % 360.0 - 180.0)
        assert abs(derived.lightness - base.lightness) <= 12.0
        assert abs(derived.chroma - base.chroma) <= 0.045 + 1e-9
        assert hue_delta <= 24.0 + 1e-9
        assert 0.0 <= derived.hue < 360.0
        assert derived.alpha == "80%"


def test_perturbation_clamps_lightness_and_chroma() -> None:
    for index in range(30):
        dark = perturb_oklch(OklchColor(lightness=0.0, chroma=0.0, hue=355.0), f"d-{index}-0")
        assert 0.0 <= dark.lightness <= 12.0
        assert dark.chroma >= 0.0
        assert 0.0 <= dark.hue < 360.0


def test_child_of_overridden_duchy_gets_deterministic_derived_shade() -> None:
    overrides = {"duchies": {"d-0-0": {"color": BASE_COLOR}}}
    world = build_world_map(8, 8, overrides)

    first = resolve_region_color("county", "c-0-0", overrides, world)
    second = resolve_region_color("county", "c-0-0", overrides, build_world_map(8, 8, overrides))
    sibling = resolve_region_color("county", "c-0-1", overrides, world)

    assert first == second
    assert first == perturb_oklch(parse_oklch(BASE_COLOR), "c-0-0").format()
    assert first.startswith("oklch(")
    assert sibling != first
    assert resolve_region_color("duchy", "d-0-0", overrides, world) == BASE_COLOR


def test_explicit_county_color_wins_over_parent() -> None:
    overrides = {"duchies": {"d-0-0": {"color": BASE_COLOR}}, "counties": {"c-0-0": {"color": " #ff0000 "}}}

    assert resolve_region_color("county", "c-0-0", overrides, build_world_map(4, 4, overrides)) == "#ff0000"


def test_empire_color_cascades_through_every_level() -> None:
    overrides = {"empire": {"color": BASE_COLOR}}
    world = build_world_map(8, 8, overrides)

    kingdom = resolve_region_color("kingdom", "k-0-0", overrides, world)
    duchy = resolve_region_color("duchy", "d-0-0", overrides, world)
    county = resolve_region_color("county", "c-0-0", overrides, world)

    assert kingdom == perturb_oklch(parse_oklch(BASE_COLOR), "k-0-0").format()
    assert duchy == perturb_oklch(parse_oklch(kingdom), "d-0-0").format()
    assert county == perturb_oklch(parse_oklch(duchy), "c-0-0").format()


def test_non_oklch_parent_chain_falls_back_to_hash_color() -> None:
    world = build_world_map(8, 8, {})

    assert resolve_region_color("empire", "e-0", {}, world) == hash_color("e-0")
    assert resolve_region_color("kingdom", "k-0-0", {}, world) == hash_color("k-0-0")
    assert resolve_region_color("county", "c-3-3", {}, world) == hash_color("c-3-3")
    assert resolve_region_color("county", "c-3-3") == hash_color("c-3-3")
    assert resolve_region_color("county", "c-99-99", {}, world) == hash_color("c-99-99")


def test_oklch_to_rgb_endpoints() -> None:
    assert oklch_to_rgb(OklchColor(lightness=0.0, chroma=0.0, hue=0.0)) == (0, 0, 0)
    assert oklch_to_rgb(OklchColor(lightness=100.0, chroma=0.0, hue=0.0)) == (255, 255, 255)


def test_lone_surrogate_region_id_hashes_by_code_unit() -> None:
    duchy_id = "d-\ud800"
    overrides = {"counties": {"c-0-0": {"parentId": duchy_id}}}
    world = build_world_map(4, 4, overrides)

    assert duchy_id in world.duchies
    assert hash_string(duchy_id) == 152791
    assert resolve_region_color("duchy", duchy_id, overrides, world) == "hsl(151, 55%, 55%)"

    tinted = {**overrides, "kingdoms": {"k-0-0": {"color": BASE_COLOR}}}
    assert parse_oklch(resolve_region_color("duchy", duchy_id, tinted, world)) is not None
