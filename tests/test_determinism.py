from realmgrid.model.hash import overrides_hash, world_hash
from realmgrid.model.partition import build_world_map

OVERRIDES = {
    "counties": {"c-0-0": {"parentId": None}, "c-2-3": {"parentId": "d-custom", "name": "Marsh"}},
    "duchies": {"d-1-1": {"parentId": "k-1-1"}, "d-custom": {"parentId": None}},
}


def test_identical_inputs_build_identical_world_maps() -> None:
    world_a = build_world_map(8, 8, OVERRIDES)
    world_b = build_world_map(8, 8, OVERRIDES)

    assert world_a == world_b
    assert world_hash(world_a) == world_hash(world_b)
    assert list(world_a.duchies) == list(world_b.duchies)
    assert world_a.kingdoms["k-orphan-d-custom"].duchy_ids == ("d-custom",)


def test_parent_override_changes_world_hash() -> None:
    assert world_hash(build_world_map(8, 8, OVERRIDES)) != world_hash(build_world_map(8, 8, {}))


def test_overrides_hash_ignores_no_op_entries() -> None:
    padded = {**OVERRIDES, "kingdoms": {"k-0-0": {"name": "  "}}, "empire": {"color": ""}}

    assert overrides_hash(padded) == overrides_hash(OVERRIDES)
