from realmgrid.cli.viewer import AsciiRegionViewer, RegionEditController
from realmgrid.model.session import MapSession


def test_edit_controller_parent_commands_use_tri_state() -> None:
    session = MapSession(width=4, height=4)
    controller = RegionEditController(session)

    controller.set_parent("county", "c-0-0", "none")
    assert session.overrides["counties"]["c-0-0"] == {"parentId": None}
    assert session.world_map.counties["c-0-0"].duchy_id == "d-orphan-c-0-0"

    controller.set_parent("county", "c-0-0", "d-1-1")
    assert session.world_map.counties["c-0-0"].duchy_id == "d-1-1"

    controller.set_parent("county", "c-0-0", "clear")
    assert "counties" not in session.overrides
    assert session.world_map.counties["c-0-0"].duchy_id == "d-0-0"


def test_edit_controller_preserves_other_fields() -> None:
    session = MapSession(width=4, height=4)
    controller = RegionEditController(session)

    controller.set_parent("duchy", "d-0-0", "none")
    controller.set_name("duchy", "d-0-0", "Crown Duchy")
    controller.set_color("duchy", "d-0-0", "oklch(60% 0.1 200)")
    controller.set_name("duchy", "d-0-0", None)

    assert session.overrides["duchies"]["d-0-0"] == {"color": "oklch(60% 0.1 200)", "parentId": None}


def test_ascii_viewer_renders_region_grid_and_info() -> None:
    session = MapSession(width=2, height=2)
    view = AsciiRegionViewer()

    rendered = view.render(session).splitlines()
    assert rendered == ["level=county size=2x2", "c-0-0 c-0-1", "c-1-0 c-1-1"]

    session.set_level("duchy")
    assert view.render(session).splitlines()[1:] == ["d-0-0 d-0-0", "d-0-0 d-0-0"]
    assert view.render_info(session, "duchy", "d-0-0").startswith("duchy[d-0-0] name=- tiles=4 parent=k-0-0")
    assert view.render_info(session, "duchy", "d-9-9") == "unknown duchy d-9-9"


def test_ascii_viewer_handles_empty_grid() -> None:
    session = MapSession(width=0, height=0)

    assert AsciiRegionViewer().render(session).endswith("<empty grid>")
