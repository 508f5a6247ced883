"""
Breadcrumb path and view-mode transitions of the navigation controller.
"""
import pytest

from fscloud.errors import InvalidArgument
from fscloud.models import ROOT_ENTRY, PathEntry, ViewMode


def _descend(controller, depth):
    for i in range(depth):
        controller.enter_folder(f"folder-{i}", f"id-{i}")


def test_initial_state_is_folder_root(controller):
    assert controller.authenticated
    assert controller.view_mode is ViewMode.FOLDER
    assert controller.path == [PathEntry("Home", None)]
    assert controller.current_folder_id is None


def test_enter_folder_appends_one_entry(controller):
    _descend(controller, 2)
    before = controller.path

    controller.enter_folder("Photos", "p1")

    after = controller.path
    assert len(after) == len(before) + 1
    assert after[:-1] == before
    assert after[-1] == PathEntry("Photos", "p1")
    assert controller.current_folder_id == "p1"


def test_enter_folder_requires_id(controller):
    with pytest.raises(InvalidArgument):
        controller.enter_folder("Broken", None)
    assert controller.path == [ROOT_ENTRY]


def test_enter_folder_from_recent_switches_to_folder_mode(controller):
    controller.show_recent()
    controller.enter_folder("Docs", "d1")
    assert controller.view_mode is ViewMode.FOLDER


@pytest.mark.parametrize("index", [0, 1, 2, 3])
def test_jump_to_breadcrumb_truncates_to_prefix(controller, index):
    _descend(controller, 3)
    full = controller.path

    controller.jump_to_breadcrumb(index)

    assert controller.path == full[: index + 1]
    assert controller.path[0] == ROOT_ENTRY


@pytest.mark.parametrize("index", [-1, 4, 10])
def test_jump_to_breadcrumb_out_of_range(controller, index):
    _descend(controller, 3)
    with pytest.raises(InvalidArgument):
        controller.jump_to_breadcrumb(index)
    assert len(controller.path) == 4


def test_show_recent_preserves_path(controller):
    _descend(controller, 2)
    path = controller.path

    controller.show_recent()

    assert controller.view_mode is ViewMode.RECENT
    assert controller.is_recent_view
    assert controller.path == path


def test_recent_then_dashboard_resets_to_root(controller):
    _descend(controller, 5)
    controller.show_recent()

    controller.show_dashboard_root()

    assert controller.view_mode is ViewMode.FOLDER
    assert controller.path == [PathEntry("Home", None)]


def test_navigation_clears_search(controller):
    for action in (
        lambda: controller.enter_folder("Docs", "d1"),
        lambda: controller.jump_to_breadcrumb(0),
        controller.show_recent,
        controller.show_dashboard_root,
    ):
        controller.update_search_input("report")
        action()
        assert controller.search.raw == ""
        assert controller.search.debounced == ""
        assert controller.search.pending is False


def test_path_property_is_a_copy(controller):
    controller.path.append(PathEntry("Ghost", "g"))
    assert controller.path == [ROOT_ENTRY]


def test_subscribers_hear_path_changes(controller):
    events = []
    controller.subscribe(events.append)

    controller.enter_folder("Docs", "d1")

    assert "path" in events
    assert "mode" in events
