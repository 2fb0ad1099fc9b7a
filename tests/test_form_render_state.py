"""Unit tests for graph form render state projections and edit sessions."""

from __future__ import annotations

import pytest

from formrules.graph_dto import GraphType
from formrules.render_state import GraphFormSession, UnknownFieldError, graph_form_state, item_columns

pytestmark = pytest.mark.unit

AXIS_FIELDS = (
    "visible_percent_left",
    "percent_left",
    "visible_percent_right",
    "percent_right",
    "ymin_type",
    "yaxismin",
    "ymin_name",
    "ymax_type",
    "yaxismax",
    "ymax_name",
)


def test_fresh_form_layout() -> None:
    state = graph_form_state({})

    assert state.value("width") == "900"
    assert state.value("height") == "200"
    assert state.value("graphtype") == "Normal"
    assert state.get("name").maxlength == 255
    assert state.get("width").maxlength == 5
    assert state.get("height").maxlength == 5
    assert state.mandatory_fields() == ("name", "width", "height")
    assert not state.exists("show_3d")
    assert not state.exists("discover")


def test_dependent_inputs_start_hidden_with_defaults() -> None:
    state = graph_form_state({})

    for field_id in ("percent_left", "percent_right", "yaxismin", "ymin_name", "yaxismax", "ymax_name"):
        assert state.exists(field_id)
        assert not state.is_visible(field_id)
    assert state.value("yaxismin") == "0"
    assert state.value("yaxismax") == "100"
    assert state.value("ymin_name") == ""


@pytest.mark.parametrize("graph_type", ["Stacked", "Pie", "Exploded"])
def test_axis_groups_exist_only_for_normal_graphs(graph_type: str) -> None:
    state = graph_form_state({"graphtype": graph_type})
    for field_id in AXIS_FIELDS:
        assert not state.exists(field_id), field_id
        assert not state.get(field_id).mandatory


@pytest.mark.parametrize(
    ("graph_type", "work_period", "show_3d"),
    [("Normal", True, False), ("Stacked", True, False), ("Pie", False, True), ("Exploded", False, True)],
)
def test_graph_type_specific_options(graph_type: str, work_period: bool, show_3d: bool) -> None:
    state = graph_form_state({"graphtype": graph_type})
    assert state.exists("show_work_period") is work_period
    assert state.exists("show_triggers") is work_period
    assert state.exists("show_3d") is show_3d
    assert state.exists("show_legend")


def test_prototype_form_adds_mandatory_discover() -> None:
    state = graph_form_state({}, prototype=True)
    assert state.exists("discover")
    assert state.value("discover") is True
    assert state.mandatory_fields() == ("name", "width", "height", "discover")


def test_revealing_a_percentile_presets_zero() -> None:
    session = GraphFormSession({"id:visible_percent_left": True})
    state = session.state()
    assert state.is_visible("percent_left")
    assert state.get("percent_left").mandatory
    assert state.value("percent_left") == "0"
    assert not state.is_visible("percent_right")


def test_rechecking_a_percentile_presets_zero_again() -> None:
    session = GraphFormSession({"id:visible_percent_left": True, "id:percent_left": "12"})
    session.set("id:visible_percent_left", False)
    session.set("id:visible_percent_left", True)

    assert session.state().value("percent_left") == "0"
    assert session.submission()["percent_left"] == "0"


def test_submission_omits_hidden_and_absent_fields() -> None:
    session = GraphFormSession({"Name": "Load", "id:visible_percent_left": True, "id:percent_left": "5"})
    session.set("id:visible_percent_left", False)
    submission = session.submission()

    assert submission["name"] == "Load"
    assert "percent_left" not in submission
    assert "yaxismin" not in submission
    assert "show_3d" not in submission
    assert "discover" not in submission


def test_fixed_item_fixed_never_resurrects_value() -> None:
    session = GraphFormSession({"id:ymin_type": "Fixed", "id:yaxismin": "15"})
    assert session.state().value("yaxismin") == "15"

    session.set("id:ymin_type", "Item")
    assert session.state().is_visible("ymin_name")
    assert not session.state().is_visible("yaxismin")

    session.set("id:ymin_type", "Fixed")
    assert session.state().value("yaxismin") == ""


def test_leaving_normal_resets_axis_options() -> None:
    session = GraphFormSession({"id:visible_percent_left": True, "id:percent_left": "7", "id:ymax_type": "Fixed"})
    session.set("Graph type", "Pie")
    assert session.graph_type is GraphType.pie
    assert not session.state().exists("percent_left")

    session.set("Graph type", "Normal")
    state = session.state()
    assert state.value("visible_percent_left") is False
    assert state.value("percent_left") == "0"
    assert state.value("ymax_type") == "Calculated"
    assert state.value("yaxismax") == "100"


def test_setting_a_field_that_is_not_rendered_fails() -> None:
    session = GraphFormSession({"Graph type": "Stacked"})
    with pytest.raises(UnknownFieldError):
        session.set("id:percent_left", "5")
    with pytest.raises(UnknownFieldError):
        session.set("3D view", True)
    with pytest.raises(UnknownFieldError):
        session.set("id:itemsTable", [])


@pytest.mark.parametrize(
    ("graph_type", "columns"),
    [
        ("Normal", ("", "", "Name", "Function", "Draw style", "Y axis side", "Color", "Action")),
        ("Stacked", ("", "", "Name", "Function", "Y axis side", "Color", "Action")),
        ("Pie", ("", "", "Name", "Type", "Function", "Color", "Action")),
        ("Exploded", ("", "", "Name", "Type", "Function", "Color", "Action")),
    ],
)
def test_item_columns_follow_graph_type(graph_type: str, columns: tuple[str, ...]) -> None:
    assert item_columns(graph_type) == columns
    assert GraphFormSession({"Graph type": graph_type}).item_columns() == columns


def test_as_dict_is_json_ready() -> None:
    payload = graph_form_state({"name": "Load"}).as_dict()
    assert payload["name"] == {
        "exists": True,
        "visible": True,
        "enabled": True,
        "mandatory": True,
        "value": "Load",
        "maxlength": 255,
    }
    assert payload["percent_left"]["visible"] is False
