"""Unit tests for dependent-field state machines."""

from __future__ import annotations

import pytest

from formrules.conditional import HIDDEN, REQUIRED, CheckboxGatedField, EnumGatedField, GraphTypeGate, as_checked
from formrules.graph_dto import GraphType

pytestmark = pytest.mark.unit


@pytest.fixture
def percentile() -> CheckboxGatedField:
    return CheckboxGatedField(checkbox_id="visible_percent_left", input_id="percent_left")


@pytest.fixture
def ymin() -> EnumGatedField:
    return EnumGatedField(type_id="ymin_type", value_id="yaxismin", item_id="ymin_name")


@pytest.mark.parametrize(("raw", "expected"), [(True, True), ("on", True), ("1", True), ("", False), (None, False)])
def test_as_checked(raw: object, expected: bool) -> None:
    assert as_checked(raw) is expected


def test_checkbox_gate_projects_flags(percentile: CheckboxGatedField) -> None:
    assert percentile.apply(True) == {"percent_left": REQUIRED}
    assert percentile.apply(False) == {"percent_left": HIDDEN}


def test_unchecking_clears_the_input(percentile: CheckboxGatedField) -> None:
    values: dict[str, object] = {"visible_percent_left": True, "percent_left": "12.5"}
    percentile.transition(values, False)
    assert values == {"visible_percent_left": False, "percent_left": ""}


def test_checking_presets_the_input(percentile: CheckboxGatedField) -> None:
    values: dict[str, object] = {"visible_percent_left": False, "percent_left": ""}
    percentile.transition(values, "on")
    assert values == {"visible_percent_left": True, "percent_left": "0"}


def test_rechecking_presets_the_input_again(percentile: CheckboxGatedField) -> None:
    values: dict[str, object] = {"visible_percent_left": False, "percent_left": "0"}
    for checked in (True, False, True):
        percentile.transition(values, checked)
    assert values == {"visible_percent_left": True, "percent_left": "0"}


def test_checking_twice_keeps_the_typed_value(percentile: CheckboxGatedField) -> None:
    values: dict[str, object] = {"visible_percent_left": True, "percent_left": "42"}
    percentile.transition(values, "on")
    assert values == {"visible_percent_left": True, "percent_left": "42"}


@pytest.mark.parametrize(
    ("trigger", "value_flags", "item_flags"),
    [
        ("Calculated", HIDDEN, HIDDEN),
        ("Fixed", REQUIRED, HIDDEN),
        ("Item", HIDDEN, REQUIRED),
        ("1", REQUIRED, HIDDEN),
        ("2", HIDDEN, REQUIRED),
    ],
)
def test_enum_gate_projects_flags(ymin: EnumGatedField, trigger: str, value_flags, item_flags) -> None:
    assert ymin.apply(trigger) == {"yaxismin": value_flags, "ymin_name": item_flags}


def test_leaving_fixed_never_resurrects_the_value(ymin: EnumGatedField) -> None:
    """Fixed -> Item -> Fixed leaves the numeric input empty."""

    values: dict[str, object] = {"ymin_type": "Fixed", "yaxismin": "15", "ymin_name": ""}
    ymin.transition(values, "Item")
    assert values["yaxismin"] == ""
    values["ymin_name"] = "Host: CPU load"

    ymin.transition(values, "Fixed")
    assert values == {"ymin_type": "Fixed", "yaxismin": "", "ymin_name": ""}


def test_reselecting_the_same_branch_keeps_values(ymin: EnumGatedField) -> None:
    values: dict[str, object] = {"ymin_type": "Fixed", "yaxismin": "15", "ymin_name": ""}
    ymin.transition(values, "Fixed")
    assert values["yaxismin"] == "15"


def test_graph_type_gate_existence() -> None:
    gate = GraphTypeGate(applicable=(GraphType.normal,), defaults={"percent_left": "0"})
    assert gate.exists("Normal")
    assert gate.exists(GraphType.normal)
    assert not gate.exists("Stacked")
    assert not gate.exists("3")


def test_graph_type_gate_restores_defaults_when_leaving() -> None:
    gate = GraphTypeGate(
        applicable=(GraphType.normal, GraphType.stacked),
        defaults={"show_work_period": True, "show_triggers": True},
    )
    values: dict[str, object] = {"show_work_period": False, "show_triggers": False}

    gate.transition(values, GraphType.normal, GraphType.stacked)
    assert values == {"show_work_period": False, "show_triggers": False}

    gate.transition(values, GraphType.stacked, GraphType.pie)
    assert values == {"show_work_period": True, "show_triggers": True}
