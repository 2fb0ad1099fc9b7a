"""Dependent-field state machines for the graph form.

Some graph form inputs depend on a sibling control:

- percentile line inputs are gated by a checkbox,
- Y axis inputs are gated by a three-branch type dropdown,
- whole option groups exist only for specific graph types.

Each gate is an explicit state machine. `apply()` projects flags for a trigger
value without side effects; `transition()` moves the machine to a new trigger
value and runs the entry action of the new state, which resets sibling inputs
so stale values cannot reach a submission.
"""

from __future__ import annotations

from collections.abc import Iterable, MutableMapping
from dataclasses import dataclass

from .graph_dto import GraphType, YAxisType, parse_enum

FieldValues = MutableMapping[str, object]


@dataclass(frozen=True, slots=True)
class FieldFlags:
    """Visibility and mandatoriness of one dependent input."""

    visible: bool
    mandatory: bool


HIDDEN = FieldFlags(visible=False, mandatory=False)
REQUIRED = FieldFlags(visible=True, mandatory=True)


def as_checked(raw: object) -> bool:
    """Interpret a checkbox value coming from a form post or a test driver."""

    if isinstance(raw, bool):
        return raw
    return str(raw if raw is not None else "").strip().lower() in {"1", "true", "on", "yes"}


class CheckboxGatedField:
    """An input shown and required only while its checkbox is checked.

    While unchecked, the input is hidden and its raw value is ignored on
    submit. Checking presets the input to `0`; unchecking clears it.

    Args:
        checkbox_id: Controlling checkbox field id.
        input_id: Dependent input field id.
    """

    def __init__(self, *, checkbox_id: str, input_id: str) -> None:
        self.checkbox_id = checkbox_id
        self.input_id = input_id

    @property
    def field_ids(self) -> tuple[str, str]:
        return (self.checkbox_id, self.input_id)

    def apply(self, checked: object) -> dict[str, FieldFlags]:
        return {self.input_id: REQUIRED if as_checked(checked) else HIDDEN}

    def transition(self, values: FieldValues, checked: object) -> None:
        new_state = as_checked(checked)
        old_state = as_checked(values.get(self.checkbox_id))
        values[self.checkbox_id] = new_state
        if new_state != old_state:
            values[self.input_id] = "0" if new_state else ""


class EnumGatedField:
    """A Y axis bound selector with Calculated / Fixed / Item branches.

    Calculated shows nothing; Fixed shows a mandatory numeric input; Item
    shows a mandatory item picker. Entering a branch clears the inputs of the
    branches being left.

    Args:
        type_id: Controlling dropdown field id.
        value_id: Numeric input used by the Fixed branch.
        item_id: Item picker used by the Item branch.
    """

    def __init__(self, *, type_id: str, value_id: str, item_id: str) -> None:
        self.type_id = type_id
        self.value_id = value_id
        self.item_id = item_id

    @property
    def field_ids(self) -> tuple[str, str, str]:
        return (self.type_id, self.value_id, self.item_id)

    def state(self, raw: object) -> YAxisType:
        return parse_enum(YAxisType, raw, YAxisType.calculated)  # type: ignore[return-value]

    def apply(self, trigger: object) -> dict[str, FieldFlags]:
        state = self.state(trigger)
        return {
            self.value_id: REQUIRED if state is YAxisType.fixed else HIDDEN,
            self.item_id: REQUIRED if state is YAxisType.item else HIDDEN,
        }

    def transition(self, values: FieldValues, trigger: object) -> None:
        new_state = self.state(trigger)
        old_state = self.state(values.get(self.type_id))
        values[self.type_id] = new_state.label
        if new_state is old_state:
            return
        self._enter(new_state, values)

    def _enter(self, state: YAxisType, values: FieldValues) -> None:
        if state is not YAxisType.fixed:
            values[self.value_id] = ""
        if state is not YAxisType.item:
            values[self.item_id] = ""


class GraphTypeGate:
    """A group of controls that exists only for some graph types.

    Unlike hidden inputs, gated controls are absent from the rendered form
    for other graph types. Leaving an applicable graph type restores the
    group's defaults.

    Args:
        applicable: Graph types the group exists for.
        defaults: Field id -> default value restored when the group is removed.
    """

    def __init__(self, *, applicable: Iterable[GraphType], defaults: dict[str, object]) -> None:
        self.applicable = frozenset(applicable)
        self.defaults = dict(defaults)

    @property
    def field_ids(self) -> tuple[str, ...]:
        return tuple(self.defaults)

    def exists(self, graph_type: object) -> bool:
        return parse_enum(GraphType, graph_type, GraphType.normal) in self.applicable

    def transition(self, values: FieldValues, old_type: object, new_type: object) -> None:
        if self.exists(old_type) and not self.exists(new_type):
            values.update(self.defaults)
