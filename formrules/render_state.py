"""Form render state projections and edit sessions.

`graph_form_state()` and `media_type_form_state()` are pure projections from
a field value snapshot to per-field flags (exists / visible / enabled /
mandatory). They are cheap and side-effect free, so they can run on every
change event and are what UI code and browser-driven tests assert against.

Edit sessions own a value snapshot for one form instance and apply the
transition side effects (clearing inputs that become irrelevant) before
re-projecting.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from .conditional import CheckboxGatedField, EnumGatedField, FieldFlags, GraphTypeGate, as_checked
from .graph_dto import PIE_TYPES, GraphType, YAxisType, parse_enum
from .visibility import EZTEXT_LINK, MEDIA_TYPE_VISIBILITY, FieldGroup, FieldVisibilityRuleSet, MediaTypeKind


@dataclass(frozen=True, slots=True)
class FieldState:
    """Rendered state of a single form field.

    Args:
        exists: Whether the field is part of the rendered form at all.
        visible: Whether the field is displayed.
        enabled: Whether the field accepts input.
        mandatory: Whether the field is rendered (and validated) as required.
        value: Current value, or None when the field does not exist.
        maxlength: Input length limit, when the field declares one.
    """

    exists: bool
    visible: bool
    enabled: bool
    mandatory: bool
    value: Any = None
    maxlength: int | None = None


ABSENT: Final[FieldState] = FieldState(exists=False, visible=False, enabled=False, mandatory=False)


@dataclass(frozen=True, slots=True)
class FormRenderState:
    """Field id -> FieldState projection of a whole form."""

    fields: Mapping[str, FieldState] = field(default_factory=dict)

    def get(self, field_id: str) -> FieldState:
        return self.fields.get(field_id, ABSENT)

    def exists(self, field_id: str) -> bool:
        return self.get(field_id).exists

    def is_visible(self, field_id: str) -> bool:
        return self.get(field_id).visible

    def value(self, field_id: str) -> Any:
        return self.get(field_id).value

    def mandatory_fields(self) -> tuple[str, ...]:
        return tuple(key for key, state in self.fields.items() if state.exists and state.mandatory)

    def submitted_values(self) -> dict[str, Any]:
        """Return values of fields that exist and are visible.

        Hidden and absent fields never contribute to a submission.
        """

        return {key: state.value for key, state in self.fields.items() if state.exists and state.visible}

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Return a JSON-serializable view of the render state."""

        payload: dict[str, dict[str, Any]] = {}
        for key, state in self.fields.items():
            entry: dict[str, Any] = {
                "exists": state.exists,
                "visible": state.visible,
                "enabled": state.enabled,
                "mandatory": state.mandatory,
                "value": state.value,
            }
            if state.maxlength is not None:
                entry["maxlength"] = state.maxlength
            payload[key] = entry
        return payload


class UnknownFieldError(KeyError):
    """Raised when a session is asked to fill a field that is not rendered."""


# --- Graph form ----------------------------------------------------------------

PERCENT_LEFT = CheckboxGatedField(checkbox_id="visible_percent_left", input_id="percent_left")
PERCENT_RIGHT = CheckboxGatedField(checkbox_id="visible_percent_right", input_id="percent_right")
YAXIS_MIN = EnumGatedField(type_id="ymin_type", value_id="yaxismin", item_id="ymin_name")
YAXIS_MAX = EnumGatedField(type_id="ymax_type", value_id="yaxismax", item_id="ymax_name")

GRAPH_FORM_DEFAULTS: Final[dict[str, Any]] = {
    "name": "",
    "width": "900",
    "height": "200",
    "graphtype": GraphType.normal.label,
    "show_legend": True,
    "show_work_period": True,
    "show_triggers": True,
    "show_3d": False,
    "visible_percent_left": False,
    "percent_left": "0",
    "visible_percent_right": False,
    "percent_right": "0",
    "ymin_type": YAxisType.calculated.label,
    "yaxismin": "0",
    "ymin_name": "",
    "ymax_type": YAxisType.calculated.label,
    "yaxismax": "100",
    "ymax_name": "",
    "itemsTable": None,
    "discover": True,
}

_MAXLENGTH: Final[dict[str, int]] = {"name": 255, "width": 5, "height": 5}
_ALWAYS_MANDATORY: Final[frozenset[str]] = frozenset({"name", "width", "height"})
_PROTOTYPE_MANDATORY: Final[frozenset[str]] = frozenset({"discover"})


def _defaults_for(field_ids: tuple[str, ...]) -> dict[str, Any]:
    return {key: GRAPH_FORM_DEFAULTS[key] for key in field_ids}


PERCENTILE_GATE = GraphTypeGate(
    applicable=(GraphType.normal,),
    defaults=_defaults_for(PERCENT_LEFT.field_ids + PERCENT_RIGHT.field_ids),
)
YAXIS_GATE = GraphTypeGate(
    applicable=(GraphType.normal,),
    defaults=_defaults_for(YAXIS_MIN.field_ids + YAXIS_MAX.field_ids),
)
WORK_PERIOD_GATE = GraphTypeGate(
    applicable=(GraphType.normal, GraphType.stacked),
    defaults=_defaults_for(("show_work_period", "show_triggers")),
)
SHOW_3D_GATE = GraphTypeGate(applicable=PIE_TYPES, defaults=_defaults_for(("show_3d",)))

GRAPH_TYPE_GATES: Final[tuple[GraphTypeGate, ...]] = (PERCENTILE_GATE, YAXIS_GATE, WORK_PERIOD_GATE, SHOW_3D_GATE)

_CHECKBOX_GATES: Final[dict[str, CheckboxGatedField]] = {
    gate.checkbox_id: gate for gate in (PERCENT_LEFT, PERCENT_RIGHT)
}
_ENUM_GATES: Final[dict[str, EnumGatedField]] = {gate.type_id: gate for gate in (YAXIS_MIN, YAXIS_MAX)}

GRAPH_FIELD_LABELS: Final[dict[str, str]] = {
    "Name": "name",
    "Width": "width",
    "Height": "height",
    "Graph type": "graphtype",
    "Show legend": "show_legend",
    "Show working time": "show_work_period",
    "Show triggers": "show_triggers",
    "3D view": "show_3d",
    "Discover": "discover",
}

ITEM_COLUMNS: Final[dict[GraphType, tuple[str, ...]]] = {
    GraphType.normal: ("", "", "Name", "Function", "Draw style", "Y axis side", "Color", "Action"),
    GraphType.stacked: ("", "", "Name", "Function", "Y axis side", "Color", "Action"),
    GraphType.pie: ("", "", "Name", "Type", "Function", "Color", "Action"),
    GraphType.exploded: ("", "", "Name", "Type", "Function", "Color", "Action"),
}


def item_columns(graph_type: object) -> tuple[str, ...]:
    """Return the item table headers shown for a graph type."""

    return ITEM_COLUMNS[parse_enum(GraphType, graph_type, GraphType.normal)]  # type: ignore[index]


def _graph_field_exists(field_id: str, graph_type: GraphType, *, prototype: bool) -> bool:
    if field_id == "discover":
        return prototype
    for gate in GRAPH_TYPE_GATES:
        if field_id in gate.defaults:
            return gate.exists(graph_type)
    return True


def _dependent_flags(values: Mapping[str, Any]) -> dict[str, FieldFlags]:
    flags: dict[str, FieldFlags] = {}
    for checkbox_id, gate in _CHECKBOX_GATES.items():
        flags.update(gate.apply(values.get(checkbox_id)))
    for type_id, gate in _ENUM_GATES.items():
        flags.update(gate.apply(values.get(type_id)))
    return flags


def graph_form_state(values: Mapping[str, Any], *, prototype: bool = False) -> FormRenderState:
    """Project graph form values to per-field render flags.

    Args:
        values: Field id -> value snapshot. Missing fields take form defaults.
        prototype: True for the graph prototype form, which adds `discover`.

    Returns:
        FormRenderState covering every graph form field.
    """

    merged = {**GRAPH_FORM_DEFAULTS, **values}
    graph_type = parse_enum(GraphType, merged["graphtype"], GraphType.normal)
    merged["graphtype"] = graph_type.label
    dependent = _dependent_flags(merged)

    fields: dict[str, FieldState] = {}
    for field_id in GRAPH_FORM_DEFAULTS:
        if not _graph_field_exists(field_id, graph_type, prototype=prototype):  # type: ignore[arg-type]
            fields[field_id] = ABSENT
            continue
        flags = dependent.get(field_id)
        if flags is None:
            mandatory = field_id in _ALWAYS_MANDATORY or (prototype and field_id in _PROTOTYPE_MANDATORY)
            flags = FieldFlags(visible=True, mandatory=mandatory)
        fields[field_id] = FieldState(
            exists=True,
            visible=flags.visible,
            enabled=flags.visible,
            mandatory=flags.mandatory,
            value=merged[field_id],
            maxlength=_MAXLENGTH.get(field_id),
        )
    return FormRenderState(fields=fields)


def _normalize_field_id(key: str, labels: Mapping[str, str]) -> str:
    if key.startswith("id:"):
        return key[3:]
    return labels.get(key, key)


class GraphFormSession:
    """Value snapshot and transitions for one graph (prototype) edit session.

    Args:
        values: Initial values applied through `fill()`, in order.
        prototype: True for the graph prototype form.
    """

    def __init__(self, values: Mapping[str, Any] | None = None, *, prototype: bool = False) -> None:
        self.prototype = prototype
        self._values: dict[str, Any] = dict(GRAPH_FORM_DEFAULTS)
        if values:
            self.fill(values)

    @property
    def graph_type(self) -> GraphType:
        return parse_enum(GraphType, self._values["graphtype"], GraphType.normal)  # type: ignore[return-value]

    def set(self, key: str, value: Any) -> None:
        """Change one field, running the transition side effects it triggers.

        Args:
            key: Field id, `id:`-prefixed id, or field label.
            value: New raw value.

        Raises:
            UnknownFieldError: When the field is not rendered for the current
                graph type.
        """

        field_id = _normalize_field_id(key, GRAPH_FIELD_LABELS)
        if not self.state().exists(field_id) or field_id == "itemsTable":
            raise UnknownFieldError(field_id)

        if field_id == "graphtype":
            old_type = self._values["graphtype"]
            new_type = parse_enum(GraphType, value, self.graph_type)
            for gate in GRAPH_TYPE_GATES:
                gate.transition(self._values, old_type, new_type)
            self._values["graphtype"] = new_type.label
        elif field_id in _CHECKBOX_GATES:
            _CHECKBOX_GATES[field_id].transition(self._values, value)
        elif field_id in _ENUM_GATES:
            _ENUM_GATES[field_id].transition(self._values, value)
        elif isinstance(GRAPH_FORM_DEFAULTS[field_id], bool):
            self._values[field_id] = as_checked(value)
        else:
            self._values[field_id] = "" if value is None else str(value)

    def fill(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self.set(key, value)

    def state(self) -> FormRenderState:
        return graph_form_state(self._values, prototype=self.prototype)

    def submission(self) -> dict[str, Any]:
        return self.state().submitted_values()

    def item_columns(self) -> tuple[str, ...]:
        return item_columns(self.graph_type)


# --- Media type form -------------------------------------------------------------

MEDIA_TYPE_FORM_DEFAULTS: Final[dict[str, Any]] = {
    "name": "",
    "type": MediaTypeKind.email.value,
    "smtp_server": "",
    "smtp_helo": "",
    "smtp_email": "",
    "exec_path": "",
    "gsm_modem": "",
    "jabber_username": "",
    "eztext_username": "",
    "eztext_limit": "0",
    "passwd": "",
}


def media_type_kind(raw: object) -> MediaTypeKind:
    """Resolve a media type from its value (`"100"`) or label (`"Ez Texting"`)."""

    if isinstance(raw, MediaTypeKind):
        return raw
    text = str(raw if raw is not None else "").strip()
    for kind in MediaTypeKind:
        if text in (str(kind.value), kind.label, kind.name):
            return kind
    raise ValueError(f"Unknown media type: {raw!r}.")


def media_type_form_state(
    values: Mapping[str, Any],
    *,
    rules: FieldVisibilityRuleSet = MEDIA_TYPE_VISIBILITY,
) -> FormRenderState:
    """Project media type form values to per-field render flags.

    Args:
        values: Field id -> value snapshot. Missing fields take form defaults.
        rules: Visibility rule set keyed by media type.

    Returns:
        FormRenderState covering the name, type, every managed group and the
        Ez Texting link.
    """

    merged = {**MEDIA_TYPE_FORM_DEFAULTS, **values}
    resolution = rules.resolve(media_type_kind(merged["type"]))

    fields: dict[str, FieldState] = {
        "name": FieldState(exists=True, visible=True, enabled=True, mandatory=True, value=merged["name"], maxlength=100),
        "type": FieldState(exists=True, visible=True, enabled=True, mandatory=True, value=merged["type"]),
    }
    for group in FieldGroup:
        shown = resolution.group(group).visible
        fields[group.value] = FieldState(
            exists=True,
            visible=shown,
            enabled=shown,
            mandatory=shown,
            value=merged[group.value],
        )
    link_visible = resolution.toggles.get(EZTEXT_LINK, False)
    fields[EZTEXT_LINK] = FieldState(exists=True, visible=link_visible, enabled=link_visible, mandatory=False)
    return FormRenderState(fields=fields)


class MediaTypeFormSession:
    """Value snapshot for one media type edit session.

    Visibility is resolved eagerly from the initial type. Changing the type
    clears every group the new type hides.

    Args:
        values: Initial field values.
        mediatypeid: Id of the media type being edited, None when creating.
    """

    def __init__(self, values: Mapping[str, Any] | None = None, *, mediatypeid: int | None = None) -> None:
        self.mediatypeid = mediatypeid
        self._values: dict[str, Any] = {**MEDIA_TYPE_FORM_DEFAULTS, **(values or {})}
        self._values["type"] = media_type_kind(self._values["type"]).value
        self._resolution = MEDIA_TYPE_VISIBILITY.resolve(media_type_kind(self._values["type"]))

    @property
    def kind(self) -> MediaTypeKind:
        return media_type_kind(self._values["type"])

    def change_type(self, value: object) -> None:
        """Select a media type and clear the groups it hides."""

        kind = media_type_kind(value)
        self._values["type"] = kind.value
        self._resolution = MEDIA_TYPE_VISIBILITY.resolve(kind)
        for group in self._resolution.hide:
            self._values[group.value] = MEDIA_TYPE_FORM_DEFAULTS[group.value]

    def set(self, field_id: str, value: Any) -> None:
        if field_id == "type":
            self.change_type(value)
            return
        if field_id not in MEDIA_TYPE_FORM_DEFAULTS:
            raise UnknownFieldError(field_id)
        self._values[field_id] = "" if value is None else str(value)

    def state(self) -> FormRenderState:
        return media_type_form_state(self._values)

    def submission(self) -> dict[str, Any]:
        submitted = self.state().submitted_values()
        submitted.pop(EZTEXT_LINK, None)
        return submitted

    @property
    def actions(self) -> tuple[str, ...]:
        if self.mediatypeid is None:
            return ("add", "cancel")
        return ("update", "clone", "delete", "cancel")

    @property
    def submit_label(self) -> str:
        return "Add" if self.mediatypeid is None else "Update"

    @property
    def submit_action(self) -> str:
        return "mediatype.create" if self.mediatypeid is None else "mediatype.update"

    def clone(self) -> None:
        """Turn the edited media type into a new one with the same settings."""

        self.mediatypeid = None
