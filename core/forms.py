"""Forms binding raw request data to the form rule engine.

Both forms follow the same shape: Django handles raw field coercion, then
`clean()` projects the values through the render state so hidden and absent
fields never reach validation, and reports every message as a non-field
error in the order the rule engine produced it.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from django import forms

from core.models import EZTEXT_LIMIT_CHOICES
from formrules import messages
from formrules.graph_dto import (
    DEFAULT_COLOR,
    CalcFunction,
    DrawType,
    GraphConfigDTO,
    GraphItemDTO,
    GraphItemType,
    YAxisSide,
    graph_config_from_values,
    parse_enum,
)
from formrules.graph_validator import validate_graph_fields
from formrules.render_state import GRAPH_FORM_DEFAULTS, graph_form_state, media_type_form_state

_ITEM_KEY_RE = re.compile(r"^items\[(\d+)\]\[(\w+)\]$")


def _parse_items(data: Mapping[str, Any]) -> tuple[GraphItemDTO, ...]:
    """Collect `items[<n>][<field>]` keys into ordered GraphItemDTOs.

    Rows without a reference are dropped; rows are ordered by their index.
    """

    rows: dict[int, dict[str, str]] = {}
    for key in data:
        match = _ITEM_KEY_RE.match(key)
        if match is None:
            continue
        rows.setdefault(int(match.group(1)), {})[match.group(2)] = str(data.get(key, "")).strip()

    items: list[GraphItemDTO] = []
    for index in sorted(rows):
        row = rows[index]
        reference = row.get("reference", "")
        if not reference:
            continue
        items.append(
            GraphItemDTO(
                reference=reference,
                calc_fnc=parse_enum(CalcFunction, row.get("calc_fnc"), CalcFunction.avg),  # type: ignore[arg-type]
                drawtype=parse_enum(DrawType, row.get("drawtype"), DrawType.line),  # type: ignore[arg-type]
                yaxisside=parse_enum(YAxisSide, row.get("yaxisside"), YAxisSide.left),  # type: ignore[arg-type]
                type=parse_enum(GraphItemType, row.get("type"), GraphItemType.simple),  # type: ignore[arg-type]
                color=row.get("color") or DEFAULT_COLOR,
                prototype=row.get("prototype", "").lower() in {"1", "true", "on", "yes"},
            )
        )
    return tuple(items)


class GraphForm(forms.Form):
    """Validate a graph (or graph prototype) submission.

    Numeric inputs are plain CharFields so the raw text reaches the numeric
    validator untouched. After a successful `is_valid()`, `graph_config`
    holds the submitted configuration for the service layer.
    """

    name = forms.CharField(required=False, strip=False)
    width = forms.CharField(required=False)
    height = forms.CharField(required=False)
    graphtype = forms.CharField(required=False)
    show_legend = forms.BooleanField(required=False)
    show_work_period = forms.BooleanField(required=False)
    show_triggers = forms.BooleanField(required=False)
    show_3d = forms.BooleanField(required=False)
    visible_percent_left = forms.BooleanField(required=False)
    percent_left = forms.CharField(required=False)
    visible_percent_right = forms.BooleanField(required=False)
    percent_right = forms.CharField(required=False)
    ymin_type = forms.CharField(required=False)
    yaxismin = forms.CharField(required=False)
    ymin_name = forms.CharField(required=False)
    ymax_type = forms.CharField(required=False)
    yaxismax = forms.CharField(required=False)
    ymax_name = forms.CharField(required=False)
    discover = forms.BooleanField(required=False)

    def __init__(self, *args: Any, prototype: bool = False, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.prototype = prototype
        self.graph_config: GraphConfigDTO | None = None

    def _submitted_values(self) -> dict[str, Any]:
        """Merge cleaned data with form defaults for inputs that were not posted."""

        values: dict[str, Any] = {}
        for field_id, default in GRAPH_FORM_DEFAULTS.items():
            if field_id not in self.fields:
                continue
            if isinstance(default, bool):
                values[field_id] = bool(self.cleaned_data.get(field_id))
            elif field_id in self.data:
                values[field_id] = self.cleaned_data.get(field_id, "")
            else:
                values[field_id] = default
        return values

    def clean(self) -> dict[str, Any]:
        cleaned = super().clean()
        if self.errors:
            return cleaned

        state = graph_form_state(self._submitted_values(), prototype=self.prototype)
        submitted = state.submitted_values()
        config = graph_config_from_values(submitted, items=_parse_items(self.data), prototype=self.prototype)

        result = validate_graph_fields(config)
        for message in result.errors:
            self.add_error(None, message)
        if result.is_valid:
            self.graph_config = config
        return cleaned


class MediaTypeForm(forms.Form):
    """Validate a media type submission against the visibility rules.

    Only the groups visible for the selected type are mandatory; hidden groups
    are dropped from `submission`.
    """

    name = forms.CharField(required=False, strip=True)
    type = forms.CharField(required=False)
    smtp_server = forms.CharField(required=False)
    smtp_helo = forms.CharField(required=False)
    smtp_email = forms.CharField(required=False)
    exec_path = forms.CharField(required=False)
    gsm_modem = forms.CharField(required=False)
    jabber_username = forms.CharField(required=False)
    eztext_username = forms.CharField(required=False)
    eztext_limit = forms.CharField(required=False)
    passwd = forms.CharField(required=False)

    LABELS: dict[str, str] = {
        "name": "Name",
        "type": "Type",
        "smtp_server": "SMTP server",
        "smtp_helo": "SMTP helo",
        "smtp_email": "SMTP email",
        "exec_path": "Script name",
        "gsm_modem": "GSM modem",
        "jabber_username": "Jabber identifier",
        "eztext_username": "Username",
        "eztext_limit": "Message text limit",
        "passwd": "Password",
    }

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.submission: dict[str, Any] = {}

    def clean(self) -> dict[str, Any]:
        cleaned = super().clean()
        values = {key: value for key, value in cleaned.items() if key in self.data}
        try:
            state = media_type_form_state(values)
        except ValueError:
            self.add_error(None, messages.mandatory(self.LABELS["type"]))
            return cleaned

        for field_id in state.mandatory_fields():
            value = state.value(field_id)
            if value is not None and str(value).strip():
                continue
            if field_id == "name":
                self.add_error(None, messages.empty_text(self.LABELS[field_id]))
            else:
                self.add_error(None, messages.mandatory(self.LABELS[field_id]))

        eztext_limit = state.value("eztext_limit") if state.is_visible("eztext_limit") else None
        if eztext_limit is not None and str(eztext_limit).strip() and not self._is_eztext_limit(eztext_limit):
            self.add_error(None, messages.unexpected_value(self.LABELS["eztext_limit"]))

        if not self.errors:
            self.submission = {
                key: value for key, value in state.submitted_values().items() if key in self.LABELS
            }
        return cleaned

    @staticmethod
    def _is_eztext_limit(raw: object) -> bool:
        return str(raw).strip() in {str(value) for value, _label in EZTEXT_LIMIT_CHOICES}
