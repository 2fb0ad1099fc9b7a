"""Validation for graph and graph prototype configurations.

Validation runs in two stages:

1. Field level: a fold over a fixed, ordered tuple of (field, check) pairs.
   Every field is checked, messages accumulate in declaration order, and the
   result carries the generic "Page received incorrect data" header.
2. Entity level: only when no field error exists. Checks cross-field state
   (items present, item prototypes present, colours) and resolves metric
   references through a resolver, stopping at the first failing gate. These
   rejections carry a type-specific header ("Cannot add graph").
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Final, Protocol

from . import messages
from .graph_dto import GraphConfigDTO, YAxisType
from .numeric import NumericSpec, validate_numeric


class GraphErrorKind(Enum):
    """Entity-level rejection reasons."""

    no_items = "no_items"
    no_item_prototypes = "no_item_prototypes"
    invalid_color = "invalid_color"
    reference_not_found = "reference_not_found"
    registry_unavailable = "registry_unavailable"
    duplicate_name = "duplicate_name"


class MetricRegistryUnavailableError(RuntimeError):
    """Raised by a resolver when the metric registry cannot be queried."""


class MetricResolver(Protocol):
    """Resolves metric references (`Host: Item name`) to item ids."""

    def resolve_metric_references(self, references: Iterable[str]) -> Mapping[str, int]:
        """Return ids for the references that exist; missing ones are omitted."""
        ...


NAME_MAX_LENGTH: Final[int] = 255

DIMENSION_SPEC: Final[NumericSpec] = NumericSpec(
    min_value=Decimal(20),
    max_value=Decimal(65535),
    max_fraction_digits=0,
    allow_negative=False,
    coerce_invalid=True,
)
PERCENTILE_SPEC: Final[NumericSpec] = NumericSpec(
    min_value=Decimal(0),
    max_value=Decimal(100),
    max_fraction_digits=4,
    allow_negative=False,
)
YAXIS_SPEC: Final[NumericSpec] = NumericSpec(max_fraction_digits=4)

_COLOR_RE: Final[re.Pattern[str]] = re.compile(r"^[0-9A-Fa-f]{6}$")

FieldCheck = Callable[[GraphConfigDTO], str | None]


@dataclass(frozen=True, slots=True)
class GraphValidationResult:
    """Result of validating a graph configuration.

    Args:
        is_valid: True when the configuration can be stored.
        header: Message header shown above `errors`; empty when valid.
        errors: Ordered detail messages.
        kind: Entity-level rejection reason, None for field-level failures.
        item_ids: Resolved metric reference -> item id map (entity stage only).
    """

    is_valid: bool
    header: str = ""
    errors: tuple[str, ...] = ()
    kind: GraphErrorKind | None = None
    item_ids: Mapping[str, int] = field(default_factory=dict)


def entity_error_header(config: GraphConfigDTO, *, update: bool = False) -> str:
    """Return the header for an entity-level rejection (`Cannot add graph`)."""

    verb = "update" if update else "add"
    return f"Cannot {verb} {config.entity_label}"


def _check_name(config: GraphConfigDTO) -> str | None:
    if not config.name.strip():
        return messages.empty_text("Name")
    if len(config.name) > NAME_MAX_LENGTH:
        return f'Incorrect value for field "Name": value is too long (max {NAME_MAX_LENGTH} characters).'
    return None


def _numeric_check(
    raw: Callable[[GraphConfigDTO], str],
    spec: NumericSpec,
    label: str,
    *,
    applies: Callable[[GraphConfigDTO], bool] = lambda config: True,
) -> FieldCheck:
    def check(config: GraphConfigDTO) -> str | None:
        if not applies(config):
            return None
        result = validate_numeric(raw(config), spec, mandatory=True)
        if result.error is None:
            return None
        return messages.numeric_error_message(result.error, label)

    return check


def _item_reference_check(raw: Callable[[GraphConfigDTO], str], label: str, axis: str) -> FieldCheck:
    def check(config: GraphConfigDTO) -> str | None:
        if not config.has_axis_options or getattr(config, axis) is not YAxisType.item:
            return None
        if not raw(config).strip():
            return messages.mandatory(label)
        return None

    return check


def _fixed_axis(axis: str) -> Callable[[GraphConfigDTO], bool]:
    return lambda config: config.has_axis_options and getattr(config, axis) is YAxisType.fixed


def _percentile(flag: str) -> Callable[[GraphConfigDTO], bool]:
    return lambda config: config.has_axis_options and bool(getattr(config, flag))


# Declared order of field-level checks; messages are reported in this order.
FIELD_CHECKS: Final[tuple[tuple[str, FieldCheck], ...]] = (
    ("name", _check_name),
    ("width", _numeric_check(lambda c: c.width, DIMENSION_SPEC, "Width")),
    ("height", _numeric_check(lambda c: c.height, DIMENSION_SPEC, "Height")),
    ("yaxismin", _numeric_check(lambda c: c.yaxismin, YAXIS_SPEC, "yaxismin", applies=_fixed_axis("ymin_type"))),
    ("ymin_itemid", _item_reference_check(lambda c: c.ymin_item, "ymin_itemid", "ymin_type")),
    ("yaxismax", _numeric_check(lambda c: c.yaxismax, YAXIS_SPEC, "yaxismax", applies=_fixed_axis("ymax_type"))),
    ("ymax_itemid", _item_reference_check(lambda c: c.ymax_item, "ymax_itemid", "ymax_type")),
    (
        "percent_left",
        _numeric_check(
            lambda c: c.percent_left,
            PERCENTILE_SPEC,
            "Percentile line (left)",
            applies=_percentile("visible_percent_left"),
        ),
    ),
    (
        "percent_right",
        _numeric_check(
            lambda c: c.percent_right,
            PERCENTILE_SPEC,
            "Percentile line (right)",
            applies=_percentile("visible_percent_right"),
        ),
    ),
)


def validate_graph_fields(config: GraphConfigDTO) -> GraphValidationResult:
    """Run every field-level check and collect messages in declared order.

    Args:
        config: Submitted graph configuration.

    Returns:
        GraphValidationResult; invalid results carry the generic field error header.
    """

    errors: list[str] = []
    for _field_name, check in FIELD_CHECKS:
        message = check(config)
        if message is not None:
            errors.append(message)

    if errors:
        return GraphValidationResult(is_valid=False, header=messages.FIELD_ERROR_HEADER, errors=tuple(errors))
    return GraphValidationResult(is_valid=True)


def _metric_references(config: GraphConfigDTO) -> list[str]:
    references = [item.reference for item in config.items]
    if config.has_axis_options:
        if config.ymin_type is YAxisType.item:
            references.append(config.ymin_item)
        if config.ymax_type is YAxisType.item:
            references.append(config.ymax_item)
    return list(dict.fromkeys(references))


def validate_graph_entity(
    config: GraphConfigDTO,
    *,
    resolver: MetricResolver | None = None,
    update: bool = False,
) -> GraphValidationResult:
    """Run entity-level gates on a configuration whose fields are valid.

    Gates run in order and the first failing gate rejects the entity:
    items present, item prototypes present (prototypes only), item colours,
    metric references. The resolver is queried at most once.

    Args:
        config: Graph configuration that passed `validate_graph_fields`.
        resolver: Metric reference resolver; reference checks are skipped when None.
        update: True when an existing graph is being updated (affects the header).

    Returns:
        GraphValidationResult with resolved item ids when valid.
    """

    header = entity_error_header(config, update=update)

    def reject(kind: GraphErrorKind, errors: list[str]) -> GraphValidationResult:
        return GraphValidationResult(is_valid=False, header=header, errors=tuple(errors), kind=kind)

    if not config.items:
        return reject(GraphErrorKind.no_items, [messages.missing_items(config.entity_label, config.name)])

    if config.prototype and not any(item.prototype for item in config.items):
        return reject(GraphErrorKind.no_item_prototypes, [messages.missing_item_prototypes(config.name)])

    bad_colors = [item.color for item in config.items if not _COLOR_RE.match(item.color)]
    if bad_colors:
        return reject(GraphErrorKind.invalid_color, [messages.incorrect_colour(color) for color in bad_colors])

    if resolver is None:
        return GraphValidationResult(is_valid=True)

    references = _metric_references(config)
    try:
        item_ids = dict(resolver.resolve_metric_references(references))
    except MetricRegistryUnavailableError:
        return reject(GraphErrorKind.registry_unavailable, [messages.registry_unavailable()])

    if any(reference not in item_ids for reference in references):
        return reject(GraphErrorKind.reference_not_found, [messages.reference_not_found()])

    return GraphValidationResult(is_valid=True, item_ids=item_ids)


def validate_graph_config(
    config: GraphConfigDTO,
    *,
    resolver: MetricResolver | None = None,
    update: bool = False,
) -> GraphValidationResult:
    """Validate a graph configuration end to end.

    Field-level errors are returned as a complete ordered list; entity-level
    gates only run when the field level is clean.
    """

    field_result = validate_graph_fields(config)
    if not field_result.is_valid:
        return field_result
    return validate_graph_entity(config, resolver=resolver, update=update)
