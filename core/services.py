"""Service-layer functions for the core app.

Services coordinate Django persistence concerns (ORM, transactions) with the
pure `formrules` engine. Every write happens inside one transaction, and any
rejection raises before anything is committed, so a rejected submission leaves
the graph tables byte-for-byte unchanged.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from django.db import DatabaseError, transaction
from django.db.models import Q

from core.exceptions import GraphRejectedError, MediaTypeRejectedError
from core.models import Graph, GraphItem, Item, MediaType
from formrules import messages
from formrules.graph_dto import GraphConfigDTO, GraphType, YAxisType
from formrules.graph_validator import (
    GraphErrorKind,
    MetricRegistryUnavailableError,
    entity_error_header,
    validate_graph_config,
)
from formrules.messages import format_number
from formrules.numeric import parse_decimal
from formrules.render_state import graph_form_state, media_type_kind
from formrules.visibility import MediaTypeKind

logger = logging.getLogger(__name__)

REFERENCE_SEPARATOR = ": "


class ItemRegistry:
    """Resolve `Host: Item name` references against stored items.

    Args:
        allow_prototypes: Whether item prototypes may be referenced (graph
            prototypes only).
    """

    def __init__(self, *, allow_prototypes: bool = False) -> None:
        self.allow_prototypes = allow_prototypes

    def resolve_metric_references(self, references: Iterable[str]) -> Mapping[str, int]:
        """Resolve references with a single query.

        Args:
            references: `Host: Item name` strings.

        Returns:
            Reference -> item id for every reference that exists.

        Raises:
            MetricRegistryUnavailableError: When the item table cannot be queried.
        """

        query = Q()
        for reference in references:
            host_name, separator, item_name = reference.partition(REFERENCE_SEPARATOR)
            if separator:
                query |= Q(host__name=host_name, name=item_name)
        if not query:
            return {}

        items = Item.objects.filter(query)
        if not self.allow_prototypes:
            items = items.filter(is_prototype=False)
        try:
            rows = list(items.values_list("id", "host__name", "name"))
        except DatabaseError as exc:
            logger.warning("Item registry lookup failed: %s", exc)
            raise MetricRegistryUnavailableError(str(exc)) from exc
        return {f"{host_name}{REFERENCE_SEPARATOR}{name}": item_id for item_id, host_name, name in rows}


def graph_store_fingerprint() -> str:
    """Return a content hash of every stored graph and graph item row.

    Used to prove that a rejected submission did not write anything.
    """

    payload: dict[str, Any] = {
        "graphs": [list(row) for row in Graph.objects.order_by("id").values_list()],
        "graph_items": [list(row) for row in GraphItem.objects.order_by("id").values_list()],
    }
    encoded = json.dumps(payload, default=str, sort_keys=True).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def save_graph(
    config: GraphConfigDTO,
    *,
    graph: Graph | None = None,
    resolver: ItemRegistry | None = None,
) -> Graph:
    """Validate and persist a graph (prototype) configuration.

    Args:
        config: Submitted configuration.
        graph: Existing graph to update; None creates a new one.
        resolver: Metric reference resolver; defaults to the item registry.

    Returns:
        The saved Graph.

    Raises:
        GraphRejectedError: When validation fails or the name is taken. No
            rows are written in that case.
    """

    update = graph is not None
    if resolver is None:
        resolver = ItemRegistry(allow_prototypes=config.prototype)

    try:
        with transaction.atomic():
            result = validate_graph_config(config, resolver=resolver, update=update)
            if not result.is_valid:
                raise GraphRejectedError.from_result(result)

            duplicates = Graph.objects.filter(name=config.name)
            if graph is not None:
                duplicates = duplicates.exclude(pk=graph.pk)
            if duplicates.exists():
                raise GraphRejectedError(
                    entity_error_header(config, update=update),
                    (messages.duplicate_graph_name(config.name),),
                    kind=GraphErrorKind.duplicate_name,
                )

            target = graph if graph is not None else Graph()
            _apply_graph_config(target, config, item_ids=result.item_ids)
            target.save()
            if update:
                target.graph_items.all().delete()
            GraphItem.objects.bulk_create(_graph_items(target, config, item_ids=result.item_ids))
    except GraphRejectedError as exc:
        logger.info("Rejected %s %r: %s %s", config.entity_label, config.name, exc.header, list(exc.details))
        raise

    logger.info("Saved %s %r (id=%s, items=%d)", config.entity_label, config.name, target.pk, len(config.items))
    return target


def _decimal_or(raw: str, default: Decimal) -> Decimal:
    value = parse_decimal(raw.strip()) if raw else None
    return default if value is None else value


def _apply_graph_config(graph: Graph, config: GraphConfigDTO, *, item_ids: Mapping[str, int]) -> None:
    """Copy a validated configuration onto a Graph row.

    Columns that do not apply to the graph type are reset to their defaults.
    """

    graph_type = config.graph_type
    normal = graph_type is GraphType.normal

    graph.name = config.name
    graph.width = int(Decimal(config.width))
    graph.height = int(Decimal(config.height))
    graph.graphtype = graph_type.value
    graph.show_legend = config.show_legend
    graph.show_work_period = config.show_work_period if graph_type in (GraphType.normal, GraphType.stacked) else True
    graph.show_triggers = config.show_triggers if graph_type in (GraphType.normal, GraphType.stacked) else True
    graph.show_3d = config.show_3d if graph_type in (GraphType.pie, GraphType.exploded) else False
    graph.is_prototype = config.prototype
    graph.discover = config.discover if config.prototype else True

    graph.visible_percent_left = normal and config.visible_percent_left
    graph.percent_left = _decimal_or(config.percent_left, Decimal(0)) if graph.visible_percent_left else Decimal(0)
    graph.visible_percent_right = normal and config.visible_percent_right
    graph.percent_right = _decimal_or(config.percent_right, Decimal(0)) if graph.visible_percent_right else Decimal(0)

    ymin_type = config.ymin_type if normal else YAxisType.calculated
    ymax_type = config.ymax_type if normal else YAxisType.calculated
    graph.ymin_type = ymin_type.value
    graph.ymax_type = ymax_type.value
    graph.yaxismin = _decimal_or(config.yaxismin, Decimal(0)) if ymin_type is YAxisType.fixed else Decimal(0)
    graph.yaxismax = _decimal_or(config.yaxismax, Decimal(100)) if ymax_type is YAxisType.fixed else Decimal(100)
    graph.ymin_item_id = item_ids.get(config.ymin_item) if ymin_type is YAxisType.item else None
    graph.ymax_item_id = item_ids.get(config.ymax_item) if ymax_type is YAxisType.item else None


def _graph_items(graph: Graph, config: GraphConfigDTO, *, item_ids: Mapping[str, int]) -> list[GraphItem]:
    pie = config.graph_type in (GraphType.pie, GraphType.exploded)
    normal = config.graph_type is GraphType.normal
    rows: list[GraphItem] = []
    for sortorder, item in enumerate(config.items):
        item_id = item_ids.get(item.reference)
        if item_id is None:
            # Only reachable without a resolver; nothing to link the row to.
            raise GraphRejectedError(
                entity_error_header(config),
                (messages.reference_not_found(),),
                kind=GraphErrorKind.reference_not_found,
            )
        rows.append(
            GraphItem(
                graph=graph,
                item_id=item_id,
                sortorder=sortorder,
                calc_fnc=item.calc_fnc.value,
                drawtype=item.drawtype.value if normal else 0,
                yaxisside=item.yaxisside.value if not pie else 0,
                type=item.type.value if pie else 0,
                color=item.color.upper(),
            )
        )
    return rows


def save_media_type(submission: Mapping[str, Any], *, media_type: MediaType | None = None) -> MediaType:
    """Persist a media type from the visible fields of a media type form.

    Args:
        submission: Field id -> value for visible fields only.
        media_type: Existing media type to update; None creates one.

    Returns:
        The saved MediaType.

    Raises:
        MediaTypeRejectedError: When the name is already used.
    """

    update = media_type is not None
    header = "Cannot update media type" if update else "Cannot add media type"
    kind = media_type_kind(submission.get("type", MediaTypeKind.email.value))
    name = str(submission.get("name", "")).strip()

    with transaction.atomic():
        duplicates = MediaType.objects.filter(name=name)
        if media_type is not None:
            duplicates = duplicates.exclude(pk=media_type.pk)
        if duplicates.exists():
            logger.info("Rejected media type %r: duplicate name", name)
            raise MediaTypeRejectedError(header, (f'Media type "{name}" already exists.',))

        target = media_type if media_type is not None else MediaType()
        target.name = name
        target.type = kind.value
        target.smtp_server = str(submission.get("smtp_server", ""))
        target.smtp_helo = str(submission.get("smtp_helo", ""))
        target.smtp_email = str(submission.get("smtp_email", ""))
        target.exec_path = str(submission.get("exec_path", ""))
        target.gsm_modem = str(submission.get("gsm_modem", ""))
        target.username = str(submission.get("jabber_username") or submission.get("eztext_username") or "")
        target.passwd = str(submission.get("passwd", ""))
        target.eztext_limit = int(submission.get("eztext_limit") or 0)
        target.save()

    logger.info("Saved media type %r (id=%s, type=%s)", name, target.pk, kind.label)
    return target


def media_type_values(media_type: MediaType) -> dict[str, Any]:
    """Return media type form values for an existing row."""

    kind = media_type_kind(media_type.type)
    return {
        "name": media_type.name,
        "type": kind.value,
        "smtp_server": media_type.smtp_server,
        "smtp_helo": media_type.smtp_helo,
        "smtp_email": media_type.smtp_email,
        "exec_path": media_type.exec_path,
        "gsm_modem": media_type.gsm_modem,
        "jabber_username": media_type.username if kind is MediaTypeKind.jabber else "",
        "eztext_username": media_type.username if kind is MediaTypeKind.ez_texting else "",
        "eztext_limit": str(media_type.eztext_limit),
        "passwd": media_type.passwd,
    }


def graph_values(graph: Graph) -> dict[str, Any]:
    """Return graph form values for an existing graph (prototype).

    Only fields rendered for the stored graph type are returned.
    """

    graph_type = GraphType(graph.graphtype)
    ymin_type = YAxisType(graph.ymin_type)
    ymax_type = YAxisType(graph.ymax_type)
    values: dict[str, Any] = {
        "name": graph.name,
        "width": str(graph.width),
        "height": str(graph.height),
        "graphtype": graph_type.label,
        "show_legend": graph.show_legend,
        "show_work_period": graph.show_work_period,
        "show_triggers": graph.show_triggers,
        "show_3d": graph.show_3d,
        "visible_percent_left": graph.visible_percent_left,
        "percent_left": format_number(Decimal(graph.percent_left)),
        "visible_percent_right": graph.visible_percent_right,
        "percent_right": format_number(Decimal(graph.percent_right)),
        "ymin_type": ymin_type.label,
        "yaxismin": format_number(Decimal(graph.yaxismin)),
        "ymin_name": graph.ymin_item.reference if graph.ymin_item is not None else "",
        "ymax_type": ymax_type.label,
        "yaxismax": format_number(Decimal(graph.yaxismax)),
        "ymax_name": graph.ymax_item.reference if graph.ymax_item is not None else "",
        "discover": graph.discover,
    }
    state = graph_form_state(values, prototype=graph.is_prototype)
    return {key: value for key, value in values.items() if state.exists(key)}


def graph_item_rows(graph: Graph) -> list[dict[str, Any]]:
    """Return the item table rows of a stored graph, in drawing order."""

    rows: list[dict[str, Any]] = []
    for graph_item in graph.graph_items.select_related("item__host").order_by("sortorder"):
        rows.append(
            {
                "reference": graph_item.item.reference,
                "calc_fnc": graph_item.calc_fnc,
                "drawtype": graph_item.drawtype,
                "yaxisside": graph_item.yaxisside,
                "type": graph_item.type,
                "color": graph_item.color,
                "prototype": graph_item.item.is_prototype,
            }
        )
    return rows
