"""DTO schema for graph and graph prototype configurations.

A graph configuration is edited through a form and only becomes a stored
graph after validation. The DTOs here carry the raw, user-typed strings for
numeric inputs so validation can report exactly what was entered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final


class GraphType(Enum):
    """Graph drawing types."""

    normal = 0
    stacked = 1
    pie = 2
    exploded = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class YAxisType(Enum):
    """How a Y axis bound is determined."""

    calculated = 0
    fixed = 1
    item = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


class CalcFunction(Enum):
    """Aggregation drawn for a graph item."""

    min = 1
    avg = 2
    max = 4
    all = 7
    last = 9


class DrawType(Enum):
    """Line style of a graph item (normal graphs only)."""

    line = 0
    filled_region = 1
    bold_line = 2
    dot = 3
    dashed_line = 4
    gradient_line = 5


class YAxisSide(Enum):
    """Axis a graph item is drawn against."""

    left = 0
    right = 1


class GraphItemType(Enum):
    """Role of an item in pie and exploded graphs."""

    simple = 0
    graph_sum = 2


PIE_TYPES: Final[frozenset[GraphType]] = frozenset({GraphType.pie, GraphType.exploded})

DEFAULT_WIDTH: Final[str] = "900"
DEFAULT_HEIGHT: Final[str] = "200"
DEFAULT_COLOR: Final[str] = "1A7C11"


def parse_enum(enum_cls: type[Enum], raw: object, default: Enum) -> Enum:
    """Resolve an enum member from its value or name, falling back to `default`.

    Form posts carry enum values as strings (`"1"`) while tests and the UI use
    labels (`"Fixed"`); both are accepted.
    """

    if isinstance(raw, enum_cls):
        return raw
    text = str(raw if raw is not None else "").strip()
    if not text:
        return default
    if text.lstrip("-").isdigit():
        try:
            return enum_cls(int(text))
        except ValueError:
            return default
    key = text.casefold().replace(" ", "_")
    for member in enum_cls:
        if member.name == key:
            return member
    return default


@dataclass(frozen=True, slots=True)
class GraphItemDTO:
    """One item drawn by a graph.

    Args:
        reference: Metric reference in `Host: Item name` form.
        calc_fnc: Aggregation function.
        drawtype: Line style; only meaningful for normal graphs.
        yaxisside: Axis side; not used by pie and exploded graphs.
        type: Simple or graph-sum; only meaningful for pie and exploded graphs.
        color: Six hex digit colour code.
        prototype: Whether the referenced item is an item prototype.
    """

    reference: str
    calc_fnc: CalcFunction = CalcFunction.avg
    drawtype: DrawType = DrawType.line
    yaxisside: YAxisSide = YAxisSide.left
    type: GraphItemType = GraphItemType.simple
    color: str = DEFAULT_COLOR
    prototype: bool = False


@dataclass(frozen=True, slots=True)
class GraphConfigDTO:
    """Graph configuration as submitted from the graph form.

    Numeric inputs are kept as raw strings. Inputs that were hidden or did not
    exist for the selected graph type are already dropped (empty strings /
    defaults) by the time a DTO is built.

    Args:
        name: Graph name.
        width: Raw width input.
        height: Raw height input.
        graph_type: Selected graph type.
        items: Ordered graph items.
        prototype: True for graph prototypes.
        discover: Graph prototype discovery flag.
    """

    name: str
    width: str = DEFAULT_WIDTH
    height: str = DEFAULT_HEIGHT
    graph_type: GraphType = GraphType.normal
    show_legend: bool = True
    show_work_period: bool = True
    show_triggers: bool = True
    show_3d: bool = False
    visible_percent_left: bool = False
    visible_percent_right: bool = False
    percent_left: str = ""
    percent_right: str = ""
    ymin_type: YAxisType = YAxisType.calculated
    ymax_type: YAxisType = YAxisType.calculated
    yaxismin: str = ""
    yaxismax: str = ""
    ymin_item: str = ""
    ymax_item: str = ""
    items: tuple[GraphItemDTO, ...] = field(default=())
    prototype: bool = False
    discover: bool = True

    @property
    def entity_label(self) -> str:
        """Return `graph` or `graph prototype` for messages."""

        return "graph prototype" if self.prototype else "graph"

    @property
    def has_axis_options(self) -> bool:
        return self.graph_type is GraphType.normal


def graph_config_from_values(
    values: dict[str, object],
    *,
    items: tuple[GraphItemDTO, ...] = (),
    prototype: bool = False,
) -> GraphConfigDTO:
    """Build a GraphConfigDTO from a submitted field map.

    Args:
        values: Field id -> raw value map. Missing keys take form defaults.
        items: Graph items parsed separately from the item table.
        prototype: True for graph prototypes.

    Returns:
        GraphConfigDTO with raw numeric strings preserved.
    """

    def text(key: str, default: str = "") -> str:
        raw = values.get(key)
        return default if raw is None else str(raw).strip()

    def flag(key: str, default: bool) -> bool:
        raw = values.get(key)
        if raw is None:
            return default
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in {"1", "true", "on", "yes"}

    return GraphConfigDTO(
        name=text("name"),
        width=text("width", DEFAULT_WIDTH),
        height=text("height", DEFAULT_HEIGHT),
        graph_type=parse_enum(GraphType, values.get("graphtype"), GraphType.normal),
        show_legend=flag("show_legend", True),
        show_work_period=flag("show_work_period", True),
        show_triggers=flag("show_triggers", True),
        show_3d=flag("show_3d", False),
        visible_percent_left=flag("visible_percent_left", False),
        visible_percent_right=flag("visible_percent_right", False),
        percent_left=text("percent_left"),
        percent_right=text("percent_right"),
        ymin_type=parse_enum(YAxisType, values.get("ymin_type"), YAxisType.calculated),
        ymax_type=parse_enum(YAxisType, values.get("ymax_type"), YAxisType.calculated),
        yaxismin=text("yaxismin"),
        yaxismax=text("yaxismax"),
        ymin_item=text("ymin_name"),
        ymax_item=text("ymax_name"),
        items=items,
        prototype=prototype,
        discover=flag("discover", True),
    )
