"""Database models for the monitoring console.

The console edits two kinds of configuration:

- graphs and graph prototypes drawn from monitored items,
- notification media types.

Hosts and items form the metric registry that graph items and Y axis bounds
reference. Enum-valued columns store the same integer codes as the
`formrules` enums so validated DTOs map onto rows without translation.
"""

from __future__ import annotations

from enum import Enum

from django.db import models

from formrules.graph_dto import CalcFunction, DrawType, GraphItemType, GraphType, YAxisSide, YAxisType
from formrules.visibility import MediaTypeKind


def _choices(enum_cls: type[Enum]) -> tuple[tuple[int, str], ...]:
    return tuple((member.value, member.name.replace("_", " ").capitalize()) for member in enum_cls)


GRAPH_TYPE_CHOICES = _choices(GraphType)
YAXIS_TYPE_CHOICES = _choices(YAxisType)
CALC_FUNCTION_CHOICES = _choices(CalcFunction)
DRAW_TYPE_CHOICES = _choices(DrawType)
YAXIS_SIDE_CHOICES = _choices(YAxisSide)
GRAPH_ITEM_TYPE_CHOICES = _choices(GraphItemType)
MEDIA_TYPE_CHOICES: tuple[tuple[int, str], ...] = tuple((kind.value, kind.label) for kind in MediaTypeKind)
EZTEXT_LIMIT_CHOICES: tuple[tuple[int, str], ...] = (
    (0, "USA (160 characters)"),
    (1, "Canada (136 characters)"),
)


class Host(models.Model):
    """A monitored host owning items."""

    name = models.CharField(max_length=128, unique=True)

    def __str__(self) -> str:
        """Return the host name for display contexts."""

        return self.name


class Item(models.Model):
    """A monitored metric (or metric prototype) that graphs can draw.

    Attributes:
        host: Owning host.
        name: Item name, unique per host.
        key: Item key as collected by the agent.
        is_prototype: True for item prototypes created by discovery rules.
    """

    host = models.ForeignKey(Host, on_delete=models.CASCADE, related_name="items")
    name = models.CharField(max_length=255)
    key = models.CharField(max_length=2048)
    is_prototype = models.BooleanField(default=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["host", "name"], name="uniq_host_item_name"),
        ]

    def __str__(self) -> str:
        """Return the `Host: Item name` reference used by graph forms."""

        return self.reference

    @property
    def reference(self) -> str:
        return f"{self.host.name}: {self.name}"


class Graph(models.Model):
    """A stored graph or graph prototype definition.

    Percentile and Y axis columns are only meaningful for normal graphs; other
    graph types store their defaults.
    """

    name = models.CharField(max_length=255)
    width = models.PositiveIntegerField(default=900)
    height = models.PositiveIntegerField(default=200)
    graphtype = models.PositiveSmallIntegerField(choices=GRAPH_TYPE_CHOICES, default=GraphType.normal.value)
    show_legend = models.BooleanField(default=True)
    show_work_period = models.BooleanField(default=True)
    show_triggers = models.BooleanField(default=True)
    show_3d = models.BooleanField(default=False)
    visible_percent_left = models.BooleanField(default=False)
    percent_left = models.DecimalField(max_digits=8, decimal_places=4, default=0)
    visible_percent_right = models.BooleanField(default=False)
    percent_right = models.DecimalField(max_digits=8, decimal_places=4, default=0)
    ymin_type = models.PositiveSmallIntegerField(choices=YAXIS_TYPE_CHOICES, default=YAxisType.calculated.value)
    ymax_type = models.PositiveSmallIntegerField(choices=YAXIS_TYPE_CHOICES, default=YAxisType.calculated.value)
    yaxismin = models.DecimalField(max_digits=21, decimal_places=4, default=0)
    yaxismax = models.DecimalField(max_digits=21, decimal_places=4, default=100)
    ymin_item = models.ForeignKey(Item, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    ymax_item = models.ForeignKey(Item, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    is_prototype = models.BooleanField(default=False)
    discover = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        kind = "GraphPrototype" if self.is_prototype else "Graph"
        return f"{kind}({self.name})"


class GraphItem(models.Model):
    """One item line (or slice) drawn by a graph."""

    graph = models.ForeignKey(Graph, on_delete=models.CASCADE, related_name="graph_items")
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name="graph_items")
    sortorder = models.PositiveSmallIntegerField(default=0)
    calc_fnc = models.PositiveSmallIntegerField(choices=CALC_FUNCTION_CHOICES, default=CalcFunction.avg.value)
    drawtype = models.PositiveSmallIntegerField(choices=DRAW_TYPE_CHOICES, default=DrawType.line.value)
    yaxisside = models.PositiveSmallIntegerField(choices=YAXIS_SIDE_CHOICES, default=YAxisSide.left.value)
    type = models.PositiveSmallIntegerField(choices=GRAPH_ITEM_TYPE_CHOICES, default=GraphItemType.simple.value)
    color = models.CharField(max_length=6, default="1A7C11")

    class Meta:
        ordering = ["graph", "sortorder"]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"GraphItem(graph={self.graph_id}, item={self.item_id}, sortorder={self.sortorder})"


class MediaType(models.Model):
    """A notification channel configuration.

    Only the columns relevant to `type` are populated; the rest stay blank.
    """

    name = models.CharField(max_length=100, unique=True)
    type = models.PositiveSmallIntegerField(choices=MEDIA_TYPE_CHOICES, default=MediaTypeKind.email.value)
    smtp_server = models.CharField(max_length=255, blank=True, default="")
    smtp_helo = models.CharField(max_length=255, blank=True, default="")
    smtp_email = models.CharField(max_length=255, blank=True, default="")
    exec_path = models.CharField(max_length=255, blank=True, default="")
    gsm_modem = models.CharField(max_length=255, blank=True, default="")
    username = models.CharField(max_length=255, blank=True, default="")
    passwd = models.CharField(max_length=255, blank=True, default="")
    eztext_limit = models.PositiveSmallIntegerField(choices=EZTEXT_LIMIT_CHOICES, default=0)

    def __str__(self) -> str:
        """Return the media type name for display contexts."""

        return self.name
