"""Initial schema for hosts, items, graphs and media types."""

from __future__ import annotations

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create the metric registry, graph and media type tables."""

    initial = True

    dependencies: list[tuple[str, str]] = []

    operations = [
        migrations.CreateModel(
            name="Host",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=128, unique=True)),
            ],
        ),
        migrations.CreateModel(
            name="MediaType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                (
                    "type",
                    models.PositiveSmallIntegerField(
                        choices=[(0, "Email"), (1, "Script"), (2, "SMS"), (3, "Jabber"), (100, "Ez Texting")],
                        default=0,
                    ),
                ),
                ("smtp_server", models.CharField(blank=True, default="", max_length=255)),
                ("smtp_helo", models.CharField(blank=True, default="", max_length=255)),
                ("smtp_email", models.CharField(blank=True, default="", max_length=255)),
                ("exec_path", models.CharField(blank=True, default="", max_length=255)),
                ("gsm_modem", models.CharField(blank=True, default="", max_length=255)),
                ("username", models.CharField(blank=True, default="", max_length=255)),
                ("passwd", models.CharField(blank=True, default="", max_length=255)),
                (
                    "eztext_limit",
                    models.PositiveSmallIntegerField(
                        choices=[(0, "USA (160 characters)"), (1, "Canada (136 characters)")],
                        default=0,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("key", models.CharField(max_length=2048)),
                ("is_prototype", models.BooleanField(default=False)),
                (
                    "host",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="core.host",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("host", "name"), name="uniq_host_item_name"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Graph",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("width", models.PositiveIntegerField(default=900)),
                ("height", models.PositiveIntegerField(default=200)),
                (
                    "graphtype",
                    models.PositiveSmallIntegerField(
                        choices=[(0, "Normal"), (1, "Stacked"), (2, "Pie"), (3, "Exploded")],
                        default=0,
                    ),
                ),
                ("show_legend", models.BooleanField(default=True)),
                ("show_work_period", models.BooleanField(default=True)),
                ("show_triggers", models.BooleanField(default=True)),
                ("show_3d", models.BooleanField(default=False)),
                ("visible_percent_left", models.BooleanField(default=False)),
                ("percent_left", models.DecimalField(decimal_places=4, default=0, max_digits=8)),
                ("visible_percent_right", models.BooleanField(default=False)),
                ("percent_right", models.DecimalField(decimal_places=4, default=0, max_digits=8)),
                (
                    "ymin_type",
                    models.PositiveSmallIntegerField(
                        choices=[(0, "Calculated"), (1, "Fixed"), (2, "Item")],
                        default=0,
                    ),
                ),
                (
                    "ymax_type",
                    models.PositiveSmallIntegerField(
                        choices=[(0, "Calculated"), (1, "Fixed"), (2, "Item")],
                        default=0,
                    ),
                ),
                ("yaxismin", models.DecimalField(decimal_places=4, default=0, max_digits=21)),
                ("yaxismax", models.DecimalField(decimal_places=4, default=100, max_digits=21)),
                ("is_prototype", models.BooleanField(default=False)),
                ("discover", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "ymin_item",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="core.item",
                    ),
                ),
                (
                    "ymax_item",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="core.item",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="GraphItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sortorder", models.PositiveSmallIntegerField(default=0)),
                (
                    "calc_fnc",
                    models.PositiveSmallIntegerField(
                        choices=[(1, "Min"), (2, "Avg"), (4, "Max"), (7, "All"), (9, "Last")],
                        default=2,
                    ),
                ),
                (
                    "drawtype",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (0, "Line"),
                            (1, "Filled region"),
                            (2, "Bold line"),
                            (3, "Dot"),
                            (4, "Dashed line"),
                            (5, "Gradient line"),
                        ],
                        default=0,
                    ),
                ),
                (
                    "yaxisside",
                    models.PositiveSmallIntegerField(choices=[(0, "Left"), (1, "Right")], default=0),
                ),
                (
                    "type",
                    models.PositiveSmallIntegerField(choices=[(0, "Simple"), (2, "Graph sum")], default=0),
                ),
                ("color", models.CharField(default="1A7C11", max_length=6)),
                (
                    "graph",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="graph_items",
                        to="core.graph",
                    ),
                ),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="graph_items",
                        to="core.item",
                    ),
                ),
            ],
            options={
                "ordering": ["graph", "sortorder"],
            },
        ),
    ]
