"""App configuration for the monitoring console app."""

from __future__ import annotations

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the `core` app (graphs, items, media types)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Monitoring console"
