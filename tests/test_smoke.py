"""Minimal smoke tests for project scaffolding."""

from __future__ import annotations

import pytest


@pytest.mark.unit
def test_rule_engine_imports_without_django_models() -> None:
    """Import the rule engine and verify the public entry points exist."""

    from formrules import graph_form_state, media_type_form_state, validate_graph_config

    assert callable(graph_form_state)
    assert callable(media_type_form_state)
    assert callable(validate_graph_config)


@pytest.mark.integration
def test_django_project_loads() -> None:
    """Import and initialize Django to verify settings are valid."""

    import os

    import django
    from django.conf import settings

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "monitorConsole.settings")
    django.setup()
    assert "core.apps.CoreConfig" in settings.INSTALLED_APPS
    assert settings.LOGGING["loggers"]["core"]["level"] == settings.LOG_LEVEL
