"""Regression tests for Django migration graph integrity."""

from __future__ import annotations

import pytest
from django.apps import apps
from django.db import connections
from django.db.migrations.autodetector import MigrationAutodetector
from django.db.migrations.loader import MigrationLoader
from django.db.migrations.state import ProjectState

pytestmark = pytest.mark.integration


@pytest.mark.django_db
def test_core_migrations_have_single_leaf() -> None:
    """Assert `core` has a single leaf migration.

    This prevents accidental divergent migration branches that require a merge.
    """

    loader = MigrationLoader(connections["default"])
    leaves = [node for node in loader.graph.leaf_nodes() if node[0] == "core"]

    assert len(leaves) == 1, f"Unexpected leaf nodes: {leaves}"


@pytest.mark.django_db
def test_models_match_migrations() -> None:
    """Assert the models need no migration that has not been written."""

    loader = MigrationLoader(connections["default"])
    autodetector = MigrationAutodetector(loader.project_state(), ProjectState.from_apps(apps))
    changes = autodetector.changes(graph=loader.graph)

    assert "core" not in changes, f"Missing migration for: {changes.get('core')}"
