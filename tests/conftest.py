"""Pytest fixtures shared across Django integration tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest


@pytest.fixture
def host(db):
    """Return a monitored host with two items and one item prototype."""

    from core.models import Host, Item

    host = Host.objects.create(name="Simple form test host")
    Item.objects.create(host=host, name="CPU load", key="system.cpu.load")
    Item.objects.create(host=host, name="Free memory", key="vm.memory.size[available]")
    Item.objects.create(
        host=host,
        name="Free space on {#FSNAME}",
        key="vfs.fs.size[{#FSNAME},free]",
        is_prototype=True,
    )
    return host


def _graph_post(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "name": "CPU graph",
        "width": "900",
        "height": "200",
        "graphtype": "0",
        "show_legend": "on",
        "show_work_period": "on",
        "show_triggers": "on",
        "ymin_type": "0",
        "ymax_type": "0",
        "items[0][reference]": "Simple form test host: CPU load",
        "items[0][calc_fnc]": "2",
        "items[0][drawtype]": "0",
        "items[0][yaxisside]": "0",
        "items[0][color]": "1A7C11",
    }
    data.update(overrides)
    return {key: value for key, value in data.items() if value is not None}


@pytest.fixture
def graph_post():
    """Return a factory for valid graph form posts.

    Keyword overrides replace fields; an override of None drops the field.
    """

    return _graph_post


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
