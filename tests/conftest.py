"""Pytest fixtures shared across unit and Django integration tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace

import pytest

from analysis.graph_options import GraphOptions, GraphSettings, InMemoryTimeframePreference, resolve_graph_options

GRAPHITE_URL = "http://graphite.example:8080"
_SPEED_MARKERS = ("unit", "integration")


@pytest.fixture
def graph_settings() -> GraphSettings:
    """Return GraphSettings pointing at a fake Graphite server."""

    return GraphSettings(graphite_url=GRAPHITE_URL)


@pytest.fixture
def make_options(graph_settings: GraphSettings) -> Callable[..., GraphOptions]:
    """Return a factory resolving GraphOptions for a timeframe."""

    def _make(timeframe: str = "2h", **overrides: object) -> GraphOptions:
        settings_value = replace(graph_settings, **overrides)
        return resolve_graph_options(
            settings_value,
            requested=timeframe,
            preference=InMemoryTimeframePreference(),
        )

    return _make


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Require each test to say whether it runs against `analysis` or Django.

    Pure graph modules and request-scoped helpers such as the cookie
    preference are `unit`; anything going through the test client, app
    loading, or the Graphite fetch path is `integration`.
    """

    invalid: list[str] = []
    for item in items:
        markers = [name for name in _SPEED_MARKERS if item.get_closest_marker(name) is not None]
        if len(markers) != 1:
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
