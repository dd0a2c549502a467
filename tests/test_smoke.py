"""Minimal smoke tests for the project scaffolding."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.unit


def test_analysis_package_imports() -> None:
    """Import the graphing package and verify the public entry point exists."""

    from analysis import resolve_graph_options

    assert callable(resolve_graph_options)


def test_django_project_loads() -> None:
    """Import and initialize Django to verify settings are valid."""

    import os

    import django
    from django.conf import settings

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "queueAdmin.settings")
    django.setup()
    assert "core.apps.CoreConfig" in settings.INSTALLED_APPS
