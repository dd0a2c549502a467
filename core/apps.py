"""App configuration for the core Django app."""

from __future__ import annotations

from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured

from analysis.timeframes import TimeframeCatalogError, validate_timeframe_catalog


class CoreConfig(AppConfig):
    """Configuration for the `core` app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"

    def ready(self) -> None:
        """Refuse to start when the canonical timeframe catalog is broken."""

        from core import graph_settings  # noqa: F401 - registers the setting_changed receiver

        try:
            validate_timeframe_catalog()
        except TimeframeCatalogError as exc:
            raise ImproperlyConfigured(str(exc)) from exc
