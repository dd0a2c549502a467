"""Adapter from Django settings to the immutable GraphSettings value."""

from __future__ import annotations

from functools import lru_cache

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver

from analysis.graph_options import DEFAULT_METRIC_NAMESPACE, GraphSettings


def build_graph_settings() -> GraphSettings:
    """Read the Graphite-related Django settings into a GraphSettings value."""

    return GraphSettings(
        graphite_url=str(getattr(settings, "GRAPHITE_URL", "") or "").rstrip("/"),
        proxy_graphite=bool(getattr(settings, "PROXY_GRAPHITE", False)),
        use_statsd_prefixes=bool(getattr(settings, "USE_STATSD_PREFIXES", True)),
        metric_namespace=str(getattr(settings, "GRAPHITE_METRIC_NAMESPACE", "") or DEFAULT_METRIC_NAMESPACE),
    )


@lru_cache(maxsize=1)
def get_graph_settings() -> GraphSettings:
    """Return the process-wide GraphSettings, built on first use."""

    return build_graph_settings()


_GRAPH_SETTING_NAMES = frozenset({"GRAPHITE_URL", "PROXY_GRAPHITE", "USE_STATSD_PREFIXES", "GRAPHITE_METRIC_NAMESPACE"})


@receiver(setting_changed)
def _reset_graph_settings(*, setting: str, **kwargs: object) -> None:
    """Drop the cached GraphSettings when tests override a graph setting."""

    if setting in _GRAPH_SETTING_NAMES:
        get_graph_settings.cache_clear()
