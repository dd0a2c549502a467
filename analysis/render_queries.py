"""Graphite render URLs for sparklines and full-size graphs."""

from __future__ import annotations

from typing import Final
from urllib.parse import urlencode

from .graph_options import METRIC_GAUGE, GraphOptions, metric_type
from .metric_targets import MetricEntity

TRANSPARENT_BACKGROUND: Final[str] = "ff000000"


def _render_url(base_url: str, params: dict[str, str]) -> str:
    """Join a Graphite base URL with sorted, encoded render parameters."""

    query = urlencode(sorted(params.items()))
    return f"{base_url}/render?{query}"


def sum_series(target: str) -> str:
    return f"sumSeries({target})"


def large_graph_target(key: str, target: str) -> str:
    """Wrap a target for the large graph.

    Values are summarized into one-minute averages. Counters are additionally
    scaled to per-second rates; gauges are drawn as averaged raw values.
    """

    wrapped = f'summarize({sum_series(target)},"1min","avg")'
    if metric_type(key) != METRIC_GAUGE:
        wrapped = f"scaleToSeconds({wrapped},1)"
    return wrapped


def sparkline_url(options: GraphOptions, target: str, color: str) -> str:
    """Build a small, decoration-free inline graph URL.

    Args:
        options: Resolved graph options for the request.
        target: Graphite target expression.
        color: Series color.

    Returns:
        Render URL for a 120x20 sparkline over the active timeframe.
    """

    params = {
        "height": "20",
        "width": "120",
        "hideGrid": "true",
        "hideLegend": "true",
        "hideAxes": "true",
        "bgcolor": TRANSPARENT_BACKGROUND,
        "fgcolor": "black",
        "margin": "0",
        "colorList": color,
        "yMin": "0",
        "target": sum_series(target),
        "from": options.graph_interval.graph_from,
        "until": options.graph_interval.graph_until,
    }
    return _render_url(options.graphite_url, params)


def large_graph_url(options: GraphOptions, key: str, target: str, color: str) -> str:
    """Build a full-size graph URL for a metric key.

    Args:
        options: Resolved graph options for the request.
        key: Metric key, used to decide whether to scale to a per-second rate.
        target: Graphite target expression.
        color: Series color.

    Returns:
        Render URL for an 800x450 graph over the active timeframe.
    """

    params = {
        "height": "450",
        "width": "800",
        "bgcolor": TRANSPARENT_BACKGROUND,
        "fgcolor": "999999",
        "colorList": color,
        "yMin": "0",
        "target": large_graph_target(key, target),
        "from": options.graph_interval.graph_from,
        "until": options.graph_interval.graph_until,
    }
    return _render_url(options.graphite_url, params)


def sparkline(options: GraphOptions, entity: MetricEntity, key: str) -> str:
    """Return the sparkline URL for an entity's metric."""

    metric = entity.target(options, key)
    return sparkline_url(options, metric.expression, metric.color)


def large_graph(options: GraphOptions, entity: MetricEntity, key: str) -> str:
    """Return the large graph URL for an entity's metric."""

    metric = entity.target(options, key)
    return large_graph_url(options, key, metric.expression, metric.color)
