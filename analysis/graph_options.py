"""Per-request graph options and the metric-prefix policy.

Graph options are resolved once per admin request from the requested
timeframe, a persisted timeframe preference, and process-wide GraphSettings.
The persisted preference is reached through the `TimeframePreference` port so
the resolution rules do not depend on cookies or any other transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal, Protocol

from .timeframes import (
    DEFAULT_TIMEFRAME,
    TIMEFRAME_LABELS,
    GraphInterval,
    InvalidTimeframe,
    default_graph_timeframes,
    graph_interval_for_timeframe,
)

MetricType = Literal["counter", "gauge"]

METRIC_COUNTER: Final[MetricType] = "counter"
METRIC_GAUGE: Final[MetricType] = "gauge"
GAUGE_METRIC_KEYS: Final[frozenset[str]] = frozenset({"backend_depth", "depth", "clients", "in_flight_count"})

STATSD_COUNTER_PREFIX: Final[str] = "stats_counts."
STATSD_GAUGE_PREFIX: Final[str] = "stats.gauges."
DEFAULT_METRIC_NAMESPACE: Final[str] = "nsq"


def metric_type(key: str) -> MetricType:
    """Classify a metric key as a gauge or a counter."""

    return METRIC_GAUGE if key in GAUGE_METRIC_KEYS else METRIC_COUNTER


@dataclass(frozen=True, slots=True)
class GraphSettings:
    """Process-wide graph configuration, built once at startup.

    Attributes:
        graphite_url: Graphite base URL; empty means graphs are not configured.
        proxy_graphite: When True, clients receive backend-relative URLs and
            render requests are proxied through this service.
        use_statsd_prefixes: Whether statsd `stats_counts.`/`stats.gauges.`
            prefixes are applied to targets.
        metric_namespace: First dotted segment of every metric path.
    """

    graphite_url: str = ""
    proxy_graphite: bool = False
    use_statsd_prefixes: bool = True
    metric_namespace: str = DEFAULT_METRIC_NAMESPACE

    @property
    def configured(self) -> bool:
        return self.graphite_url != ""


class TimeframePreference(Protocol):
    """Read/write access to a persisted timeframe preference."""

    def get(self) -> str | None:
        ...

    def set(self, value: str) -> None:
        ...


class InMemoryTimeframePreference:
    """TimeframePreference backed by a plain attribute."""

    def __init__(self, value: str | None = None) -> None:
        self.value = value

    def get(self) -> str | None:
        return self.value

    def set(self, value: str) -> None:
        self.value = value


@dataclass(frozen=True, slots=True)
class GraphOptions:
    """Graph configuration for a single admin request.

    Attributes:
        configured: True when a Graphite URL is set (before proxying).
        enabled: True when configured and the active timeframe is not `off`.
        graphite_url: Base URL handed to URL builders; empty when proxied.
        use_statsd_prefixes: Whether the statsd prefix policy is active.
        metric_namespace: First dotted segment of every metric path.
        all_graph_intervals: Every selectable timeframe, active one selected.
        graph_interval: The active timeframe.
    """

    configured: bool
    enabled: bool
    graphite_url: str
    use_statsd_prefixes: bool
    metric_namespace: str
    all_graph_intervals: tuple[GraphInterval, ...]
    graph_interval: GraphInterval

    def prefix(self, kind: str) -> str:
        """Return the statsd namespace prefix for a metric type."""

        if not self.use_statsd_prefixes:
            return ""
        if kind == METRIC_COUNTER:
            return STATSD_COUNTER_PREFIX
        if kind == METRIC_GAUGE:
            return STATSD_GAUGE_PREFIX
        return ""

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation for API responses."""

        return {
            "configured": self.configured,
            "enabled": self.enabled,
            "graphite_url": self.graphite_url,
            "use_statsd_prefixes": self.use_statsd_prefixes,
            "timeframe": self.graph_interval.timeframe,
            "graph_from": self.graph_interval.graph_from,
            "graph_until": self.graph_interval.graph_until,
            "intervals": [
                {
                    "timeframe": interval.timeframe,
                    "selected": interval.selected,
                    "url_option": interval.url_option,
                }
                for interval in self.all_graph_intervals
            ],
        }


def _resolve_interval(label: str) -> GraphInterval | None:
    """Resolve a caller-supplied label, returning None when it is unusable."""

    if label not in TIMEFRAME_LABELS:
        return None
    try:
        return graph_interval_for_timeframe(label, selected=True)
    except InvalidTimeframe:
        return None


def resolve_graph_options(
    settings: GraphSettings,
    *,
    requested: str | None,
    preference: TimeframePreference,
) -> GraphOptions:
    """Resolve GraphOptions for one request.

    Resolution order for the timeframe: the explicitly requested label, then
    the persisted preference, then `2h`. A label that is not one of the
    canonical timeframes, or that does not parse, silently falls back to `2h`.
    An explicitly requested label that resolves is written back to the
    preference so later requests default to it.

    Args:
        settings: Process-wide graph settings.
        requested: Timeframe supplied with the request, if any.
        preference: Port to the persisted timeframe preference.

    Returns:
        GraphOptions for the request.
    """

    requested_label = (requested or "").strip()
    if requested_label:
        label = requested_label
    else:
        label = preference.get() or DEFAULT_TIMEFRAME

    interval = _resolve_interval(label)
    if interval is None:
        interval = graph_interval_for_timeframe(DEFAULT_TIMEFRAME, selected=True)
    elif requested_label:
        preference.set(interval.timeframe)

    configured = settings.configured
    return GraphOptions(
        configured=configured,
        enabled=configured and not interval.is_off,
        graphite_url="" if settings.proxy_graphite else settings.graphite_url,
        use_statsd_prefixes=settings.use_statsd_prefixes,
        metric_namespace=settings.metric_namespace,
        all_graph_intervals=default_graph_timeframes(interval.timeframe),
        graph_interval=interval,
    )
