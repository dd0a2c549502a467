"""Graphite targets for topics and channels.

Every queue entity that can be graphed implements `MetricEntity.target`, which
maps a metric key (for example `depth` or `message_count`) to a Graphite
target expression and a series color. Metric paths follow the layout written by
the daemons' statsd reporter:

    <prefix><namespace>.<host>.topic.<topic>[.channel.<channel>].<key>
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Protocol

from .graph_options import GraphOptions, metric_type

HOST_WILDCARD: Final[str] = "*"
RATE_METRIC_KEY: Final[str] = "message_count"
ALARM_METRIC_KEYS: Final[frozenset[str]] = frozenset({"depth", "deferred_count"})

COLOR_NORMAL: Final[str] = "blue"
COLOR_ALARM: Final[str] = "red"


@dataclass(frozen=True, slots=True)
class MetricTarget:
    """A Graphite target expression and the color used to draw it."""

    expression: str
    color: str


class MetricEntity(Protocol):
    """Anything that can resolve a Graphite target for a metric key."""

    def target(self, options: GraphOptions, key: str) -> MetricTarget:
        ...


def sanitize_host_key(host: str) -> str:
    """Make a host address safe as a single dotted-path segment.

    `10.0.0.1:4151` becomes `10_0_0_1_4151`.
    """

    return host.replace(".", "_").replace(":", "_")


def color_for_metric(key: str) -> str:
    """Return `red` for backlog-like metrics and `blue` for everything else."""

    return COLOR_ALARM if key in ALARM_METRIC_KEYS else COLOR_NORMAL


def _metric_target(options: GraphOptions, *, host: str, path: str, key: str) -> MetricTarget:
    expression = f"{options.prefix(metric_type(key))}{options.metric_namespace}.{host}.{path}.{key}"
    return MetricTarget(expression=expression, color=color_for_metric(key))


@dataclass(frozen=True, slots=True)
class TopicEntity:
    """A topic aggregated across every producer host."""

    topic_name: str

    def target(self, options: GraphOptions, key: str) -> MetricTarget:
        return _metric_target(options, host=HOST_WILDCARD, path=f"topic.{self.topic_name}", key=key)


@dataclass(frozen=True, slots=True)
class TopicHostStatsEntity:
    """Topic stats reported by a single host, or an aggregate of hosts.

    Attributes:
        topic_name: Topic the stats belong to.
        host_address: `host:port` of the reporting daemon.
        aggregate: True when the stats sum several hosts. Stats without a
            host address are treated as aggregate.
    """

    topic_name: str
    host_address: str = ""
    aggregate: bool = False

    def target(self, options: GraphOptions, key: str) -> MetricTarget:
        host = HOST_WILDCARD if self.aggregate or not self.host_address else sanitize_host_key(self.host_address)
        return _metric_target(options, host=host, path=f"topic.{self.topic_name}", key=key)


@dataclass(frozen=True, slots=True)
class ChannelStatsEntity:
    """Channel stats for one host, or aggregated over per-host entries.

    Attributes:
        topic_name: Topic the channel belongs to.
        channel_name: Channel name.
        host_address: `host:port` of the reporting daemon for single-host stats.
        host_stats: Per-host entries; non-empty (or a missing host address)
            means the stats are aggregated.
    """

    topic_name: str
    channel_name: str
    host_address: str = ""
    host_stats: tuple["ChannelStatsEntity", ...] = ()

    @property
    def aggregate(self) -> bool:
        return len(self.host_stats) > 0 or not self.host_address

    def target(self, options: GraphOptions, key: str) -> MetricTarget:
        host = HOST_WILDCARD if self.aggregate else sanitize_host_key(self.host_address)
        path = f"topic.{self.topic_name}.channel.{self.channel_name}"
        return _metric_target(options, host=host, path=path, key=key)


def rate_target(options: GraphOptions, entity: MetricEntity) -> str:
    """Return the `message_count` target used for rate lookups."""

    return entity.target(options, RATE_METRIC_KEY).expression
