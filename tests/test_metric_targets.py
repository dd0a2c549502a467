"""Unit tests for Graphite targets of topics and channels."""

from __future__ import annotations

import pytest

from analysis.metric_targets import (
    ChannelStatsEntity,
    MetricTarget,
    TopicEntity,
    TopicHostStatsEntity,
    color_for_metric,
    rate_target,
    sanitize_host_key,
)

pytestmark = pytest.mark.unit


def test_sanitize_host_key_replaces_dots_and_colons() -> None:
    """Host addresses become single dotted-path segments."""

    assert sanitize_host_key("10.0.0.1:4151") == "10_0_0_1_4151"
    assert sanitize_host_key(sanitize_host_key("10.0.0.1:4151")) == "10_0_0_1_4151"
    assert sanitize_host_key("[::1]:4151") == "[__1]_4151"


@pytest.mark.parametrize(("key", "color"), [("depth", "red"), ("deferred_count", "red"), ("message_count", "blue")])
def test_color_for_metric(key: str, color: str) -> None:
    """Backlog-like metrics are drawn in red."""

    assert color_for_metric(key) == color


def test_topic_target_uses_wildcard_host(make_options) -> None:
    """Aggregate topic targets match every host."""

    target = TopicEntity("orders").target(make_options(), "depth")
    assert target == MetricTarget(expression="stats.gauges.nsq.*.topic.orders.depth", color="red")


def test_topic_target_without_prefixes(make_options) -> None:
    """Disabling statsd prefixes leaves the bare namespace."""

    target = TopicEntity("orders").target(make_options(use_statsd_prefixes=False), "message_count")
    assert target.expression == "nsq.*.topic.orders.message_count"
    assert target.color == "blue"


def test_topic_host_stats_target_uses_sanitized_host(make_options) -> None:
    """Single-host topic stats address that host's metrics."""

    entity = TopicHostStatsEntity(topic_name="orders", host_address="10.0.0.1:4151")
    target = entity.target(make_options(), "message_count")
    assert target.expression == "stats_counts.nsq.10_0_0_1_4151.topic.orders.message_count"


def test_topic_host_stats_aggregate_uses_wildcard(make_options) -> None:
    """Aggregated topic stats ignore the host address."""

    entity = TopicHostStatsEntity(topic_name="orders", host_address="10.0.0.1:4151", aggregate=True)
    assert entity.target(make_options(), "depth").expression == "stats.gauges.nsq.*.topic.orders.depth"


def test_channel_target_for_single_host(make_options) -> None:
    """Single-host channel stats include the channel segment and the host."""

    entity = ChannelStatsEntity(topic_name="orders", channel_name="archive", host_address="node1:4151")
    target = entity.target(make_options(), "in_flight_count")
    assert target.expression == "stats.gauges.nsq.node1_4151.topic.orders.channel.archive.in_flight_count"
    assert target.color == "blue"


def test_channel_target_with_host_entries_uses_wildcard(make_options) -> None:
    """Channel stats carrying per-host entries are aggregated."""

    entity = ChannelStatsEntity(
        topic_name="orders",
        channel_name="archive",
        host_address="node1:4151",
        host_stats=(
            ChannelStatsEntity(topic_name="orders", channel_name="archive", host_address="node1:4151"),
            ChannelStatsEntity(topic_name="orders", channel_name="archive", host_address="node2:4151"),
        ),
    )
    target = entity.target(make_options(), "deferred_count")
    assert target.expression == "stats_counts.nsq.*.topic.orders.channel.archive.deferred_count"
    assert target.color == "red"


def test_custom_namespace(make_options) -> None:
    """The first path segment follows the configured namespace."""

    target = TopicEntity("orders").target(make_options(metric_namespace="queues"), "depth")
    assert target.expression == "stats.gauges.queues.*.topic.orders.depth"


def test_rate_target_uses_message_count(make_options) -> None:
    """Rate lookups always graph `message_count`."""

    options = make_options()
    assert rate_target(options, TopicEntity("orders")) == "stats_counts.nsq.*.topic.orders.message_count"
    channel = ChannelStatsEntity(topic_name="orders", channel_name="archive", host_address="node1:4151")
    assert rate_target(options, channel) == "stats_counts.nsq.node1_4151.topic.orders.channel.archive.message_count"
