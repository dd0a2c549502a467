"""JSON views exposing graph options, graph URLs, and Graphite data."""

from __future__ import annotations

import logging

from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET

from analysis.graph_options import GraphOptions, resolve_graph_options
from analysis.metric_targets import ChannelStatsEntity, MetricEntity, TopicEntity, TopicHostStatsEntity, rate_target
from analysis.rates import NoDatapoints, RateQueryError
from analysis.render_queries import large_graph, sparkline
from core.graph_settings import get_graph_settings
from core.preferences import CookieTimeframePreference
from core.services import GraphiteUnavailable, fetch_graphite, fetch_rate

logger = logging.getLogger(__name__)

TOPIC_GRAPH_KEYS: tuple[str, ...] = ("depth", "backend_depth", "message_count")
CHANNEL_GRAPH_KEYS: tuple[str, ...] = (
    "depth",
    "backend_depth",
    "in_flight_count",
    "deferred_count",
    "requeue_count",
    "timeout_count",
    "message_count",
    "clients",
)


def _request_graph_options(request: HttpRequest) -> tuple[GraphOptions, CookieTimeframePreference]:
    """Resolve graph options for a request and return the cookie port with them."""

    preference = CookieTimeframePreference(request)
    options = resolve_graph_options(
        get_graph_settings(),
        requested=request.GET.get("t"),
        preference=preference,
    )
    return options, preference


def _graphs_payload(
    options: GraphOptions,
    entity: MetricEntity,
    *,
    keys: list[str],
) -> dict[str, object]:
    """Return graph URLs for the requested metric keys of an entity."""

    graphs: dict[str, dict[str, str]] = {}
    if options.enabled:
        for key in keys:
            metric = entity.target(options, key)
            graphs[key] = {
                "target": metric.expression,
                "color": metric.color,
                "sparkline": sparkline(options, entity, key),
                "large_graph": large_graph(options, entity, key),
            }
    return {
        "options": options.as_json(),
        "rate_target": rate_target(options, entity) if options.configured else "",
        "graphs": graphs,
    }


@require_GET
def graph_options(request: HttpRequest) -> JsonResponse:
    """Return the resolved graph options for the current request."""

    options, preference = _request_graph_options(request)
    response = JsonResponse(options.as_json())
    return preference.apply(response)


@require_GET
def topic_graphs(request: HttpRequest, topic: str) -> JsonResponse:
    """Return graph URLs for a topic, optionally scoped to one host."""

    options, preference = _request_graph_options(request)
    host = (request.GET.get("host") or "").strip()
    entity: MetricEntity
    if host:
        entity = TopicHostStatsEntity(topic_name=topic, host_address=host)
    else:
        entity = TopicEntity(topic_name=topic)

    keys = request.GET.getlist("key") or list(TOPIC_GRAPH_KEYS)
    response = JsonResponse(_graphs_payload(options, entity, keys=keys))
    return preference.apply(response)


@require_GET
def channel_graphs(request: HttpRequest, topic: str, channel: str) -> JsonResponse:
    """Return graph URLs for a channel.

    A single `host` scopes the graphs to that host; several `host` values (or
    none) graph the channel aggregated across hosts.
    """

    options, preference = _request_graph_options(request)
    hosts = [h.strip() for h in request.GET.getlist("host") if h.strip()]
    if len(hosts) == 1:
        entity = ChannelStatsEntity(topic_name=topic, channel_name=channel, host_address=hosts[0])
    else:
        entity = ChannelStatsEntity(
            topic_name=topic,
            channel_name=channel,
            host_stats=tuple(
                ChannelStatsEntity(topic_name=topic, channel_name=channel, host_address=h) for h in hosts
            ),
        )

    keys = request.GET.getlist("key") or list(CHANNEL_GRAPH_KEYS)
    response = JsonResponse(_graphs_payload(options, entity, keys=keys))
    return preference.apply(response)


@require_GET
def graphite_data(request: HttpRequest) -> HttpResponse:
    """Fetch an instantaneous rate from Graphite for a target."""

    metric = (request.GET.get("metric") or "").strip()
    target = (request.GET.get("target") or "").strip()
    if metric != "rate":
        return JsonResponse({"error": "INVALID_ARG_METRIC"}, status=400)
    if not target:
        return JsonResponse({"error": "INVALID_ARG_TARGET"}, status=400)

    try:
        payload = fetch_rate(get_graph_settings(), target)
    except GraphiteUnavailable as exc:
        return JsonResponse({"error": str(exc)}, status=502)
    except NoDatapoints:
        logger.info("no datapoints for rate target %s", target)
        return JsonResponse({"error": "datapoints not found"}, status=404)
    except RateQueryError as exc:
        logger.error("failed to parse rate response for %s", target, exc_info=exc)
        return JsonResponse({"error": str(exc)}, status=502)

    return HttpResponse(payload, content_type="application/json")


@require_GET
def graphite_render(request: HttpRequest) -> HttpResponse:
    """Proxy a render request to Graphite when proxy mode is enabled."""

    graph_settings = get_graph_settings()
    if not graph_settings.proxy_graphite:
        raise Http404("Graphite proxying is disabled.")

    query = request.META.get("QUERY_STRING", "")
    try:
        upstream = fetch_graphite(graph_settings, f"/render?{query}")
    except GraphiteUnavailable as exc:
        return HttpResponse(str(exc), status=502, content_type="text/plain")
    return HttpResponse(upstream.body, content_type=upstream.content_type)
