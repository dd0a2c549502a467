"""Graphite network access for the admin service.

The pure `analysis` package builds queries and parses responses; the functions
here perform the HTTP fetches against the configured Graphite server.
"""

from __future__ import annotations

import http.client
import logging
import urllib.request
from dataclasses import dataclass

from django.conf import settings

from analysis.graph_options import GraphSettings
from analysis.rates import build_rate_query, parse_rate_response

logger = logging.getLogger(__name__)

_USER_AGENT = "queueAdmin (graphite client)"


class GraphiteUnavailable(Exception):
    """Raised when Graphite is not configured or cannot be reached."""


@dataclass(frozen=True, slots=True)
class GraphiteResponse:
    """Raw body and content type returned by Graphite."""

    body: bytes
    content_type: str


def _timeout() -> int:
    return int(getattr(settings, "GRAPHITE_TIMEOUT_SECONDS", 10))


def fetch_graphite(graph_settings: GraphSettings, path: str) -> GraphiteResponse:
    """Fetch a backend-relative path from Graphite.

    Args:
        graph_settings: Process-wide graph settings holding the Graphite URL.
        path: Backend-relative path such as `/render?...`.

    Returns:
        GraphiteResponse with the raw body.

    Raises:
        GraphiteUnavailable: When Graphite is not configured or the request fails.
    """

    if not graph_settings.configured:
        raise GraphiteUnavailable("Graphite is not configured.")

    url = f"{graph_settings.graphite_url}{path}"
    logger.debug("fetching %s", url)
    try:
        request = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
        with urllib.request.urlopen(request, timeout=_timeout()) as response:
            content_type = response.headers.get("Content-Type", "application/octet-stream")
            return GraphiteResponse(body=response.read(), content_type=content_type)
    except (OSError, ValueError, http.client.HTTPException) as exc:
        logger.warning("graphite request failed for %s: %s", url, exc)
        raise GraphiteUnavailable(f"Failed to fetch {url}") from exc


def fetch_rate(graph_settings: GraphSettings, target: str) -> str:
    """Fetch and parse the instantaneous rate for a target.

    Args:
        graph_settings: Process-wide graph settings.
        target: Graphite target expression.

    Returns:
        JSON text `{"datapoint": "<rate>"}`.

    Raises:
        GraphiteUnavailable: When the fetch fails.
        RateQueryError: When the response cannot be turned into a rate.
    """

    response = fetch_graphite(graph_settings, build_rate_query(target))
    return parse_rate_response(response.body)
