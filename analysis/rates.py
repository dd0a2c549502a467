"""Instantaneous message rates from Graphite.

A rate lookup asks Graphite for the one-minute bucket that closed a minute ago
and converts the summed `message_count` delta into messages per second. The
fetch itself is performed by the caller; this module only builds the query and
parses the response body.
"""

from __future__ import annotations

import json
import math
from typing import Any, Final
from urllib.parse import urlencode

RATE_WINDOW_SECONDS: Final[int] = 60


class RateQueryError(Exception):
    """Base class for rate response failures."""


class MalformedResponse(RateQueryError):
    """Raised when the response is not JSON or its datapoint is unusable."""


class NoDatapoints(RateQueryError):
    """Raised when the response has no series with a `datapoints` field."""


class SerializationError(RateQueryError):
    """Raised when the rate payload cannot be encoded."""


def build_rate_query(target: str) -> str:
    """Return the backend-relative render path for a rate lookup.

    The path is always relative: rate lookups are fetched by this service
    whether or not Graphite is proxied.

    Args:
        target: Graphite target expression, typically a `message_count` target.

    Returns:
        A `/render?...` path requesting JSON for the previous full minute.
    """

    params = {
        "from": "-2min",
        "until": "-1min",
        "format": "json",
        "target": f"sumSeries({target})",
    }
    return f"/render?{urlencode(sorted(params.items()))}"


def _first_datapoints(payload: Any) -> Any:
    if not isinstance(payload, list) or not payload:
        raise NoDatapoints("datapoints not found")
    series = payload[0]
    if not isinstance(series, dict) or "datapoints" not in series:
        raise NoDatapoints("datapoints not found")
    return series["datapoints"]


def _first_value(datapoints: Any) -> float:
    try:
        value = datapoints[0][0]
    except (IndexError, KeyError, TypeError) as exc:
        raise MalformedResponse("first datapoint is missing") from exc
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedResponse(f"first datapoint is not numeric: {value!r}")
    try:
        return float(value)
    except OverflowError as exc:
        raise SerializationError("first datapoint is out of float range") from exc


def parse_rate_response(body: str | bytes) -> str:
    """Parse a Graphite JSON render response into a rate payload.

    Args:
        body: Raw response body, a JSON array of series each carrying
            `datapoints` as `[value, timestamp]` pairs.

    Returns:
        JSON text `{"datapoint": "<rate>"}` with the per-second rate formatted
        to two decimals.

    Raises:
        MalformedResponse: When the body is not JSON or the first datapoint is
            missing or not numeric.
        NoDatapoints: When the first series has no `datapoints` field.
        SerializationError: When the rate cannot be encoded or the
            datapoint is too large for a float.
    """

    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise MalformedResponse(f"failed to parse rate response: {exc}") from exc

    value = _first_value(_first_datapoints(payload))
    rate = value / RATE_WINDOW_SECONDS
    if not math.isfinite(rate):
        raise SerializationError(f"rate is not finite: {rate!r}")

    try:
        return json.dumps({"datapoint": f"{rate:.2f}"}, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise SerializationError("failed to encode rate payload") from exc
