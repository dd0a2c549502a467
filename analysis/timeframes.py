"""Selectable graph timeframes and their Graphite window offsets.

A timeframe is a short label such as `2h` that the admin UI offers as a viewing
window. This module parses those labels and maps them to relative `from` and
`until` offsets understood by Graphite's render API. It is pure: no Django
imports and no I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Final

TIMEFRAME_OFF: Final[str] = "off"
DEFAULT_TIMEFRAME: Final[str] = "2h"
TIMEFRAME_LABELS: Final[tuple[str, ...]] = ("1h", "2h", "12h", "24h", "48h", "168h", TIMEFRAME_OFF)

_GRAPH_UNTIL: Final[str] = "-1min"

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_UNIT_MICROSECONDS: Final[dict[str, float]] = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}


class InvalidTimeframe(ValueError):
    """Raised when a timeframe label cannot be turned into a graph window."""

    def __init__(self, label: str, reason: str) -> None:
        super().__init__(f"Invalid timeframe {label!r}: {reason}.")
        self.label = label


class TimeframeCatalogError(RuntimeError):
    """Raised when a canonical timeframe label does not parse.

    This is a build/configuration defect rather than a runtime condition, and
    callers are expected to let it halt startup.
    """


@dataclass(frozen=True, slots=True)
class GraphInterval:
    """A resolved viewing window for graphs.

    Attributes:
        timeframe: Canonical UI label (for example `2h`), or `off`.
        graph_from: Graphite `from` offset (for example `-120min`); empty when off.
        graph_until: Graphite `until` offset; empty when off.
        duration: Parsed window length; zero when off.
        selected: True when this is the active choice in a presented list.
    """

    timeframe: str
    graph_from: str
    graph_until: str
    duration: timedelta
    selected: bool = False

    @property
    def is_off(self) -> bool:
        return self.timeframe == TIMEFRAME_OFF

    @property
    def url_option(self) -> str:
        """Return the query-string fragment that selects this timeframe."""

        return f"t={self.timeframe}"


def parse_duration(label: str) -> timedelta:
    """Parse a duration label such as `2h`, `90m`, `1h30m`, or `1.5h`.

    The accepted grammar is an optional sign followed by one or more
    `<number><unit>` parts, with units `ns`, `us`/`µs`, `ms`, `s`, `m`, and `h`.
    A bare `0` is accepted as a zero duration.

    Args:
        label: Raw duration label.

    Returns:
        Parsed duration.

    Raises:
        InvalidTimeframe: When the label does not match the grammar or is out
            of range.
    """

    raw = label or ""
    sign = 1
    body = raw
    if body[:1] in {"+", "-"}:
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if body == "0":
        return timedelta(0)
    if not body:
        raise InvalidTimeframe(raw, "empty duration")

    total_us = 0.0
    position = 0
    while position < len(body):
        match = _DURATION_PART_RE.match(body, position)
        if match is None:
            raise InvalidTimeframe(raw, f"unexpected input at {body[position:]!r}")
        number, unit = match.groups()
        total_us += float(number) * _DURATION_UNIT_MICROSECONDS[unit]
        position = match.end()

    try:
        return timedelta(microseconds=sign * total_us)
    except OverflowError as exc:
        raise InvalidTimeframe(raw, "duration out of range") from exc


def start_end_for_duration(duration: timedelta) -> tuple[str, str]:
    """Return Graphite `(from, until)` offsets for a window length.

    The window ends one minute ago so the newest, still-filling bucket is not
    drawn.
    """

    minutes = int(duration.total_seconds() // 60)
    return f"-{minutes}min", _GRAPH_UNTIL


def graph_interval_for_timeframe(label: str, *, selected: bool = False) -> GraphInterval:
    """Resolve a timeframe label into a GraphInterval.

    Args:
        label: Timeframe label, for example `24h` or `off`.
        selected: Whether the interval is the active choice.

    Returns:
        GraphInterval for the label.

    Raises:
        InvalidTimeframe: When the label does not parse, or parses to a
            non-positive duration.
    """

    if label == TIMEFRAME_OFF:
        return GraphInterval(
            timeframe=TIMEFRAME_OFF,
            graph_from="",
            graph_until="",
            duration=timedelta(0),
            selected=selected,
        )

    duration = parse_duration(label)
    if duration <= timedelta(0):
        raise InvalidTimeframe(label, "duration must be positive")

    graph_from, graph_until = start_end_for_duration(duration)
    return GraphInterval(
        timeframe=label,
        graph_from=graph_from,
        graph_until=graph_until,
        duration=duration,
        selected=selected,
    )


def default_graph_timeframes(selected: str) -> tuple[GraphInterval, ...]:
    """Return every canonical timeframe in display order.

    Args:
        selected: Label of the active timeframe; the matching entry is marked.

    Returns:
        Tuple of GraphInterval values, one per canonical label.

    Raises:
        TimeframeCatalogError: When a canonical label fails to parse.
    """

    intervals: list[GraphInterval] = []
    for label in TIMEFRAME_LABELS:
        try:
            intervals.append(graph_interval_for_timeframe(label, selected=label == selected))
        except InvalidTimeframe as exc:
            raise TimeframeCatalogError(f"error parsing duration {exc}") from exc
    return tuple(intervals)


def validate_timeframe_catalog() -> None:
    """Build the canonical catalog once, raising when any label is broken."""

    default_graph_timeframes(DEFAULT_TIMEFRAME)
