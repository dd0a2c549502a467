"""Cookie transport for the persisted graph timeframe preference."""

from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from django.http.request import split_domain_port


class CookieTimeframePreference:
    """TimeframePreference backed by a long-lived, HTTP-only cookie.

    Reads come from the incoming request. Writes are buffered and applied to
    the outgoing response with `apply`, because the response does not exist
    yet when graph options are resolved.
    """

    def __init__(self, request: HttpRequest) -> None:
        self.request = request
        self.pending: str | None = None

    @property
    def cookie_name(self) -> str:
        return str(getattr(settings, "GRAPH_TIMEFRAME_COOKIE_NAME", "t"))

    def get(self) -> str | None:
        value = self.request.COOKIES.get(self.cookie_name)
        return value or None

    def set(self, value: str) -> None:
        self.pending = value

    def apply(self, response: HttpResponse) -> HttpResponse:
        """Write a pending preference to the response as a cookie.

        Args:
            response: Outgoing response.

        Returns:
            The same response, for chaining.
        """

        if self.pending is None:
            return response

        domain, _port = split_domain_port(self.request.get_host())
        response.set_cookie(
            self.cookie_name,
            self.pending,
            max_age=int(getattr(settings, "GRAPH_TIMEFRAME_COOKIE_MAX_AGE", 30 * 24 * 60 * 60)),
            path="/",
            domain=domain or None,
            httponly=True,
        )
        return response
