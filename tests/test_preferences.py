"""Unit tests for the cookie-backed timeframe preference."""

from __future__ import annotations

import pytest
from django.http import HttpResponse
from django.test import RequestFactory

from analysis.graph_options import GraphSettings, resolve_graph_options
from core.preferences import CookieTimeframePreference

pytestmark = pytest.mark.unit


def test_get_reads_request_cookie() -> None:
    """The persisted value comes from the `t` cookie."""

    request = RequestFactory().get("/graphs/options/")
    request.COOKIES["t"] = "48h"
    assert CookieTimeframePreference(request).get() == "48h"


def test_get_without_cookie_returns_none() -> None:
    """A missing or empty cookie means no preference."""

    request = RequestFactory().get("/graphs/options/")
    assert CookieTimeframePreference(request).get() is None
    request.COOKIES["t"] = ""
    assert CookieTimeframePreference(request).get() is None


def test_apply_sets_long_lived_http_only_cookie() -> None:
    """Pending values become a host-scoped, HTTP-only cookie."""

    request = RequestFactory().get("/graphs/options/", HTTP_HOST="localhost:4171")
    preference = CookieTimeframePreference(request)
    preference.set("24h")
    response = preference.apply(HttpResponse())

    cookie = response.cookies["t"]
    assert cookie.value == "24h"
    assert cookie["httponly"] is True
    assert cookie["path"] == "/"
    assert cookie["domain"] == "localhost"
    assert cookie["max-age"] == 30 * 24 * 60 * 60


def test_apply_without_pending_value_leaves_response_untouched() -> None:
    """Nothing is written when the timeframe came from the cookie itself."""

    request = RequestFactory().get("/graphs/options/")
    request.COOKIES["t"] = "12h"
    preference = CookieTimeframePreference(request)
    resolve_graph_options(GraphSettings(), requested=None, preference=preference)
    response = preference.apply(HttpResponse())
    assert "t" not in response.cookies
