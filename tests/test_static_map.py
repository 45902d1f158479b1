"""
Tests for the static map request builder and the Mapbox image fetcher.

Run with: python -m pytest tests/test_static_map.py
"""

from unittest.mock import Mock, patch

import pytest
import requests
from fastapi import HTTPException

from gottago.geo.static_map import (
    MapNotConfiguredError,
    StaticMapRequest,
    build_markers,
    build_static_map_request,
    describe,
    format_number,
)
from gottago.geo.viewport import ViewportState
from gottago.models import GeoPoint
from gottago.services.mapbox_service import fetch_static_map
from tests.helpers import make_bathroom

VIEWPORT = ViewportState(center=GeoPoint(latitude=40.7589, longitude=-73.9851), zoom=12)
OBSERVER = GeoPoint(latitude=40.75, longitude=-73.99)


def test_format_number():
    assert format_number(12) == "12"
    assert format_number(12.5) == "12.5"
    assert format_number(-73.9851) == "-73.9851"
    assert format_number(0.0) == "0"
    assert format_number(-0.0000001) == "0"


def test_markers_in_collection_order_with_observer_last():
    bathrooms = [make_bathroom("a", 40.1, -74.2), make_bathroom("b", 40.3, -74.4)]
    markers = build_markers(bathrooms, OBSERVER)
    assert markers == (
        "pin-s+3b82f6(-74.2,40.1)",
        "pin-s+3b82f6(-74.4,40.3)",
        "pin-l+ef4444(-73.99,40.75)",
    )


def test_request_url_layout():
    request = build_static_map_request([make_bathroom("a", 40.1, -74.2)], VIEWPORT, None, "tok")
    assert request.url == (
        "https://api.mapbox.com/styles/v1/mapbox/dark-v11/static/"
        "pin-s+3b82f6(-74.2,40.1)/-73.9851,40.7589,12,0/800x600@2x?access_token=tok"
    )


def test_request_without_markers_omits_overlay():
    request = build_static_map_request([], VIEWPORT, None, "tok")
    assert request.markers == ()
    assert "/static/-73.9851,40.7589,12,0/" in request.url


def test_request_is_idempotent():
    bathrooms = [make_bathroom("a", 40.1, -74.2), make_bathroom("b")]
    first = build_static_map_request(bathrooms, VIEWPORT, OBSERVER, "tok")
    second = build_static_map_request(bathrooms, VIEWPORT, OBSERVER, "tok")
    assert first == second


@pytest.mark.parametrize("token", [None, "", "your-mapbox-token"])
def test_unconfigured_token_raises(token):
    with pytest.raises(MapNotConfiguredError):
        build_static_map_request([make_bathroom("a")], VIEWPORT, None, token)


def test_describe_placeholder_when_unconfigured():
    payload = describe([make_bathroom("a")], VIEWPORT, None)
    assert payload["configured"] is False
    assert "MAPBOX_TOKEN" in payload["placeholder"]
    assert "url" not in payload


def test_describe_uses_environment(monkeypatch):
    monkeypatch.setenv("MAPBOX_TOKEN", "pk.test")
    monkeypatch.setenv("MAPBOX_STYLE", "mapbox/streets-v12")
    payload = describe([make_bathroom("a")], VIEWPORT, OBSERVER)
    assert payload["configured"] is True
    assert payload["url"].startswith("https://api.mapbox.com/styles/v1/mapbox/streets-v12/static/")
    assert payload["url"].endswith("access_token=pk.test")
    assert payload["markers"][-1] == "pin-l+ef4444(-73.99,40.75)"
    assert payload["observer"] == {"latitude": 40.75, "longitude": -73.99}


@patch("requests.get")
def test_fetch_static_map_returns_image(mock_get):
    response = Mock()
    response.content = b"png-bytes"
    response.raise_for_status.return_value = None
    mock_get.return_value = response

    request = StaticMapRequest(markers=(), url="https://api.mapbox.com/x?access_token=t")
    assert fetch_static_map(request) == b"png-bytes"
    mock_get.assert_called_once_with(request.url, timeout=30)


@patch("requests.get")
def test_fetch_static_map_upstream_failure(mock_get):
    mock_get.side_effect = requests.ConnectionError("boom")
    with pytest.raises(HTTPException) as exc_info:
        fetch_static_map(StaticMapRequest(markers=(), url="https://api.mapbox.com/x"))
    assert exc_info.value.status_code == 502
