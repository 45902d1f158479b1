"""
Mapbox Static Images request builder.

Turns (bathrooms, viewport, observer) into the marker overlay and image URL.
Building is pure: the same inputs always give the same request.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from gottago import settings
from gottago.geo.viewport import ViewportState
from gottago.models import Bathroom, GeoPoint

MAPBOX_STATIC_BASE = "https://api.mapbox.com/styles/v1"

BATHROOM_MARKER_STYLE = "pin-s+3b82f6"
OBSERVER_MARKER_STYLE = "pin-l+ef4444"

BEARING = 0


class MapNotConfiguredError(Exception):
    """Raised when no usable Mapbox token is configured."""


@dataclass(frozen=True)
class StaticMapRequest:
    markers: Tuple[str, ...]
    url: str


def format_number(value: float) -> str:
    """At most six decimals, no trailing zeros (12.0 -> "12")."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def marker_spec(style: str, point: GeoPoint) -> str:
    return f"{style}({format_number(point.longitude)},{format_number(point.latitude)})"


def build_markers(bathrooms: Sequence[Bathroom], observer: Optional[GeoPoint] = None) -> Tuple[str, ...]:
    markers = [marker_spec(BATHROOM_MARKER_STYLE, b.location) for b in bathrooms]
    if observer is not None:
        markers.append(marker_spec(OBSERVER_MARKER_STYLE, observer))
    return tuple(markers)


def build_static_map_request(
    bathrooms: Sequence[Bathroom],
    viewport: ViewportState,
    observer: Optional[GeoPoint],
    token: Optional[str],
    style: str = "mapbox/dark-v11",
    size: str = "800x600@2x",
) -> StaticMapRequest:
    if not token or token == settings.MAPBOX_TOKEN_SENTINEL:
        raise MapNotConfiguredError("Add MAPBOX_TOKEN to .env to enable the map")

    markers = build_markers(bathrooms, observer)
    camera = ",".join(
        (
            format_number(viewport.center.longitude),
            format_number(viewport.center.latitude),
            format_number(viewport.zoom),
            format_number(BEARING),
        )
    )
    segments = [f"{MAPBOX_STATIC_BASE}/{style}/static"]
    if markers:
        segments.append(",".join(markers))
    segments.extend([camera, size])
    url = "/".join(segments) + f"?access_token={token}"
    return StaticMapRequest(markers=markers, url=url)


def build_from_settings(
    bathrooms: Sequence[Bathroom],
    viewport: ViewportState,
    observer: Optional[GeoPoint],
) -> StaticMapRequest:
    """Same as build_static_map_request, with token, style and size taken from the environment."""
    return build_static_map_request(
        bathrooms,
        viewport,
        observer,
        settings.mapbox_token(),
        style=settings.mapbox_style(),
        size=settings.map_image_size(),
    )


def describe(bathrooms: Sequence[Bathroom], viewport: ViewportState, observer: Optional[GeoPoint]) -> dict:
    """JSON payload for clients: the request, or a placeholder when the map is unconfigured."""
    payload = {
        "center": {"latitude": viewport.center.latitude, "longitude": viewport.center.longitude},
        "zoom": viewport.zoom,
        "observer": observer.model_dump() if observer is not None else None,
    }
    try:
        request = build_from_settings(bathrooms, viewport, observer)
    except MapNotConfiguredError as e:
        payload.update({"configured": False, "placeholder": str(e)})
        return payload
    payload.update({"configured": True, "url": request.url, "markers": list(request.markers)})
    return payload
