"""
Pan/zoom camera for the static map.

The controller state is an immutable ``MapState`` (viewport + gesture) and
every input event goes through ``transition(state, event) -> state``.
The gesture is a tagged variant, so a session is either idle, dragging
with a last pointer position, or pinching with a last finger distance;
never two at once.
"""

import math
from dataclasses import dataclass, replace
from typing import Sequence, Tuple, Union

from gottago.models import GeoPoint

MIN_ZOOM = 1
MAX_ZOOM = 18
DEFAULT_ZOOM = 12

# Times Square
DEFAULT_CENTER = GeoPoint(latitude=40.7589, longitude=-73.9851)

# Degrees per pixel at MAX_ZOOM; doubles with every level zoomed out
BASE_DEGREES_PER_PIXEL = 0.0001

WHEEL_ZOOM_STEP = 1
PINCH_ZOOM_STEP = 0.5

# Web Mercator latitude limit
MAX_LATITUDE = 85.0511

Point = Tuple[float, float]


@dataclass(frozen=True)
class ViewportState:
    center: GeoPoint = DEFAULT_CENTER
    zoom: float = DEFAULT_ZOOM


@dataclass(frozen=True)
class Idle:
    name = "idle"


@dataclass(frozen=True)
class Dragging:
    last_pointer: Point
    name = "dragging"


@dataclass(frozen=True)
class Pinching:
    last_distance: float
    name = "pinching"


Gesture = Union[Idle, Dragging, Pinching]

IDLE = Idle()


@dataclass(frozen=True)
class MapState:
    viewport: ViewportState = ViewportState()
    gesture: Gesture = IDLE


# Input events


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class PointerLeave:
    pass


@dataclass(frozen=True)
class Wheel:
    delta_y: float


@dataclass(frozen=True)
class TouchStart:
    touches: Tuple[Point, ...]


@dataclass(frozen=True)
class TouchMove:
    touches: Tuple[Point, ...]


@dataclass(frozen=True)
class TouchEnd:
    # touch points still on the surface
    touches: Tuple[Point, ...] = ()


Event = Union[PointerDown, PointerMove, PointerUp, PointerLeave, Wheel, TouchStart, TouchMove, TouchEnd]


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


def degrees_per_pixel(zoom: float) -> float:
    return BASE_DEGREES_PER_PIXEL * math.pow(2, MAX_ZOOM - zoom)


def _wrap_longitude(lng: float) -> float:
    if -180 <= lng <= 180:
        return lng
    return (lng + 180) % 360 - 180


def _clamp_latitude(lat: float) -> float:
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))


def touch_distance(touches: Sequence[Point]) -> float:
    (x1, y1), (x2, y2) = touches[0], touches[1]
    return math.hypot(x1 - x2, y1 - y2)


def pan(viewport: ViewportState, dx: float, dy: float) -> ViewportState:
    """Move the center by a pixel delta; screen y grows downwards, latitude upwards."""
    scale = degrees_per_pixel(viewport.zoom)
    center = GeoPoint(
        latitude=_clamp_latitude(viewport.center.latitude + dy * scale),
        longitude=_wrap_longitude(viewport.center.longitude - dx * scale),
    )
    return replace(viewport, center=center)


def zoom_by(viewport: ViewportState, delta: float) -> ViewportState:
    return replace(viewport, zoom=clamp_zoom(viewport.zoom + delta))


def _drag_to(state: MapState, point: Point) -> MapState:
    last_x, last_y = state.gesture.last_pointer
    viewport = pan(state.viewport, point[0] - last_x, point[1] - last_y)
    return MapState(viewport=viewport, gesture=Dragging(last_pointer=point))


def _pinch_to(state: MapState, distance: float) -> MapState:
    last = state.gesture.last_distance
    viewport = state.viewport
    if distance > last:
        viewport = zoom_by(viewport, PINCH_ZOOM_STEP)
    elif distance < last:
        viewport = zoom_by(viewport, -PINCH_ZOOM_STEP)
    return MapState(viewport=viewport, gesture=Pinching(last_distance=distance))


def _begin_pinch(state: MapState, touches: Sequence[Point]) -> MapState:
    # A drag in progress is dropped (back to idle) before pinching starts.
    return MapState(viewport=state.viewport, gesture=Pinching(last_distance=touch_distance(touches)))


def transition(state: MapState, event: Event) -> MapState:
    """Apply one input event and return the new controller state."""
    gesture = state.gesture

    if isinstance(event, Wheel):
        if event.delta_y == 0:
            return state
        step = -WHEEL_ZOOM_STEP if event.delta_y > 0 else WHEEL_ZOOM_STEP
        return replace(state, viewport=zoom_by(state.viewport, step))

    if isinstance(event, PointerDown):
        if isinstance(gesture, Pinching):
            return state
        return replace(state, gesture=Dragging(last_pointer=(event.x, event.y)))

    if isinstance(event, PointerMove):
        if isinstance(gesture, Dragging):
            return _drag_to(state, (event.x, event.y))
        return state

    if isinstance(event, (PointerUp, PointerLeave)):
        if isinstance(gesture, Dragging):
            return replace(state, gesture=IDLE)
        return state

    if isinstance(event, TouchStart):
        if len(event.touches) >= 2:
            return _begin_pinch(state, event.touches)
        if len(event.touches) == 1 and isinstance(gesture, Idle):
            return replace(state, gesture=Dragging(last_pointer=event.touches[0]))
        return state

    if isinstance(event, TouchMove):
        if len(event.touches) >= 2:
            if isinstance(gesture, Pinching):
                return _pinch_to(state, touch_distance(event.touches))
            return _begin_pinch(state, event.touches)
        if len(event.touches) == 1 and isinstance(gesture, Dragging):
            return _drag_to(state, event.touches[0])
        if isinstance(gesture, Pinching):
            return replace(state, gesture=IDLE)
        return state

    if isinstance(event, TouchEnd):
        if isinstance(gesture, Pinching) and len(event.touches) >= 2:
            return state
        if isinstance(gesture, Idle):
            return state
        return replace(state, gesture=IDLE)

    raise TypeError(f"Unsupported map event: {type(event).__name__}")


def apply_events(state: MapState, events: Sequence[Event]) -> MapState:
    for event in events:
        state = transition(state, event)
    return state
