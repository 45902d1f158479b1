import logging
import math
from typing import Any, Dict, List, Optional

from fastapi import WebSocket

from gottago.geo import static_map
from gottago.geo.viewport import (
    MapState,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    TouchEnd,
    TouchMove,
    TouchStart,
    ViewportState,
    Wheel,
    transition,
)
from gottago.models import Bathroom, GeoPoint
from gottago.services.geolocation import ObserverLocationRequest, PushedLocationSource

logger = logging.getLogger(__name__)


class InvalidMessage(ValueError):
    pass


def _number(value) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("not a finite number")
    return number


def _point(data: dict) -> tuple:
    try:
        return _number(data["x"]), _number(data["y"])
    except (KeyError, TypeError, ValueError):
        raise InvalidMessage("x and y are required numbers")


def _touches(data: dict) -> tuple:
    raw = data.get("touches", [])
    if not isinstance(raw, list):
        raise InvalidMessage("touches must be a list of [x, y] pairs")
    try:
        return tuple((_number(t[0]), _number(t[1])) for t in raw)
    except (IndexError, TypeError, ValueError):
        raise InvalidMessage("touches must be a list of [x, y] pairs")


def parse_event(msg_type: str, data: dict):
    """Map a client message onto a viewport event."""
    if msg_type == "pointer_down":
        return PointerDown(*_point(data))
    if msg_type == "pointer_move":
        return PointerMove(*_point(data))
    if msg_type == "pointer_up":
        return PointerUp()
    if msg_type == "pointer_leave":
        return PointerLeave()
    if msg_type == "wheel":
        try:
            return Wheel(delta_y=_number(data["delta_y"]))
        except (KeyError, TypeError, ValueError):
            raise InvalidMessage("delta_y must be a finite number")
    if msg_type == "touch_start":
        return TouchStart(_touches(data))
    if msg_type == "touch_move":
        return TouchMove(_touches(data))
    if msg_type == "touch_end":
        return TouchEnd(_touches(data))
    raise InvalidMessage(f"unknown message type: {msg_type}")


class MapSession:
    """
    Per-connection map state: the camera, the bathrooms on the map and the
    observer location. Sends a map:update whenever the derived request changes.
    """

    def __init__(self, websocket: WebSocket, bathrooms: List[Bathroom], center: Optional[GeoPoint] = None):
        self.websocket = websocket
        self.bathrooms = list(bathrooms)
        self.state = MapState(viewport=ViewportState(center=center)) if center else MapState()
        self.observer: Optional[GeoPoint] = None
        self.location_source = PushedLocationSource()
        self.location_request = ObserverLocationRequest(self.location_source, self.set_observer)
        self._last_payload: Optional[Dict[str, Any]] = None

    def start(self) -> None:
        self.location_request.start()

    def close(self) -> None:
        self.location_request.close()

    def payload(self) -> Dict[str, Any]:
        descriptor = static_map.describe(self.bathrooms, self.state.viewport, self.observer)
        descriptor["gesture"] = self.state.gesture.name
        return descriptor

    async def publish(self, force: bool = False) -> None:
        payload = self.payload()
        # gesture-only changes do not alter the image
        comparable = {k: v for k, v in payload.items() if k != "gesture"}
        if not force and comparable == self._last_payload:
            return
        self._last_payload = comparable
        await self.websocket.send_json({"type": "map:update", "data": payload})

    async def set_observer(self, point: Optional[GeoPoint]) -> None:
        self.observer = point
        if point is not None:
            logger.debug("Observer located at %s,%s", point.latitude, point.longitude)
        try:
            await self.publish()
        except Exception as e:
            # runs in the location task; the socket may already be gone
            logger.debug("Could not publish observer update: %s", type(e).__name__)

    async def add_bathroom(self, bathroom: Bathroom) -> None:
        self.bathrooms.append(bathroom)
        await self.publish()

    async def handle(self, message: Any) -> None:
        if not isinstance(message, dict):
            raise InvalidMessage("messages must be JSON objects")
        msg_type = message.get("type")
        data = message.get("data") or {}
        if not isinstance(data, dict):
            raise InvalidMessage("data must be an object")

        if msg_type == "location":
            try:
                point = GeoPoint(latitude=data.get("latitude"), longitude=data.get("longitude"))
            except ValueError:
                raise InvalidMessage("latitude and longitude must be valid coordinates")
            if not self.location_source.push(point):
                logger.debug("Ignoring repeated location push")
            return
        if msg_type == "location_error":
            self.location_source.fail(str(data.get("reason", "position_unavailable")))
            return

        event = parse_event(msg_type, data)
        try:
            self.state = transition(self.state, event)
        except ValueError:
            raise InvalidMessage("event moves the map out of range")
        await self.publish()
