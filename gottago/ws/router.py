import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from gottago.deps import get_db
from gottago.models import GeoPoint
from gottago.security.auth import decode_subject
from gottago.services import place_store
from gottago.ws.manager import manager
from gottago.ws.session import InvalidMessage, MapSession

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/map")
async def map_session(
    websocket: WebSocket,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    token: Optional[str] = Query(None),
    database=Depends(get_db),
):
    """
    Interactive map: ws://.../ws/map?lat=..&lng=..&token=..
    The client streams pointer/touch/wheel events and its location as
    {type, data} messages and receives map:update messages back.
    """
    user_sub = decode_subject(token)
    center = GeoPoint(latitude=lat, longitude=lng) if lat is not None and lng is not None else None
    bathrooms = await place_store.list_approved(database)
    session = MapSession(websocket, bathrooms, center=center)

    await manager.connect(websocket, session)
    try:
        await session.publish(force=True)
        while True:
            raw = await websocket.receive_text()
            try:
                await session.handle(json.loads(raw))
            except (InvalidMessage, json.JSONDecodeError) as e:
                await websocket.send_json({"type": "system:error", "data": {"error": str(e)}})
    except WebSocketDisconnect:
        logger.debug("Map session for %s closed by client", user_sub or "anonymous")
    finally:
        manager.disconnect(websocket)
