import logging
from typing import Dict

from fastapi import WebSocket

from gottago.models import Bathroom
from gottago.ws.session import MapSession

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self.sessions: Dict[WebSocket, MapSession] = {}

    async def connect(self, websocket: WebSocket, session: MapSession):
        await websocket.accept()
        self.sessions[websocket] = session
        session.start()
        logger.info("Map session connected: %d clients", len(self.sessions))

    def disconnect(self, websocket: WebSocket):
        session = self.sessions.pop(websocket, None)
        if session is not None:
            session.close()
        logger.info("Map session disconnected: %d clients", len(self.sessions))

    async def broadcast_bathroom(self, bathroom: Bathroom):
        """Add a newly created bathroom to every live map."""
        dead = []
        for websocket, session in list(self.sessions.items()):
            try:
                await session.add_bathroom(bathroom)
            except Exception as e:
                logger.warning("Dropping map session after send failure: %s", e)
                dead.append(websocket)
        for websocket in dead:
            self.disconnect(websocket)


manager = ConnectionManager()
