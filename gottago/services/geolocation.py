"""
One-shot observer location lookup.

A request runs once, delivers its result once, and never retries or
times out. A lookup that never completes simply leaves the observer
unknown. After ``close()`` any late result is dropped, so a torn-down
session is never updated.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from gottago.models import GeoPoint

logger = logging.getLogger(__name__)

PERMISSION_DENIED = "permission_denied"
POSITION_UNAVAILABLE = "position_unavailable"

LocationSource = Callable[[], Awaitable[GeoPoint]]
LocationCallback = Callable[[Optional[GeoPoint]], Any]


class LocationUnavailable(Exception):
    def __init__(self, reason: str = POSITION_UNAVAILABLE):
        super().__init__(reason)
        self.reason = reason


class ObserverLocationRequest:
    def __init__(self, source: LocationSource, on_result: LocationCallback):
        self._source = source
        self._on_result = on_result
        self._task: Optional[asyncio.Task] = None
        self._closed = False
        self.delivered = False

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> asyncio.Task:
        if self._task is not None:
            raise RuntimeError("Location request already started")
        self._task = asyncio.ensure_future(self._run())
        return self._task

    async def _run(self) -> None:
        try:
            point: Optional[GeoPoint] = await self._source()
        except LocationUnavailable as e:
            logger.info("Observer location unavailable: %s", e.reason)
            point = None
        except Exception as e:
            logger.warning("Observer location lookup failed: %s", type(e).__name__, exc_info=e)
            point = None

        if self._closed:
            logger.debug("Dropping observer location that arrived after teardown")
            return
        self.delivered = True
        result = self._on_result(point)
        if inspect.isawaitable(result):
            await result

    def close(self) -> None:
        """Stop caring about the result; cancels the lookup if it is still pending."""
        self._closed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()


class PushedLocationSource:
    """
    Location source fed by the client: the first pushed position or error wins,
    later pushes are ignored.
    """

    def __init__(self):
        self._future: Optional[asyncio.Future] = None

    def _get_future(self) -> asyncio.Future:
        if self._future is None:
            self._future = asyncio.get_running_loop().create_future()
        return self._future

    def push(self, point: GeoPoint) -> bool:
        future = self._get_future()
        if future.done():
            return False
        future.set_result(point)
        return True

    def fail(self, reason: str) -> bool:
        future = self._get_future()
        if future.done():
            return False
        future.set_exception(LocationUnavailable(reason))
        return True

    async def __call__(self) -> GeoPoint:
        return await self._get_future()
