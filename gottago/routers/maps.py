from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from gottago.deps import get_db
from gottago.geo import static_map
from gottago.geo.viewport import DEFAULT_CENTER, DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, ViewportState
from gottago.models import GeoPoint
from gottago.routers.bathrooms import observer_from_query
from gottago.services import place_store
from gottago.services.mapbox_service import fetch_static_map

router = APIRouter()


def viewport_from_query(
    zoom: float = Query(DEFAULT_ZOOM, ge=MIN_ZOOM, le=MAX_ZOOM),
    center_lat: Optional[float] = Query(None, ge=-90, le=90),
    center_lng: Optional[float] = Query(None, ge=-180, le=180),
) -> ViewportState:
    center = DEFAULT_CENTER
    if center_lat is not None and center_lng is not None:
        center = GeoPoint(latitude=center_lat, longitude=center_lng)
    return ViewportState(center=center, zoom=zoom)


@router.get("/static", summary="Static map request for the current viewport")
async def static_map_descriptor(
    viewport: ViewportState = Depends(viewport_from_query),
    observer: Optional[GeoPoint] = Depends(observer_from_query),
    database=Depends(get_db),
):
    bathrooms = await place_store.list_approved(database)
    return static_map.describe(bathrooms, viewport, observer)


@router.get("/image", summary="Rendered map image", response_class=Response)
async def static_map_image(
    viewport: ViewportState = Depends(viewport_from_query),
    observer: Optional[GeoPoint] = Depends(observer_from_query),
    database=Depends(get_db),
):
    bathrooms = await place_store.list_approved(database)
    try:
        request = static_map.build_from_settings(bathrooms, viewport, observer)
    except static_map.MapNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e))
    image = await run_in_threadpool(fetch_static_map, request)
    return Response(content=image, media_type="image/png")
