import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from gottago.deps import get_db
from gottago.geo.ranking import SORT_KEYS, format_distance, rank_bathrooms, ratings_display
from gottago.models import BathroomCreate, BathroomList, BathroomListItem, GeoPoint, ReviewCreate
from gottago.security.auth import get_current_user
from gottago.services import place_store
from gottago.ws.manager import manager

logger = logging.getLogger(__name__)

router = APIRouter()

SortKey = Literal[SORT_KEYS]


def observer_from_query(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Observer latitude"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Observer longitude"),
) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(latitude=lat, longitude=lng)


@router.get("", response_model=BathroomList, summary="List approved bathrooms, ranked")
async def list_bathrooms(
    sort_by: SortKey = Query("distance"),
    observer: Optional[GeoPoint] = Depends(observer_from_query),
    database=Depends(get_db),
):
    bathrooms = await place_store.list_approved(database)
    items = [
        BathroomListItem(
            bathroom=bathroom,
            distance_miles=distance,
            distance_display=format_distance(distance),
            ratings_display=ratings_display(bathroom),
        )
        for bathroom, distance in rank_bathrooms(bathrooms, sort_by, observer)
    ]
    return BathroomList(items=items, count=len(items), sort_by=sort_by, observer=observer)


@router.get("/{bathroom_id}", summary="Get a bathroom")
async def get_bathroom(bathroom_id: str, database=Depends(get_db)):
    bathroom = await place_store.get_bathroom(database, bathroom_id)
    if bathroom is None:
        raise HTTPException(status_code=404, detail="Bathroom not found")
    return {"bathroom": bathroom, "ratings_display": ratings_display(bathroom)}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add a bathroom")
async def create_bathroom(
    payload: BathroomCreate,
    current_user: dict = Depends(get_current_user),
    database=Depends(get_db),
):
    bathroom = await place_store.create_bathroom(database, payload, current_user)
    await manager.broadcast_bathroom(bathroom)
    return bathroom


@router.get("/{bathroom_id}/reviews", summary="List reviews for a bathroom")
async def list_reviews(
    bathroom_id: str,
    limit: int = Query(50, ge=1, le=100),
    database=Depends(get_db),
):
    reviews = await place_store.list_reviews(database, bathroom_id, limit)
    return {"items": reviews, "count": len(reviews)}


@router.post("/{bathroom_id}/reviews", status_code=status.HTTP_201_CREATED, summary="Review a bathroom")
async def add_review(
    bathroom_id: str,
    payload: ReviewCreate,
    current_user: dict = Depends(get_current_user),
    database=Depends(get_db),
):
    return await place_store.add_review(database, bathroom_id, payload, current_user)
