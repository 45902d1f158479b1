"""
Distance calculation and list ranking for bathrooms.

Distances are great-circle (haversine) distances in miles. Ranking sorts by
distance from the observer, or by a rating field in descending order.
Both sorts are stable, so ties keep the collection's original order.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from gottago.models import RATING_NOT_AVAILABLE, Bathroom, GeoPoint

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3959

SORT_DISTANCE = "distance"

# sort key -> Bathroom rating field
RATING_SORT_FIELDS: Dict[str, str] = {
    "overall": "overall_rating",
    "cleanliness": "cleanliness_rating",
    "smell": "smell_rating",
    "safety": "safety_rating",
    "supplies": "supplies_rating",
    "accessibility": "accessibility_rating",
    "crowding": "crowding_rating",
    "privacy": "privacy_rating",
    "facilities": "facilities_rating",
}

SORT_KEYS = (SORT_DISTANCE,) + tuple(RATING_SORT_FIELDS)


def distance_miles(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points, in miles."""
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    h = min(1.0, h)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_MILES * c


def _rating(bathroom: Bathroom, field: str) -> float:
    return getattr(bathroom, field) or 0


def sort_bathrooms(
    bathrooms: Sequence[Bathroom],
    sort_by: str,
    observer: Optional[GeoPoint] = None,
) -> List[Bathroom]:
    """Return a new, stably sorted list of bathrooms.

    "distance" without an observer, and unknown sort keys, leave the order
    unchanged. That is the normal state while the observer location is
    still unknown, not an error.
    """
    if sort_by == SORT_DISTANCE:
        if observer is None:
            logger.debug("Distance sort requested without observer location; keeping order")
            return list(bathrooms)
        return sorted(bathrooms, key=lambda b: distance_miles(observer, b.location))

    field = RATING_SORT_FIELDS.get(sort_by)
    if field is None:
        logger.debug("Unknown sort key %r; keeping order", sort_by)
        return list(bathrooms)
    return sorted(bathrooms, key=lambda b: _rating(b, field), reverse=True)


def rank_bathrooms(
    bathrooms: Sequence[Bathroom],
    sort_by: str,
    observer: Optional[GeoPoint] = None,
) -> List[Tuple[Bathroom, Optional[float]]]:
    """Sorted bathrooms paired with their distance from the observer (None if unknown)."""
    ranked = sort_bathrooms(bathrooms, sort_by, observer)
    if observer is None:
        return [(b, None) for b in ranked]
    return [(b, distance_miles(observer, b.location)) for b in ranked]


def format_rating(value: Optional[float]) -> str:
    if value is None:
        return RATING_NOT_AVAILABLE
    return f"{value:.1f}"


def format_distance(miles: Optional[float]) -> Optional[str]:
    if miles is None:
        return None
    return f"{miles:.1f} mi"


def ratings_display(bathroom: Bathroom) -> Dict[str, str]:
    return {key: format_rating(getattr(bathroom, field)) for key, field in RATING_SORT_FIELDS.items()}
