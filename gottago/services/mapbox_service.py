import logging

import requests
from fastapi import HTTPException

from gottago.geo.static_map import StaticMapRequest

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


def fetch_static_map(request: StaticMapRequest) -> bytes:
    """
    Download the rendered map image for a static map request.
    """
    try:
        response = requests.get(request.url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        # never log the URL, it carries the access token
        logger.error("Mapbox static image request failed: %s", type(e).__name__)
        raise HTTPException(status_code=502, detail="Map image service unavailable")

    logger.debug("Fetched static map image (%d bytes, %d markers)", len(response.content), len(request.markers))
    return response.content
