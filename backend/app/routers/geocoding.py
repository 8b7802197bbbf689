"""Address lookup and browser geolocation settings.

  GET /reverse?latitude=..&longitude=..  → place name for a coordinate
  GET /search?q=..                       → best match for a place name
  GET /client-config                     → position options + error messages
"""

from fastapi import APIRouter, Depends, Query

from app.auth.deps import require_permission
from app.dependencies import get_services
from app.middleware.exceptions import ResourceNotFoundError
from app.schemas.geo import GeocodeResult, GeolocationClientConfig, GeolocationOptions
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext
from app.utils.location import GEOLOCATION_ERROR_MESSAGES, GEOLOCATION_OPTIONS

router = APIRouter()


@router.get("/reverse", response_model=GeocodeResult)
async def reverse_geocode(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    services: AppServices = Depends(get_services),
    _ctx: OrganizationContext = Depends(require_permission("geocoding.read")),
):
    place_name = await services.geocoding.reverse(longitude=longitude, latitude=latitude)
    return GeocodeResult(place_name=place_name, latitude=latitude, longitude=longitude)


@router.get("/search", response_model=GeocodeResult)
async def search_place(
    q: str = Query(..., min_length=1, max_length=200),
    services: AppServices = Depends(get_services),
    _ctx: OrganizationContext = Depends(require_permission("geocoding.read")),
):
    result = await services.geocoding.search(q)
    if result is None:
        raise ResourceNotFoundError("Place", q)
    return result


@router.get("/client-config", response_model=GeolocationClientConfig)
async def geolocation_client_config(services: AppServices = Depends(get_services)):
    return GeolocationClientConfig(
        options=GeolocationOptions(**GEOLOCATION_OPTIONS),
        error_messages={int(code): message for code, message in GEOLOCATION_ERROR_MESSAGES.items()},
        geocoding_enabled=services.geocoding.configured,
    )
