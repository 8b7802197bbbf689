"""Schemas for geocoding, geolocation config and image uploads."""

from pydantic import BaseModel


class GeocodeResult(BaseModel):
    place_name: str
    latitude: float | None = None
    longitude: float | None = None


class GeolocationOptions(BaseModel):
    enableHighAccuracy: bool = True
    timeout: int = 10000
    maximumAge: int = 0


class GeolocationClientConfig(BaseModel):
    """What a browser client needs to request and explain a position fix."""
    options: GeolocationOptions
    error_messages: dict[int, str]
    geocoding_enabled: bool


class UploadOut(BaseModel):
    url: str
    path: str
    content_type: str
    size: int
