"""Farm location helpers and browser geolocation error mapping.

Browser clients request a position with GEOLOCATION_OPTIONS and map the
three platform error codes to the messages below.
"""

import enum


class GeolocationErrorCode(enum.IntEnum):
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


GEOLOCATION_OPTIONS = {
    "enableHighAccuracy": True,
    "timeout": 10_000,  # ms
    "maximumAge": 0,  # never reuse a cached position
}

GEOLOCATION_ERROR_MESSAGES: dict[GeolocationErrorCode, str] = {
    GeolocationErrorCode.PERMISSION_DENIED: (
        "Location access was denied. Please enable location services in your browser settings."
    ),
    GeolocationErrorCode.POSITION_UNAVAILABLE: (
        "Location information is unavailable. Please check your connection or try again later."
    ),
    GeolocationErrorCode.TIMEOUT: (
        "The request to get your location timed out. Please try again."
    ),
}

UNKNOWN_GEOLOCATION_ERROR = "An unknown error occurred while getting your location."


def geolocation_error_message(code: int) -> str:
    """User-facing message for a geolocation error code."""
    try:
        return GEOLOCATION_ERROR_MESSAGES[GeolocationErrorCode(code)]
    except ValueError:
        return UNKNOWN_GEOLOCATION_ERROR


def is_location_set(latitude: float | None, longitude: float | None) -> bool:
    """True when both coordinates are present and not the (0, 0) placeholder."""
    if latitude is None or longitude is None:
        return False
    return not (latitude == 0 and longitude == 0)
