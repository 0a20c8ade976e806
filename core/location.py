import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import InvalidLatitudeError, InvalidLongitudeError
from . import geodesic


@dataclass(frozen=True)
class Location:
    """A WGS84 coordinate with optional elevation and uncertainty.

    Latitude must lie in [-90, 90] and longitude in [-180, 180]; anything
    else (including NaN) is rejected at construction.

    Examples:
        >>> nyc = Location(40.7128, -74.0060, name="New York")
        >>> nyc.to_tuple()
        (40.7128, -74.006)
    """
    lat: float
    lon: float
    elevation: Optional[float] = None           # meters
    uncertainty_meters: Optional[float] = None  # radius in meters
    name: Optional[str] = None

    def __post_init__(self):
        try:
            lat = float(self.lat)
        except (TypeError, ValueError) as e:
            raise InvalidLatitudeError(self.lat) from e
        try:
            lon = float(self.lon)
        except (TypeError, ValueError) as e:
            raise InvalidLongitudeError(self.lon) from e

        if math.isnan(lat) or not -90.0 <= lat <= 90.0:
            raise InvalidLatitudeError(self.lat)
        if math.isnan(lon) or not -180.0 <= lon <= 180.0:
            raise InvalidLongitudeError(self.lon)

        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lon", lon)

    def distance_to(self, other: "Location") -> float:
        """Great-circle distance in meters"""
        return geodesic.distance(self, other)

    def bearing_to(self, other: "Location") -> float:
        return geodesic.bearing(self, other)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lon)
