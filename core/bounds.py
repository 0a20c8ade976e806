import math
from dataclasses import dataclass
from typing import Iterable, Optional

from .exceptions import InvalidBoundsError
from .location import Location
from .timestamp import Timestamp


@dataclass(frozen=True)
class GeoBounds:
    """Axis-aligned latitude/longitude box; a single point has min == max"""
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def __post_init__(self):
        if any(math.isnan(v) for v in (self.min_lat, self.max_lat, self.min_lon, self.max_lon)):
            raise InvalidBoundsError("bounds must not contain NaN")
        if self.min_lat > self.max_lat:
            raise InvalidBoundsError(
                f"invalid bounds: min_lat {self.min_lat} > max_lat {self.max_lat}")
        if self.min_lon > self.max_lon:
            raise InvalidBoundsError(
                f"invalid bounds: min_lon {self.min_lon} > max_lon {self.max_lon}")

    @classmethod
    def from_locations(cls, locations: Iterable[Location]) -> Optional["GeoBounds"]:
        """Tightest box around the locations, or None when there are none"""
        locations = list(locations)
        if not locations:
            return None
        lats = [loc.lat for loc in locations]
        lons = [loc.lon for loc in locations]
        return cls(min(lats), max(lats), min(lons), max(lons))

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lon_span(self) -> float:
        return self.max_lon - self.min_lon

    def center(self) -> Location:
        return Location((self.min_lat + self.max_lat) / 2.0, (self.min_lon + self.max_lon) / 2.0)

    def contains(self, location: Location) -> bool:
        return (self.min_lat <= location.lat <= self.max_lat
                and self.min_lon <= location.lon <= self.max_lon)

    def union(self, other: "GeoBounds") -> "GeoBounds":
        return GeoBounds(
            min(self.min_lat, other.min_lat),
            max(self.max_lat, other.max_lat),
            min(self.min_lon, other.min_lon),
            max(self.max_lon, other.max_lon),
        )


@dataclass(frozen=True)
class TimeRange:
    """Closed interval [start, end] of timestamps"""
    start: Timestamp
    end: Timestamp

    def __post_init__(self):
        if self.start.to_unix_millis() > self.end.to_unix_millis():
            raise InvalidBoundsError(f"invalid time range: start {self.start} is after end {self.end}")

    @property
    def duration_secs(self) -> float:
        return (self.end.to_unix_millis() - self.start.to_unix_millis()) / 1000.0

    def contains(self, timestamp: Timestamp) -> bool:
        return self.start.to_unix_millis() <= timestamp.to_unix_millis() <= self.end.to_unix_millis()

    def overlaps(self, other: "TimeRange") -> bool:
        return (self.start.to_unix_millis() <= other.end.to_unix_millis()
                and other.start.to_unix_millis() <= self.end.to_unix_millis())
