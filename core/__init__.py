"""
Core data model for spatial narratives.

Main Components:
- location.py: Location (validated WGS84 coordinate)
- timestamp.py: Timestamp and TemporalPrecision
- event.py: Event, SourceRef, SourceType
- narrative.py: Narrative and NarrativeMetadata
- bounds.py: GeoBounds and TimeRange
- geodesic.py: great-circle distance, bearing and destination
- exceptions.py: construction-time validation errors
"""

from .exceptions import (
    SpatialNarrativeError,
    InvalidInputError,
    InvalidLatitudeError,
    InvalidLongitudeError,
    InvalidTimestampError,
    InvalidBoundsError,
    MissingFieldError
)
from .location import Location
from .timestamp import Timestamp, TemporalPrecision
from .bounds import GeoBounds, TimeRange
from .event import Event, SourceRef, SourceType
from .narrative import Narrative, NarrativeMetadata
from .geodesic import (
    haversine_distance,
    distance,
    bearing,
    destination,
    destination_point,
    haversine_matrix
)

__all__ = [
    # Errors
    "SpatialNarrativeError",
    "InvalidInputError",
    "InvalidLatitudeError",
    "InvalidLongitudeError",
    "InvalidTimestampError",
    "InvalidBoundsError",
    "MissingFieldError",

    # Value types
    "Location",
    "Timestamp",
    "TemporalPrecision",
    "GeoBounds",
    "TimeRange",
    "Event",
    "SourceRef",
    "SourceType",
    "Narrative",
    "NarrativeMetadata",

    # Geodesic primitives
    "haversine_distance",
    "distance",
    "bearing",
    "destination",
    "destination_point",
    "haversine_matrix"
]
