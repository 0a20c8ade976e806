import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from config import MOVEMENT_CONFIG
from core.bounds import TimeRange
from core.event import Event
from core.geodesic import haversine_distance
from core.location import Location
from core.timestamp import Timestamp
from metrics.spatial_metrics import compute_planar_centroid
from .trajectory import Trajectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stop:
    """A dwell period: the entity stayed within a radius for a while.

    Examples:
        >>> stop = Stop(
        ...     location=Location(40.0, -74.0),
        ...     start=Timestamp.parse("2024-01-01T10:00:00Z"),
        ...     end=Timestamp.parse("2024-01-01T11:00:00Z"),
        ...     duration_secs=3600.0,
        ...     event_count=3
        ... )
    """
    location: Location      # mean position of the events in the stop
    start: Timestamp
    end: Timestamp
    duration_secs: float
    event_count: int

    def time_range(self) -> TimeRange:
        return TimeRange(self.start, self.end)


@dataclass(frozen=True)
class StopThreshold:
    radius_m: float = field(default_factory=lambda: MOVEMENT_CONFIG["stop_radius_m"])
    min_duration_secs: float = field(default_factory=lambda: MOVEMENT_CONFIG["stop_min_duration_secs"])


def detect_stops(trajectory: Union[Trajectory, Sequence[Event]], threshold: StopThreshold = None,
                 radius_m: float = None, min_duration_secs: float = None) -> List[Stop]:
    """Find dwell periods along a trajectory.

    A window opens at an anchor event and grows while each following event
    stays within ``radius_m`` of that anchor (the anchor is never
    re-centred, so slow drift ends the window). If the window holds at least
    two events spanning ``min_duration_secs`` or more, it becomes a stop and
    scanning resumes after it; otherwise the next event becomes the anchor.

    ``radius_m`` / ``min_duration_secs`` override the threshold's values.
    """
    if threshold is None:
        threshold = StopThreshold()
    if radius_m is None:
        radius_m = threshold.radius_m
    if min_duration_secs is None:
        min_duration_secs = threshold.min_duration_secs

    if not isinstance(trajectory, Trajectory):
        trajectory = Trajectory("events", trajectory)

    events = trajectory.events
    n = len(events)
    if n < 2:
        return []

    stops = []
    start_idx = 0

    while start_idx < n:
        anchor = events[start_idx].location
        end_idx = start_idx

        while end_idx < n:
            loc = events[end_idx].location
            if haversine_distance(anchor.lat, anchor.lon, loc.lat, loc.lon) > radius_m:
                break
            end_idx += 1

        if end_idx - start_idx >= 2:
            start_ts = events[start_idx].timestamp
            end_ts = events[end_idx - 1].timestamp
            duration_secs = (end_ts.to_unix_millis() - start_ts.to_unix_millis()) / 1000.0

            if duration_secs >= min_duration_secs:
                window = events[start_idx:end_idx]
                stops.append(Stop(
                    location=compute_planar_centroid([e.location for e in window]),
                    start=start_ts,
                    end=end_ts,
                    duration_secs=duration_secs,
                    event_count=len(window),
                ))
                start_idx = end_idx
                continue

        start_idx += 1

    logger.debug(f"Detected {len(stops)} stops in trajectory {trajectory.id} "
                 f"(radius={radius_m}m, min_duration={min_duration_secs}s)")
    return stops
