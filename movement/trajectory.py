import logging
from typing import Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from config import MOVEMENT_CONFIG
from core.bounds import GeoBounds, TimeRange
from core.event import Event
from core.geodesic import haversine_distance
from core.timestamp import Timestamp
from .simplification import douglas_peucker_indices

logger = logging.getLogger(__name__)


class Trajectory:
    """Time-ordered path of one moving entity.

    Events are sorted by timestamp once, at construction (stable, so equal
    timestamps keep their input order). Distances are in meters, durations
    in seconds and speeds in m/s.
    """

    def __init__(self, id: str, events: Iterable[Event]):
        self.id = id
        self._events = tuple(sorted(events, key=lambda e: e.timestamp.to_unix_millis()))

    def __repr__(self) -> str:
        return f"Trajectory(id={self.id!r}, events={len(self._events)})"

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    def is_empty(self) -> bool:
        return not self._events

    def time_range(self) -> Optional[TimeRange]:
        if not self._events:
            return None
        return TimeRange(self._events[0].timestamp, self._events[-1].timestamp)

    def bounds(self) -> Optional[GeoBounds]:
        return GeoBounds.from_locations(e.location for e in self._events)

    def _step_distances(self) -> List[float]:
        return [
            haversine_distance(a.location.lat, a.location.lon, b.location.lat, b.location.lon)
            for a, b in zip(self._events, self._events[1:])
        ]

    def total_distance(self) -> float:
        return sum(self._step_distances())

    def duration_secs(self) -> float:
        if len(self._events) < 2:
            return 0.0
        first = self._events[0].timestamp.to_unix_millis()
        last = self._events[-1].timestamp.to_unix_millis()
        return (last - first) / 1000.0

    def avg_speed(self) -> float:
        duration = self.duration_secs()
        if duration <= 0:
            return 0.0
        return self.total_distance() / duration

    def velocity_profile(self) -> List[Tuple[Timestamp, float]]:
        """(timestamp of the earlier event, speed) for each consecutive pair"""
        profile = []
        for (a, b), dist in zip(zip(self._events, self._events[1:]), self._step_distances()):
            time_diff = (b.timestamp.to_unix_millis() - a.timestamp.to_unix_millis()) / 1000.0
            speed = dist / time_diff if time_diff > 0 else 0.0
            profile.append((a.timestamp, speed))
        return profile

    def simplify(self, epsilon: float = None) -> "Trajectory":
        """Douglas-Peucker simplification with tolerance ``epsilon`` meters"""
        if epsilon is None:
            epsilon = MOVEMENT_CONFIG["simplify_epsilon_m"]
        if len(self._events) <= 2:
            return Trajectory(self.id, self._events)

        indices = douglas_peucker_indices(self._events, epsilon)
        logger.debug(f"Simplified trajectory {self.id}: {len(self._events)} -> {len(indices)} events")
        return Trajectory(f"{self.id}_simplified", [self._events[i] for i in indices])

    def to_dataframe(self) -> pd.DataFrame:
        """Per-event table with the step distance and speed into each event"""
        columns = ["event_id", "timestamp_ms", "lat", "lon", "step_distance_m", "speed_mps"]
        steps = [0.0] + self._step_distances()
        speeds = [0.0] + [speed for _, speed in self.velocity_profile()]
        rows = [
            {
                "event_id": e.id,
                "timestamp_ms": e.timestamp.to_unix_millis(),
                "lat": e.location.lat,
                "lon": e.location.lon,
                "step_distance_m": step,
                "speed_mps": speed,
            }
            for e, step, speed in zip(self._events, steps, speeds)
        ]
        return pd.DataFrame(rows, columns=columns)
