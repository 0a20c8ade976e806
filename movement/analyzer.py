import logging
from typing import Iterable, List

from core.event import Event
from .stops import Stop, StopThreshold, detect_stops
from .trajectory import Trajectory

logger = logging.getLogger(__name__)


class MovementAnalyzer:
    """Trajectory extraction, stop detection and segmentation with one threshold"""

    def __init__(self, stop_threshold: StopThreshold = None):
        self.stop_threshold = stop_threshold or StopThreshold()

    def extract_trajectory(self, id: str, events: Iterable[Event]) -> Trajectory:
        return Trajectory(id, events)

    def detect_stops(self, trajectory: Trajectory) -> List[Stop]:
        return detect_stops(trajectory, self.stop_threshold)

    def movement_segments(self, trajectory: Trajectory) -> List[Trajectory]:
        """Split a trajectory into the stretches between its stops.

        Events inside a stop belong to no segment. Without stops the whole
        trajectory is returned as the single segment.
        """
        stops = self.detect_stops(trajectory)
        if not stops:
            return [trajectory]

        events = trajectory.events
        n = len(events)
        segments = []
        current_start = 0

        for i, stop in enumerate(stops):
            stop_start_idx = next(
                (j for j, e in enumerate(events)
                 if e.timestamp.to_unix_millis() >= stop.start.to_unix_millis()),
                n
            )
            if stop_start_idx > current_start:
                segments.append(Trajectory(f"{trajectory.id}_segment_{i}", events[current_start:stop_start_idx]))

            current_start = next(
                (j for j, e in enumerate(events)
                 if e.timestamp.to_unix_millis() > stop.end.to_unix_millis()),
                n
            )

        if current_start < n:
            segments.append(Trajectory(f"{trajectory.id}_segment_{len(stops)}", events[current_start:]))

        logger.debug(f"Split trajectory {trajectory.id} into {len(segments)} segments around {len(stops)} stops")
        return segments
