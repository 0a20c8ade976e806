"""Douglas-Peucker simplification for time-ordered event paths.

Perpendicular distances are measured by projecting onto the chord in plain
(lon, lat) degree space and then taking the great-circle distance to the
projected point. That projection is only a fair approximation over small
extents (city scale); over long or high-latitude paths the selected points
can differ from a true geodesic simplification.
"""

from typing import List, Sequence

from config import MOVEMENT_CONFIG
from core.event import Event
from core.geodesic import haversine_distance
from core.location import Location


def perpendicular_distance(point: Location, line_start: Location, line_end: Location) -> float:
    """Distance in meters from ``point`` to the segment start-end"""
    dx = line_end.lon - line_start.lon
    dy = line_end.lat - line_start.lat

    line_len_sq = dx * dx + dy * dy
    if line_len_sq < MOVEMENT_CONFIG["degenerate_segment_deg2"]:
        return haversine_distance(point.lat, point.lon, line_start.lat, line_start.lon)

    t = ((point.lon - line_start.lon) * dx + (point.lat - line_start.lat) * dy) / line_len_sq
    t = min(1.0, max(0.0, t))

    proj_lon = line_start.lon + t * dx
    proj_lat = line_start.lat + t * dy

    return haversine_distance(point.lat, point.lon, proj_lat, proj_lon)


def douglas_peucker_indices(events: Sequence[Event], epsilon: float) -> List[int]:
    """Indices of the events kept by Douglas-Peucker, ascending.

    Works on an explicit stack of (start, end) index ranges so long paths
    do not hit the recursion limit. The first and last index are always kept.
    """
    n = len(events)
    if n <= 2:
        return list(range(n))

    # A negative tolerance would split at zero-distance points forever
    epsilon = max(epsilon, 0.0)

    keep = [False] * n
    keep[0] = keep[n - 1] = True
    ranges = [(0, n - 1)]

    while ranges:
        start, end = ranges.pop()
        if end - start < 2:
            continue

        first = events[start].location
        last = events[end].location

        max_dist = 0.0
        max_idx = start
        for i in range(start + 1, end):
            dist = perpendicular_distance(events[i].location, first, last)
            if dist > max_dist:
                max_dist = dist
                max_idx = i

        if max_dist > epsilon:
            keep[max_idx] = True
            ranges.append((start, max_idx))
            ranges.append((max_idx, end))

    return [i for i, kept in enumerate(keep) if kept]
