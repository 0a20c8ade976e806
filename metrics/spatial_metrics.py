import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from core.bounds import GeoBounds
from core.event import Event
from core.geodesic import haversine_distance
from core.location import Location

logger = logging.getLogger(__name__)


def _to_locations(items: Sequence) -> List[Location]:
    """Reduce a sequence of events and/or locations to locations"""
    return [item.location if isinstance(item, Event) else item for item in items]


@dataclass(frozen=True)
class SpatialMetrics:
    """Geographic summary of a set of located events.

    ``area`` is width x height of the bounding box in square meters, measured
    along its southern and western edges. It is a rough extent, not a
    polygon or convex-hull area.
    """
    event_count: int = 0
    bounds: Optional[GeoBounds] = None
    centroid: Optional[Location] = None
    total_distance: float = 0.0
    avg_distance: float = 0.0
    max_distance: float = 0.0
    dispersion: float = 0.0
    area: Optional[float] = None

    @classmethod
    def from_events(cls, events: Sequence[Event]) -> "SpatialMetrics":
        return cls.from_locations(_to_locations(events))

    @classmethod
    def from_locations(cls, locations: Sequence[Location]) -> "SpatialMetrics":
        """Compute metrics; the sequence order is taken as temporal order"""
        locations = _to_locations(locations)
        if not locations:
            return cls()

        bounds = GeoBounds.from_locations(locations)
        centroid = compute_centroid(locations)
        total, avg, max_dist = compute_consecutive_distances(locations)
        dispersion = compute_dispersion(locations, centroid)

        width_m = haversine_distance(bounds.min_lat, bounds.min_lon, bounds.min_lat, bounds.max_lon)
        height_m = haversine_distance(bounds.min_lat, bounds.min_lon, bounds.max_lat, bounds.min_lon)

        return cls(
            event_count=len(locations),
            bounds=bounds,
            centroid=centroid,
            total_distance=total,
            avg_distance=avg,
            max_distance=max_dist,
            dispersion=dispersion,
            area=width_m * height_m,
        )


def compute_centroid(locations: Sequence[Location]) -> Optional[Location]:
    """Spherical centroid via the mean of unit 3-D vectors.

    Handles antimeridian crossings and polar clusters, unlike averaging raw
    degrees. Elevation is averaged over the inputs that have one.
    """
    if not locations:
        return None

    lat_rad = np.radians([loc.lat for loc in locations])
    lon_rad = np.radians([loc.lon for loc in locations])

    x = float(np.mean(np.cos(lat_rad) * np.cos(lon_rad)))
    y = float(np.mean(np.cos(lat_rad) * np.sin(lon_rad)))
    z = float(np.mean(np.sin(lat_rad)))

    lon = float(np.degrees(np.arctan2(y, x)))
    lat = float(np.degrees(np.arctan2(z, np.hypot(x, y))))

    elevations = [loc.elevation for loc in locations if loc.elevation is not None]
    elevation = sum(elevations) / len(elevations) if elevations else None

    # Guard against float overshoot past the valid ranges
    lat = min(90.0, max(-90.0, lat))
    lon = min(180.0, max(-180.0, lon))
    return Location(lat, lon, elevation=elevation)


def compute_planar_centroid(locations: Sequence[Location]) -> Location:
    """Arithmetic mean of latitudes and longitudes.

    Only meaningful for small extents away from the antimeridian; used where
    a cheap representative point is enough (k-means updates, stops).
    """
    if not locations:
        return Location(0.0, 0.0)
    n = len(locations)
    return Location(sum(loc.lat for loc in locations) / n, sum(loc.lon for loc in locations) / n)


def compute_consecutive_distances(locations: Sequence[Location]) -> Tuple[float, float, float]:
    """(total, average, max) of distances between adjacent locations"""
    if len(locations) < 2:
        return 0.0, 0.0, 0.0

    steps = [
        haversine_distance(a.lat, a.lon, b.lat, b.lon)
        for a, b in zip(locations, locations[1:])
    ]
    total = sum(steps)
    return total, total / (len(locations) - 1), max(steps)


def compute_dispersion(locations: Sequence[Location], centroid: Optional[Location]) -> float:
    """Mean great-circle distance from each location to the centroid"""
    if not locations or centroid is None:
        return 0.0

    total = sum(haversine_distance(loc.lat, loc.lon, centroid.lat, centroid.lon) for loc in locations)
    return total / len(locations)


@dataclass(frozen=True)
class DensityCell:
    lat: float        # cell centre
    lon: float
    count: int
    area_km2: float
    density: float    # events per km²


def density_map(events: Sequence, rows: int, cols: int) -> List[DensityCell]:
    """Count events on a rows x cols equal-angle grid over their bounding box.

    Cells are returned row-major starting from the south-west corner. Points
    on the northern/eastern edge fall into the last row/column.
    """
    locations = _to_locations(events)
    if not locations or rows <= 0 or cols <= 0:
        return []

    bounds = GeoBounds.from_locations(locations)
    lat_step = bounds.lat_span / rows
    lon_step = bounds.lon_span / cols

    counts = np.zeros((rows, cols), dtype=int)
    for loc in locations:
        row = int(np.floor((loc.lat - bounds.min_lat) / lat_step)) if lat_step > 0 else 0
        col = int(np.floor((loc.lon - bounds.min_lon) / lon_step)) if lon_step > 0 else 0
        counts[min(row, rows - 1), min(col, cols - 1)] += 1

    cells = []
    for row in range(rows):
        for col in range(cols):
            cell_lat = bounds.min_lat + (row + 0.5) * lat_step
            cell_lon = bounds.min_lon + (col + 0.5) * lon_step

            width_m = haversine_distance(cell_lat, bounds.min_lon, cell_lat, bounds.min_lon + lon_step)
            height_m = haversine_distance(bounds.min_lat, cell_lon, bounds.min_lat + lat_step, cell_lon)
            area_km2 = (width_m * height_m) / 1_000_000.0

            count = int(counts[row, col])
            density = count / area_km2 if area_km2 > 0 else 0.0
            cells.append(DensityCell(cell_lat, cell_lon, count, area_km2, density))

    logger.debug(f"Density map: {rows}x{cols} cells over {len(locations)} events")
    return cells
