"""
Spatial and Temporal Metrics

Summary statistics over already-loaded event batches.

Main Components:
- spatial_metrics.py: bounds, spherical centroid, distances, dispersion, density grid
- temporal_metrics.py: duration, gap statistics, time binning, gap and burst detection

Usage:
    from metrics import SpatialMetrics, event_rate, TimeBin
    metrics = SpatialMetrics.from_events(narrative.events)
    hourly = event_rate(narrative.events, TimeBin.HOUR)
"""

from .spatial_metrics import (
    SpatialMetrics,
    DensityCell,
    density_map,
    compute_centroid,
    compute_planar_centroid,
    compute_dispersion,
    compute_consecutive_distances
)

from .temporal_metrics import (
    TemporalMetrics,
    TimeBin,
    TimeBinCount,
    event_rate,
    detect_gaps,
    detect_bursts
)

__all__ = [
    # Spatial
    "SpatialMetrics",
    "DensityCell",
    "density_map",
    "compute_centroid",
    "compute_planar_centroid",
    "compute_dispersion",
    "compute_consecutive_distances",

    # Temporal
    "TemporalMetrics",
    "TimeBin",
    "TimeBinCount",
    "event_rate",
    "detect_gaps",
    "detect_bursts"
]
