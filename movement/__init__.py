"""
Movement and Trajectory Analysis

Main Components:
- trajectory.py: Trajectory (time-sorted path, distance/speed profiles)
- stops.py: Stop, StopThreshold and anchor-based stop detection
- simplification.py: Douglas-Peucker path simplification
- analyzer.py: MovementAnalyzer (stops and movement segments)

Usage:
    from movement import Trajectory, detect_stops, StopThreshold
    trajectory = Trajectory("courier", events)
    stops = detect_stops(trajectory, StopThreshold(radius_m=100, min_duration_secs=1800))
"""

from .trajectory import Trajectory
from .stops import Stop, StopThreshold, detect_stops
from .simplification import douglas_peucker_indices, perpendicular_distance
from .analyzer import MovementAnalyzer

__all__ = [
    "Trajectory",
    "Stop",
    "StopThreshold",
    "detect_stops",
    "douglas_peucker_indices",
    "perpendicular_distance",
    "MovementAnalyzer"
]
