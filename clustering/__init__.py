"""
Spatial Clustering Module for Event Collections

This module groups located events with great-circle distance.
It includes DBSCAN and K-means clustering plus quality scoring and
automatic k selection.

Main Components:
- dbscan.py: density-based clustering (deterministic scan order)
- kmeans.py: centroid-based clustering (deterministic seeding)
- models.py: Cluster and ClusteringResult
- cluster_analysis.py: scoring, k selection, summaries and hotspots

Usage:
    from clustering import DBSCAN, EventClusterAnalyzer
    result = DBSCAN(eps=1000.0, min_points=2).cluster(events)
    scores = EventClusterAnalyzer().evaluate_clustering(events, result.labels)
"""

from .models import (
    Cluster,
    ClusteringResult,
    NOISE
)

from .dbscan import DBSCAN
from .kmeans import KMeans
from .cluster_analysis import EventClusterAnalyzer

__version__ = "1.0.0"

__all__ = [
    # Algorithms
    "DBSCAN",
    "KMeans",

    # Results
    "Cluster",
    "ClusteringResult",
    "NOISE",

    # Analysis
    "EventClusterAnalyzer"
]
