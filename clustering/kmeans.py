import logging
from typing import List, Sequence, Tuple

from config import CLUSTERING_CONFIG
from core.event import Event
from core.geodesic import haversine_distance
from core.location import Location
from .models import ClusteringResult, build_cluster

logger = logging.getLogger(__name__)


class KMeans:
    """K-means over latitude/longitude with great-circle assignment.

    Seeding is deterministic: centroid ``i`` starts at event ``i * n // k``.
    Points go to the nearest centroid (ties to the lowest index). Centroids
    are then moved to the plain mean of their members' latitudes and
    longitudes; a centroid that loses all its members stays where it was.
    Iteration stops once no centroid moves more than ``tolerance`` meters,
    or after ``max_iterations``.
    """

    def __init__(self, k: int = None, max_iterations: int = None, tolerance: float = None):
        if k is None:
            k = CLUSTERING_CONFIG["kmeans_n_clusters"]
        if max_iterations is None:
            max_iterations = CLUSTERING_CONFIG["kmeans_max_iterations"]
        if tolerance is None:
            tolerance = CLUSTERING_CONFIG["kmeans_tolerance_m"]

        self.k = k
        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.n_iterations_ = 0

    def __repr__(self) -> str:
        return f"KMeans(k={self.k}, max_iterations={self.max_iterations}, tolerance={self.tolerance})"

    def cluster(self, events: Sequence[Event]) -> ClusteringResult:
        n = len(events)
        if n == 0 or self.k <= 0:
            return ClusteringResult()

        k = min(self.k, n)
        points = [(e.location.lat, e.location.lon) for e in events]

        centroids = [points[(i * n) // k] for i in range(k)]
        labels = [0] * n

        self.n_iterations_ = 0
        converged = False
        for _ in range(self.max_iterations):
            self.n_iterations_ += 1
            labels = [self._nearest_centroid(point, centroids) for point in points]
            centroids, converged = self._update_centroids(points, labels, centroids)
            if converged:
                break

        # Drop clusters that ended up empty and renumber the rest compactly
        clusters = []
        compact_ids = {}
        for cluster_id, (lat, lon) in enumerate(centroids):
            indices = [i for i, label in enumerate(labels) if label == cluster_id]
            if not indices:
                continue
            compact_ids[cluster_id] = len(clusters)
            clusters.append(build_cluster(len(clusters), indices, events, centroid=Location(lat, lon)))

        labels = [compact_ids[label] for label in labels]

        logger.info(f"K-means produced {len(clusters)} clusters from {n} events "
                    f"(k={k}, iterations={self.n_iterations_}, converged={converged})")
        return ClusteringResult(clusters=clusters, noise=[], labels=labels)

    @staticmethod
    def _nearest_centroid(point: Tuple[float, float], centroids: List[Tuple[float, float]]) -> int:
        min_dist = float("inf")
        min_cluster = 0
        for c, (lat, lon) in enumerate(centroids):
            dist = haversine_distance(point[0], point[1], lat, lon)
            if dist < min_dist:
                min_dist = dist
                min_cluster = c
        return min_cluster

    def _update_centroids(self, points: List[Tuple[float, float]], labels: List[int],
                          centroids: List[Tuple[float, float]]) -> Tuple[List[Tuple[float, float]], bool]:
        """Move each centroid to its members' mean; report convergence"""
        converged = True
        updated = list(centroids)

        for c, (old_lat, old_lon) in enumerate(centroids):
            members = [points[i] for i, label in enumerate(labels) if label == c]
            if not members:
                continue

            new_lat = sum(lat for lat, _ in members) / len(members)
            new_lon = sum(lon for _, lon in members) / len(members)

            shift = haversine_distance(old_lat, old_lon, new_lat, new_lon)
            if shift > self.tolerance:
                converged = False

            updated[c] = (new_lat, new_lon)

        return updated, converged
