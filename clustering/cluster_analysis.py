import logging
from collections import Counter
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.metrics import silhouette_score, calinski_harabasz_score, davies_bouldin_score

from config import CLUSTERING_CONFIG
from core.event import Event
from core.geodesic import haversine_distance, haversine_matrix
from .dbscan import DBSCAN
from .kmeans import KMeans
from .models import NOISE, ClusteringResult

logger = logging.getLogger(__name__)


class EventClusterAnalyzer:
    """Runs DBSCAN and k-means over events and scores the partitions"""

    def __init__(self):
        self.dbscan_model = None
        self.kmeans_model = None
        self.cluster_results = {}

    def prepare_clustering_data(self, events: Sequence[Event]) -> Tuple[np.ndarray, np.ndarray]:
        """(lat, lon) matrix and pairwise great-circle distance matrix"""
        coords = np.array([[e.location.lat, e.location.lon] for e in events], dtype=float).reshape(-1, 2)
        distances = haversine_matrix(coords[:, 0], coords[:, 1])
        return coords, distances

    def evaluate_clustering(self, events: Sequence[Event], labels: Sequence[int]) -> Dict[str, float]:
        """Quality scores over clustered (non-noise) events.

        Silhouette uses the geodesic distance matrix; Calinski-Harabasz and
        Davies-Bouldin work on raw (lat, lon). All three are 0 when there are
        fewer than two clusters or too few points to score.
        """
        scores = {
            "silhouette_score": 0.0,
            "calinski_harabasz_score": 0.0,
            "davies_bouldin_score": 0.0
        }
        if len(events) == 0:
            return scores

        labels = np.asarray(labels)
        coords, distances = self.prepare_clustering_data(events)

        non_noise_mask = labels != NOISE
        clustered_labels = labels[non_noise_mask]
        n_samples = int(np.sum(non_noise_mask))
        n_labels = len(np.unique(clustered_labels))

        if n_labels < 2 or n_labels > n_samples - 1:
            return scores

        sub_distances = distances[np.ix_(non_noise_mask, non_noise_mask)]
        scores["silhouette_score"] = float(silhouette_score(sub_distances, clustered_labels, metric="precomputed"))
        scores["calinski_harabasz_score"] = float(calinski_harabasz_score(coords[non_noise_mask], clustered_labels))
        scores["davies_bouldin_score"] = float(davies_bouldin_score(coords[non_noise_mask], clustered_labels))
        return scores

    def run_kmeans(self, events: Sequence[Event], n_clusters: int = None) -> Dict[str, Any]:
        """Apply geodesic K-means"""
        if n_clusters is None:
            n_clusters = CLUSTERING_CONFIG["kmeans_n_clusters"]

        kmeans = KMeans(k=n_clusters)
        result = kmeans.cluster(events)

        results = {
            "method": "kmeans",
            "n_clusters": result.num_clusters,
            "cluster_labels": list(result.labels),
            "cluster_centers": [c.centroid.to_tuple() for c in result.clusters],
            "inertia": self._inertia(events, result),
            "n_iterations": kmeans.n_iterations_,
            "result": result
        }
        results.update(self.evaluate_clustering(events, result.labels))

        self.kmeans_model = kmeans
        return results

    def run_dbscan(self, events: Sequence[Event], eps: float = None, min_points: int = None) -> Dict[str, Any]:
        """Apply geodesic DBSCAN"""
        dbscan = DBSCAN(eps=eps, min_points=min_points)
        result = dbscan.cluster(events)

        results = {
            "method": "dbscan",
            "eps": dbscan.eps,
            "min_points": dbscan.min_points,
            "n_clusters": result.num_clusters,
            "n_noise": len(result.noise),
            "cluster_labels": list(result.labels),
            "result": result
        }
        results.update(self.evaluate_clustering(events, result.labels))

        self.dbscan_model = dbscan
        return results

    def find_optimal_k(self, events: Sequence[Event], max_clusters: int = None) -> Dict[str, Any]:
        """Sweep k with the elbow method and silhouette analysis"""
        if max_clusters is None:
            max_clusters = CLUSTERING_CONFIG["max_k_search"]

        # Silhouette needs at least one point more than clusters
        max_clusters = min(max_clusters, len(events) - 1)
        k_range = range(2, max_clusters + 1)
        if len(k_range) == 0:
            return {
                "k_range": [],
                "inertias": [],
                "silhouette_scores": [],
                "elbow_k": None,
                "best_silhouette_k": None,
                "recommended_k": min(1, len(events))
            }

        inertias = []
        silhouette_scores = []
        for k in k_range:
            result = KMeans(k=k).cluster(events)
            inertias.append(self._inertia(events, result))
            silhouette_scores.append(self.evaluate_clustering(events, result.labels)["silhouette_score"])

        elbow_k = self._find_elbow_point(k_range, inertias)
        best_silhouette_k = k_range[int(np.argmax(silhouette_scores))]

        return {
            "k_range": list(k_range),
            "inertias": inertias,
            "silhouette_scores": silhouette_scores,
            "elbow_k": elbow_k,
            "best_silhouette_k": best_silhouette_k,
            "recommended_k": best_silhouette_k  # Prefer silhouette score
        }

    def _find_elbow_point(self, k_range: range, inertias: List[float]) -> int:
        """Find elbow point using simplified method"""
        if len(inertias) < 3:
            return k_range[0]

        # Largest second difference
        second_derivative = []
        for i in range(1, len(inertias) - 1):
            second_derivative.append(inertias[i + 1] - 2 * inertias[i] + inertias[i - 1])

        elbow_idx = int(np.argmax(second_derivative)) + 1
        return k_range[elbow_idx]

    def _inertia(self, events: Sequence[Event], result: ClusteringResult) -> float:
        """Sum of squared distances (km²) from members to their centroid"""
        total = 0.0
        for cluster in result.clusters:
            for i in cluster.event_indices:
                loc = events[i].location
                d_km = haversine_distance(loc.lat, loc.lon, cluster.centroid.lat, cluster.centroid.lon) / 1000.0
                total += d_km ** 2
        return total

    def summarize_clusters(self, events: Sequence[Event], result: ClusteringResult) -> pd.DataFrame:
        """One row per cluster (plus a noise row when present)"""
        columns = [
            "cluster", "size", "percentage", "centroid_lat", "centroid_lon",
            "radius_m", "start_ms", "end_ms", "time_span_secs", "top_tags"
        ]
        n = len(events)
        rows = []

        groups = [(f"cluster_{c.id}", c.event_indices, c.centroid) for c in result.clusters]
        if result.noise:
            groups.append(("noise", result.noise, None))

        for name, indices, centroid in groups:
            members = [events[i] for i in indices]
            millis = [e.timestamp.to_unix_millis() for e in members]
            radius = 0.0
            if centroid is not None:
                radius = max(haversine_distance(e.location.lat, e.location.lon, centroid.lat, centroid.lon)
                             for e in members)
            tag_counts = Counter(tag for e in members for tag in set(e.tags))

            rows.append({
                "cluster": name,
                "size": len(members),
                "percentage": len(members) / n * 100 if n else 0.0,
                "centroid_lat": centroid.lat if centroid is not None else np.nan,
                "centroid_lon": centroid.lon if centroid is not None else np.nan,
                "radius_m": radius,
                "start_ms": min(millis),
                "end_ms": max(millis),
                "time_span_secs": (max(millis) - min(millis)) / 1000.0,
                "top_tags": [tag for tag, _ in tag_counts.most_common(3)]
            })

        return pd.DataFrame(rows, columns=columns)

    def identify_hotspots(self, events: Sequence[Event], result: ClusteringResult,
                          method: str, threshold: float = None) -> List[Dict[str, Any]]:
        """Clusters holding at least ``threshold`` of all events"""
        if threshold is None:
            threshold = CLUSTERING_CONFIG["hotspot_share_threshold"]

        n = len(events)
        hotspots = []
        if n == 0:
            return hotspots

        for cluster in result.clusters:
            share = cluster.size / n
            if share < threshold:
                continue

            members = [events[i] for i in cluster.event_indices]
            tag_counts = Counter(tag for e in members for tag in set(e.tags))
            hotspots.append({
                "cluster_id": cluster.id,
                "method": method,
                "share": share,
                "size": cluster.size,
                "spatial_center": {
                    "lat": cluster.centroid.lat,
                    "lon": cluster.centroid.lon
                },
                "bounds": cluster.bounds,
                "tag_pattern": dict(tag_counts.most_common(3))
            })

        return hotspots

    def run_complete_analysis(self, events: Sequence[Event]) -> Dict[str, Any]:
        """Run complete clustering analysis pipeline"""
        logger.info(f"Finding optimal K-means clusters for {len(events)} events...")
        optimal_k = self.find_optimal_k(events)
        recommended_k = optimal_k["recommended_k"] or CLUSTERING_CONFIG["kmeans_n_clusters"]

        logger.info(f"Applying K-means with {recommended_k} clusters...")
        kmeans_results = self.run_kmeans(events, recommended_k)

        logger.info("Applying DBSCAN clustering...")
        dbscan_results = self.run_dbscan(events)

        self.cluster_results = {
            "kmeans": {
                "results": kmeans_results,
                "summary": self.summarize_clusters(events, kmeans_results["result"]),
                "hotspots": self.identify_hotspots(events, kmeans_results["result"], "kmeans")
            },
            "dbscan": {
                "results": dbscan_results,
                "summary": self.summarize_clusters(events, dbscan_results["result"]),
                "hotspots": self.identify_hotspots(events, dbscan_results["result"], "dbscan")
            },
            "optimal_k_analysis": optimal_k
        }

        logger.info(f"K-means hotspots: {len(self.cluster_results['kmeans']['hotspots'])}, "
                    f"DBSCAN hotspots: {len(self.cluster_results['dbscan']['hotspots'])}")
        return self.cluster_results
