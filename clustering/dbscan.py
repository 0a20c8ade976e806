import logging
from typing import List, Sequence

from config import CLUSTERING_CONFIG
from core.event import Event
from core.geodesic import haversine_distance
from .models import NOISE, ClusteringResult, build_cluster

logger = logging.getLogger(__name__)

UNVISITED = -2


class DBSCAN:
    """Density-based clustering with great-circle distance.

    A point is a core point when at least ``min_points`` *other* events lie
    within ``eps`` meters of it. Each neighbourhood is an exhaustive O(n)
    scan with ``haversine_distance``, run when the point is first visited,
    so the whole pass is O(n²) in time but only O(n) in extra memory. No
    spatial index is used.

    Clusters are grown depth-first from a LIFO work-list in a single pass
    over the input. A border point reachable from two clusters therefore
    belongs to whichever cluster reaches it first in scan order, and
    cluster ids follow discovery order.
    """

    def __init__(self, eps: float = None, min_points: int = None):
        if eps is None:
            eps = CLUSTERING_CONFIG["dbscan_eps_m"]
        if min_points is None:
            min_points = CLUSTERING_CONFIG["dbscan_min_points"]

        self.eps = eps
        self.min_points = min_points

    def __repr__(self) -> str:
        return f"DBSCAN(eps={self.eps}, min_points={self.min_points})"

    def cluster(self, events: Sequence[Event]) -> ClusteringResult:
        """Cluster events; indices in the result refer to ``events``"""
        n = len(events)
        if n == 0:
            return ClusteringResult()

        labels = [UNVISITED] * n
        discovered = []

        for i in range(n):
            if labels[i] != UNVISITED:
                continue

            neighbors = self._range_query(events, i)
            if len(neighbors) < self.min_points:
                # Provisional: may still be absorbed as a border point
                labels[i] = NOISE
                continue

            members = self._expand_cluster(events, i, neighbors, len(discovered), labels)
            discovered.append(members)

        clusters = [
            build_cluster(cluster_id, members, events)
            for cluster_id, members in enumerate(discovered)
        ]
        noise = [i for i, label in enumerate(labels) if label == NOISE]

        logger.info(f"DBSCAN found {len(clusters)} clusters and {len(noise)} noise points "
                    f"in {n} events (eps={self.eps}m, min_points={self.min_points})")
        return ClusteringResult(clusters=clusters, noise=noise, labels=labels)

    def _range_query(self, events: Sequence[Event], idx: int) -> List[int]:
        """Indices within eps of ``events[idx]``, excluding the event itself"""
        origin = events[idx].location
        return [
            j for j, other in enumerate(events)
            if j != idx and haversine_distance(origin.lat, origin.lon,
                                               other.location.lat, other.location.lon) <= self.eps
        ]

    def _expand_cluster(self, events: Sequence[Event], seed_idx: int, seed_neighbors: List[int],
                        cluster_id: int, labels: List[int]) -> List[int]:
        """Grow a cluster from a core point; returns members in discovery order"""
        labels[seed_idx] = cluster_id
        members = [seed_idx]

        seeds = list(seed_neighbors)
        processed = set()

        while seeds:
            current_idx = seeds.pop()
            if current_idx in processed:
                continue
            processed.add(current_idx)

            if labels[current_idx] == NOISE:
                # Border point: joins the cluster but is never expanded
                labels[current_idx] = cluster_id
                members.append(current_idx)
                continue

            if labels[current_idx] != UNVISITED:
                continue

            labels[current_idx] = cluster_id
            members.append(current_idx)

            neighbors = self._range_query(events, current_idx)
            if len(neighbors) >= self.min_points:
                seeds.extend(neighbors)

        return members
