from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import pandas as pd

from core.bounds import GeoBounds
from core.event import Event
from core.location import Location
from metrics.spatial_metrics import compute_planar_centroid

NOISE = -1


@dataclass(frozen=True)
class Cluster:
    """A group of events identified by their indices into the input sequence"""
    id: int
    event_indices: List[int]
    centroid: Location
    bounds: GeoBounds

    @property
    def size(self) -> int:
        return len(self.event_indices)

    def __len__(self) -> int:
        return len(self.event_indices)


@dataclass(frozen=True)
class ClusteringResult:
    """Partition of n events into clusters and noise.

    ``labels`` has one entry per input event: the cluster id, or -1 for noise.
    """
    clusters: List[Cluster] = field(default_factory=list)
    noise: List[int] = field(default_factory=list)
    labels: List[int] = field(default_factory=list)

    @property
    def num_clusters(self) -> int:
        return len(self.clusters)

    def cluster_of(self, event_idx: int) -> Optional[Cluster]:
        """Cluster containing the event, or None for noise / out of range"""
        if not 0 <= event_idx < len(self.labels):
            return None
        label = self.labels[event_idx]
        if label < 0:
            return None
        return self.clusters[label]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({
            "event_index": range(len(self.labels)),
            "label": self.labels,
            "is_noise": [label == NOISE for label in self.labels],
        })


def build_cluster(cluster_id: int, indices: List[int], events: Sequence[Event],
                  centroid: Optional[Location] = None) -> Cluster:
    locations = [events[i].location for i in indices]
    if centroid is None:
        centroid = compute_planar_centroid(locations)
    return Cluster(
        id=cluster_id,
        event_indices=list(indices),
        centroid=centroid,
        bounds=GeoBounds.from_locations(locations),
    )
