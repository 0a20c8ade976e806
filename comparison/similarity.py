import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from config import COMPARISON_CONFIG
from core.bounds import GeoBounds
from core.event import Event
from core.geodesic import haversine_distance
from core.narrative import Narrative

logger = logging.getLogger(__name__)

EventCollection = Union[Narrative, Sequence[Event]]


def _events_of(collection: EventCollection) -> Sequence[Event]:
    if isinstance(collection, Narrative):
        return collection.events
    return collection


def _within(e1: Event, e2: Event, threshold_m: float) -> bool:
    return haversine_distance(e1.location.lat, e1.location.lon,
                              e2.location.lat, e2.location.lon) <= threshold_m


@dataclass(frozen=True)
class NarrativeSimilarity:
    """Similarity scores in [0, 1]; ``overall`` is the weighted mean of the rest"""
    overall: float
    spatial: float
    temporal: float
    thematic: float


@dataclass(frozen=True)
class ComparisonConfig:
    spatial_weight: float = field(default_factory=lambda: COMPARISON_CONFIG["spatial_weight"])
    temporal_weight: float = field(default_factory=lambda: COMPARISON_CONFIG["temporal_weight"])
    thematic_weight: float = field(default_factory=lambda: COMPARISON_CONFIG["thematic_weight"])
    location_threshold_m: float = field(default_factory=lambda: COMPARISON_CONFIG["location_threshold_m"])


def compare_narratives(n1: EventCollection, n2: EventCollection,
                       config: ComparisonConfig = None) -> NarrativeSimilarity:
    """Score two event collections spatially, temporally and thematically"""
    if config is None:
        config = ComparisonConfig()
    events1, events2 = _events_of(n1), _events_of(n2)

    spatial = spatial_similarity(events1, events2, config.location_threshold_m)
    temporal = temporal_similarity(events1, events2)
    thematic = thematic_similarity(events1, events2)

    total_weight = config.spatial_weight + config.temporal_weight + config.thematic_weight
    if total_weight > 0:
        overall = (spatial * config.spatial_weight
                   + temporal * config.temporal_weight
                   + thematic * config.thematic_weight) / total_weight
    else:
        overall = 0.0

    logger.debug(f"Compared {len(events1)} vs {len(events2)} events: overall={overall:.3f} "
                 f"(spatial={spatial:.3f}, temporal={temporal:.3f}, thematic={thematic:.3f})")
    return NarrativeSimilarity(overall=overall, spatial=spatial, temporal=temporal, thematic=thematic)


def spatial_similarity(events1: Sequence[Event], events2: Sequence[Event], threshold_m: float) -> float:
    """Jaccard-style share of events with a counterpart within ``threshold_m``.

    An event of the first set matches when any event of the second set is
    close enough (first hit wins; this is not an optimal one-to-one matching).
    """
    if not events1 or not events2:
        return 0.0

    matches = sum(1 for e1 in events1 if any(_within(e1, e2, threshold_m) for e2 in events2))
    union = len(events1) + len(events2) - matches
    return matches / union if union > 0 else 0.0


def _millis_span(events: Sequence[Event]) -> Optional[Tuple[int, int]]:
    if not events:
        return None
    millis = [e.timestamp.to_unix_millis() for e in events]
    return min(millis), max(millis)


def temporal_similarity(events1: Sequence[Event], events2: Sequence[Event]) -> float:
    """Overlap of the two collections' time spans divided by their union span"""
    span1 = _millis_span(events1)
    span2 = _millis_span(events2)
    if span1 is None or span2 is None:
        return 0.0

    start1, end1 = span1
    start2, end2 = span2

    overlap_start = max(start1, start2)
    overlap_end = min(end1, end2)
    if overlap_start >= overlap_end:
        return 0.0

    overlap = overlap_end - overlap_start
    union = max(end1, end2) - min(start1, start2)
    return overlap / union if union > 0 else 0.0


def thematic_similarity(events1: Sequence[Event], events2: Sequence[Event]) -> float:
    """Jaccard similarity of the tag vocabularies; 0 when neither has tags"""
    tags1 = {tag for e in events1 for tag in e.tags}
    tags2 = {tag for e in events2 for tag in e.tags}

    union = tags1 | tags2
    if not union:
        return 0.0
    return len(tags1 & tags2) / len(union)


def common_locations(n1: EventCollection, n2: EventCollection, threshold_m: float = None) -> List[Tuple[int, int]]:
    """Every (i, j) index pair whose events lie within ``threshold_m``"""
    if threshold_m is None:
        threshold_m = COMPARISON_CONFIG["location_threshold_m"]
    events1, events2 = _events_of(n1), _events_of(n2)

    return [
        (i, j)
        for i, e1 in enumerate(events1)
        for j, e2 in enumerate(events2)
        if _within(e1, e2, threshold_m)
    ]


def spatial_intersection(n1: EventCollection, n2: EventCollection, threshold_m: float = None) -> List[Event]:
    """Events of the first collection with a counterpart in the second, in order"""
    if threshold_m is None:
        threshold_m = COMPARISON_CONFIG["location_threshold_m"]
    events1, events2 = _events_of(n1), _events_of(n2)

    return [e1 for e1 in events1 if any(_within(e1, e2, threshold_m) for e2 in events2)]


def spatial_union(n1: EventCollection, n2: EventCollection) -> Optional[GeoBounds]:
    """Bounding box covering both collections, or None if both are empty"""
    bounds1 = GeoBounds.from_locations(e.location for e in _events_of(n1))
    bounds2 = GeoBounds.from_locations(e.location for e in _events_of(n2))

    if bounds1 is not None and bounds2 is not None:
        return bounds1.union(bounds2)
    return bounds1 if bounds1 is not None else bounds2
