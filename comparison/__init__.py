"""
Narrative Comparison

Spatial, temporal and thematic similarity between two event collections.

Usage:
    from comparison import compare_narratives, ComparisonConfig
    similarity = compare_narratives(narrative_a, narrative_b, ComparisonConfig(location_threshold_m=500))
"""

from .similarity import (
    NarrativeSimilarity,
    ComparisonConfig,
    compare_narratives,
    spatial_similarity,
    temporal_similarity,
    thematic_similarity,
    common_locations,
    spatial_intersection,
    spatial_union
)

__all__ = [
    "NarrativeSimilarity",
    "ComparisonConfig",
    "compare_narratives",
    "spatial_similarity",
    "temporal_similarity",
    "thematic_similarity",
    "common_locations",
    "spatial_intersection",
    "spatial_union"
]
