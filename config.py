from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent

# Spherical Earth model used by every geodesic computation
GEODESY_CONFIG = {
    "earth_radius_m": 6_371_000.0,
}

# Clustering parameters
CLUSTERING_CONFIG = {
    "dbscan_eps_m": 1000.0,
    "dbscan_min_points": 2,
    "kmeans_n_clusters": 5,
    "kmeans_max_iterations": 100,
    "kmeans_tolerance_m": 1.0,
    "max_k_search": 10,
    "hotspot_share_threshold": 0.25
}

# Trajectory / stop detection parameters
MOVEMENT_CONFIG = {
    "stop_radius_m": 50.0,           # 50 meters
    "stop_min_duration_secs": 300.0, # 5 minutes
    "simplify_epsilon_m": 10.0,
    "degenerate_segment_deg2": 1e-12
}

# Narrative comparison parameters
COMPARISON_CONFIG = {
    "spatial_weight": 0.4,
    "temporal_weight": 0.4,
    "thematic_weight": 0.2,
    "location_threshold_m": 1000.0   # 1 km
}

# Fixed-width time bins (month and year use calendar averages)
TEMPORAL_CONFIG = {
    "bin_millis": {
        "hour": 3_600_000,
        "day": 86_400_000,
        "week": 604_800_000,
        "month": 2_629_800_000,      # ~30.44 days
        "year": 31_557_600_000       # ~365.25 days
    }
}

# Logging
LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "log_file": None
}
