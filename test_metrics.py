import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from core import Event, Location, Timestamp, haversine_distance
from metrics import (
    SpatialMetrics, TemporalMetrics, TimeBin, density_map,
    event_rate, detect_gaps, detect_bursts, compute_centroid
)


def make_event(lat=0.0, lon=0.0, time_str="2024-01-01T10:00:00Z"):
    return Event(Location(lat, lon), Timestamp.parse(time_str), "test")


def make_timed(time_str):
    return make_event(0.0, 0.0, time_str)


class TestSpatialMetrics(unittest.TestCase):
    def test_empty(self):
        """Test default metrics for empty input"""
        metrics = SpatialMetrics.from_events([])
        self.assertEqual(metrics.event_count, 0)
        self.assertIsNone(metrics.bounds)
        self.assertIsNone(metrics.centroid)
        self.assertIsNone(metrics.area)
        self.assertEqual(metrics.total_distance, 0.0)

    def test_single_event(self):
        """Test metrics for a single event"""
        metrics = SpatialMetrics.from_events([make_event(40.0, -74.0)])
        self.assertEqual(metrics.event_count, 1)
        self.assertIsNotNone(metrics.bounds)
        self.assertAlmostEqual(metrics.centroid.lat, 40.0, places=9)
        self.assertAlmostEqual(metrics.centroid.lon, -74.0, places=9)
        self.assertEqual(metrics.total_distance, 0.0)
        self.assertAlmostEqual(metrics.dispersion, 0.0, places=6)
        self.assertEqual(metrics.area, 0.0)

    def test_multiple_events(self):
        """Test metrics for several events"""
        events = [make_event(40.0, -74.0), make_event(41.0, -73.0), make_event(39.0, -75.0)]
        metrics = SpatialMetrics.from_events(events)

        self.assertEqual(metrics.event_count, 3)
        self.assertGreater(metrics.total_distance, 0.0)
        self.assertGreater(metrics.dispersion, 0.0)
        self.assertLess(abs(metrics.centroid.lat - 40.0), 1.0)
        self.assertLess(abs(metrics.centroid.lon + 74.0), 1.0)

    def test_consecutive_distances(self):
        """Test total, average and max step distance"""
        locations = [Location(0.0, 0.0), Location(0.0, 1.0), Location(0.0, 3.0)]
        metrics = SpatialMetrics.from_locations(locations)

        step1 = haversine_distance(0.0, 0.0, 0.0, 1.0)
        step2 = haversine_distance(0.0, 1.0, 0.0, 3.0)
        self.assertAlmostEqual(metrics.total_distance, step1 + step2, places=6)
        self.assertAlmostEqual(metrics.avg_distance, (step1 + step2) / 2, places=6)
        self.assertAlmostEqual(metrics.max_distance, step2, places=6)

    def test_area_is_bounding_box_product(self):
        """Test the approximate bounding-box area"""
        metrics = SpatialMetrics.from_locations([Location(0.0, 0.0), Location(1.0, 1.0)])
        width = haversine_distance(0.0, 0.0, 0.0, 1.0)
        height = haversine_distance(0.0, 0.0, 1.0, 0.0)
        self.assertAlmostEqual(metrics.area, width * height, delta=1.0)

    def test_centroid_across_antimeridian(self):
        """Test that the spherical centroid does not average raw degrees"""
        centroid = compute_centroid([Location(0.0, 179.0), Location(0.0, -179.0)])
        self.assertAlmostEqual(abs(centroid.lon), 180.0, places=6)
        self.assertAlmostEqual(centroid.lat, 0.0, places=6)

    def test_centroid_elevation(self):
        """Test elevation averaged over inputs that have it"""
        centroid = compute_centroid([
            Location(0.0, 0.0, elevation=10.0),
            Location(0.0, 1.0),
            Location(0.0, 2.0, elevation=30.0),
        ])
        self.assertEqual(centroid.elevation, 20.0)
        self.assertIsNone(compute_centroid([Location(0.0, 0.0)]).elevation)


class TestDensityMap(unittest.TestCase):
    def setUp(self):
        self.events = [make_event(0.0, 0.0), make_event(0.1, 0.1), make_event(0.9, 0.9)]

    def test_grid_counts(self):
        """Test cell count and point totals"""
        cells = density_map(self.events, 2, 2)
        self.assertEqual(len(cells), 4)
        self.assertEqual(sum(c.count for c in cells), 3)
        self.assertEqual(cells[0].count, 2)
        # Upper-edge point is clamped into the last row/column
        self.assertEqual(cells[3].count, 1)

    def test_cell_area_and_density(self):
        """Test per-cell area and density"""
        cells = density_map(self.events, 2, 2)
        for cell in cells:
            self.assertGreater(cell.area_km2, 0.0)
            self.assertAlmostEqual(cell.density, cell.count / cell.area_km2)
        self.assertAlmostEqual(cells[0].lat, 0.225)
        self.assertAlmostEqual(cells[0].lon, 0.225)

    def test_degenerate_inputs(self):
        """Test empty results for empty input or zero dimensions"""
        self.assertEqual(density_map([], 2, 2), [])
        self.assertEqual(density_map(self.events, 0, 2), [])
        self.assertEqual(density_map(self.events, 2, 0), [])

    def test_single_point(self):
        """Test a zero-extent bounding box"""
        cells = density_map([make_event(1.0, 1.0)], 2, 2)
        self.assertEqual(sum(c.count for c in cells), 1)
        self.assertTrue(all(c.density == 0.0 for c in cells))


class TestTemporalMetrics(unittest.TestCase):
    def test_empty(self):
        """Test default metrics for empty input"""
        metrics = TemporalMetrics.from_events([])
        self.assertEqual(metrics.event_count, 0)
        self.assertIsNone(metrics.time_range)
        self.assertEqual(metrics.duration_secs, 0.0)

    def test_single(self):
        """Test metrics for a single event"""
        metrics = TemporalMetrics.from_events([make_timed("2024-01-01T10:00:00Z")])
        self.assertEqual(metrics.event_count, 1)
        self.assertIsNotNone(metrics.time_range)
        self.assertEqual(metrics.duration_secs, 0.0)

    def test_multiple_unsorted(self):
        """Test that input order does not matter"""
        events = [
            make_timed("2024-01-01T12:00:00Z"),
            make_timed("2024-01-01T10:00:00Z"),
            make_timed("2024-01-01T11:00:00Z"),
        ]
        metrics = TemporalMetrics.from_events(events)
        self.assertEqual(metrics.event_count, 3)
        self.assertEqual(metrics.duration_secs, 7200.0)
        self.assertEqual(metrics.avg_inter_event_time, 3600.0)
        self.assertEqual(metrics.inter_event_std_dev, 0.0)
        self.assertEqual(metrics.time_range.start, Timestamp.parse("2024-01-01T10:00:00Z"))

    def test_population_std_dev(self):
        """Test gap statistics use the population standard deviation"""
        metrics = TemporalMetrics.from_timestamps([Timestamp(0), Timestamp(60_000), Timestamp(180_000)])
        self.assertEqual(metrics.min_inter_event_time, 60.0)
        self.assertEqual(metrics.max_inter_event_time, 120.0)
        self.assertAlmostEqual(metrics.avg_inter_event_time, 90.0)
        self.assertAlmostEqual(metrics.inter_event_std_dev, 30.0)


class TestEventRate(unittest.TestCase):
    def test_hourly_bins(self):
        """Test the documented hourly example"""
        events = [
            make_timed("2024-01-01T10:00:00Z"),
            make_timed("2024-01-01T10:30:00Z"),
            make_timed("2024-01-01T11:15:00Z"),
        ]
        rates = event_rate(events, TimeBin.HOUR)
        self.assertEqual([r.count for r in rates], [2, 1])
        self.assertEqual(rates[0].start, Timestamp.parse("2024-01-01T10:00:00Z"))
        self.assertEqual(rates[0].end, Timestamp.parse("2024-01-01T11:00:00Z"))

    def test_bins_are_contiguous(self):
        """Test that empty interior bins are reported"""
        events = [make_timed("2024-01-01T13:30:00Z"), make_timed("2024-01-01T10:05:00Z")]
        rates = event_rate(events, "hour")

        self.assertEqual([r.count for r in rates], [1, 0, 0, 1])
        self.assertEqual(sum(r.count for r in rates), len(events))
        for earlier, later in zip(rates, rates[1:]):
            self.assertEqual(earlier.end, later.start)

    def test_day_bins(self):
        """Test daily bins"""
        events = [make_timed("2024-01-01T23:00:00Z"), make_timed("2024-01-03T01:00:00Z")]
        rates = event_rate(events, TimeBin.DAY)
        self.assertEqual([r.count for r in rates], [1, 0, 1])

    def test_empty(self):
        """Test empty input"""
        self.assertEqual(event_rate([], TimeBin.WEEK), [])


class TestGapsAndBursts(unittest.TestCase):
    def test_detect_gaps(self):
        """Test gaps above the threshold are reported"""
        events = [
            make_timed("2024-01-01T10:00:00Z"),
            make_timed("2024-01-01T15:00:00Z"),
            make_timed("2024-01-01T10:30:00Z"),
        ]
        gaps = detect_gaps(events, 3600.0)
        self.assertEqual(len(gaps), 1)
        self.assertEqual(gaps[0].start, Timestamp.parse("2024-01-01T10:30:00Z"))
        self.assertEqual(gaps[0].end, Timestamp.parse("2024-01-01T15:00:00Z"))
        self.assertEqual(detect_gaps(events[:1], 10.0), [])

    def test_detect_bursts(self):
        """Test a single burst and an isolated event"""
        events = [
            make_timed("2024-01-01T10:00:00Z"),
            make_timed("2024-01-01T10:01:00Z"),
            make_timed("2024-01-01T10:02:00Z"),
            make_timed("2024-01-01T15:00:00Z"),
        ]
        bursts = detect_bursts(events, 300.0, 3)
        self.assertEqual(len(bursts), 1)
        self.assertEqual(bursts[0].start, Timestamp.parse("2024-01-01T10:00:00Z"))
        self.assertEqual(bursts[0].end, Timestamp.parse("2024-01-01T10:02:00Z"))

    def test_bursts_do_not_overlap(self):
        """Test that a detected run is consumed before scanning resumes"""
        events = [make_timed(f"2024-01-01T10:0{minute}:00Z") for minute in range(6)]
        bursts = detect_bursts(events, 150.0, 2)

        self.assertEqual(len(bursts), 2)
        self.assertEqual(bursts[0].end, Timestamp.parse("2024-01-01T10:02:00Z"))
        self.assertEqual(bursts[1].start, Timestamp.parse("2024-01-01T10:03:00Z"))

    def test_burst_window_is_exclusive(self):
        """Test that an event exactly window_secs later is outside the window"""
        events = [make_timed("2024-01-01T10:00:00Z"), make_timed("2024-01-01T10:05:00Z")]
        self.assertEqual(detect_bursts(events, 300.0, 2), [])

    def test_degenerate_bursts(self):
        """Test empty input and min_events of zero"""
        self.assertEqual(detect_bursts([], 60.0, 2), [])
        self.assertEqual(detect_bursts([make_timed("2024-01-01T10:00:00Z")], 60.0, 0), [])


if __name__ == "__main__":
    # Run tests
    unittest.main(verbosity=2)
