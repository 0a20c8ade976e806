import unittest
import sys
import os

import pandas as pd

# Add project root to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from core import Event, Location, Timestamp, haversine_distance
from movement import (
    Trajectory, Stop, StopThreshold, detect_stops, MovementAnalyzer,
    douglas_peucker_indices, perpendicular_distance
)


def make_event(lat, lon, time_str):
    return Event(Location(lat, lon), Timestamp.parse(time_str), "test")


def stop_scenario():
    """One dwell at (41, -73) between two stretches of movement"""
    return [
        make_event(40.0, -74.0, "2024-01-01T10:00:00Z"),
        make_event(41.0, -73.0, "2024-01-01T11:00:00Z"),
        make_event(41.0, -73.0, "2024-01-01T11:30:00Z"),
        make_event(41.0, -73.0, "2024-01-01T12:00:00Z"),
        make_event(42.0, -72.0, "2024-01-01T13:00:00Z"),
        make_event(43.0, -71.0, "2024-01-01T14:00:00Z"),
    ]


class TestTrajectory(unittest.TestCase):
    def test_events_sorted_on_construction(self):
        """Test that events are ordered by timestamp"""
        events = [
            make_event(1.0, 1.0, "2024-01-01T12:00:00Z"),
            make_event(0.0, 0.0, "2024-01-01T10:00:00Z"),
            make_event(0.5, 0.5, "2024-01-01T11:00:00Z"),
        ]
        trajectory = Trajectory("t", events)
        self.assertEqual(len(trajectory), 3)
        self.assertEqual([e.location.lat for e in trajectory], [0.0, 0.5, 1.0])
        self.assertEqual(trajectory.time_range().duration_secs, 7200.0)

    def test_equal_timestamps_keep_input_order(self):
        """Test that the sort is stable"""
        events = [make_event(float(i), 0.0, "2024-01-01T10:00:00Z") for i in range(3)]
        trajectory = Trajectory("t", events)
        self.assertEqual([e.location.lat for e in trajectory.events], [0.0, 1.0, 2.0])

    def test_empty_trajectory(self):
        """Test an empty trajectory"""
        trajectory = Trajectory("empty", [])
        self.assertTrue(trajectory.is_empty())
        self.assertIsNone(trajectory.time_range())
        self.assertIsNone(trajectory.bounds())
        self.assertEqual(trajectory.total_distance(), 0.0)
        self.assertEqual(trajectory.avg_speed(), 0.0)
        self.assertEqual(trajectory.velocity_profile(), [])

    def test_distance_and_speed(self):
        """Test distance, duration and speed"""
        events = [
            make_event(0.0, 0.0, "2024-01-01T10:00:00Z"),
            make_event(0.0, 0.01, "2024-01-01T10:01:00Z"),
            make_event(0.0, 0.02, "2024-01-01T10:02:00Z"),
        ]
        trajectory = Trajectory("t", events)
        step = haversine_distance(0.0, 0.0, 0.0, 0.01)

        self.assertAlmostEqual(trajectory.total_distance(), 2 * step, places=6)
        self.assertEqual(trajectory.duration_secs(), 120.0)
        self.assertAlmostEqual(trajectory.avg_speed(), step / 60.0, places=6)

        profile = trajectory.velocity_profile()
        self.assertEqual(len(profile), 2)
        self.assertEqual(profile[0][0], Timestamp.parse("2024-01-01T10:00:00Z"))
        self.assertAlmostEqual(profile[1][1], step / 60.0, places=6)

    def test_zero_time_step_has_zero_speed(self):
        """Test that simultaneous events do not divide by zero"""
        events = [make_event(0.0, 0.0, "2024-01-01T10:00:00Z"), make_event(0.0, 1.0, "2024-01-01T10:00:00Z")]
        trajectory = Trajectory("t", events)
        self.assertEqual(trajectory.velocity_profile()[0][1], 0.0)
        self.assertEqual(trajectory.avg_speed(), 0.0)

    def test_to_dataframe(self):
        """Test conversion to a per-event table"""
        df = Trajectory("t", stop_scenario()).to_dataframe()
        self.assertIsInstance(df, pd.DataFrame)
        self.assertEqual(len(df), 6)
        self.assertEqual(df.iloc[0]["step_distance_m"], 0.0)
        self.assertIn("speed_mps", df.columns)


class TestSimplification(unittest.TestCase):
    def setUp(self):
        # Straight line along the equator with a small kink at index 2 (about 11 m)
        times = ["2024-01-01T10:0%d:00Z" % i for i in range(5)]
        lats = [0.0, 0.0, 0.0001, 0.0, 0.0]
        self.events = [make_event(lat, i * 0.01, t) for i, (lat, t) in enumerate(zip(lats, times))]

    def test_perpendicular_distance(self):
        """Test distance to a segment and to a degenerate segment"""
        start, end = Location(0.0, 0.0), Location(0.0, 0.01)
        point = Location(0.001, 0.005)

        expected = haversine_distance(0.001, 0.005, 0.0, 0.005)
        self.assertAlmostEqual(perpendicular_distance(point, start, end), expected, places=6)
        self.assertAlmostEqual(perpendicular_distance(point, start, start),
                               haversine_distance(0.001, 0.005, 0.0, 0.0), places=6)

    def test_projection_clamped_to_segment(self):
        """Test points beyond the end measure to the endpoint"""
        start, end = Location(0.0, 0.0), Location(0.0, 0.01)
        beyond = Location(0.0, 0.02)
        self.assertAlmostEqual(perpendicular_distance(beyond, start, end),
                               haversine_distance(0.0, 0.02, 0.0, 0.01), places=6)

    def test_douglas_peucker(self):
        """Test tolerance controls which points survive"""
        self.assertEqual(douglas_peucker_indices(self.events, 100.0), [0, 4])
        self.assertEqual(douglas_peucker_indices(self.events, 8.0), [0, 2, 4])
        self.assertEqual(douglas_peucker_indices(self.events, 0.0), [0, 1, 2, 3, 4])

    def test_short_paths_unchanged(self):
        """Test paths of two or fewer events"""
        self.assertEqual(douglas_peucker_indices(self.events[:2], 100.0), [0, 1])
        self.assertEqual(douglas_peucker_indices([], 100.0), [])

    def test_trajectory_simplify(self):
        """Test simplified trajectories keep endpoints and get a new id"""
        trajectory = Trajectory("t", self.events)
        simplified = trajectory.simplify(100.0)

        self.assertEqual(simplified.id, "t_simplified")
        self.assertEqual(len(simplified), 2)
        self.assertIs(simplified.events[0], trajectory.events[0])
        self.assertIs(simplified.events[-1], trajectory.events[-1])
        self.assertEqual(Trajectory("short", self.events[:2]).simplify(100.0).id, "short")


class TestStops(unittest.TestCase):
    def test_detect_single_stop(self):
        """Test a dwell of three events over an hour"""
        trajectory = Trajectory("t", stop_scenario())
        stops = detect_stops(trajectory, StopThreshold(radius_m=100.0, min_duration_secs=1800.0))

        self.assertEqual(len(stops), 1)
        stop = stops[0]
        self.assertIsInstance(stop, Stop)
        self.assertEqual(stop.event_count, 3)
        self.assertEqual(stop.duration_secs, 3600.0)
        self.assertEqual(stop.start, Timestamp.parse("2024-01-01T11:00:00Z"))
        self.assertEqual(stop.end, Timestamp.parse("2024-01-01T12:00:00Z"))
        self.assertAlmostEqual(stop.location.lat, 41.0)
        self.assertAlmostEqual(stop.location.lon, -73.0)
        self.assertEqual(stop.time_range().duration_secs, 3600.0)

    def test_dwell_too_short(self):
        """Test a dwell shorter than the minimum duration"""
        stops = detect_stops(stop_scenario(), radius_m=100.0, min_duration_secs=7200.0)
        self.assertEqual(stops, [])

    def test_slow_drift_is_not_a_stop(self):
        """Test that the anchor is not re-centred as the entity drifts"""
        # Steps of about 40 m every ten minutes
        events = [
            make_event(0.0, i * 0.00036, "2024-01-01T10:%d0:00Z" % i)
            for i in range(6)
        ]
        stops = detect_stops(events, StopThreshold(radius_m=50.0, min_duration_secs=900.0))
        self.assertEqual(stops, [])

    def test_single_events_never_stop(self):
        """Test that a stop needs at least two events even with no minimum duration"""
        events = [
            make_event(0.0, 0.0, "2024-01-01T10:00:00Z"),
            make_event(1.0, 1.0, "2024-01-01T11:00:00Z"),
        ]
        self.assertEqual(detect_stops(events, radius_m=50.0, min_duration_secs=0.0), [])
        self.assertEqual(detect_stops(events[:1], radius_m=50.0, min_duration_secs=0.0), [])

    def test_default_threshold(self):
        """Test default stop threshold values"""
        threshold = StopThreshold()
        self.assertEqual(threshold.radius_m, 50.0)
        self.assertEqual(threshold.min_duration_secs, 300.0)


class TestMovementAnalyzer(unittest.TestCase):
    def setUp(self):
        self.analyzer = MovementAnalyzer(StopThreshold(radius_m=100.0, min_duration_secs=1800.0))

    def test_extract_trajectory(self):
        """Test trajectory extraction sorts events"""
        trajectory = self.analyzer.extract_trajectory("t", list(reversed(stop_scenario())))
        self.assertEqual(trajectory.id, "t")
        self.assertEqual(trajectory.events[0].location.lat, 40.0)

    def test_movement_segments(self):
        """Test splitting around a stop"""
        trajectory = self.analyzer.extract_trajectory("t", stop_scenario())
        segments = self.analyzer.movement_segments(trajectory)

        self.assertEqual(len(segments), 2)
        self.assertEqual(segments[0].id, "t_segment_0")
        self.assertEqual(len(segments[0]), 1)
        self.assertEqual(segments[1].id, "t_segment_1")
        self.assertEqual(len(segments[1]), 2)
        self.assertEqual(segments[1].events[0].location.lat, 42.0)

    def test_no_stops_returns_whole_trajectory(self):
        """Test segmentation without stops"""
        events = [
            make_event(0.0, 0.0, "2024-01-01T10:00:00Z"),
            make_event(1.0, 1.0, "2024-01-01T11:00:00Z"),
        ]
        trajectory = self.analyzer.extract_trajectory("t", events)
        segments = self.analyzer.movement_segments(trajectory)
        self.assertEqual(len(segments), 1)
        self.assertIs(segments[0], trajectory)


if __name__ == "__main__":
    # Run tests
    unittest.main(verbosity=2)
