import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from config import TEMPORAL_CONFIG
from core.bounds import TimeRange
from core.event import Event
from core.timestamp import Timestamp

logger = logging.getLogger(__name__)


class TimeBin(Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def millis(self) -> int:
        """Fixed bin width; month and year are calendar averages"""
        return TEMPORAL_CONFIG["bin_millis"][self.value]


@dataclass(frozen=True)
class TimeBinCount:
    start: Timestamp
    end: Timestamp    # exclusive
    count: int


def _sorted_timestamps(items: Sequence) -> List[Timestamp]:
    """Timestamps of events (or bare timestamps) in ascending order"""
    timestamps = [item.timestamp if isinstance(item, Event) else item for item in items]
    return sorted(timestamps, key=lambda t: t.to_unix_millis())


@dataclass(frozen=True)
class TemporalMetrics:
    """Duration and inter-event gap statistics (seconds)"""
    event_count: int = 0
    time_range: Optional[TimeRange] = None
    duration_secs: float = 0.0
    avg_inter_event_time: float = 0.0
    min_inter_event_time: float = 0.0
    max_inter_event_time: float = 0.0
    inter_event_std_dev: float = 0.0

    @classmethod
    def from_events(cls, events: Sequence[Event]) -> "TemporalMetrics":
        return cls.from_timestamps(events)

    @classmethod
    def from_timestamps(cls, timestamps: Sequence[Timestamp]) -> "TemporalMetrics":
        ordered = _sorted_timestamps(timestamps)
        if not ordered:
            return cls()

        first, last = ordered[0], ordered[-1]
        avg, min_gap, max_gap, std_dev = compute_inter_event_stats(ordered)

        return cls(
            event_count=len(ordered),
            time_range=TimeRange(first, last),
            duration_secs=(last.to_unix_millis() - first.to_unix_millis()) / 1000.0,
            avg_inter_event_time=avg,
            min_inter_event_time=min_gap,
            max_inter_event_time=max_gap,
            inter_event_std_dev=std_dev,
        )


def compute_inter_event_stats(ordered: Sequence[Timestamp]) -> Tuple[float, float, float, float]:
    """(mean, min, max, population std dev) of consecutive gaps in seconds"""
    if len(ordered) < 2:
        return 0.0, 0.0, 0.0, 0.0

    millis = np.array([t.to_unix_millis() for t in ordered], dtype=np.int64)
    gaps = np.diff(millis) / 1000.0

    return (float(np.mean(gaps)), float(np.min(gaps)),
            float(np.max(gaps)), float(np.std(gaps, ddof=0)))


def event_rate(events: Sequence, bin_size: TimeBin) -> List[TimeBinCount]:
    """Count events per fixed-width, epoch-anchored time bin.

    Bins run contiguously from the first event's bin to the last event's
    bin; empty bins in between are reported with a zero count.
    """
    ordered = _sorted_timestamps(events)
    if not ordered:
        return []

    bin_size = TimeBin(bin_size)
    bin_millis = bin_size.millis

    bins = Counter((t.to_unix_millis() // bin_millis) * bin_millis for t in ordered)
    first_bin = (ordered[0].to_unix_millis() // bin_millis) * bin_millis
    last_bin = (ordered[-1].to_unix_millis() // bin_millis) * bin_millis

    result = []
    for bin_start in range(first_bin, last_bin + 1, bin_millis):
        result.append(TimeBinCount(
            start=Timestamp.from_unix_millis(bin_start),
            end=Timestamp.from_unix_millis(bin_start + bin_millis),
            count=bins.get(bin_start, 0),
        ))

    logger.debug(f"Binned {len(ordered)} events into {len(result)} {bin_size.value} bins")
    return result


def detect_gaps(events: Sequence, threshold_secs: float) -> List[TimeRange]:
    """Quiet periods between consecutive events longer than the threshold"""
    ordered = _sorted_timestamps(events)
    if len(ordered) < 2:
        return []

    threshold_millis = int(threshold_secs * 1000)
    gaps = [
        TimeRange(earlier, later)
        for earlier, later in zip(ordered, ordered[1:])
        if later.to_unix_millis() - earlier.to_unix_millis() > threshold_millis
    ]
    return gaps


def detect_bursts(events: Sequence, window_secs: float, min_events: int) -> List[TimeRange]:
    """Greedy, non-overlapping scan for runs of at least ``min_events``.

    Each candidate window opens at an event timestamp and includes the
    following timestamps strictly less than ``window_secs`` after it. A hit
    consumes the whole run; a miss advances by one event.
    """
    ordered = _sorted_timestamps(events)
    if not ordered or min_events <= 0:
        return []

    window_millis = int(window_secs * 1000)
    millis = [t.to_unix_millis() for t in ordered]

    bursts = []
    i = 0
    while i < len(millis):
        window_end = millis[i] + window_millis

        count = 0
        for t in millis[i:]:
            if t >= window_end:
                break
            count += 1

        if count >= min_events:
            burst_end = i + count - 1
            bursts.append(TimeRange(ordered[i], ordered[burst_end]))
            i = burst_end + 1
        else:
            i += 1

    logger.debug(f"Detected {len(bursts)} bursts (window={window_secs}s, min_events={min_events})")
    return bursts
