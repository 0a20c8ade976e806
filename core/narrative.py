import uuid
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set

import pandas as pd

from .bounds import GeoBounds, TimeRange
from .event import Event
from .timestamp import Timestamp


@dataclass
class NarrativeMetadata:
    title: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None


@dataclass
class Narrative:
    """An ordered collection of events plus descriptive metadata.

    The narrative owns its event list; analytics receive ``narrative.events``
    and never modify it.
    """
    events: List[Event] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    metadata: NarrativeMetadata = field(default_factory=NarrativeMetadata)

    def __post_init__(self):
        self.events = list(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)

    @property
    def description(self) -> Optional[str]:
        return self.metadata.description

    def events_sorted_by_time(self) -> List[Event]:
        return sorted(self.events, key=lambda e: e.timestamp.to_unix_millis())

    def time_range(self) -> Optional[TimeRange]:
        if not self.events:
            return None
        millis = [e.timestamp.to_unix_millis() for e in self.events]
        return TimeRange(Timestamp.from_unix_millis(min(millis)), Timestamp.from_unix_millis(max(millis)))

    def bounds(self) -> Optional[GeoBounds]:
        return GeoBounds.from_locations(e.location for e in self.events)

    def tags(self) -> Set[str]:
        return {tag for e in self.events for tag in e.tags}

    def filter_by_tag(self, tag: str) -> List[Event]:
        return [e for e in self.events if e.has_tag(tag)]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per event, in narrative order"""
        columns = ["id", "lat", "lon", "timestamp_ms", "text", "tags"]
        rows = [
            {
                "id": e.id,
                "lat": e.location.lat,
                "lon": e.location.lon,
                "timestamp_ms": e.timestamp.to_unix_millis(),
                "text": e.text,
                "tags": list(e.tags),
            }
            for e in self.events
        ]
        return pd.DataFrame(rows, columns=columns)
