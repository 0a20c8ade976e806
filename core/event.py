import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .exceptions import MissingFieldError
from .location import Location
from .timestamp import Timestamp


class SourceType(Enum):
    ARTICLE = "article"
    REPORT = "report"
    WITNESS = "witness"
    SENSOR = "sensor"
    ARCHIVE = "archive"
    OTHER = "other"


@dataclass(frozen=True)
class SourceRef:
    """Where an event was reported"""
    source_type: SourceType
    title: Optional[str] = None
    url: Optional[str] = None
    author: Optional[str] = None


def _new_event_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Event:
    """Something that happened at a place and time.

    Tags may be passed as any iterable; they are stored as a tuple in the
    order given (duplicates kept). Similarity scoring treats them as a set.
    """
    location: Location
    timestamp: Timestamp
    text: str = ""
    tags: Tuple[str, ...] = ()
    source: Optional[SourceRef] = None
    id: str = field(default_factory=_new_event_id)

    def __post_init__(self):
        if self.location is None:
            raise MissingFieldError("location")
        if self.timestamp is None:
            raise MissingFieldError("timestamp")
        if isinstance(self.tags, str):
            object.__setattr__(self, "tags", (self.tags,))
        else:
            object.__setattr__(self, "tags", tuple(self.tags))

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags
