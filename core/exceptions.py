"""Exception hierarchy for the spatial narrative data model.

Analytics functions are total and never raise for degenerate input; only the
value types validate themselves at construction time.
"""


class SpatialNarrativeError(Exception):
    """Base class for all errors raised by this package"""


class InvalidInputError(SpatialNarrativeError, ValueError):
    """A value type was constructed from invalid input"""


class InvalidLatitudeError(InvalidInputError):
    def __init__(self, lat):
        self.lat = lat
        super().__init__(f"invalid latitude {lat}: must be between -90 and 90")


class InvalidLongitudeError(InvalidInputError):
    def __init__(self, lon):
        self.lon = lon
        super().__init__(f"invalid longitude {lon}: must be between -180 and 180")


class InvalidTimestampError(InvalidInputError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"invalid timestamp: {value}")


class InvalidBoundsError(InvalidInputError):
    """Raised when a GeoBounds or TimeRange has min > max"""


class MissingFieldError(InvalidInputError):
    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"missing required field: {field_name}")
