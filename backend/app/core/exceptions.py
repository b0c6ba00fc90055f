"""
Domain errors for lines, stations and sections.
Routes translate these into HTTP responses.
"""


class SubwayError(Exception):
    """Base class for every error raised by the subway domain"""

    default_message = "Subway domain error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


# ---------------------------------------------------------------------------
# Section topology
# ---------------------------------------------------------------------------

class SectionError(SubwayError):
    default_message = "Invalid section operation"


class DuplicateSectionError(SectionError):
    default_message = "Section is already registered"


class DisconnectedSectionError(SectionError):
    default_message = "Section cannot be registered: neither station is on the line"


class InvalidDistanceError(SectionError):
    default_message = "Invalid section distance"


class InvalidSectionError(SectionError):
    default_message = "Invalid section"


class TooFewSectionsError(SectionError):
    default_message = "Line has fewer sections than the minimum removable size"


class StationNotOnLineError(SectionError):
    default_message = "Station is not on this line"


class InvalidSectionSetError(SectionError):
    """Stored sections do not form a single simple path"""

    default_message = "Stored sections do not form a single path"


# ---------------------------------------------------------------------------
# Directory / lifecycle
# ---------------------------------------------------------------------------

class StationNotFoundError(SubwayError):
    default_message = "Station not found"


class DuplicateStationError(SubwayError):
    default_message = "Station name already exists"


class StationInUseError(SubwayError):
    default_message = "Station is registered on a line"


class LineNotFoundError(SubwayError):
    default_message = "Line not found"


class DuplicateLineError(SubwayError):
    default_message = "Line name already exists"
