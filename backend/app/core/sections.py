"""
Section topology for a single subway line.

A line is stored as a set of directed, distance-weighted sections. The start
station is carried by a section without a predecessor, every other section
points from its predecessor station to its station. Together they must form
one simple path.
"""
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional
import logging

from app.core.exceptions import (
    DisconnectedSectionError,
    DuplicateSectionError,
    InvalidDistanceError,
    InvalidSectionError,
    InvalidSectionSetError,
    StationNotOnLineError,
    TooFewSectionsError,
)

logger = logging.getLogger(__name__)

# A line with this many sections (two stations) cannot lose a station
MIN_REMOVABLE_SIZE = 2


@dataclass(frozen=True)
class Section:
    """One hop of a line: predecessor -> station, distance measured between them"""
    station: int
    predecessor: Optional[int] = None
    distance: int = 0
    line_id: Optional[int] = None

    def __post_init__(self):
        if self.station == self.predecessor:
            raise InvalidSectionError(f"Section cannot connect station {self.station} to itself")
        if self.distance < 0:
            raise InvalidDistanceError(f"Distance must not be negative (got {self.distance})")
        if self.predecessor is None and self.distance != 0:
            raise InvalidDistanceError("Start section of a line must have distance 0")

    @property
    def is_start(self) -> bool:
        return self.predecessor is None


class SectionSet:
    """
    Sections of one line, kept in path order.

    The order is maintained incrementally by insert/remove. Each mutation
    builds the new order first and swaps it in only when validation passed,
    so a rejected operation leaves the set untouched.
    """

    def __init__(self, line_id: Optional[int] = None):
        self.line_id = line_id
        self._sections: List[Section] = []

    @classmethod
    def from_unordered(cls, sections: Iterable[Section], line_id: Optional[int] = None) -> "SectionSet":
        """Rebuild the path order from sections stored without any order."""
        sections = list(sections)
        section_set = cls(line_id)
        if not sections:
            return section_set

        starts = [s for s in sections if s.is_start]
        if len(starts) != 1:
            raise InvalidSectionSetError(f"Expected exactly one start section, found {len(starts)}")

        leaving: Dict[int, Section] = {}
        for section in sections:
            if section.is_start:
                continue
            if section.predecessor in leaving:
                raise InvalidSectionSetError(f"Station {section.predecessor} branches into two sections")
            leaving[section.predecessor] = section

        ordered = [starts[0]]
        visited = {starts[0].station}
        following = leaving.get(starts[0].station)
        while following is not None:
            if following.station in visited:
                raise InvalidSectionSetError(f"Sections loop back to station {following.station}")
            ordered.append(following)
            visited.add(following.station)
            following = leaving.get(following.station)

        if len(ordered) != len(sections):
            raise InvalidSectionSetError(
                f"{len(sections) - len(ordered)} section(s) are not connected to the start station"
            )

        section_set._sections = ordered
        return section_set

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self):
        return iter(list(self._sections))

    def __contains__(self, station: int) -> bool:
        return any(s.station == station for s in self._sections)

    def ordered(self) -> List[Section]:
        """Sections from the start of the line to its end."""
        return list(self._sections)

    def stations(self) -> List[int]:
        return [s.station for s in self._sections]

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------
    def insert(self, section: Section) -> None:
        """
        Register a section, splitting the edge it falls into or extending
        the line at either end.
        """
        if not self._sections:
            self._sections = [section]
            logger.debug("Registered first section %s", section)
            return

        if section.is_start:
            raise InvalidSectionError("Line already has a start station")

        upstream_exists = section.predecessor in self
        downstream_exists = section.station in self
        if upstream_exists and downstream_exists:
            raise DuplicateSectionError(
                f"Stations {section.predecessor} and {section.station} are both already on the line"
            )
        if not upstream_exists and not downstream_exists:
            raise DisconnectedSectionError(
                f"Neither station {section.predecessor} nor {section.station} is on the line"
            )

        if upstream_exists:
            self._sections = self._insert_after(section)
        else:
            self._sections = self._insert_before(section)
        logger.info("Inserted section %s -> %s (%s)", section.predecessor, section.station, section.distance)

    def _insert_after(self, section: Section) -> List[Section]:
        # section starts at a station already on the line
        path = self._sections
        index = self._index_leaving(section.predecessor)
        if index is None:
            return path + [section]

        old = path[index]
        remainder = self._split_remainder(old, section)
        shortened = replace(old, predecessor=section.station, distance=remainder)
        return path[:index] + [section, shortened] + path[index + 1:]

    def _insert_before(self, section: Section) -> List[Section]:
        # section ends at a station already on the line
        path = self._sections
        index = self._index_entering(section.station)
        old = path[index]
        if old.is_start:
            new_start = replace(old, station=section.predecessor)
            return [new_start, section] + path[1:]

        remainder = self._split_remainder(old, section)
        shortened = replace(old, station=section.predecessor, distance=remainder)
        return path[:index] + [shortened, section] + path[index + 1:]

    @staticmethod
    def _split_remainder(old: Section, section: Section) -> int:
        if section.distance >= old.distance:
            raise InvalidDistanceError(
                f"Distance {section.distance} must be shorter than the section it splits ({old.distance})"
            )
        return old.distance - section.distance

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------
    def remove(self, station: int) -> None:
        """Drop a station from the line, merging its two neighbouring sections."""
        if len(self._sections) <= MIN_REMOVABLE_SIZE:
            raise TooFewSectionsError(
                f"A line needs more than {MIN_REMOVABLE_SIZE} sections to remove a station"
            )

        path = self._sections
        leaving = self._index_leaving(station)
        entering = self._index_entering(station)

        if leaving is None and entering is None:
            raise StationNotOnLineError(f"Station {station} is not on the line")

        if leaving is not None and entering is not None:
            before, after = path[entering], path[leaving]
            if before.is_start:
                merged = replace(before, station=after.station)
            else:
                merged = Section(
                    station=after.station,
                    predecessor=before.predecessor,
                    distance=before.distance + after.distance,
                    line_id=before.line_id,
                )
            self._sections = path[:entering] + [merged] + path[leaving + 1:]
        elif entering is not None:
            self._sections = path[:entering] + path[entering + 1:]
        else:
            self._sections = path[:leaving] + path[leaving + 1:]
        logger.info("Removed station %s, %d section(s) left", station, len(self._sections))

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------
    def _index_leaving(self, station: int) -> Optional[int]:
        for index, section in enumerate(self._sections):
            if section.predecessor is not None and section.predecessor == station:
                return index
        return None

    def _index_entering(self, station: int) -> Optional[int]:
        for index, section in enumerate(self._sections):
            if section.station == station:
                return index
        return None
