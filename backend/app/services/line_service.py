"""
Line lifecycle: creating, editing and deleting lines and registering or
removing their sections.

Section rows are stored without order. Every structural change loads them into
a SectionSet, applies the change there and writes the resulting rows back in
the same transaction.
"""
from dataclasses import dataclass
from typing import List
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateLineError, LineNotFoundError
from app.core.sections import Section, SectionSet
from app.db.models import Line, LineSection, Station
from app.services.station_directory import resolve_station, resolve_stations

logger = logging.getLogger(__name__)


@dataclass
class LineDetail:
    """A line together with its sections and stations in travel order"""
    line: Line
    sections: List[Section]
    stations: List[Station]


# ============================================================================
# Row <-> SectionSet conversion
# ============================================================================

def load_section_set(line: Line) -> SectionSet:
    sections = [
        Section(
            station=row.station_id,
            predecessor=row.predecessor_station_id,
            distance=row.distance,
            line_id=line.id,
        )
        for row in line.sections
    ]
    return SectionSet.from_unordered(sections, line_id=line.id)


def store_section_set(line: Line, section_set: SectionSet) -> None:
    """Replace the stored rows of a line with the given sections."""
    line.sections.clear()
    for section in section_set.ordered():
        line.sections.append(
            LineSection(
                station_id=section.station,
                predecessor_station_id=section.predecessor,
                distance=section.distance,
            )
        )


def describe_line(db: Session, line: Line) -> LineDetail:
    section_set = load_section_set(line)
    station_ids = section_set.stations()
    stations = resolve_stations(db, station_ids)
    return LineDetail(
        line=line,
        sections=section_set.ordered(),
        stations=[stations[station_id] for station_id in station_ids],
    )


# ============================================================================
# Lookups
# ============================================================================

def _get_line(db: Session, line_id: int, for_update: bool = False) -> Line:
    query = select(Line).where(Line.id == line_id)
    if for_update:
        # One structural change per line at a time
        query = query.with_for_update()
    line = db.scalars(query).first()
    if line is None:
        raise LineNotFoundError(f"Line {line_id} not found")
    return line


def _ensure_unique_name(db: Session, name: str, line_id: int | None = None) -> None:
    existing = db.scalars(select(Line).where(Line.name == name)).first()
    if existing is not None and existing.id != line_id:
        raise DuplicateLineError(f"Line '{name}' already exists")


def find_all_lines(db: Session) -> List[Line]:
    return list(db.scalars(select(Line).order_by(Line.id)).all())


def find_line(db: Session, line_id: int) -> LineDetail:
    return describe_line(db, _get_line(db, line_id))


# ============================================================================
# Line lifecycle
# ============================================================================

def save_line(
    db: Session,
    name: str,
    color: str,
    up_station_id: int,
    down_station_id: int,
    distance: int,
) -> LineDetail:
    """
    Create a line with its first two stations.

    The start section and the first end-to-end section are registered
    together, a failure in either leaves nothing behind.
    """
    _ensure_unique_name(db, name)
    stations = resolve_stations(db, [up_station_id, down_station_id])
    up_station, down_station = stations[up_station_id], stations[down_station_id]

    line = Line(name=name, color=color)
    db.add(line)
    db.flush()

    section_set = SectionSet(line.id)
    section_set.insert(Section(station=up_station.id, line_id=line.id))
    section_set.insert(
        Section(station=down_station.id, predecessor=up_station.id, distance=distance, line_id=line.id)
    )
    store_section_set(line, section_set)
    db.commit()
    db.refresh(line)
    logger.info(f"Created line {line.id} ({line.name}) from station {up_station.id} to {down_station.id}")
    return describe_line(db, line)


def update_line(db: Session, line_id: int, name: str, color: str) -> Line:
    line = _get_line(db, line_id)
    _ensure_unique_name(db, name, line_id=line.id)
    line.name = name
    line.color = color
    db.commit()
    logger.info(f"Updated line {line_id}: name={name}, color={color}")
    return line


def delete_line(db: Session, line_id: int) -> None:
    line = _get_line(db, line_id)
    db.delete(line)
    db.commit()
    logger.info(f"Deleted line {line_id}")


# ============================================================================
# Sections
# ============================================================================

def add_section(
    db: Session,
    line_id: int,
    up_station_id: int,
    down_station_id: int,
    distance: int,
) -> LineDetail:
    line = _get_line(db, line_id, for_update=True)
    stations = resolve_stations(db, [up_station_id, down_station_id])

    section_set = load_section_set(line)
    section_set.insert(
        Section(
            station=stations[down_station_id].id,
            predecessor=stations[up_station_id].id,
            distance=distance,
            line_id=line.id,
        )
    )
    store_section_set(line, section_set)
    db.commit()
    db.refresh(line)
    return describe_line(db, line)


def remove_section(db: Session, line_id: int, station_id: int) -> None:
    line = _get_line(db, line_id, for_update=True)
    station = resolve_station(db, station_id)

    section_set = load_section_set(line)
    section_set.remove(station.id)
    store_section_set(line, section_set)
    db.commit()
