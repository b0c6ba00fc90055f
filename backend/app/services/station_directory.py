"""
Station directory backed by the stations table.
Resolves numeric station ids to stored stations.
"""
from typing import Dict, Iterable, List
import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateStationError, StationInUseError, StationNotFoundError
from app.db.models import LineSection, Station

logger = logging.getLogger(__name__)


def resolve_station(db: Session, station_id: int) -> Station:
	"""Return the station with the given id or raise StationNotFoundError."""
	station = db.get(Station, station_id)
	if station is None:
		raise StationNotFoundError(f"Station {station_id} not found")
	return station


def resolve_stations(db: Session, station_ids: Iterable[int]) -> Dict[int, Station]:
	"""
	Resolve several ids with a single query.

	Every id must exist, the first missing one raises StationNotFoundError.
	"""
	wanted = list(dict.fromkeys(station_ids))
	if not wanted:
		return {}
	rows = db.scalars(select(Station).where(Station.id.in_(wanted))).all()
	found = {station.id: station for station in rows}
	for station_id in wanted:
		if station_id not in found:
			raise StationNotFoundError(f"Station {station_id} not found")
	return found


def list_stations(db: Session) -> List[Station]:
	return list(db.scalars(select(Station).order_by(Station.id)).all())


def create_station(db: Session, name: str) -> Station:
	existing = db.scalars(select(Station).where(Station.name == name)).first()
	if existing is not None:
		raise DuplicateStationError(f"Station '{name}' already exists")
	station = Station(name=name)
	db.add(station)
	db.commit()
	db.refresh(station)
	logger.info(f"Created station {station.id} ({station.name})")
	return station


def delete_station(db: Session, station_id: int) -> None:
	station = resolve_station(db, station_id)
	in_use = db.scalars(
		select(LineSection.id).where(
			or_(LineSection.station_id == station_id, LineSection.predecessor_station_id == station_id)
		)
	).first()
	if in_use is not None:
		raise StationInUseError(f"Station {station_id} is registered on a line")
	db.delete(station)
	db.commit()
	logger.info(f"Deleted station {station_id}")
