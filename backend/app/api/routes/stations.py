from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from app.api.errors import to_http_exception
from app.db.session import get_db
from app.services import station_directory


router = APIRouter()


class StationRequest(BaseModel):
	name: str

	@field_validator("name")
	@classmethod
	def name_not_blank(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("name must not be blank")
		return value


class StationResponse(BaseModel):
	id: int
	name: str
	created_at: Optional[datetime] = None

	model_config = {"from_attributes": True}


@router.post("", response_model=StationResponse, status_code=status.HTTP_201_CREATED)
def create_station(payload: StationRequest, response: Response, db: Session = Depends(get_db)) -> StationResponse:
	try:
		station = station_directory.create_station(db, payload.name)
	except Exception as e:
		raise to_http_exception(db, e, "station creation")
	response.headers["Location"] = f"/stations/{station.id}"
	return StationResponse.model_validate(station)


@router.get("", response_model=List[StationResponse])
def show_stations(db: Session = Depends(get_db)) -> List[StationResponse]:
	try:
		stations = station_directory.list_stations(db)
	except Exception as e:
		raise to_http_exception(db, e, "station listing")
	return [StationResponse.model_validate(station) for station in stations]


@router.delete("/{station_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_station(station_id: int, db: Session = Depends(get_db)) -> Response:
	try:
		station_directory.delete_station(db, station_id)
	except Exception as e:
		raise to_http_exception(db, e, "station deletion")
	return Response(status_code=status.HTTP_204_NO_CONTENT)
