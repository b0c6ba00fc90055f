from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from app.api.errors import to_http_exception
from app.api.routes.stations import StationResponse
from app.db.models import Line
from app.db.session import get_db
from app.services import line_service
from app.services.line_service import LineDetail


router = APIRouter()


# ============================================================================
# Request / response payloads
# ============================================================================

class LineUpdateRequest(BaseModel):
	name: str
	color: str

	@field_validator("name", "color")
	@classmethod
	def not_blank(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("must not be blank")
		return value


class LineRequest(LineUpdateRequest):
	up_station_id: int = Field(..., gt=0)
	down_station_id: int = Field(..., gt=0)
	distance: int = Field(..., gt=0)


class SectionCreateRequest(BaseModel):
	up_station_id: int = Field(..., gt=0)
	down_station_id: int = Field(..., gt=0)
	distance: int = Field(..., gt=0)


class SectionDeleteRequest(BaseModel):
	station_id: int = Field(..., gt=0)


class SectionResponse(BaseModel):
	"""One hop of the line; up_station_id is null for the start station"""
	up_station_id: Optional[int] = None
	down_station_id: int
	distance: int


class LinesResponse(BaseModel):
	id: int
	name: str
	color: str
	created_at: Optional[datetime] = None


class LineResponse(LinesResponse):
	stations: List[StationResponse] = []
	sections: List[SectionResponse] = []


class SectionCreateResponse(LineResponse):
	pass


def _summary(line: Line) -> LinesResponse:
	return LinesResponse(id=line.id, name=line.name, color=line.color, created_at=line.created_at)


def _detail(detail: LineDetail, model: type[LineResponse] = LineResponse) -> LineResponse:
	line = detail.line
	return model(
		id=line.id,
		name=line.name,
		color=line.color,
		created_at=line.created_at,
		stations=[StationResponse.model_validate(station) for station in detail.stations],
		sections=[
			SectionResponse(
				up_station_id=section.predecessor,
				down_station_id=section.station,
				distance=section.distance,
			)
			for section in detail.sections
		],
	)


# ============================================================================
# Lines
# ============================================================================

@router.get("", response_model=List[LinesResponse])
def show_lines(db: Session = Depends(get_db)) -> List[LinesResponse]:
	try:
		lines = line_service.find_all_lines(db)
	except Exception as e:
		raise to_http_exception(db, e, "line listing")
	return [_summary(line) for line in lines]


@router.get("/{line_id}", response_model=LineResponse)
def show_line(line_id: int, db: Session = Depends(get_db)) -> LineResponse:
	try:
		detail = line_service.find_line(db, line_id)
	except Exception as e:
		raise to_http_exception(db, e, f"lookup of line {line_id}")
	return _detail(detail)


@router.post("", response_model=LineResponse, status_code=status.HTTP_201_CREATED)
def create_line(payload: LineRequest, response: Response, db: Session = Depends(get_db)) -> LineResponse:
	try:
		detail = line_service.save_line(
			db,
			name=payload.name,
			color=payload.color,
			up_station_id=payload.up_station_id,
			down_station_id=payload.down_station_id,
			distance=payload.distance,
		)
	except Exception as e:
		raise to_http_exception(db, e, "line creation")
	response.headers["Location"] = f"/lines/{detail.line.id}"
	return _detail(detail)


@router.put("/{line_id}", response_model=LinesResponse)
def update_line(line_id: int, payload: LineUpdateRequest, db: Session = Depends(get_db)) -> LinesResponse:
	try:
		line = line_service.update_line(db, line_id, payload.name, payload.color)
	except Exception as e:
		raise to_http_exception(db, e, f"update of line {line_id}")
	return _summary(line)


@router.delete("/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_line(line_id: int, db: Session = Depends(get_db)) -> Response:
	try:
		line_service.delete_line(db, line_id)
	except Exception as e:
		raise to_http_exception(db, e, f"deletion of line {line_id}")
	return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# Sections
# ============================================================================

@router.post("/{line_id}/sections", response_model=SectionCreateResponse, status_code=status.HTTP_201_CREATED)
def create_section(
	line_id: int,
	payload: SectionCreateRequest,
	response: Response,
	db: Session = Depends(get_db),
) -> SectionCreateResponse:
	try:
		detail = line_service.add_section(
			db,
			line_id,
			up_station_id=payload.up_station_id,
			down_station_id=payload.down_station_id,
			distance=payload.distance,
		)
	except Exception as e:
		raise to_http_exception(db, e, f"section registration on line {line_id}")
	response.headers["Location"] = f"/lines/{line_id}"
	return _detail(detail, SectionCreateResponse)


@router.delete("/{line_id}/sections", status_code=status.HTTP_204_NO_CONTENT)
def delete_section(line_id: int, payload: SectionDeleteRequest, db: Session = Depends(get_db)) -> Response:
	try:
		line_service.remove_section(db, line_id, payload.station_id)
	except Exception as e:
		raise to_http_exception(db, e, f"section removal on line {line_id}")
	return Response(status_code=status.HTTP_204_NO_CONTENT)
