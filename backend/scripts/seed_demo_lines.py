#!/usr/bin/env python3
"""Seed a demo line so the /lines endpoints return meaningful data locally.

Creates a handful of stations and the Sinbundang line, then registers sections
between, before and after the initial pair of stations.

Run from repository root:
python backend/scripts/seed_demo_lines.py

The script uses the project's SQLAlchemy engine and session helpers.
Rerunning it is safe: existing stations are reused and an existing line is kept.
"""
import sys
import logging

# Ensure backend package dir is on path so we can import app.* modules
from pathlib import Path
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select

from app.core.exceptions import DuplicateLineError
from app.db.session import engine, get_db_session
from app.db.models import Base, Station
from app.services import line_service


STATION_NAMES = ["Gangnam", "Yangjae", "Cheonggye", "Pangyo", "Gwanggyo"]


def create_schema() -> None:
    print("Ensuring database schema exists...")
    Base.metadata.create_all(bind=engine)


def seed_demo() -> None:
    with get_db_session() as db:
        ids = {}
        for name in STATION_NAMES:
            station = db.scalars(select(Station).where(Station.name == name)).first()
            if station is None:
                station = Station(name=name)
                db.add(station)
                db.flush()
            ids[name] = station.id
        db.commit()

        try:
            detail = line_service.save_line(db, "Sinbundang", "bg-red-600", ids["Yangjae"], ids["Pangyo"], 100)
        except DuplicateLineError:
            print("Line 'Sinbundang' already exists, leaving it untouched")
            return

        line_id = detail.line.id
        line_service.add_section(db, line_id, ids["Yangjae"], ids["Cheonggye"], 50)
        line_service.add_section(db, line_id, ids["Gangnam"], ids["Yangjae"], 50)
        detail = line_service.add_section(db, line_id, ids["Pangyo"], ids["Gwanggyo"], 50)

        print(f"Seeded line {line_id}: " + " -> ".join(s.name for s in detail.stations))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_schema()
    seed_demo()
