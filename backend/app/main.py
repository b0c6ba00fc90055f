from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import lines, stations
from .db.session import engine, test_connection
from .db.models import Base
from sqlalchemy.exc import SQLAlchemyError
import os
import logging

from .core.config import settings

# Configure logging
logging.basicConfig(
	level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
	format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:

	app = FastAPI(
		title=f"{settings.APP_NAME} Backend",
		description="Subway line and section management backend (FastAPI)",
		version="0.1.0",
	)

	allowed_origins = [
		"http://localhost:5173",
		"http://127.0.0.1:5173",
	]
	# Allow override via env var (comma-separated)
	env_origins = os.getenv("CORS_ALLOW_ORIGINS")
	if env_origins:
		allowed_origins = [o.strip() for o in env_origins.split(",") if o.strip()]

	app.add_middleware(
		CORSMiddleware,
		allow_origins=allowed_origins,
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	app.include_router(lines.router, prefix=f"{settings.API_PREFIX}/lines", tags=["lines"])
	app.include_router(stations.router, prefix=f"{settings.API_PREFIX}/stations", tags=["stations"])

	# Ensure database tables exist on startup
	@app.on_event("startup")
	def on_startup() -> None:
		logger.info(f"Database configuration: DB_TYPE={settings.DB_TYPE}, ENV={settings.ENV}")

		connection_ok, error_msg = test_connection()
		if not connection_ok:
			logger.error(f"Database connection test failed: {error_msg}")
			logger.error("Application will continue to start, but database operations may fail.")
		else:
			logger.info("Database connection test successful")

		try:
			Base.metadata.create_all(bind=engine)
			logger.info("Database tables created/verified successfully")
		except SQLAlchemyError as e:
			logger.error(f"Failed to create database tables: {str(e)}", exc_info=True)

	@app.get("/health")
	def health() -> dict:
		return {"status": "ok"}

	@app.get("/")
	def root() -> dict:
		return {"message": f"{settings.APP_NAME} backend is running"}

	return app


app = create_app()
