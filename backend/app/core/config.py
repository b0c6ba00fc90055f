import os
import logging
from dotenv import load_dotenv

# Reload .env file to pick up changes
load_dotenv(override=True)  # override=True ensures new values replace old ones

logger = logging.getLogger(__name__)


class Settings:
	APP_NAME: str = os.getenv("APP_NAME", "SubwayLines")
	ENV: str = os.getenv("ENV", "dev")
	API_PREFIX: str = os.getenv("API_PREFIX", "")
	LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

	DB_TYPE: str = os.getenv("DB_TYPE", "sqlite")  # 'sqlite' or 'postgresql'
	DB_HOST: str = os.getenv("DB_HOST", "localhost")
	DB_PORT: str = os.getenv("DB_PORT", "5432")
	DB_USER: str = os.getenv("DB_USER", "postgres")
	DB_PASSWORD: str = os.getenv("DB_PASSWORD", "postgres")
	DB_NAME: str = os.getenv("DB_NAME", "subway")
	# Optional explicit path for SQLite files
	SQLITE_PATH: str | None = os.getenv("SQLITE_PATH")
	# Full SQLAlchemy URL for managed DBs
	DATABASE_URL: str | None = os.getenv("DATABASE_URL")

	SQLALCHEMY_ECHO: bool = os.getenv("SQLALCHEMY_ECHO", "false").lower() == "true"

	def __init__(self):
		"""Validate database configuration on initialization"""
		self._validate_database_config()

	def _validate_database_config(self):
		"""Log warnings for incomplete database configuration"""
		if self.DB_TYPE not in ("sqlite", "postgresql"):
			logger.warning(f"Unknown DB_TYPE={self.DB_TYPE!r}, expected 'sqlite' or 'postgresql'")
		if self.DB_TYPE == "postgresql":
			if not self.DATABASE_URL:
				logger.warning(
					f"DATABASE_URL is not set. Falling back to individual DB_* variables. "
					f"Using DB_HOST={self.DB_HOST}, DB_PORT={self.DB_PORT}, DB_NAME={self.DB_NAME}"
				)
			else:
				# Don't log the actual URL, it carries credentials
				logger.info("DATABASE_URL is set (using provided connection string)")

	@property
	def sync_database_uri(self) -> str:
		# Prefer a provided DATABASE_URL when not using sqlite
		if self.DATABASE_URL and self.DB_TYPE != "sqlite":
			url = self.DATABASE_URL
			# Convert postgres:// to postgresql+psycopg://
			if url.startswith("postgres://"):
				url = "postgresql+psycopg://" + url[len("postgres://"):]
			elif url.startswith("postgresql://"):
				url = "postgresql+psycopg://" + url[len("postgresql://"):]
			if not url.startswith("postgresql+psycopg://"):
				url = "postgresql+psycopg://" + url
			logger.debug("Using DATABASE_URL for connection (hostname masked)")
			return url
		if self.DB_TYPE == "sqlite":
			if self.SQLITE_PATH:
				db_path = self.SQLITE_PATH
			else:
				base_dir = "/tmp" if self.ENV != "dev" else os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
				db_path = os.path.join(base_dir, f"{self.DB_NAME}.db")
			# Ensure directory exists to avoid OperationalError on first run
			os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
			return f"sqlite:///{db_path}"
		uri = f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
		logger.debug(f"Constructed database URI from individual components (host={self.DB_HOST}, port={self.DB_PORT})")
		return uri


settings = Settings()
