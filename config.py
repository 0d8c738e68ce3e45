# config.py: settings from the environment (.env supported) + logging setup
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class ConfigurationError(RuntimeError):
    pass


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    database_url: str
    environment: str = "production"
    log_level: str = "INFO"
    request_timeout: float = 30.0
    database_echo: bool = False
    app_name: str = "Local Library"

    @property
    def debug(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        # No fallback target: the store must be supplied by the deployment.
        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise ConfigurationError("DATABASE_URL is not set")
        return cls(
            database_url=database_url,
            environment=os.getenv("ENVIRONMENT", "production"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            database_echo=_env_bool("DATABASE_ECHO"),
            app_name=os.getenv("APP_NAME", "Local Library"),
        )


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger("catalog")
    if level:
        logger.setLevel(level.upper())
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    if not level:
        logger.setLevel(logging.INFO)
    return logger
