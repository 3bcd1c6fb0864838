"""Centralized application configuration using Pydantic Settings (v2).

Values come from, in order of precedence:
- real environment variables
- `.env` and `.env.local` in the working directory

Everything the service needs from its surroundings lives here: where the event
store is, where uploaded images go, where the frontend build is served from,
and how the upstream geocoder is reached.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
StoreBackend = Literal["memory", "mongo"]


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `TIMELINEMAP_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    store_backend : StoreBackend
        `memory` keeps events in-process; `mongo` uses `MONGO_URI`.
    mongo_uri : str
        MongoDB connection string; maps from `MONGO_URI`.
    uploads_dir : Path
        Root directory for uploaded images, served under `/uploads`.
    frontend_build_dir : Path
        Directory holding the single-page app build (`index.html`).
    geocoder_user_agent : str
        Identification string sent to the upstream geocoder (usage policy).
    """

    environment: EnvName = Field(default="dev", alias="TIMELINEMAP_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")

    store_backend: StoreBackend = Field(default="memory", alias="STORE_BACKEND")
    mongo_uri: str = Field(default="mongodb://localhost:27017/timeline", alias="MONGO_URI")
    mongo_database: str = Field(default="timeline", alias="MONGO_DATABASE")

    uploads_dir: Path = Field(default=Path("uploads"), alias="UPLOADS_DIR")
    frontend_build_dir: Path = Field(default=Path("frontend/build"), alias="FRONTEND_BUILD_DIR")

    geocoder_base_url: str = Field(
        default="https://nominatim.openstreetmap.org", alias="GEOCODER_BASE_URL"
    )
    geocoder_user_agent: str = Field(default="TimelineMapApp/1.0", alias="GEOCODER_USER_AGENT")
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0, alias="GEOCODER_TIMEOUT_SECONDS")

    seed_demo_data: bool = Field(default=True, alias="SEED_DEMO_DATA")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: object) -> object:
        # LOG_LEVEL=debug is as common as LOG_LEVEL=DEBUG
        return v.upper() if isinstance(v, str) else v

    @property
    def is_dev(self) -> bool:
        """True under `TIMELINEMAP_ENV=dev` (enables auto-reload in `server.main`)."""
        return self.environment == "dev"

    def log_level_numeric(self) -> int:
        """Map `log_level` onto the `logging` module's numeric constants."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Build the process-wide `Settings` once.

    Call `load_settings.cache_clear()` after changing `os.environ` (tests do)
    to pick the new values up.
    """
    os.environ.setdefault("TIMELINEMAP_ENV", "dev")
    return Settings()


def get_logger(name: str = "timelinemap") -> logging.Logger:
    """Return the named logger with a single stream handler at `LOG_LEVEL`.

    Handlers are attached once per name; the level is re-read on every call
    so a cleared settings cache takes effect for later lookups.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
