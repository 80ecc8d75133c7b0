"""
Configuration Management.

Two sources, both resolved from the directory holding `.project_root`:

    config/.env               secrets only (DB_PASSWORD)
    config/settings/*.yaml    everything else, one file per AppConfig section

    application.yaml   name, server, cors, pagination, timeouts
    database.yaml      PostgreSQL connection and pool
    logging.yaml       levels and handlers
    autosave.yaml      editor debounce window and title derivation
    templates.yaml     note template catalog

Each YAML file is validated against its schema in config_schema.py when
AppConfig is built, so a typo in a key fails at startup, not at first use.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from modules.backend.core.config_schema import (
    ApplicationSchema,
    AutosaveSchema,
    DatabaseSchema,
    LoggingSchema,
    TemplatesSchema,
)

PROJECT_MARKER = ".project_root"


def find_project_root() -> Path:
    """Walk up from the working directory to the first `.project_root`."""
    for directory in (Path.cwd(), *Path.cwd().parents):
        if (directory / PROJECT_MARKER).exists():
            return directory
    raise RuntimeError(f"Project root not found. Ensure {PROJECT_MARKER} file exists.")


def validate_project_root() -> Path:
    """find_project_root() for entry scripts: exits with a message instead of raising."""
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets from config/.env or the environment."""

    db_password: str

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_section(schema: type[BaseModel], filename: str) -> Any:
    try:
        return schema(**load_yaml_config(filename))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """Typed view over config/settings/*.yaml, one attribute per file."""

    application: ApplicationSchema
    database: DatabaseSchema
    logging: LoggingSchema
    autosave: AutosaveSchema
    templates: TemplatesSchema

    SECTIONS: dict[str, tuple[type[BaseModel], str]] = {
        "application": (ApplicationSchema, "application.yaml"),
        "database": (DatabaseSchema, "database.yaml"),
        "logging": (LoggingSchema, "logging.yaml"),
        "autosave": (AutosaveSchema, "autosave.yaml"),
        "templates": (TemplatesSchema, "templates.yaml"),
    }

    def __init__(self) -> None:
        for name, (schema, filename) in self.SECTIONS.items():
            setattr(self, name, _load_section(schema, filename))


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=str(find_project_root() / "config" / ".env"))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def get_database_url(async_driver: bool = True) -> str:
    """
    Build the PostgreSQL URL from database.yaml and DB_PASSWORD.

    Args:
        async_driver: asyncpg URL for the app; plain postgresql:// for tools
    """
    db = get_app_config().database
    driver = "postgresql+asyncpg" if async_driver else "postgresql"
    return f"{driver}://{db.user}:{get_settings().db_password}@{db.host}:{db.port}/{db.name}"


def get_server_base_url() -> tuple[str, float]:
    """Return (base_url, timeout_seconds) the CLI and ApiNoteStore connect with."""
    app = get_app_config().application
    return f"http://{app.server.host}:{app.server.port}", float(app.timeouts.external_api)
