"""
Configuration Schemas.

One model per file in config/settings/. All models forbid unknown keys, so a
misspelt setting is reported when AppConfig loads instead of being ignored.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


# application.yaml


class ServerSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)


class CorsSchema(_StrictBase):
    origins: list[str] = Field(default_factory=list)


class PaginationSchema(_StrictBase):
    """Page size used when a listing request sends no limit, and the cap."""

    default_limit: int = Field(ge=1)
    max_limit: int = Field(ge=1)


class TimeoutsSchema(_StrictBase):
    """Seconds. `database` bounds connecting; `external_api` bounds CLI/editor HTTP calls."""

    database: int = Field(gt=0)
    external_api: int = Field(gt=0)


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str = Field(pattern=r"^/")
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    pagination: PaginationSchema
    timeouts: TimeoutsSchema


# database.yaml (the password is a secret and lives in config/.env)


class DatabaseSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)
    name: str
    user: str
    pool_size: int = Field(ge=1)
    max_overflow: int = Field(ge=0)
    pool_timeout: int = Field(gt=0)
    pool_recycle: int
    echo: bool


# logging.yaml


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int = Field(gt=0)
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: HandlersSchema


# autosave.yaml


class AutosaveSchema(_StrictBase):
    """Tunables of AutosaveController."""

    debounce_seconds: float = Field(gt=0)
    title_max_length: int = Field(ge=1, le=255)
    untitled_title: str = Field(min_length=1)


# templates.yaml


class NoteTemplateSchema(_StrictBase):
    """A starting note: `title`, `content` (markup) and `plain_text` are copied into it."""

    id: str = Field(pattern=r"^[a-z0-9-]+$")
    name: str
    description: str
    title: str
    content: str
    plain_text: str


class TemplatesSchema(_StrictBase):
    templates: list[NoteTemplateSchema]
