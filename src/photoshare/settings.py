from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import PICSUM_BASE_URL

PROJECT_ROOT = Path(__file__).resolve().parents[2]

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class UiSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = "PhotoShare - Random Photos"
    columns: int = Field(default=4, ge=1, le=12)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("ui.title must not be empty")
        return text


class ApiSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    base_url: str = PICSUM_BASE_URL
    page_size: int = Field(default=30, ge=1, le=100)
    timeout_seconds: int = Field(default=10, ge=1, le=120)
    user_agent: str = "photoshare/0.1"

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        text = value.strip().rstrip("/")
        parsed = urlparse(text)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("api.base_url must be an absolute http(s) URL")
        return text

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("api.user_agent must not be empty")
        return text


class PhotoShareYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ui: UiSettings = Field(default_factory=UiSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    photoshare_env: Literal["dev", "test", "prod"] = "dev"
    photoshare_config_path: Path = Path("config/photoshare.yaml")
    photoshare_log_level: LogLevel = "INFO"

    @field_validator("photoshare_log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class AppSettings(BaseModel):
    env: EnvSettings
    yaml: PhotoShareYamlSettings
    project_root: Path
    config_path: Path


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _load_yaml_settings(path: Path) -> PhotoShareYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"PhotoShare config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("PhotoShare config must be a YAML mapping/object at the top level")
    return PhotoShareYamlSettings.model_validate(raw_config)


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    env = EnvSettings()
    config_path = _resolve_project_path(env.photoshare_config_path)
    yaml_settings = _load_yaml_settings(config_path)
    return AppSettings(
        env=env,
        yaml=yaml_settings,
        project_root=PROJECT_ROOT,
        config_path=config_path,
    )
