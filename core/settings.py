from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from core.exceptions import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Load .env file from project root
_env_path = PROJECT_ROOT / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


class GeometrySettings(BaseModel):
    epsilon: float = Field(1e-6, gt=0.0, le=1e-2)


class CollisionSettings(BaseModel):
    # Floor applied to non-positive box dimensions in the incremental engine
    min_dimension_ft: float = Field(1e-6, gt=0.0)
    # Upper bound on concurrently open interactive collision sessions
    max_sessions: int = Field(256, ge=1)


class StorageSettings(BaseModel):
    data_root: Path = Path("data")

    @field_validator("data_root", mode="before")
    @classmethod
    def _coerce_root(cls, value: Any) -> Path:
        if value is None or value == "":
            return Path("data")
        return Path(value)

    @property
    def layouts_root(self) -> Path:
        return resolve_path(self.data_root) / "layouts"


class CatalogSettings(BaseModel):
    path: Path = Path("config/equipment.yaml")

    @property
    def resolved_path(self) -> Path:
        return resolve_path(self.path)


class Settings(BaseModel):
    geometry: GeometrySettings = Field(default_factory=GeometrySettings)
    collision: CollisionSettings = Field(default_factory=CollisionSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from YAML configuration file.

        Args:
            path: Optional path to configuration file. If not provided, uses
                SHOPFLOOR_CONFIG environment variable or defaults to
                config/default.yaml under the project root.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            ConfigurationError: If the file does not exist or is invalid.
        """
        config_path = path or resolve_path(Path(os.getenv("SHOPFLOOR_CONFIG", "config/default.yaml")))
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)},
            )
        with config_path.open("r", encoding="utf-8") as fp:
            payload = yaml.safe_load(fp) or {}
        try:
            return cls(**payload)
        except Exception as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}", {"path": str(config_path)}) from exc


def resolve_path(path: Path) -> Path:
    """Resolve relative paths against the project root."""
    return path if path.is_absolute() else PROJECT_ROOT / path


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> Settings:
    return Settings.load(Path(path) if path else None)


__all__ = [
    "Settings",
    "GeometrySettings",
    "CollisionSettings",
    "StorageSettings",
    "CatalogSettings",
    "get_settings",
    "resolve_path",
]
