"""
Settings for the engine and the API.

Values come from the YAML files under ``config/``; ``${VAR:-default}``
references inside them are expanded from the process environment.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


class StorageConfig(BaseModel):
    """Persistent store configuration."""

    backend: Literal["file", "memory"] = Field(default="file", description="Key-value backend")
    data_dir: str = Field(default="data", description="Directory for the file backend")
    key_prefix: str = Field(default="logipro_tms_", description="Namespace prefix for stored keys")
    seed_defaults: bool = Field(default=True, description="Seed the demo dataset when a key is absent")


class QueryConfig(BaseModel):
    """List view configuration."""

    page_size: int = Field(default=10, ge=1, description="Records per page")


class ImporterConfig(BaseModel):
    """Bulk CSV import configuration."""

    unavailable_sentinel: str = Field(default="N/A", description="Placeholder for missing origin/destination")
    delivery_offset_days: int = Field(default=3, ge=0, description="Default estimated delivery offset")
    template_delivery_offset_days: int = Field(default=5, ge=0, description="Delivery offset in the template row")
    placeholder_item_name: str = Field(default="Imported Item", description="Item used when ItemsJSON is unreadable")


class ApiConfig(BaseModel):
    """HTTP API configuration."""

    title: str = Field(default="LogiPro TMS API", description="API title")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")


class Config(BaseSettings):
    """Main configuration class."""

    environment: str = Field(default="dev", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    storage: StorageConfig = Field(default_factory=StorageConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    importer: ImporterConfig = Field(default_factory=ImporterConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    class Config:
        env_prefix = "TMS_"
        env_nested_delimiter = "__"


ENV_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


class ConfigLoader:
    """
    Build a Config from ``base.yaml`` and ``<environment>.yaml``.

    The environment file is deep-merged over the base file, then
    ``${VAR}`` and ``${VAR:-default}`` references are expanded from the
    process environment. Unset variables without a default expand to an
    empty string inside longer values and to None when they are the whole
    value, so the field default applies.
    """

    def __init__(self, config_dir: str | Path | None = None):
        self.config_dir = Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR
        self._config: Config | None = None

    def _deep_merge(self, base: dict, override: dict) -> dict:
        merged = dict(base)
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = self._deep_merge(current, value)
            else:
                merged[key] = value
        return merged

    def _read(self, filename: str) -> dict[str, Any]:
        path = self.config_dir / filename
        if not path.is_file():
            return {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    def _expand(self, value: Any) -> Any:
        if isinstance(value, dict):
            expanded = {key: self._expand(item) for key, item in value.items()}
            return {key: item for key, item in expanded.items() if item is not None}
        if isinstance(value, list):
            return [self._expand(item) for item in value]
        if not isinstance(value, str):
            return value

        whole = ENV_REFERENCE.fullmatch(value)
        if whole:
            return os.environ.get(whole["name"], whole["default"])
        return ENV_REFERENCE.sub(lambda m: os.environ.get(m["name"], m["default"] or ""), value)

    def load(self, environment: str | None = None) -> Config:
        """Load configuration for ``environment`` (default: $ENVIRONMENT, then "dev")."""
        environment = environment or os.environ.get("ENVIRONMENT", "dev")

        raw = self._deep_merge(self._read("base.yaml"), self._read(f"{environment}.yaml"))
        values = self._expand(raw)
        values["environment"] = environment

        self._config = Config(**values)
        return self._config

    @property
    def config(self) -> Config:
        """Loaded configuration, loading the default environment on first access."""
        if self._config is None:
            return self.load()
        return self._config


def get_config(environment: str | None = None, config_dir: str | Path | None = None) -> Config:
    """Load configuration for an environment from the given (or default) config directory."""
    return ConfigLoader(config_dir).load(environment)
