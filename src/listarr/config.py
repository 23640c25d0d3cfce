"""Configuration management for ListArr."""

import os
import re
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from listarr.models.import_list import ImportListDefinition, ListSyncLevel


class TMDBConfig(BaseModel):
    """TMDB API configuration."""

    enabled: bool = Field(default=True, description="Enrich list movies from TMDB")
    api_key: Optional[str] = Field(
        default=None, validate_default=True, description="TMDB API key"
    )
    cache_ttl_days: int = Field(default=7, description="Cache TTL in days")
    cache_path: str = Field(default="/config/tmdb_cache.db", description="Cache database path")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str], info) -> Optional[str]:
        """Validate API key is provided when TMDB is enabled."""
        enabled = info.data.get("enabled", True)
        if enabled and not v:
            raise ValueError("TMDB API key required when TMDB is enabled")
        return v


class DatabaseConfig(BaseModel):
    """Library database configuration."""

    path: str = Field(default="/config/listarr.db", description="SQLite database path")


class SyncConfig(BaseModel):
    """Import list sync configuration."""

    interval_minutes: int = Field(
        default=360, ge=0, description="Minutes between scheduled syncs (0 disables)"
    )
    max_parallel_fetches: int = Field(
        default=4, ge=1, description="Lists fetched concurrently"
    )
    request_timeout_seconds: float = Field(default=30.0, description="HTTP timeout per list")


class HealthConfig(BaseModel):
    """Import list health tracking configuration."""

    minimum_time_since_initial_failure: int = Field(
        default=300,
        ge=0,
        description="Seconds a list must keep failing before it is blocked",
    )


class APIConfig(BaseModel):
    """API server configuration."""

    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=7879, description="API port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="json", description="Log format (json or text)")
    level: str = Field(default="info", description="Log level")
    output: Optional[str] = Field(default=None, description="Log file path (console only if unset)")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in ("trace", "debug", "info", "warning", "error", "critical"):
            raise ValueError("Invalid log level")
        return v.lower()


class Config(BaseModel):
    """Main configuration model."""

    import_lists: List[ImportListDefinition] = Field(
        default_factory=list, description="Configured import lists"
    )
    list_sync_level: ListSyncLevel = Field(
        default=ListSyncLevel.DISABLED,
        description="Cleanup policy for library movies missing from all lists",
    )
    tmdb: TMDBConfig = Field(
        default_factory=lambda: TMDBConfig(enabled=False), description="TMDB configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    sync: SyncConfig = Field(default_factory=SyncConfig, description="Sync configuration")
    health: HealthConfig = Field(default_factory=HealthConfig, description="List health tracking")
    api: APIConfig = Field(default_factory=APIConfig, description="API configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    @field_validator("import_lists")
    @classmethod
    def validate_unique_ids(cls, v: List[ImportListDefinition]) -> List[ImportListDefinition]:
        """Validate import list ids are unique."""
        ids = [definition.id for definition in v]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate import list ids: {duplicates}")
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Replace ${VAR_NAME} references with environment values."""
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            def replace_var(match):
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    raise ValueError(
                        f"Environment variable '{var_name}' not found "
                        f"(referenced in configuration)"
                    )
                return value

            return re.sub(r"\$\{([^}]+)\}", replace_var, obj)
        else:
            return obj

    @classmethod
    def from_defaults(cls) -> "Config":
        """Create configuration with default values."""
        return cls()


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load configuration from file or use defaults.

    Args:
        path: Optional path to configuration file. If None, uses defaults.

    Returns:
        Config instance
    """
    if path is None:
        return Config.from_defaults()

    return Config.from_yaml(path)
