"""Application configuration using pydantic-settings."""

import logging
from pathlib import Path
from typing import Any, Dict, Literal, Union

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    reload: bool = Field(default=False, description="Enable auto-reload for development")
    log_level: str = Field(default="info", description="Uvicorn logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}")
        return v.lower()


class DatabaseConfig(BaseModel):
    """Topology/entity store configuration."""

    driver: Literal["sqlite", "memory"] = Field(default="sqlite", description="Store driver")
    path: str = Field(default="./data/cephprov.db", description="SQLite database file path")


class CephApiConfig(BaseModel):
    """Cluster control API endpoint configuration."""

    scheme: Literal["http", "https"] = Field(default="http", description="URL scheme")
    port: int = Field(default=8002, ge=1, le=65535, description="Control API port on monitor hosts")
    prefix: str = Field(default="api", description="Control API path prefix")
    request_timeout: float = Field(default=30.0, gt=0, description="Per-call HTTP timeout in seconds")
    verify_tls: bool = Field(default=True, description="Verify TLS certificates for https")

    @field_validator("prefix")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        """Normalise the prefix to have no surrounding slashes."""
        return v.strip("/")


class ProvisioningConfig(BaseModel):
    """Pool provisioning behaviour."""

    poll_interval: float = Field(default=2.0, gt=0, description="Seconds between request status polls")
    poll_timeout: Union[float, None] = Field(
        default=3600.0,
        gt=0,
        description="Give up polling after this many seconds (None waits forever)",
    )
    poll_max_attempts: Union[int, None] = Field(
        default=None,
        ge=1,
        description="Give up polling after this many status reads (None for no cap)",
    )
    task_retention: int = Field(
        default=1000,
        ge=1,
        description="Known tasks kept before the oldest finished ones are forgotten",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="info", description="Default logging level")
    audit_enabled: bool = Field(default=True, description="Write the JSON audit log")
    audit_file: str = Field(default="./data/audit.log", description="Audit log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        if v.lower() not in VALID_LOG_LEVELS:
            raise ValueError(f"level must be one of {VALID_LOG_LEVELS}")
        return v.lower()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CEPHPROV_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Sub-configurations
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    ceph_api: CephApiConfig = Field(default_factory=CephApiConfig)
    provisioning: ProvisioningConfig = Field(default_factory=ProvisioningConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Top-level settings
    api_v1_prefix: str = "/api/v1"
    environment: Literal["development", "staging", "production"] = "production"
    debug: bool = False

    @classmethod
    def load_from_yaml(cls, config_path: Union[str, Path]) -> "Settings":
        """Load settings from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Settings instance with values from YAML and environment

        Raises:
            yaml.YAMLError: If YAML parsing fails
        """
        config_path = Path(config_path)

        if not config_path.exists():
            logging.warning(f"Config file not found: {config_path}, using defaults")
            return cls()

        try:
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logging.error(f"Failed to parse YAML config: {e}")
            raise

        return cls(**config_data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump()


# Global settings instance
_settings: Union[Settings, None] = None


def get_settings() -> Settings:
    """Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings

    if _settings is None:
        config_file = Path("config.yaml")
        if config_file.exists():
            _settings = Settings.load_from_yaml(config_file)
        else:
            _settings = Settings()

    return _settings


def reload_settings(config_path: Union[str, Path, None] = None) -> Settings:
    """Reload settings from configuration file.

    Args:
        config_path: Path to configuration file (optional)

    Returns:
        Reloaded Settings instance
    """
    global _settings

    _settings = None
    if config_path:
        _settings = Settings.load_from_yaml(config_path)
        return _settings

    return get_settings()
