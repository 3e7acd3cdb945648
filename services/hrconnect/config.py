"""
Configuration management for the HR Connect access service.

Non-secret configuration loaded from YAML file, overridden by environment variables.
"""

import os
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def yaml_config_settings_source() -> dict[str, Any]:
    """Load configuration from YAML file."""
    config_path = Path(os.environ.get("HRCONNECT_CONFIG_FILE", "/etc/hrconnect/config.yaml"))
    if config_path.exists():
        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    return {}


# --- Mapping Source Configuration Models ---


class MappingBackend(StrEnum):
    """Supported mapping table sources."""

    FILE = "file"
    HTTP = "http"


class FileSourceConfig(BaseModel):
    """Local JSON file holding the mapping table."""

    path: str = Field(
        default="/etc/hrconnect/hr_mapping.json",
        description="Path to a JSON array of mapping records",
    )


class HttpSourceConfig(BaseModel):
    """Remote endpoint serving the mapping table as a JSON array."""

    url: str = Field(default="", description="Mapping endpoint URL")
    timeout_seconds: float = Field(default=10.0, description="Request timeout in seconds")
    headers: dict[str, str] = Field(
        default_factory=lambda: {"Accept": "application/json"},
        description="Extra request headers",
    )


class MappingConfig(BaseModel):
    """Mapping table loading configuration."""

    backend: MappingBackend = Field(
        default=MappingBackend.FILE,
        description="Mapping source: file or http",
    )
    file: FileSourceConfig = Field(default_factory=FileSourceConfig)
    http: HttpSourceConfig = Field(default_factory=HttpSourceConfig)
    ready_timeout_seconds: float = Field(
        default=5.0,
        description="How long readers wait for the initial load before using fallback roles",
    )


# --- Access Configuration ---


class AccessConfig(BaseModel):
    """Identity resolution and fixed-role configuration."""

    admin_identity: str = Field(default="admin001", description="Synthetic system admin id")
    admin_display_name: str = Field(default="System Admin")
    default_identity: str = Field(
        default="admin001",
        description="Identity used when the request carries no identity parameter",
    )
    senior_identities: list[str] = Field(
        default=["H541", "H2081", "H3237"],
        description="Identities always granted global visibility",
    )
    identity_params: list[str] = Field(
        default=["userId", "id", "user"],
        description="Query parameters checked, in order, for the viewer identity",
    )


# --- Directory Configuration ---

# Known staff, including the fallback and senior identities
DEFAULT_DISPLAY_NAMES: dict[str, str] = {
    "H1766": "Vishu Kumar",
    "H2396": "Atul Inderyas",
    "H535": "Amar Debnath",
    "H955": "Himanshu Chaudhary",
    "H546": "Ajay Hatimuria",
    "H3362": "Karthick G",
    "H833": "Nandish M",
    "H1355": "Suresh A",
    "H2155": "Jagruti Narendra Bhanushali",
    "H2601": "Kiran Kumar KN",
    "H3270": "Gorijala Umakanth",
    "H1575": "Vruchika Prathamesh Nanavare",
    "H2908": "Shailesh Ramhari Sahu",
    "H2273": "Sanjay Madhukar Jadhav",
    "H3386": "Abhishek Vilas Satardekar",
    "H2758": "Rutuja Shirish Gaikwad",
    "H2262": "Anil Rawat",
    "H3578": "Abhishek Singh",
    "H2165": "Monica Kithodya",
    "H2761": "Subin K",
    "H1972": "Swati Raju Shetti",
    "H3603": "Manasi Jagdish Sawant",
    "H3247": "Thatikonda Sunil Kumar",
    "H2081": "Swapna Sarit Padhi",
    "H541": "Amritanshu Prasad",
}


class DirectoryConfig(BaseModel):
    """People directory used for display names."""

    display_names: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DISPLAY_NAMES),
        description="Identity id to display name",
    )


# --- CORS Configuration ---


class CORSConfig(BaseModel):
    """CORS (Cross-Origin Resource Sharing) configuration."""

    allow_origins: list[str] = Field(
        default_factory=list,
        description="Allowed origins. Empty list means CORS middleware is disabled.",
    )
    allow_credentials: bool = Field(default=False)
    allow_methods: list[str] = Field(default=["GET", "POST", "OPTIONS"])
    allow_headers: list[str] = Field(default=["Content-Type", "X-Request-ID"])


# --- Main Settings ---


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="HRCONNECT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="hrconnect-api")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=True, description="JSON logging in production")

    mapping: MappingConfig = Field(default_factory=MappingConfig)
    access: AccessConfig = Field(default_factory=AccessConfig)
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig)
    cors: CORSConfig = Field(default_factory=CORSConfig)

    # API
    api_prefix: str = Field(default="/api/v1")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings sources: env vars override YAML config."""
        return (
            init_settings,
            env_settings,
            yaml_config_settings_source,
            dotenv_settings,
            file_secret_settings,
        )


# Global settings instance
settings = Settings()
