"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (VESPABRIDGE_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

CONFIG_ENV_VAR = "VESPABRIDGE_CONFIG"
"""Environment variable naming the YAML file the app factory loads."""

DEFAULT_CONFIG_FILE = "vespabridge-config.yaml"


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class BackendSettings(BaseModel):
    """Vespa backend configuration."""

    endpoint: str = Field(default="http://localhost:8080/", description="Vespa container base URL")
    document_type: str = Field(default="doc", description="Fixed Vespa document type for every index")
    timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")
    default_index: str = Field(
        default="default",
        description="Namespace used by search, count and mget when the path names no index",
    )

    @field_validator("endpoint")
    @classmethod
    def _ensure_trailing_slash(cls, v: str) -> str:
        """Relative backend paths are joined onto the endpoint, so it must end in '/'."""
        return v if v.endswith("/") else v + "/"


class ProxySettings(BaseModel):
    """Inbound request handling."""

    path_prefix: str = Field(default="", description="Prefix stripped from every request path before routing")

    @field_validator("path_prefix")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the VESPABRIDGE_ prefix.
    Nested settings use double underscores: VESPABRIDGE_SERVER__PORT=9200

    Example:
        VESPABRIDGE_SERVER__PORT=9200
        VESPABRIDGE_BACKEND__ENDPOINT=http://vespa:8080/
        VESPABRIDGE_PROXY__PATH_PREFIX=/opensearch
    """

    model_config = {
        "env_prefix": "VESPABRIDGE_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    server: ServerSettings = Field(default_factory=ServerSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over keyword values, so YAML loaded through from_yaml
        # stays overridable by VESPABRIDGE_* variables.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
