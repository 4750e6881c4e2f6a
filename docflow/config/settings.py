"""Root settings model for Docflow configuration."""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from docflow.config.models.conversation import ConversationConfig
from docflow.config.models.observability import ObservabilityConfig
from docflow.config.models.routing import AutoSessionConfig, RoutingConfig
from docflow.config.models.storage import StorageConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# TOML config consumed by TomlConfigSettingsSource
_toml_config: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Set the TOML configuration to be used by Settings."""
    global _toml_config
    _toml_config = config


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that reads from the loaded TOML configuration."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        """Get field value from TOML config."""
        value = _toml_config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        """Return the TOML config values."""
        return _toml_config.copy()


class Settings(BaseSettings):
    """Root configuration object containing all nested configuration sections.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{DOCFLOW_ENV}.toml (environment overrides)
    4. DOCFLOW_* environment variables (runtime overrides)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCFLOW_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="docflow", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")
    workspace_root: str = Field(
        default=".",
        description="Root directory that document paths are resolved against",
    )

    conversation: ConversationConfig = Field(
        default_factory=ConversationConfig,
        description="Conversation engine configuration",
    )
    routing: RoutingConfig = Field(
        default_factory=RoutingConfig,
        description="Session router configuration",
    )
    auto_session: AutoSessionConfig = Field(
        default_factory=AutoSessionConfig,
        description="Auto-session (implicit agent) configuration",
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Host state storage configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include TOML config.

        Priority order (highest to lowest):
        1. init_settings (constructor arguments)
        2. env_settings (DOCFLOW_* environment variables)
        3. toml_settings (config/*.toml files)
        4. (defaults from model)
        """
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )
