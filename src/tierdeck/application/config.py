from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from tierdeck.domain.constants import DEFAULT_DECK_FILE


class AppConfig(BaseSettings):
    """
    Configuration model for the tierdeck CLI.
    Supports loading from:
    1. Environment variables (TIERDECK_*)
    2. Config file (~/.config/tierdeck/config.toml)
    3. Manual overrides (CLI)

    Scheduling itself has no settings; these only tell the CLI where the
    deck lives and how chatty to be.
    """

    model_config = SettingsConfigDict(
        env_prefix="TIERDECK_",
        extra="ignore",
    )

    deck_path: Path | None = None
    day: int | None = Field(default=None, ge=0)
    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Earlier sources win: CLI overrides, then env, then the TOML file.
        toml_file = next((f for f in _config_files() if f.exists()), None)
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("deck_path", mode="before")
    @classmethod
    def resolve_deck_path(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()


def _config_files() -> list[Path]:
    return [
        Path.home() / ".config/tierdeck/config.toml",
        Path.home() / ".tierdeck.toml",
    ]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/tierdeck/config.toml (if exists)
    3. Environment variables (TIERDECK_*)
    4. cli_overrides (passed from Typer, None values dropped)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    config = AppConfig(**overrides)

    if config.deck_path is None:
        config.deck_path = (Path.cwd() / DEFAULT_DECK_FILE).resolve()

    return config
