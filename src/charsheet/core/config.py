"""Configuration management for the charsheet rules core.

Settings are loaded with pydantic-settings from environment variables and
an optional .env file. The rules core itself never reads settings
implicitly inside its pure functions; callers (the loader, the default
dice roller, the host application) pass the relevant values in.

Example:
    >>> from charsheet.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.ruleset.supported_source
    'XPHB'

Environment Variables:
    CHARSHEET_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CHARSHEET_JSON_LOGS: Emit JSON log lines instead of console output
    CHARSHEET_RULESET_SUPPORTED_SOURCE: Source tag of the supported rules (XPHB)
    CHARSHEET_RULESET_SUPPORTED_EDITION: Edition marker of the supported rules (one)
    CHARSHEET_RULESET_DATA_PATH: Directory holding the reference JSON files
    CHARSHEET_DICE_SEED: Seed for reproducible dice rolls
    CHARSHEET_DICE_MAX_DICE: Most dice a single formula may roll (1-1000)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from charsheet.core.constants import MAX_DICE, MAX_DICE_LIMIT
from charsheet.core.exceptions import ConfigurationError


class RulesetSettings(BaseSettings):
    """Configuration for the supported ruleset variant.

    Attributes:
        supported_source: Source abbreviation retained by the edition filter.
        supported_edition: Edition marker retained by the edition filter.
        data_path: Directory containing 5etools-style reference JSON files.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARSHEET_RULESET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    supported_source: str = Field(
        default="XPHB",
        min_length=1,
        description="Source tag of the supported rules (2024 Player's Handbook)",
    )
    supported_edition: str = Field(
        default="one",
        min_length=1,
        description="Edition marker accepted alongside the source tag",
    )
    data_path: Path = Field(
        default=Path("data/5etools"),
        description="Directory of reference JSON collections",
    )

    @field_validator("supported_source", mode="after")
    @classmethod
    def normalize_source(cls, value: str) -> str:
        """Source tags are compared upper-cased, like entity keys."""
        return value.strip().upper()


class DiceSettings(BaseSettings):
    """Configuration for dice evaluation.

    Attributes:
        seed: Optional seed for reproducible rolls.
        max_dice: Most dice a single formula may roll.
        ability_score_sets: Number of 4d6kh3 totals in a generated array.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARSHEET_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    seed: int | None = Field(
        default=None,
        description="Random seed for reproducible rolls",
    )
    max_dice: int = Field(
        default=MAX_DICE,
        ge=1,
        le=MAX_DICE_LIMIT,
        description="Most dice a single formula may roll",
    )
    ability_score_sets: int = Field(
        default=6,
        ge=1,
        le=12,
        description="Ability score totals generated per array",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Render log lines as JSON.
        ruleset: Supported ruleset settings.
        dice: Dice evaluation settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Character Sheet Rules Core",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    ruleset: RulesetSettings = Field(default_factory=RulesetSettings)
    dice: DiceSettings = Field(default_factory=DiceSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "RulesetSettings",
    "DiceSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
