"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        CharsheetError: Base exception for all charsheet errors.
        InvalidFormulaError, InsufficientResourceError, OutOfRangeError,
        UnsupportedScoreError, UnknownEntityError: rules-level failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        character_context: Tag log entries with the character being edited.
"""

from __future__ import annotations

from charsheet.core.config import (
    DiceSettings,
    RulesetSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from charsheet.core.exceptions import (
    CharsheetError,
    ConfigurationError,
    DataLoadError,
    InsufficientResourceError,
    InvalidFormulaError,
    OutOfRangeError,
    ReferenceDataError,
    RulesError,
    UnknownEntityError,
    UnsupportedScoreError,
    ValidationError,
)
from charsheet.core.logging import (
    character_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "CharsheetError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Rules exceptions
    "RulesError",
    "InvalidFormulaError",
    "InsufficientResourceError",
    "OutOfRangeError",
    "UnsupportedScoreError",
    # Reference data exceptions
    "ReferenceDataError",
    "UnknownEntityError",
    "DataLoadError",
    # Configuration
    "Settings",
    "RulesetSettings",
    "DiceSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "character_context",
]
