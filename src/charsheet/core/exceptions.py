"""Exception hierarchy for the charsheet rules core.

Every error raised by the core inherits from CharsheetError, so a host
application can catch the whole family at its boundary while still
reacting to the specific rules violation (a bad dice formula, an
over-spent resource, an unknown rules entity).

None of these errors is transient. They describe bad input or a rules
violation and are returned to the immediate caller unchanged.

Example:
    >>> from charsheet.core.exceptions import InvalidFormulaError
    >>> raise InvalidFormulaError("Unrecognised dice notation", expression="2x6")
"""

from __future__ import annotations

from typing import Any


class CharsheetError(Exception):
    """Base exception for all charsheet errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(CharsheetError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(CharsheetError):
    """Raised when an argument is malformed.

    Used for inputs outside any closed vocabulary (an unknown condition
    name, a key without a source separator, a non-positive amount).
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# Rules Domain Exceptions
# =============================================================================


class RulesError(CharsheetError):
    """Base exception for violations of the game rules model."""


class InvalidFormulaError(RulesError):
    """Raised when dice notation fails the grammar or a structural check.

    Structural checks cover a non-positive count, a non-standard die, a
    count above the configured dice cap, and a keep count of zero or
    larger than the number of dice rolled.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize formula error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression is not None:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class InsufficientResourceError(RulesError):
    """Raised when a use requests more than is currently available.

    Consumption is never clamped, so the caller always learns that the
    requested action was not affordable.
    """

    def __init__(
        self,
        message: str,
        *,
        resource: str | None = None,
        requested: int | None = None,
        available: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize insufficient resource error with pool context.

        Args:
            message: Human-readable error description.
            resource: Name of the resource or slot pool.
            requested: Amount the caller tried to consume.
            available: Amount that was actually available.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if resource:
            combined_details["resource"] = resource
        if requested is not None:
            combined_details["requested"] = requested
        if available is not None:
            combined_details["available"] = available
        super().__init__(message, details=combined_details)


class OutOfRangeError(RulesError):
    """Raised when a bounded input falls outside its closed interval."""

    def __init__(
        self,
        message: str,
        *,
        value: int | None = None,
        minimum: int | None = None,
        maximum: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize range error with bounds context.

        Args:
            message: Human-readable error description.
            value: The rejected value.
            minimum: Inclusive lower bound.
            maximum: Inclusive upper bound.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if value is not None:
            combined_details["value"] = value
        if minimum is not None:
            combined_details["minimum"] = minimum
        if maximum is not None:
            combined_details["maximum"] = maximum
        super().__init__(message, details=combined_details)


class UnsupportedScoreError(RulesError):
    """Raised when a point-buy cost is requested outside the cost table."""

    def __init__(
        self,
        message: str,
        *,
        score: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if score is not None:
            combined_details["score"] = score
        super().__init__(message, details=combined_details)


# =============================================================================
# Reference Data Exceptions
# =============================================================================


class ReferenceDataError(CharsheetError):
    """Base exception for reference-data lookup and loading errors."""


class UnknownEntityError(ReferenceDataError):
    """Raised when a lookup by key or name matches no reference record."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        category: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize unknown entity error with lookup context.

        Args:
            message: Human-readable error description.
            key: The entity key or name that was looked up.
            category: Reference category searched (spell, class, ...).
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if key:
            combined_details["key"] = key
        if category:
            combined_details["category"] = category
        super().__init__(message, details=combined_details)


class DataLoadError(ReferenceDataError):
    """Raised when reference data files cannot be read or decoded."""

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if source_file:
            combined_details["source_file"] = source_file
        super().__init__(message, details=combined_details)


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
]
