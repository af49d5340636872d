"""Custom exceptions for printplan."""


class PrintPlanError(Exception):
    """Base exception for all printplan errors."""

    pass


class ValidationError(PrintPlanError):
    """Raised when validation fails."""

    pass


class ConfigurationError(PrintPlanError):
    """Raised when a scheduling run is requested with nothing to schedule or nowhere to put it."""

    pass


class ParseError(PrintPlanError):
    """Raised when YAML parsing fails."""

    pass
