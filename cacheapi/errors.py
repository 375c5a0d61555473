"""
CacheAPI - Core Error Types

Defines the exception hierarchy for the host-facing layers (configuration,
backend registry, factory). Cache backends themselves never raise across
their public contract: failures there surface as False / None.
"""

from typing import Any


class CacheAPIError(Exception):
    """Base exception for all CacheAPI errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging or admin responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(CacheAPIError):
    """Raised when configuration is invalid or missing."""


class DependencyError(CacheAPIError):
    """Raised when a backend's required package is missing or fails to load."""

    def __init__(
        self,
        package: str,
        feature: str | None = None,
        install_hint: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        if feature:
            message = f"Required dependency '{package}' is missing for {feature}"
        else:
            message = f"Required dependency '{package}' is missing"

        if install_hint:
            message += f". Install with: {install_hint}"

        error_details = details or {}
        error_details.update(
            {
                "package": package,
                "feature": feature,
                "install_hint": install_hint,
            }
        )

        super().__init__(message, error_details)
        self.package = package
        self.feature = feature
