# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for the Arbiter mesh engine.

All exceptions inherit from ArbiterError for consistent error handling.
"""

from typing import Optional


class ArbiterError(Exception):
    """Base exception for all Arbiter errors."""

    def __init__(
        self,
        message: str,
        code: str = "ARBITER_ERROR",
        details: Optional[dict] = None
    ):
        """
        Initialize Arbiter error.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for API response."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details
        }


class ConfigurationError(ArbiterError):
    """Configuration error."""

    def __init__(self, message: str, config_file: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize configuration error.

        Args:
            message: Configuration error message
            config_file: Configuration file path
            details: Additional error details
        """
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)
        self.config_file = config_file


# Error Message Utilities

def sanitize_error_for_user(error: Exception, include_type: bool = False) -> str:
    """
    Sanitize error messages before they are stored on a record.
    Removes surrounding whitespace and bounds the message length.

    Args:
        error: The exception to sanitize
        include_type: Whether to include exception type

    Returns:
        Error message without stack trace
    """
    error_msg = str(error).strip() or "Unknown error"

    # Limit message length
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."

    if include_type:
        return f"{error.__class__.__name__}: {error_msg}"

    return error_msg
