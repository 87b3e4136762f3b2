"""
Defensive programming utilities for Sweepr.
Input validation for values that arrive from the command line or prompts.
"""

import logging
from typing import Any, List, Optional, Sequence


class ConfigurationError(Exception):
    """Raised when a run cannot start: bad mode, profile, or task definition."""
    pass


class InputValidator:
    """Validates all inputs defensively."""

    # Characters that would let a profile name escape the profile base directory
    FORBIDDEN_PROFILE_CHARS = ('/', '\\', '\x00', ':')

    @staticmethod
    def validate_string(value: Any, min_length: int = 0, max_length: int = 10000,
                        allow_empty: bool = True, allow_none: bool = False) -> Optional[str]:
        """
        Validate string input.

        Args:
            value: Value to validate
            min_length: Minimum string length
            max_length: Maximum string length
            allow_empty: Allow empty strings
            allow_none: Allow None values

        Returns:
            Validated string or None

        Raises:
            ConfigurationError: If validation fails
        """
        if value is None:
            if allow_none:
                return None
            raise ConfigurationError("String cannot be None")

        if not isinstance(value, str):
            raise ConfigurationError(f"Expected string, got {type(value).__name__}")

        if not value and not allow_empty:
            raise ConfigurationError("String cannot be empty")

        if len(value) < min_length:
            raise ConfigurationError(f"String too short (min {min_length}): {len(value)}")

        if len(value) > max_length:
            raise ConfigurationError(f"String too long (max {max_length}): {len(value)}")

        return value

    @staticmethod
    def validate_profile_name(name: Any) -> str:
        """
        Validate a user profile name before it is joined onto a base directory.

        Args:
            name: Raw profile name (from CLI or prompt)

        Returns:
            The stripped profile name

        Raises:
            ConfigurationError: If the name is empty or could escape the base directory
        """
        if name is None:
            raise ConfigurationError("No profile name provided")
        if not isinstance(name, str):
            raise ConfigurationError(f"Invalid profile name type: {type(name).__name__}")

        cleaned = name.strip()
        if not cleaned:
            raise ConfigurationError("No profile name provided")

        if cleaned in ('.', '..'):
            raise ConfigurationError(f"Invalid profile name: {cleaned!r}")

        for char in InputValidator.FORBIDDEN_PROFILE_CHARS:
            if char in cleaned:
                logging.warning(f"Rejected profile name containing {char!r}: {cleaned!r}")
                raise ConfigurationError(f"Invalid profile name: {cleaned!r}")

        return cleaned

    @staticmethod
    def validate_argv(argv: Any) -> List[str]:
        """
        Validate an external command definition.

        Args:
            argv: Sequence of program name followed by its arguments

        Returns:
            argv as a list of strings

        Raises:
            ConfigurationError: If argv is empty or contains non-string items
        """
        if argv is None or isinstance(argv, (str, bytes)):
            raise ConfigurationError("Command must be a sequence of strings, not a single string")

        if not isinstance(argv, Sequence):
            raise ConfigurationError(f"Invalid command type: {type(argv).__name__}")

        if len(argv) == 0:
            raise ConfigurationError("Command is empty")

        if not all(isinstance(part, str) for part in argv):
            raise ConfigurationError("Command contains non-string values")

        if not argv[0]:
            raise ConfigurationError("Command program name is empty")

        return list(argv)

