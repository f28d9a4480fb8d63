"""hexsphere-specific exception hierarchy.

Expected failures of the generation pipeline (an invalid level, a grid that
fails validation) are reported through diagnostics lists, not exceptions.
The classes below cover misuse at the API seams.
"""

import hexsphere


class HexSphereError(Exception):
    """Base class for all hexsphere-specific exceptions.

    It automatically prefixes the hexsphere version to help with debugging reports.
    """

    def __init__(self, message: str):
        self.hexsphere_version = getattr(hexsphere, "__version__", "unknown")
        # Store the original message cleanly for programmatic access
        self.original_message = message
        full_message = f"[hexsphere {self.hexsphere_version}] {message}"
        super().__init__(full_message)


# Grid Errors
class GridError(HexSphereError):
    """Generic errors related to building or querying a grid."""


class InvalidLevelError(GridError):
    """Raised when a subdivision level is not an integer in the supported range."""

    def __init__(self, level, min_level: int = 0, max_level: int | None = None):
        self.level = level
        self.min_level = min_level
        self.max_level = max_level
        if max_level is None:
            message = f"Invalid level {level}. Level must be an integer >= {min_level}."
        else:
            message = (
                f"Invalid level {level}. "
                f"Level must be between {min_level} and {max_level}."
            )
        super().__init__(message)


class InvalidDirectionError(GridError):
    """Raised when a zero-length or non-finite vector has to be normalized."""

    def __init__(self, direction):
        self.direction = direction
        super().__init__(f"Cannot normalize direction {direction}.")


# Settings Errors
class SettingsError(HexSphereError):
    """Raised when generation settings are invalid or cannot be changed."""

    def __init__(self, param_name: str | None = None, reason: str | None = None):
        # Allow flexible usage: raise SettingsError("Generic message")
        # OR: raise SettingsError("merge_tolerance", "must be positive")
        if param_name and reason:
            message = f"Invalid setting '{param_name}': {reason}"
            self.param_name = param_name
        else:
            message = param_name if param_name else "Invalid settings"
            self.param_name = None

        super().__init__(message)
