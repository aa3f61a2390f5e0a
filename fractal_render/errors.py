"""
Exception types raised by fractal rendering.

Parsing and configuration problems are reported before any pixel is
evaluated, so a failed render never leaves a partial buffer or output file.
"""

from typing import Optional


class FractalRenderError(Exception):
    """Base class for all fractal rendering errors."""


class UsageError(FractalRenderError):
    """Wrong number of command-line arguments."""


class ParseError(FractalRenderError, ValueError):
    """A command-line or config value could not be parsed."""

    def __init__(self, argument: str, value: Optional[str] = None, reason: Optional[str] = None):
        """
        Initialize parse error.

        Args:
            argument: Name of the offending argument
            value: Raw text that failed to parse
            reason: Optional explanation of the expected format
        """
        self.argument = argument
        self.value = value
        self.reason = reason

        message = f"Invalid {argument}"
        if value is not None:
            message += f" '{value}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConfigurationError(FractalRenderError, ValueError):
    """Render parameters that would produce a degenerate image."""


class OutputError(FractalRenderError, OSError):
    """The output image could not be written."""
