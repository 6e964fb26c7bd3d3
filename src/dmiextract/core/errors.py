"""
Exception types for dmiextract.

Everything raised on purpose by this package derives from DmiExtractError so
the CLI can tell expected failures apart from programming errors.
"""

from __future__ import annotations

from pathlib import Path


class DmiExtractError(Exception):
    """Base class for all dmiextract errors."""


class InputValidationError(DmiExtractError):
    """An input file is missing or has the wrong extension."""

    def __init__(self, path: Path, reason: str, exit_code: int) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason
        self.exit_code = exit_code


class ContainerFormatError(DmiExtractError):
    """A container file could not be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class StateShapeError(DmiExtractError, ValueError):
    """A state's image grid or timing does not match its declared dimensions."""


class FrameTimingError(DmiExtractError, ValueError):
    """Frame images and frame durations cannot be paired one to one."""


class NotAnimatedError(DmiExtractError, ValueError):
    """An animation was requested for a state with a single frame."""


class OutputRootError(DmiExtractError):
    """The output root directory could not be created."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Failed to create directory {path}")
        self.path = path
