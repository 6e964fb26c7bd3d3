"""
Path and file system utilities for dmiextract.

This module handles:
- Deriving a container's base name for output folders and prefixes
- Validating input container paths before anything is written
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from ..core.constants import CONTAINER_EXTENSION, EXIT_FILE_NOT_FOUND, EXIT_WRONG_EXTENSION
from ..core.errors import InputValidationError


def container_base_name(path: Path | str) -> str:
    """Return the container's name with directories and every extension stripped.

    Examples:
        "icons/mob/human.dmi" -> "human"
        "C:\\icons\\walk.dmi" -> "walk"
        "obj.old.dmi" -> "obj"

    Args:
        path (Path | str): Container path.

    Returns:
        str: Base name used for the per-container folder or filename prefix.
    """
    name = str(path).replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    return name.split(".", 1)[0]


def validate_input_file(path: Path, extension: str = CONTAINER_EXTENSION) -> None:
    """Check that one input exists and carries the container extension.

    Raises:
        InputValidationError: exit_code EXIT_FILE_NOT_FOUND or EXIT_WRONG_EXTENSION.
    """
    if not path.is_file():
        raise InputValidationError(path, "File does not exist", EXIT_FILE_NOT_FOUND)
    if not path.name.endswith(extension):
        raise InputValidationError(
            path, f"Non-{extension.lstrip('.').upper()} file extension", EXIT_WRONG_EXTENSION
        )


def validate_inputs(files: Iterable[Path], extension: str = CONTAINER_EXTENSION) -> None:
    """Validate every input up front, stopping at the first bad one."""
    for path in files:
        validate_input_file(Path(path), extension)
