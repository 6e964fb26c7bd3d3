"""
Output path planning for exported artifacts.

Every function here is pure: given the export configuration, the container's
base name and a state's dimensions, it returns where an artifact goes. Nothing
touches the filesystem.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import NamedTuple

from ..config import ExportConfig
from .constants import ANIMATED_EXTENSION, ANIMATED_FOLDER, STILL_EXTENSION, STILL_FOLDER
from .model import State


class ArtifactKind(Enum):
    """Kind of exported artifact."""

    STILL = "still"
    ANIMATED = "animated"

    @property
    def extension(self) -> str:
        return STILL_EXTENSION if self is ArtifactKind.STILL else ANIMATED_EXTENSION

    @property
    def folder(self) -> str:
        return STILL_FOLDER if self is ArtifactKind.STILL else ANIMATED_FOLDER


class PlannedArtifact(NamedTuple):
    """One artifact to write; frame is None for animations."""

    kind: ArtifactKind
    state: State
    direction: int
    frame: int | None
    path: Path


def artifact_dir(config: ExportConfig, base: str, kind: ArtifactKind) -> Path:
    """Directory an artifact of `kind` from container `base` is written to."""
    out = config.output_root
    if config.per_container_subfolder:
        out = out / base
    if config.per_format_subfolder:
        out = out / kind.folder
    return out


def artifact_stem(
    config: ExportConfig,
    base: str,
    state: State,
    direction: int,
    frame: int | None,
) -> str:
    """Build the filename stem for one artifact.

    Direction and frame suffixes only appear when the state actually has more
    than one of them. Animations pass frame=None and never get a frame suffix.
    When containers share one flat directory, the stem is prefixed with the
    container's base name. Path separators in the state name become
    underscores, so every artifact stays inside its artifact_dir.
    """
    stem = _file_safe_name(state.name)
    if state.directions > 1:
        stem += f"_D{direction}"
    if frame is not None and state.frames > 1:
        stem += f"_F{frame}"
    if not config.per_container_subfolder:
        stem = f"{base}_{stem}"
    return stem


def _file_safe_name(name: str) -> str:
    """Replace path separators so a state name always stays one path segment."""
    return name.replace("/", "_").replace("\\", "_")


def _check_direction(state: State, direction: int) -> None:
    if not 0 <= direction < state.directions:
        raise IndexError(f"direction {direction} out of range for {state.name!r} ({state.directions} directions)")


def plan_still_path(config: ExportConfig, base: str, state: State, direction: int, frame: int) -> Path:
    """Path of the still image for one (direction, frame) cell of a state."""
    _check_direction(state, direction)
    if not 0 <= frame < state.frames:
        raise IndexError(f"frame {frame} out of range for {state.name!r} ({state.frames} frames)")
    kind = ArtifactKind.STILL
    name = f"{artifact_stem(config, base, state, direction, frame)}.{kind.extension}"
    return artifact_dir(config, base, kind) / name


def plan_animated_path(config: ExportConfig, base: str, state: State, direction: int) -> Path:
    """Path of the animation covering every frame of one direction."""
    _check_direction(state, direction)
    kind = ArtifactKind.ANIMATED
    name = f"{artifact_stem(config, base, state, direction, None)}.{kind.extension}"
    return artifact_dir(config, base, kind) / name


def plan_still_paths(config: ExportConfig, base: str, state: State) -> list[PlannedArtifact]:
    """Every still artifact of a state, direction-major then frame."""
    return [
        PlannedArtifact(
            ArtifactKind.STILL, state, d, f, plan_still_path(config, base, state, d, f)
        )
        for d in range(state.directions)
        for f in range(state.frames)
    ]


def plan_animated_paths(config: ExportConfig, base: str, state: State) -> list[PlannedArtifact]:
    """One animation per direction, or nothing for single-frame states."""
    if not state.is_animated:
        return []
    return [
        PlannedArtifact(ArtifactKind.ANIMATED, state, d, None, plan_animated_path(config, base, state, d))
        for d in range(state.directions)
    ]
