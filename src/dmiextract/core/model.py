"""
In-memory model of a parsed sprite container.

A Container owns its States; each State owns a grid of decoded images indexed
by [direction][frame] plus one display duration per frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

from .errors import StateShapeError


@dataclass
class State:
    """A named icon spanning one or more directions and frames."""

    name: str
    directions: int
    frames: int
    images: list[list[Image.Image]]  # [direction][frame]
    frame_durations: list[int]  # milliseconds, one per frame

    def __post_init__(self) -> None:
        if self.directions < 1 or self.frames < 1:
            raise StateShapeError(
                f"State {self.name!r} must have at least one direction and frame, "
                f"got {self.directions}x{self.frames}"
            )
        if len(self.images) != self.directions or any(len(row) != self.frames for row in self.images):
            raise StateShapeError(
                f"State {self.name!r} image grid does not match {self.directions} directions x {self.frames} frames"
            )
        if len(self.frame_durations) != self.frames:
            raise StateShapeError(
                f"State {self.name!r} has {len(self.frame_durations)} durations for {self.frames} frames"
            )
        sizes = {im.size for row in self.images for im in row}
        if len(sizes) != 1:
            raise StateShapeError(f"State {self.name!r} mixes image sizes: {sorted(sizes)}")

    @property
    def is_animated(self) -> bool:
        """Only multi-frame states are candidates for animated export."""
        return self.frames > 1

    @property
    def size(self) -> tuple[int, int]:
        return self.images[0][0].size

    def image(self, direction: int, frame: int) -> Image.Image:
        if not 0 <= direction < self.directions:
            raise IndexError(f"direction {direction} out of range for state {self.name!r}")
        if not 0 <= frame < self.frames:
            raise IndexError(f"frame {frame} out of range for state {self.name!r}")
        return self.images[direction][frame]

    def close(self) -> None:
        for row in self.images:
            for im in row:
                im.close()


@dataclass
class Container:
    """A parsed container file; release with close() or use as a context manager."""

    path: Path
    states: list[State] = field(default_factory=list)
    version: str = ""
    icon_width: int = 0
    icon_height: int = 0

    def __enter__(self) -> Container:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self.states)

    def close(self) -> None:
        """Release every decoded image buffer."""
        for state in self.states:
            state.close()
