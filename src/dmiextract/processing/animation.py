"""
Animation assembly for multi-frame states.

assemble() pairs each frame of one direction with its display duration, in
frame order, producing an Animation ready to hand to the writer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from PIL import Image

from ..core.errors import FrameTimingError, NotAnimatedError
from ..core.model import State


class AnimationFrame(NamedTuple):
    image: Image.Image
    duration: int  # milliseconds


@dataclass
class Animation:
    """Timed frame sequence for one direction of a state.

    The frames reference the state's images; close() only drops those
    references so the writer's converted copies and this sequence can be freed
    as soon as the artifact is written.
    """

    state_name: str
    direction: int
    frames: list[AnimationFrame] = field(default_factory=list)
    loop: int = 0

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def durations(self) -> list[int]:
        return [f.duration for f in self.frames]

    @property
    def total_duration(self) -> int:
        return sum(self.durations)

    @property
    def closed(self) -> bool:
        return not self.frames

    def close(self) -> None:
        self.frames.clear()


def assemble(state: State, direction: int, loop: int = 0) -> Animation:
    """Gather one direction's frames and durations into an Animation.

    Args:
        state: Multi-frame state to animate.
        direction: 0-based direction index.
        loop: Loop count stored on the animation; 0 loops forever.

    Returns:
        Animation with exactly state.frames entries in ascending frame order.

    Raises:
        NotAnimatedError: The state has a single frame.
        FrameTimingError: Frame and duration counts disagree.
        IndexError: Direction is out of range.
    """
    if not state.is_animated:
        raise NotAnimatedError(f"State {state.name!r} has a single frame and cannot be animated")
    if not 0 <= direction < state.directions:
        raise IndexError(f"direction {direction} out of range for {state.name!r} ({state.directions} directions)")

    row = state.images[direction]
    durations = state.frame_durations
    if len(row) != state.frames or len(durations) != state.frames:
        raise FrameTimingError(
            f"State {state.name!r} direction {direction}: {len(row)} frames, "
            f"{len(durations)} durations, expected {state.frames}"
        )

    frames = [AnimationFrame(image, int(duration)) for image, duration in zip(row, durations)]
    return Animation(state_name=state.name, direction=direction, frames=frames, loop=loop)
