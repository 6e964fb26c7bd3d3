"""
Reader for BYOND .dmi sprite containers.

A .dmi file is a PNG sheet whose "Description" text chunk describes the icon
size and the states laid out on the sheet:

    # BEGIN DMI
    version = 4.0
        width = 32
        height = 32
    state = "walk"
        dirs = 4
        frames = 2
        delay = 1,2
    # END DMI

Cells are read left to right, top to bottom. Within a state, every direction
of frame 0 comes first, then every direction of frame 1, and so on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..config import AppSettings, app_settings
from ..core.constants import DESCRIPTION_KEY
from ..core.errors import ContainerFormatError, StateShapeError
from ..core.model import Container, State

HEADER_BEGIN = "# BEGIN DMI"
HEADER_END = "# END DMI"


@dataclass
class StateSpec:
    """One state entry from the description header."""

    name: str
    dirs: int = 1
    frames: int = 1
    delays: list[float] = field(default_factory=list)


@dataclass
class DmiHeader:
    """Parsed description header."""

    version: str = ""
    width: int | None = None
    height: int | None = None
    states: list[StateSpec] = field(default_factory=list)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1].replace('\\"', '"')
    return value


def _as_int(path: Path, key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ContainerFormatError(path, f"invalid integer for {key}: {value!r}") from None


def parse_description(text: str, path: Path = Path("<memory>")) -> DmiHeader:
    """Parse a .dmi description block into a DmiHeader.

    Unknown keys (loop, rewind, movement, hotspot, ...) are ignored.

    Raises:
        ContainerFormatError: Missing markers or malformed values.
    """
    lines = [ln.strip() for ln in text.replace("\r\n", "\n").split("\n")]
    lines = [ln for ln in lines if ln]
    if not lines or lines[0] != HEADER_BEGIN:
        raise ContainerFormatError(path, "description does not start with '# BEGIN DMI'")
    if HEADER_END not in lines:
        raise ContainerFormatError(path, "description is missing '# END DMI'")

    header = DmiHeader()
    current: StateSpec | None = None
    for line in lines[1:lines.index(HEADER_END)]:
        if line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise ContainerFormatError(path, f"malformed description line: {line!r}")
        key, value = key.strip(), value.strip()

        if key == "version":
            header.version = value
        elif key == "state":
            current = StateSpec(name=_unquote(value))
            header.states.append(current)
        elif current is None:
            if key == "width":
                header.width = _as_int(path, key, value)
            elif key == "height":
                header.height = _as_int(path, key, value)
        elif key == "dirs":
            current.dirs = _as_int(path, key, value)
        elif key == "frames":
            current.frames = _as_int(path, key, value)
        elif key == "delay":
            try:
                current.delays = [float(v) for v in value.split(",") if v.strip()]
            except ValueError:
                raise ContainerFormatError(path, f"invalid delay list: {value!r}") from None
    return header


def frame_durations(spec: StateSpec, tick_millis: int) -> list[int]:
    """Convert a state's delay ticks into one duration (ms) per frame.

    A missing or short delay list is padded with single ticks and a long
    one is cut to the frame count.
    """
    ticks = list(spec.delays[: spec.frames])
    ticks += [1.0] * (spec.frames - len(ticks))
    return [int(round(t * tick_millis)) for t in ticks]


def read_container(path: Path, settings: AppSettings = app_settings) -> Container:
    """Parse a .dmi file into a Container.

    Args:
        path: Container file to read.
        settings: Icon size fallbacks and tick length.

    Returns:
        Container whose states hold decoded RGBA images.

    Raises:
        ContainerFormatError: The file is unreadable or its layout is invalid.
    """
    path = Path(path)
    try:
        with Image.open(path) as im:
            description = im.info.get(DESCRIPTION_KEY)
            sheet = np.asarray(im.convert("RGBA"))
    except (UnidentifiedImageError, OSError) as ex:
        raise ContainerFormatError(path, f"cannot read image: {ex}") from ex

    if not description:
        raise ContainerFormatError(path, f"no {DESCRIPTION_KEY} metadata; not a DMI file")

    header = parse_description(description, path)
    width = header.width or settings.icon.default_width
    height = header.height or settings.icon.default_height
    if width <= 0 or height <= 0:
        raise ContainerFormatError(path, f"invalid icon size {width}x{height}")

    sheet_h, sheet_w = sheet.shape[:2]
    columns = sheet_w // width
    if columns == 0:
        raise ContainerFormatError(path, f"icon width {width} exceeds sheet width {sheet_w}")

    container = Container(path=path, version=header.version, icon_width=width, icon_height=height)
    index = 0
    try:
        for spec in header.states:
            if spec.dirs < 1 or spec.frames < 1:
                raise ContainerFormatError(
                    path, f"state {spec.name!r} has {spec.dirs} dirs and {spec.frames} frames"
                )
            grid: list[list[Image.Image]] = [[] for _ in range(spec.dirs)]
            for frame in range(spec.frames):
                for direction in range(spec.dirs):
                    row, col = divmod(index, columns)
                    y, x = row * height, col * width
                    if y + height > sheet_h:
                        raise ContainerFormatError(
                            path, f"state {spec.name!r} runs past the end of the sheet"
                        )
                    cell = np.ascontiguousarray(sheet[y:y + height, x:x + width])
                    grid[direction].append(Image.fromarray(cell))
                    index += 1
            try:
                state = State(
                    name=spec.name,
                    directions=spec.dirs,
                    frames=spec.frames,
                    images=grid,
                    frame_durations=frame_durations(spec, settings.icon.tick_millis),
                )
            except StateShapeError as ex:
                raise ContainerFormatError(path, str(ex)) from ex
            container.states.append(state)
    except BaseException:
        container.close()
        raise
    return container
