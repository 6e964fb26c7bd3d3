from __future__ import annotations

import math
from pathlib import Path

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo

from dmiextract.config import ExportConfig
from dmiextract.core.model import State
from dmiextract.output.logger import SimpleLogger


def cell_color(index: int) -> tuple[int, int, int, int]:
    """Distinct opaque color for the index-th cell (index < 24)."""
    return (10 + index * 10, 250 - index * 10, (index * 29) % 256, 255)


def describe(states, width: int, height: int, version: str = "4.0") -> str:
    lines = ["# BEGIN DMI", f"version = {version}", f"\twidth = {width}", f"\theight = {height}"]
    for name, dirs, frames, delays in states:
        lines.append(f'state = "{name}"')
        lines.append(f"\tdirs = {dirs}")
        lines.append(f"\tframes = {frames}")
        if delays is not None:
            lines.append("\tdelay = " + ",".join(str(d) for d in delays))
    lines.append("# END DMI")
    return "\n".join(lines) + "\n"


def write_dmi(
    path: Path,
    states,
    width: int = 4,
    height: int = 4,
    columns: int = 4,
    description: str | None = None,
) -> Path:
    """Write a real .dmi file: a PNG sheet plus a zTXt Description chunk.

    `states` is a list of (name, dirs, frames, delays-or-None). Cell i is
    filled with cell_color(i), in file order (frame-major, then direction).
    """
    total = sum(d * f for _, d, f, _ in states)
    rows = max(1, math.ceil(total / columns))
    sheet = Image.new("RGBA", (columns * width, rows * height), (0, 0, 0, 0))
    for i in range(total):
        row, col = divmod(i, columns)
        sheet.paste(cell_color(i), (col * width, row * height, (col + 1) * width, (row + 1) * height))

    info = PngInfo()
    info.add_text("Description", description if description is not None else describe(states, width, height), zip=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    sheet.save(path, format="PNG", pnginfo=info)
    return path


def make_state(name: str, directions: int, frames: int, durations=None, size=(4, 4)) -> State:
    images = [
        [Image.new("RGBA", size, cell_color(d * frames + f)) for f in range(frames)]
        for d in range(directions)
    ]
    if durations is None:
        durations = [100 * (f + 1) for f in range(frames)]
    return State(name=name, directions=directions, frames=frames, images=images, frame_durations=list(durations))


@pytest.fixture
def logger() -> SimpleLogger:
    return SimpleLogger()


@pytest.fixture
def config_factory(tmp_path: Path):
    def build(**overrides) -> ExportConfig:
        values = {"output_root": tmp_path / "out", "export_still": True, "export_animated": True}
        values.update(overrides)
        return ExportConfig(**values)

    return build


def relative_files(root: Path) -> list[str]:
    """Every file under root as sorted POSIX paths relative to root."""
    if not root.exists():
        return []
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())
