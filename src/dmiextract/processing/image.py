"""
Image writing for exported artifacts.

This module handles:
- Still PNG encoding
- Animated GIF encoding with per-frame durations
- Atomic placement (encode to a temp file, then rename over the target)
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Callable
from pathlib import Path

from PIL import GifImagePlugin, Image

from .animation import Animation

# GIF disposal: restore to background so transparent sprites don't smear
GIF_DISPOSAL = 2

# Palette slot written as the transparent color of every frame
GIF_TRANSPARENT_INDEX = 255

# Alpha below this is written as fully transparent
GIF_ALPHA_THRESHOLD = 128


def _atomic_write(path: Path, encode: Callable[[Path], None]) -> None:
    """Run `encode` against a temp file next to `path`, then move it into place.

    The parent directory is created on demand. On any failure the temp file
    is removed and `path` is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".part", dir=path.parent)
    os.close(fd)
    tmp = Path(tmp_name)
    try:
        encode(tmp)
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise


class ArtifactWriter:
    """Writes stills as PNG and animations as GIF."""

    def write_still(self, image: Image.Image, path: Path) -> None:
        _atomic_write(path, lambda tmp: image.save(tmp, format="PNG"))

    def write_animation(self, animation: Animation, path: Path) -> None:
        """Write every frame of `animation` as one GIF image block.

        Identical consecutive frames stay separate frames with their own delay;
        Image.save(save_all=True) would fold them into one.
        """
        if not animation.frames:
            raise ValueError(f"Animation {animation.state_name!r} has no frames")

        frames = [_to_gif_frame(f.image) for f in animation.frames]
        try:
            def encode(tmp: Path) -> None:
                header, _ = GifImagePlugin.getheader(
                    frames[0], info={"loop": animation.loop, "duration": animation.durations[0]}
                )
                with open(tmp, "wb") as fp:
                    fp.write(b"".join(header))
                    for im, duration in zip(frames, animation.durations):
                        for chunk in GifImagePlugin.getdata(
                            im,
                            duration=duration,
                            disposal=GIF_DISPOSAL,
                            transparency=GIF_TRANSPARENT_INDEX,
                            include_color_table=True,
                        ):
                            fp.write(chunk)
                    fp.write(b";")

            _atomic_write(path, encode)
        finally:
            for im in frames:
                im.close()


def _to_gif_frame(image: Image.Image) -> Image.Image:
    """Quantize to a 255-color palette, reserving the last index for transparency.

    GIF alpha is binary: pixels below GIF_ALPHA_THRESHOLD become transparent.
    """
    rgba = image.convert("RGBA")
    try:
        with rgba.convert("RGB") as rgb:
            frame = rgb.quantize(colors=GIF_TRANSPARENT_INDEX, dither=Image.Dither.NONE)
        palette = (frame.getpalette() or [])[: GIF_TRANSPARENT_INDEX * 3]
        palette += [0] * (768 - len(palette))
        frame.putpalette(palette)
        with rgba.getchannel("A").point(lambda a: 255 if a < GIF_ALPHA_THRESHOLD else 0) as mask:
            frame.paste(GIF_TRANSPARENT_INDEX, mask=mask)
    finally:
        rgba.close()
    return frame
