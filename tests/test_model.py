from pathlib import Path

import pytest
from PIL import Image

from dmiextract.core.errors import StateShapeError
from dmiextract.core.model import Container, State

from conftest import make_state


def blank(size=(4, 4)):
    return Image.new("RGBA", size)


def test_is_animated_depends_on_frame_count():
    assert make_state("a", 4, 2).is_animated
    assert not make_state("b", 4, 1).is_animated


def test_grid_must_match_dimensions():
    with pytest.raises(StateShapeError):
        State("x", 2, 1, images=[[blank()]], frame_durations=[100])
    with pytest.raises(StateShapeError):
        State("x", 1, 2, images=[[blank()]], frame_durations=[100, 100])


def test_durations_must_match_frames():
    with pytest.raises(StateShapeError):
        State("x", 1, 2, images=[[blank(), blank()]], frame_durations=[100])


def test_cells_must_share_size():
    with pytest.raises(StateShapeError):
        State("x", 1, 2, images=[[blank((4, 4)), blank((8, 8))]], frame_durations=[100, 100])


def test_zero_dimensions_rejected():
    with pytest.raises(StateShapeError):
        State("x", 0, 1, images=[], frame_durations=[100])


def test_image_lookup_bounds():
    state = make_state("a", 2, 3)
    assert state.image(1, 2) is state.images[1][2]
    with pytest.raises(IndexError):
        state.image(2, 0)
    with pytest.raises(IndexError):
        state.image(0, 3)


def test_container_context_manager_closes_images():
    state = make_state("a", 1, 2)
    with Container(path=Path("a.dmi"), states=[state]) as container:
        assert len(container) == 1
    # Closed Pillow images refuse pixel access.
    with pytest.raises(ValueError):
        state.images[0][0].getpixel((0, 0))
