import numpy as np
import pytest

from blendframes.errors import DecodeError
from blendframes.image_loader import check_image, image_size, load_image

from conftest import solid


def test_loads_color_png(write_image, gradient):
    path = write_image("a.png", gradient)
    img = load_image(path)
    assert img.dtype == np.uint8
    assert img.shape == (6, 8, 3)
    np.testing.assert_array_equal(img, gradient)


def test_gray_gets_channel_axis(write_image):
    path = write_image("gray.png", np.full((4, 5), 77, dtype=np.uint8))
    img = load_image(path)
    assert img.shape == (4, 5, 1)
    assert image_size(img) == (5, 4, 1)


def test_keeps_alpha_and_16_bit(write_image):
    path = write_image("deep.png", solid(4000, channels=4, dtype=np.uint16))
    img = load_image(path)
    assert img.dtype == np.uint16
    assert img.shape == (6, 8, 4)
    assert int(img[0, 0, 0]) == 4000


def test_missing_file(tmp_path):
    missing = str(tmp_path / "nope.png")
    with pytest.raises(DecodeError) as excinfo:
        load_image(missing)
    assert excinfo.value.path == missing
    assert excinfo.value.stage == "load"
    assert missing in str(excinfo.value)


def test_directory_is_rejected(tmp_path):
    with pytest.raises(DecodeError):
        load_image(str(tmp_path))


def test_garbage_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"this is not an image")
    with pytest.raises(DecodeError, match="format"):
        load_image(str(path))


def test_check_image_reads_only_the_signature(write_image, tmp_path):
    check_image(write_image("ok.png", solid(3)))
    text = tmp_path / "notes.png"
    text.write_text("hello")
    with pytest.raises(DecodeError) as excinfo:
        check_image(str(text))
    assert excinfo.value.path == str(text)
