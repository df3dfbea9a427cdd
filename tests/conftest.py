import cv2
import numpy as np
import pytest


def solid(value, width=8, height=6, channels=3, dtype=np.uint8):
    return np.full((height, width, channels), value, dtype=dtype)


@pytest.fixture
def write_image(tmp_path):
    """Write an array to ``tmp_path/<name>`` and return the path as a string."""

    def _write(name, img):
        path = tmp_path / name
        assert cv2.imwrite(str(path), img)
        return str(path)

    return _write


@pytest.fixture
def gradient():
    ys, xs = np.mgrid[0:6, 0:8]
    img = np.stack([xs * 30, ys * 40, xs * 10 + ys * 5], axis=2)
    return img.astype(np.uint8)
