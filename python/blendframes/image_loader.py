import os

import cv2
import numpy as np

from blendframes.errors import DecodeError

SUPPORTED_DTYPES = (np.uint8, np.uint16)
SUPPORTED_CHANNELS = (1, 3, 4)


def check_image(path):
    """Fail early if ``path`` is missing or not in a format OpenCV can read.

    Only the file signature is inspected; the pixels are decoded later.
    """
    if not os.path.exists(path):
        raise DecodeError("Input image file not found", path)
    if not os.path.isfile(path):
        raise DecodeError("Input path is not a file", path)
    if not cv2.haveImageReader(str(path)):
        raise DecodeError("Unsupported or unrecognised image format", path)


def load_image(path):
    """Decode ``path`` into a ``(height, width, channels)`` array.

    Images are read unchanged, so alpha and 16-bit samples survive. Gray
    images get an explicit channel axis of size 1.
    """
    check_image(path)

    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise DecodeError("Could not load image. Check file integrity and format", path)

    if img.dtype not in SUPPORTED_DTYPES:
        raise DecodeError(f"Unsupported sample type {img.dtype}", path)
    if img.ndim == 2:
        img = img[:, :, np.newaxis]
    if img.ndim != 3 or img.shape[2] not in SUPPORTED_CHANNELS:
        raise DecodeError(f"Unsupported channel layout (shape: {img.shape})", path)

    return img


def image_size(img):
    """Return ``(width, height, channels)`` of an image buffer."""
    height, width, channels = img.shape
    return width, height, channels
