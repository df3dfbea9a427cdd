import cv2
import numpy as np

from blendframes.errors import IncompatibleImageError

RESAMPLE_METHODS = {
    "nearest": cv2.INTER_NEAREST,
    "bilinear": cv2.INTER_LINEAR,
}
DEFAULT_RESAMPLE = "bilinear"

# (from_channels, to_channels) -> cvtColor code
_CHANNEL_CONVERSIONS = {
    (1, 3): cv2.COLOR_GRAY2BGR,
    (1, 4): cv2.COLOR_GRAY2BGRA,
    (3, 4): cv2.COLOR_BGR2BGRA,
    (3, 1): cv2.COLOR_BGR2GRAY,
    (4, 1): cv2.COLOR_BGRA2GRAY,
    (4, 3): cv2.COLOR_BGRA2BGR,
}


def _channels(img):
    if img.ndim != 3 or img.shape[2] not in (1, 3, 4):
        raise IncompatibleImageError(f"Cannot blend image with shape {img.shape}")
    return img.shape[2]


def _with_channel_axis(img):
    # cv2 drops a trailing axis of size 1
    if img.ndim == 2:
        return img[:, :, np.newaxis]
    return img


def coerce_channels(img, channels):
    """Convert ``img`` between gray, BGR and BGRA.

    Widening adds an opaque alpha or copies gray into every color channel;
    narrowing drops alpha or converts to luma.
    """
    current = _channels(img)
    if current == channels:
        return img
    code = _CHANNEL_CONVERSIONS.get((current, channels))
    if code is None:
        raise IncompatibleImageError(f"Cannot convert {current}-channel image to {channels} channels")
    source = img[:, :, 0] if current == 1 else img
    return _with_channel_axis(cv2.cvtColor(source, code))


def coerce_depth(img, dtype):
    """Rescale samples between 8 and 16 bits."""
    dtype = np.dtype(dtype)
    if img.dtype == dtype:
        return img
    if img.dtype == np.uint16 and dtype == np.uint8:
        return (img >> 8).astype(np.uint8)
    if img.dtype == np.uint8 and dtype == np.uint16:
        return img.astype(np.uint16) * 257
    raise IncompatibleImageError(f"Cannot convert {img.dtype} samples to {dtype}")


def _resize(img, width, height, resample):
    resized = cv2.resize(img, (width, height), interpolation=RESAMPLE_METHODS[resample])
    return _with_channel_axis(resized)


def normalize_pair(start, end, resample=DEFAULT_RESAMPLE):
    """Make ``end`` blendable with ``start``.

    The start image decides the layout: ``end`` is converted to its channel
    count and sample depth and resized to its width and height. ``start`` is
    returned untouched, so chaining pairs keeps one layout for a whole run.
    """
    if resample not in RESAMPLE_METHODS:
        raise ValueError(f"Unknown resampling method: {resample!r} (expected one of {sorted(RESAMPLE_METHODS)})")

    channels = _channels(start)
    _channels(end)
    if start.shape == end.shape and start.dtype == end.dtype:
        return start, end

    end = coerce_depth(coerce_channels(end, channels), start.dtype)

    height, width = start.shape[:2]
    if end.shape[:2] != (height, width):
        end = _resize(end, width, height, resample)

    return start, end
