import os
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import NamedTuple, Optional

import cv2
import numpy as np

from blendframes.errors import WriteError

DEFAULT_OUTPUT_DIR = "frames"
DEFAULT_EXTENSION = "png"
DEFAULT_PREFIX = "frame_"
DEFAULT_PAD = 9
DEEP_EXTENSIONS = ("png", "tif", "tiff")

# Extension -> imwrite quality flag
QUALITY_FLAGS = {
    "jpg": cv2.IMWRITE_JPEG_QUALITY,
    "jpeg": cv2.IMWRITE_JPEG_QUALITY,
    "webp": cv2.IMWRITE_WEBP_QUALITY,
}


class Frame(NamedTuple):
    index: int
    pixels: np.ndarray


class FrameWriter:
    """Writes frames as ``<prefix><zero padded index>.<extension>`` files."""

    def __init__(
        self,
        output_dir: str = DEFAULT_OUTPUT_DIR,
        extension: str = DEFAULT_EXTENSION,
        prefix: str = DEFAULT_PREFIX,
        pad: int = DEFAULT_PAD,
        quality: Optional[int] = None,
    ):
        self.output_dir = str(output_dir)
        self.extension = extension.lower().lstrip(".")
        self.prefix = prefix
        self.pad = pad
        self.quality = quality
        self.written = 0
        self._dir_ready = False

        if quality is not None and not 0 <= quality <= 100:
            raise ValueError(f"Quality must be within 0..100, got {quality}")

    def filename(self, index: int) -> str:
        return f"{self.prefix}{index:0{self.pad}d}.{self.extension}"

    def path_for(self, index: int) -> str:
        return os.path.join(self.output_dir, self.filename(index))

    def ensure_output_dir(self):
        """Create the output directory if it doesn't exist. Safe to call repeatedly."""
        try:
            os.makedirs(self.output_dir, exist_ok=True)
        except OSError as e:
            raise WriteError(f"Failed to create output directory ({e})", self.output_dir) from e
        self._dir_ready = True

    def _params(self):
        flag = QUALITY_FLAGS.get(self.extension)
        if flag is None or self.quality is None:
            return []
        return [flag, self.quality]

    def write(self, frame: Frame) -> str:
        if not self._dir_ready:
            self.ensure_output_dir()

        pixels = frame.pixels
        # Only png and tiff hold 16-bit samples, imwrite would saturate them elsewhere
        if pixels.dtype == np.uint16 and self.extension not in DEEP_EXTENSIONS:
            pixels = (pixels >> 8).astype(np.uint8)

        output_filename = self.path_for(frame.index)
        try:
            success = cv2.imwrite(output_filename, pixels, self._params())
        except cv2.error as e:
            raise WriteError(f"Failed to save frame ({e})", output_filename) from e
        if not success:
            raise WriteError("Failed to save frame", output_filename)

        self.written += 1
        return output_filename


def write_frames(frames, writer: FrameWriter, queue_size: int = 4) -> int:
    """Write ``frames`` on a background thread while the caller produces the next one.

    A single writer thread keeps files in submission order. At most
    ``queue_size`` frames wait to be written; the first failure is raised here
    and nothing after it is computed or written.
    """
    if queue_size < 1:
        raise ValueError(f"Queue size must be at least 1, got {queue_size}")

    failed = threading.Event()

    def write_one(frame):
        # Frames queued behind a failed write are dropped
        if failed.is_set():
            return None
        try:
            return writer.write(frame)
        except BaseException:
            failed.set()
            raise

    pending = deque()
    count = 0
    with ThreadPoolExecutor(max_workers=1) as pool:
        try:
            for frame in frames:
                while pending and (pending[0].done() or len(pending) >= queue_size):
                    pending.popleft().result()
                if failed.is_set():
                    break
                pending.append(pool.submit(write_one, frame))
                count += 1
            while pending:
                pending.popleft().result()
        except BaseException:
            failed.set()
            for future in pending:
                future.cancel()
            raise
    return count
