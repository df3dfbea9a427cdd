"""Cross-dissolve a list of still images into a numbered frame sequence."""

from blendframes.errors import (
    BlendFramesError,
    DecodeError,
    IncompatibleImageError,
    InsufficientInputError,
    WriteError,
)
from blendframes.frame_interpolator import blend_factor, interpolate
from blendframes.frame_writer import Frame, FrameWriter, write_frames
from blendframes.image_loader import check_image, image_size, load_image
from blendframes.sequence_driver import SequenceDriver, Transition, frames_for_duration
from blendframes.size_normalizer import coerce_channels, coerce_depth, normalize_pair

__version__ = "0.1.0"
