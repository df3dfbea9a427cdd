#!/usr/bin/env python3
"""
Blend a list of still images into a numbered frame sequence.

Each image cross-dissolves into the next over a configurable number of
intermediate frames. The frames are written as frame_000000000.png,
frame_000000001.png, ... and can be turned into a video with e.g.

    ffmpeg -framerate 30 -i frames/frame_%09d.png -pix_fmt yuv420p out.mp4
"""

import argparse
import sys

from blendframes.errors import BlendFramesError
from blendframes.frame_writer import FrameWriter
from blendframes.sequence_driver import SequenceDriver, frames_for_duration
from blendframes.size_normalizer import DEFAULT_RESAMPLE, RESAMPLE_METHODS

# --- Configuration ---
OUTPUT_DIR = "frames"
N_INTERMEDIATE_FRAMES = 50  # Number of frames to generate BETWEEN each key image
FPS = 30  # Only used to turn --duration into a frame count
OUTPUT_EXTENSION = "png"
OUTPUT_EXTENSIONS = ["png", "jpg", "webp", "bmp", "tiff"]
QUEUE_SIZE = 4
# --- End Configuration ---


def _non_negative_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def _positive_int(value):
    number = _non_negative_int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def _positive_float(value):
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def _frame_list(value):
    return [_non_negative_int(part.strip()) for part in value.split(",") if part.strip()]


def build_parser():
    parser = argparse.ArgumentParser(
        description="Cross-dissolve still images into a numbered frame sequence.",
    )
    parser.add_argument("images", nargs="+", help="Images to blend, in order")
    parser.add_argument("-n", "--n-frames", type=_non_negative_int, default=N_INTERMEDIATE_FRAMES,
                        help="Intermediate frames between each pair of images")
    parser.add_argument("--transition-frames", type=_frame_list, default=None,
                        help="Comma-separated intermediate frame counts, one per transition (overrides -n)")
    parser.add_argument("--duration", type=_positive_float, default=None,
                        help="Length of each transition in seconds (overrides -n)")
    parser.add_argument("--fps", type=_positive_float, default=FPS,
                        help="Frame rate used with --duration")
    parser.add_argument("-o", "--outdir", default=OUTPUT_DIR, help="Directory to save the frames to")
    parser.add_argument("--ext", choices=OUTPUT_EXTENSIONS, default=OUTPUT_EXTENSION,
                        help="Image format of the written frames")
    parser.add_argument("--quality", type=int, choices=range(0, 101), metavar="0-100", default=None,
                        help="Encoder quality for jpg/webp frames")
    parser.add_argument("--start-index", type=_non_negative_int, default=0,
                        help="Number of the first written frame")
    parser.add_argument("--resample", choices=sorted(RESAMPLE_METHODS), default=DEFAULT_RESAMPLE,
                        help="How mismatched image sizes are resized")
    parser.add_argument("--workers", type=_positive_int, default=1,
                        help="Threads used to blend each frame")
    parser.add_argument("--queue-size", type=_positive_int, default=QUEUE_SIZE,
                        help="Frames allowed to wait for the disk writer")
    parser.add_argument("--loop", action="store_true",
                        help="Blend the last image back into the first")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only print errors")
    return parser


def _frame_count(args, parser):
    if args.transition_frames is not None:
        if args.duration is not None:
            parser.error("--transition-frames and --duration are mutually exclusive")
        return args.transition_frames
    if args.duration is not None:
        return frames_for_duration(args.duration, args.fps)
    return args.n_frames


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        driver = SequenceDriver(
            args.images,
            _frame_count(args, parser),
            start_index=args.start_index,
            resample=args.resample,
            workers=args.workers,
            loop=args.loop,
            verbose=not args.quiet,
        )
        writer = FrameWriter(args.outdir, extension=args.ext, quality=args.quality)
    except ValueError as e:
        parser.error(str(e))

    try:
        driver.run(writer, queue_size=args.queue_size)
    except BlendFramesError as e:
        print(f"Error: [{e.stage}] {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        pattern = f"{writer.prefix}%0{writer.pad}d.{writer.extension}"
        print(f"Encode with: ffmpeg -framerate {args.fps:g} -start_number {args.start_index} "
              f"-i {writer.output_dir}/{pattern} -pix_fmt yuv420p output.mp4")
    return 0


if __name__ == "__main__":
    sys.exit(main())
