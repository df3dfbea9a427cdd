import numbers
import os
from typing import List, NamedTuple, Sequence, Union

from blendframes.errors import InsufficientInputError
from blendframes.frame_interpolator import blend_factor, interpolate
from blendframes.frame_writer import Frame, FrameWriter, write_frames
from blendframes.image_loader import check_image, load_image
from blendframes.size_normalizer import DEFAULT_RESAMPLE, RESAMPLE_METHODS, normalize_pair

IDLE = "idle"
PROCESSING_TRANSITION = "processing_transition"
DONE = "done"


class Transition(NamedTuple):
    index: int
    start_path: str
    end_path: str
    frame_count: int


def frames_for_duration(seconds: float, fps: float) -> int:
    """Intermediate frames needed for a transition lasting ``seconds`` at ``fps``.

    The end image takes one of the frame slots, so one is subtracted.
    """
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    if seconds < 0:
        raise ValueError(f"Duration must not be negative, got {seconds}")
    return max(round(seconds * fps) - 1, 0)


def _name(path):
    return os.path.splitext(os.path.basename(str(path)))[0]


class SequenceDriver:
    """
    Walks the input images pairwise and emits every frame of the run with a
    contiguous global index.

    The first image is emitted once, then each transition contributes its
    intermediate frames followed by its end image. The end image of one
    transition is the start image of the next, so shared endpoints appear
    exactly once. All frames take the size, channel layout and sample depth
    of the first image.
    """

    def __init__(
        self,
        paths: Sequence[str],
        frame_count: Union[int, Sequence[int]],
        start_index: int = 0,
        resample: str = DEFAULT_RESAMPLE,
        workers: int = 1,
        loop: bool = False,
        verbose: bool = True,
    ):
        self.paths = [str(p) for p in paths]
        self.start_index = start_index
        self.resample = resample
        self.workers = workers
        self.loop = loop
        self.verbose = verbose

        if resample not in RESAMPLE_METHODS:
            raise ValueError(f"Unknown resampling method: {resample!r}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if start_index < 0:
            raise ValueError(f"start_index must not be negative, got {start_index}")

        n_transitions = self._transition_count()
        if isinstance(frame_count, numbers.Integral):
            self.frame_counts = [int(frame_count)] * n_transitions
        else:
            self.frame_counts = [int(n) for n in frame_count]
            if n_transitions and len(self.frame_counts) != n_transitions:
                raise ValueError(
                    f"Got {len(self.frame_counts)} frame counts for {n_transitions} transitions"
                )
        for n in self.frame_counts:
            if n < 0:
                raise ValueError(f"Frame count must not be negative, got {n}")

        self.state = IDLE
        self.transition_index = None
        self.next_index = start_index

    def _transition_count(self):
        if len(self.paths) < 2:
            return 0
        return len(self.paths) if self.loop else len(self.paths) - 1

    def _log(self, message):
        if self.verbose:
            print(message)

    def transitions(self) -> List[Transition]:
        targets = self.paths[1:] + (self.paths[:1] if self.loop else [])
        return [
            Transition(k, start, end, self.frame_counts[k])
            for k, (start, end) in enumerate(zip(self.paths, targets))
        ]

    def total_frames(self) -> int:
        if len(self.paths) < 2:
            return 0
        total = 1 + sum(n + 1 for n in self.frame_counts)
        return total - 1 if self.loop else total

    def _emit(self, pixels):
        frame = Frame(self.next_index, pixels)
        self.next_index += 1
        return frame

    def frames(self):
        """Yield every frame of the run in index order."""
        if len(self.paths) < 2:
            raise InsufficientInputError(
                f"At least two images are needed to blend, got {len(self.paths)}"
            )
        # Every input must be readable before the first frame is written
        for path in self.paths:
            check_image(path)

        self.next_index = self.start_index
        self._log("Loading images...")
        start = load_image(self.paths[0])
        self._log(f"  Loaded {self.paths[0]} (shape: {start.shape})")
        first = start

        transitions = self.transitions()
        self._log(f"Generating {self.total_frames()} frames...")
        for transition in transitions:
            self.state = PROCESSING_TRANSITION
            self.transition_index = transition.index
            closing = self.loop and transition.index == len(transitions) - 1

            if closing:
                end = first
            else:
                end = load_image(transition.end_path)
                self._log(f"  Loaded {transition.end_path} (shape: {end.shape})")
            start, end = normalize_pair(start, end, self.resample)

            self._log(f"  Blending {_name(transition.start_path)} -> {_name(transition.end_path)} "
                      f"({transition.frame_count} intermediate frames)...")

            if transition.index == 0:
                yield self._emit(start)

            n = transition.frame_count
            for i in range(1, n + 1):
                yield self._emit(interpolate(start, end, blend_factor(i, n), self.workers))

            if not closing:
                yield self._emit(end)

            # end already has the run's layout, reuse it as the next start
            start = end

        self.state = DONE
        self.transition_index = None

    def run(self, writer: FrameWriter, queue_size: int = 4) -> int:
        """Write every frame through ``writer``. Returns the number of frames written."""
        count = write_frames(self.frames(), writer, queue_size)
        self._log(f"Successfully generated {count} frames in '{writer.output_dir}'.")
        return count
