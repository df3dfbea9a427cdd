from concurrent.futures import ThreadPoolExecutor

import cv2
import numpy as np

from blendframes.errors import IncompatibleImageError


def blend_factor(i, n):
    """Weight of the end image for intermediate frame ``i`` of ``n``.

    Endpoints (0 and 1) are never produced here; they are the source images.
    """
    if not 1 <= i <= n:
        raise ValueError(f"Frame {i} is outside 1..{n}")
    return i / (n + 1)


def row_bands(height, workers):
    """Split ``range(height)`` into at most ``workers`` contiguous (start, stop) bands."""
    workers = max(1, min(workers, height))
    step, extra = divmod(height, workers)
    bands = []
    row = 0
    for k in range(workers):
        stop = row + step + (1 if k < extra else 0)
        bands.append((row, stop))
        row = stop
    return bands


def _blend_band(start, end, out, t, rows):
    lo, hi = rows
    band = out[lo:hi]
    # Weighted addition in float, then round and clamp back to the sample type
    blended = cv2.addWeighted(
        start[lo:hi].astype(np.float64), 1.0 - t,
        end[lo:hi].astype(np.float64), t,
        0.0,
    )
    info = np.iinfo(out.dtype)
    band[...] = np.clip(np.rint(blended), info.min, info.max).reshape(band.shape)


def interpolate(start, end, t, workers=1):
    """Cross-dissolve ``start`` into ``end`` at weight ``t`` in [0, 1].

    Each output sample is ``round(start * (1 - t) + end * t)``. With more than
    one worker the rows are split into bands blended on a thread pool; every
    worker writes only its own band of the output.
    """
    if start.shape != end.shape or start.dtype != end.dtype:
        raise IncompatibleImageError(
            f"Cannot blend {start.shape} {start.dtype} with {end.shape} {end.dtype}"
        )
    if not 0.0 <= t <= 1.0:
        raise ValueError(f"Blend factor must be within [0, 1], got {t}")

    out = np.empty_like(start)
    bands = row_bands(start.shape[0], workers)
    if len(bands) == 1:
        _blend_band(start, end, out, t, bands[0])
        return out

    with ThreadPoolExecutor(max_workers=len(bands)) as pool:
        futures = [pool.submit(_blend_band, start, end, out, t, rows) for rows in bands]
        for future in futures:
            future.result()
    return out
