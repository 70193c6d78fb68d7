"""Dimension downscaling when quality alone cannot reach the target."""

import math

from tqdm import tqdm

from shrink_it.settings import (
    FALLBACK_QUALITY,
    LOSSLESS_QUALITY,
    MAX_SCALE_ITERATIONS,
    SCALE_FACTOR,
)
from shrink_it.utils.errors import raise_if_cancelled


def next_dimensions(width, height, factor=SCALE_FACTOR):
    """Shrink width and height by factor, flooring to whole pixels (at least 1)."""
    return max(1, math.floor(width * factor)), max(1, math.floor(height * factor))


def fallback_quality(session):
    """Fixed quality used while scaling: lossy formats trade resolution, not quality."""
    return FALLBACK_QUALITY if session.is_lossy else LOSSLESS_QUALITY


def scale_down(
    session,
    target_bytes,
    width=None,
    height=None,
    iterations=MAX_SCALE_ITERATIONS,
    verbose=False,
    cancel_event=None,
):
    """Shrink dimensions by 10% per step until the encode fits the target.

    Each step re-encodes the source at the smaller size with the fallback
    quality. The loop stops early once the size is within the target, or when
    the image cannot shrink any further.

    Args:
        session: EncodeSession for the request
        target_bytes: Size budget in bytes
        width: Starting width (default: source width)
        height: Starting height (default: source height)
        iterations: Maximum number of shrink steps
        verbose: Whether to show a progress bar
        cancel_event: Optional threading.Event checked before each step

    Returns:
        tuple: (EncodeAttempt, encoded bytes) of the last attempt, or
               (None, None) if no step could run
    """
    width = session.source.width if width is None else width
    height = session.source.height if height is None else height
    quality = fallback_quality(session)
    attempt, data = None, None

    fmt = session.output_format.extension
    for _ in (
        pbar := tqdm(
            range(iterations), desc=f"{fmt: >5} {width}x{height}", disable=not verbose
        )
    ):
        raise_if_cancelled(cancel_event)

        new_width, new_height = next_dimensions(width, height)
        if (new_width, new_height) == (width, height):
            break  # 1x1, nothing left to shrink
        width, height = new_width, new_height

        attempt, data = session.encode(width, height, quality, stage="scale")
        pbar.set_description(f"{fmt: >5} {width}x{height} {attempt.size: >9d}")

        if attempt.size <= target_bytes:
            break

    return attempt, data
