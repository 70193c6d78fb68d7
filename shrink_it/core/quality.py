"""Quality search for lossy formats."""

from tqdm import tqdm

from shrink_it.settings import (
    MAX_QUALITY,
    MAX_SEARCH_ITERATIONS,
    MIN_QUALITY,
    SWEET_SPOT_RATIO,
)
from shrink_it.utils.errors import raise_if_cancelled


def in_sweet_spot(size, target_bytes):
    """Whether size is close enough to the target to stop searching."""
    return target_bytes * SWEET_SPOT_RATIO < size <= target_bytes


def search_quality(
    session,
    target_bytes,
    iterations=MAX_SEARCH_ITERATIONS,
    verbose=False,
    cancel_event=None,
):
    """Binary search the quality that lands the encode just under the target.

    The search runs at the source's native size. It stops as soon as an
    encode falls in the sweet spot (0.9 x target, target]. When the
    iterations run out, the last attempt is returned whichever side of the
    target it falls on.

    Args:
        session: EncodeSession for a lossy format
        target_bytes: Size budget in bytes
        iterations: Maximum number of encodes
        verbose: Whether to show a progress bar
        cancel_event: Optional threading.Event checked before each encode

    Returns:
        tuple: (EncodeAttempt, encoded bytes) of the last attempt

    Raises:
        ValueError: If the session's format has no quality axis
    """
    if not session.is_lossy:
        raise ValueError(
            f"Quality search does not apply to lossless {session.output_format.value}"
        )

    width, height = session.source.width, session.source.height
    min_quality, max_quality = MIN_QUALITY, MAX_QUALITY
    attempt, data = None, None

    fmt = session.output_format.extension
    for _ in (
        pbar := tqdm(
            range(iterations), desc=f"{fmt: >5}  None  None", disable=not verbose
        )
    ):
        raise_if_cancelled(cancel_event)

        quality = (min_quality + max_quality) / 2
        attempt, data = session.encode(width, height, quality, stage="search")
        pbar.set_description(f"{fmt: >5} {quality: 5.3f} {attempt.size: >9d}")

        if in_sweet_spot(attempt.size, target_bytes):
            break
        elif attempt.size > target_bytes:
            max_quality = quality  # Too big, try a lower quality
        else:
            min_quality = quality  # Room to raise quality

    return attempt, data
