"""Main compression functionality for shrink_it."""

import os
from concurrent.futures import ThreadPoolExecutor

from shrink_it.core.decoder import decode_image
from shrink_it.core.encoders import EncodeSession
from shrink_it.core.models import (
    BatchItem,
    CompressionRequest,
    CompressionResult,
    CompressionStage,
    CompressionStatus,
    FileResult,
    OutputFormat,
    SizeUnit,
)
from shrink_it.core.quality import search_quality
from shrink_it.core.scaling import scale_down
from shrink_it.settings import INITIAL_QUALITY, LOSSLESS_QUALITY, OUTPUT_PREFIX
from shrink_it.utils.errors import (
    CompressionCancelled,
    ShrinkItError,
    raise_if_cancelled,
)
from shrink_it.utils.image import format_size
from shrink_it.utils.validation import (
    ensure_output_dir,
    validate_file_exists,
    validate_target_size,
)


def _log(verbose, stage, message):
    if verbose:
        print(f"[{stage.value}] {message}")


def compress_request(source_bytes, request, verbose=False, cancel_event=None):
    """Run one compression request through decode, search and scaling.

    Args:
        source_bytes: Encoded source image
        request: CompressionRequest with target size and format
        verbose: Whether to print stage transitions and progress bars
        cancel_event: Optional threading.Event to abort the request

    Returns:
        CompressionResult: The last attempt; check ``unachievable`` to see
        whether the target was met

    Raises:
        DecodeError: If the source is not a readable image
        EncodeError: If the codec refuses the request
        CompressionCancelled: If cancel_event was set
    """
    target = request.target_bytes
    stage = CompressionStage.IDLE

    try:
        raise_if_cancelled(cancel_event)

        source = decode_image(source_bytes)
        stage = CompressionStage.DECODED
        _log(
            verbose,
            stage,
            f"{source.source_format or 'image'} {source.width}x{source.height}, "
            f"target {format_size(target)} as {request.output_format.value}",
        )

        session = EncodeSession(source, request.output_format)
        width, height = source.width, source.height

        # Attempt 1: native size, high quality
        quality = INITIAL_QUALITY if session.is_lossy else LOSSLESS_QUALITY
        attempt, data = session.encode(width, height, quality, stage="initial")
        stage = CompressionStage.INITIAL_ENCODED
        _log(verbose, stage, f"quality {quality:.2f}: {format_size(attempt.size)}")

        if attempt.size > target:
            if session.is_lossy:
                attempt, data = search_quality(
                    session, target, verbose=verbose, cancel_event=cancel_event
                )
                stage = CompressionStage.QUALITY_SEARCHED
            else:
                stage = CompressionStage.SKIPPED_SEARCH
            _log(
                verbose,
                stage,
                f"quality {attempt.quality:.3f}: {format_size(attempt.size)}",
            )

            # Still too big: trade resolution for size
            if attempt.size > target:
                scaled, scaled_data = scale_down(
                    session, target, verbose=verbose, cancel_event=cancel_event
                )
                if scaled is not None:
                    attempt, data = scaled, scaled_data
                stage = CompressionStage.DIMENSION_SCALED
            else:
                stage = CompressionStage.SKIPPED_SCALE
            _log(
                verbose,
                stage,
                f"{attempt.width}x{attempt.height}: {format_size(attempt.size)}",
            )

    except ShrinkItError as e:
        _log(verbose, CompressionStage.FAILED, f"after {stage.value}: {e}")
        raise

    result = CompressionResult(
        data=data,
        width=attempt.width,
        height=attempt.height,
        output_format=request.output_format,
        target_bytes=target,
        quality=attempt.quality,
        attempts=tuple(session.attempts),
        source_bytes=len(source_bytes),
    )

    status = "target met" if result.target_met else "target not met"
    _log(
        verbose,
        CompressionStage.DONE,
        f"{format_size(result.size)} ({status}) after {session.encode_count} encodes",
    )
    return result


@validate_target_size
def compress(
    source_bytes,
    target_size,
    unit=SizeUnit.KB,
    output_format=OutputFormat.JPEG,
    verbose=False,
    cancel_event=None,
):
    """Compress an image to at most target_size in the requested format.

    Args:
        source_bytes: Encoded source image
        target_size: Size budget, in units of ``unit``
        unit: SizeUnit or "KB"/"MB"
        output_format: OutputFormat or "jpeg"/"webp"/"png"
        verbose: Whether to print progress information
        cancel_event: Optional threading.Event to abort the request

    Returns:
        CompressionResult: Encoded bytes with final dimensions
    """
    request = CompressionRequest(target_size, unit, output_format)
    return compress_request(
        source_bytes, request, verbose=verbose, cancel_event=cancel_event
    )


def output_path_for(input_path, output_format, output_dir=None, prefix=OUTPUT_PREFIX):
    """Build the output path: <prefix>_<stem>.<ext> next to the input or in output_dir."""
    base_name = os.path.splitext(os.path.basename(input_path))[0]
    extension = OutputFormat.parse(output_format).extension
    directory = output_dir or os.path.dirname(os.path.abspath(input_path))
    return os.path.join(directory, f"{prefix}_{base_name}.{extension}")


@validate_file_exists
@ensure_output_dir
def compress_file(
    input_path,
    target_size,
    unit=SizeUnit.KB,
    output_format=OutputFormat.JPEG,
    *,
    output_dir=None,
    prefix=OUTPUT_PREFIX,
    verbose=False,
    cancel_event=None,
):
    """Compress an image file and write the result.

    Args:
        input_path: Path to input image
        target_size: Size budget, in units of ``unit``
        unit: SizeUnit or "KB"/"MB"
        output_format: OutputFormat or format name
        output_dir: Directory for the output file (default: same as input)
        prefix: Prefix of the output file name
        verbose: Whether to print progress information
        cancel_event: Optional threading.Event to abort the request

    Returns:
        FileResult: Paths, original size and compression result
    """
    with open(input_path, "rb") as f:
        source_bytes = f.read()

    result = compress(
        source_bytes,
        target_size,
        unit,
        output_format,
        verbose=verbose,
        cancel_event=cancel_event,
    )

    output_path = output_path_for(input_path, result.output_format, output_dir, prefix)
    with open(output_path, "wb") as f:
        f.write(result.data)

    return FileResult(
        input_path=input_path,
        output_path=output_path,
        original_size=len(source_bytes),
        result=result,
    )


def bulk_compress(
    input_files,
    target_size,
    unit=SizeUnit.KB,
    output_format=OutputFormat.JPEG,
    *,
    output_dir=None,
    prefix=OUTPUT_PREFIX,
    workers=1,
    verbose=False,
    cancel_event=None,
):
    """Compress multiple images with the same settings.

    Requests share nothing, so with ``workers > 1`` they run on a thread
    pool. Failures are recorded on the item and do not stop the batch. Once
    cancel_event is set, items not yet finished are marked cancelled.

    Args:
        input_files: List of input image paths
        target_size: Size budget, in units of ``unit``
        unit: SizeUnit or "KB"/"MB"
        output_format: OutputFormat or format name
        output_dir: Directory for output files
        prefix: Prefix of the output file names
        workers: Number of images compressed at once
        verbose: Whether to print progress information
        cancel_event: Optional threading.Event to abort remaining requests

    Returns:
        list: BatchItem for each input file, in input order
    """
    if workers < 1:
        raise ValueError(f"Workers must be at least 1, got {workers}")

    # Fail fast on settings shared by every item
    CompressionRequest(target_size, unit, output_format)

    items = [BatchItem(input_path=path) for path in input_files]

    def run(item):
        if cancel_event is not None and cancel_event.is_set():
            item.status = CompressionStatus.CANCELLED
            return item

        item.status = CompressionStatus.COMPRESSING
        try:
            if verbose:
                print(f"Processing: {item.input_path}")
            item.file_result = compress_file(
                item.input_path,
                target_size,
                unit,
                output_format,
                output_dir=output_dir,
                prefix=prefix,
                verbose=verbose,
                cancel_event=cancel_event,
            )
            item.status = CompressionStatus.COMPLETED
            if verbose:
                result = item.file_result.result
                print(
                    f"Compressed to {result.width}x{result.height}, "
                    f"{format_size(result.size)} (-{result.savings}%)"
                )

        except CompressionCancelled:
            item.status = CompressionStatus.CANCELLED

        except Exception as e:
            print(f"Error processing {item.input_path}: {e}")
            item.status = CompressionStatus.ERROR
            item.error = str(e)

        return item

    if workers == 1:
        return [run(item) for item in items]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(run, items))
