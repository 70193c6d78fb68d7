"""CLI interface for shrink_it compression."""

import argparse
import os
import sys

from shrink_it.cli.main import create_parent_parser, run_with_args
from shrink_it.core.compression import bulk_compress
from shrink_it.core.models import CompressionStatus, OutputFormat, SizeUnit
from shrink_it.settings import OUTPUT_PREFIX
from shrink_it.utils.image import format_size
from shrink_it.utils.validation import validate_input_files

# Defaults of the original web tool: 200 KB JPEG
DEFAULT_TARGET_SIZE = 200
DEFAULT_UNIT = "KB"
DEFAULT_FORMAT = "jpeg"


def positive_float(value):
    """argparse type for a strictly positive number."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from None
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def output_format(value):
    """argparse type accepting jpeg, jpg, webp, png or a MIME type."""
    try:
        return OutputFormat.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def add_compression_arguments(parser):
    """Add the compression arguments to a parser."""
    parser.add_argument("input_images", nargs="+", help="Paths to source image files")

    parser.add_argument(
        "--size",
        "-s",
        type=positive_float,
        default=DEFAULT_TARGET_SIZE,
        help="Target size, in --unit",
    )

    parser.add_argument(
        "--unit",
        "-u",
        type=str.upper,
        choices=[unit.name for unit in SizeUnit],
        default=DEFAULT_UNIT,
        help="Unit of the target size",
    )

    parser.add_argument(
        "--format",
        "-f",
        type=output_format,
        default=DEFAULT_FORMAT,
        help="Output format (jpeg, webp, png)",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output directory. If not provided, files are written next to their input",
    )

    parser.add_argument(
        "--prefix",
        "-p",
        type=str,
        default=OUTPUT_PREFIX,
        help="Prefix of the output file names",
    )

    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=1,
        help="Number of images compressed at once",
    )


def parse_compression_args(argv=None):
    """Parse command-line arguments for compression.

    Returns:
        Namespace: Parsed arguments
    """
    parent_parser = create_parent_parser()

    parser = argparse.ArgumentParser(
        description="Compress images to a target file size",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        parents=[parent_parser],
        epilog=parent_parser.epilog,
    )
    add_compression_arguments(parser)

    return parser.parse_args(argv)


def describe(item):
    """One summary line for a batch item."""
    name = os.path.basename(item.input_path)
    if item.status is CompressionStatus.CANCELLED:
        return f"  {name}: cancelled"
    if item.status is not CompressionStatus.COMPLETED:
        return f"  {name}: failed ({item.error})"

    file_result = item.file_result
    result = file_result.result
    line = (
        f"  {name}: {format_size(file_result.original_size)} -> "
        f"{format_size(result.size)} (-{result.savings}%), "
        f"{result.width}x{result.height} -> {file_result.output_path}"
    )
    if result.unachievable:
        line += " (target not met)"
    return line


def run_compression(args):
    """Run the compression with provided arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    fmt = OutputFormat.parse(args.format)

    if args.workers < 1:
        print(f"Invalid worker count: {args.workers}", file=sys.stderr)
        return 1

    # Ensure input files exist
    try:
        validate_input_files(args.input_images)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Target size: {args.size:g} {args.unit} as {fmt.value}")
        if args.output:
            print(f"Output directory: {args.output}")

    items = bulk_compress(
        args.input_images,
        args.size,
        args.unit,
        fmt,
        output_dir=args.output,
        prefix=args.prefix,
        workers=args.workers,
        verbose=args.verbose,
    )

    print("\nCompression complete!")
    for item in items:
        print(describe(item))

    failed = [item for item in items if item.status is not CompressionStatus.COMPLETED]
    return 1 if failed else 0


def main(argv=None):
    """Main entry point for the compression CLI."""
    return run_with_args(
        lambda: parse_compression_args(argv),
        run_compression,
        lambda args: [args.format],
    )


if __name__ == "__main__":
    sys.exit(main())
