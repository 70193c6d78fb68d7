#!/usr/bin/env python
"""Main entry point for shrink_it when run as a script."""

import sys
import argparse
from shrink_it import __version__
from shrink_it.utils.dependencies import check_dependencies
from shrink_it.utils.errors import MissingDependencyError


def create_parent_parser():
    """Create a parent parser with common arguments."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed progress information",
    )

    # Add version information for parent parser epilog
    parser.epilog = f"shrink_it {__version__}"

    return parser


def run_with_args(parse_func, run_func, formats_func):
    """Run the CLI with parsed arguments and codec checking.

    Args:
        parse_func: Function to parse arguments
        run_func: Function to run with parsed arguments
        formats_func: Function returning the output formats the run needs

    Returns:
        int: Exit code
    """
    # Parse arguments
    args = parse_func()

    # Verify Pillow codecs
    try:
        check_dependencies(formats_func(args))
    except MissingDependencyError as e:
        print(str(e), file=sys.stderr)
        return 1

    # Run with parsed arguments
    return run_func(args)


def main(argv=None):
    """Main entry point for the script."""
    from shrink_it.cli.compression_cli import add_compression_arguments

    parser = argparse.ArgumentParser(
        description="shrink_it: compress images to a target file size",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Set up subparsers for commands
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Compression command
    compress_parser = subparsers.add_parser(
        "compress",
        help="Compress images to a target file size",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_compression_arguments(compress_parser)
    compress_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed progress information",
    )

    # Version command
    subparsers.add_parser("version", help="Show version information")

    # Parse arguments
    args = parser.parse_args(argv)

    # Handle commands
    if args.command == "compress":
        from shrink_it.cli.compression_cli import run_compression

        return run_with_args(lambda: args, run_compression, lambda a: [a.format])

    elif args.command == "version":
        print(f"shrink_it version {__version__}")
        return 0

    else:
        # No command specified, show help
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
