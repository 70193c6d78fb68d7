"""Utilities for input validation."""

import os
import functools
import math

from shrink_it.settings import MAX_QUALITY, MIN_QUALITY


def validate_file_exists(func):
    """Decorator to validate that input file exists before processing."""

    @functools.wraps(func)
    def wrapper(input_path, *args, **kwargs):
        if not os.path.isfile(input_path):
            raise FileNotFoundError(f"Input file not found: {input_path}")
        return func(input_path, *args, **kwargs)

    return wrapper


def validate_quality_range(func):
    """Decorator to validate quality is within the supported range (0.01-1.0)."""

    @functools.wraps(func)
    def wrapper(image, width, height, quality=None, *args, **kwargs):
        if quality is not None:  # Allow None for formats that don't use quality
            quality = float(quality)
            if math.isnan(quality) or quality < MIN_QUALITY or quality > MAX_QUALITY:
                raise ValueError(
                    f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
                )
        return func(image, width, height, quality, *args, **kwargs)

    return wrapper


def check_target_size(target_size):
    """Raise ValueError unless target_size is a positive number.

    Args:
        target_size: Size budget to check
    """
    if isinstance(target_size, bool) or not isinstance(target_size, (int, float)):
        raise ValueError(f"Target size must be a number, got {target_size!r}")
    if math.isnan(target_size) or target_size <= 0:
        raise ValueError(f"Target size must be positive, got {target_size}")


def validate_target_size(func):
    """Decorator to validate the target size is a positive number."""

    @functools.wraps(func)
    def wrapper(source, target_size, *args, **kwargs):
        check_target_size(target_size)
        return func(source, target_size, *args, **kwargs)

    return wrapper


def ensure_output_dir(func):
    """Decorator to ensure the output directory exists."""

    @functools.wraps(func)
    def wrapper(*args, output_dir=None, **kwargs):
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        return func(*args, output_dir=output_dir, **kwargs)

    return wrapper


def validate_input_files(files):
    """Validate that a list of input files exist.

    Args:
        files: List of file paths to validate

    Returns:
        list: List of existing files

    Raises:
        FileNotFoundError: If any file doesn't exist
    """
    missing = []
    for file_path in files:
        if not os.path.isfile(file_path):
            missing.append(file_path)

    if missing:
        raise FileNotFoundError(f"Files not found: {', '.join(missing)}")

    return files
