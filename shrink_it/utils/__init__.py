"""Utility functions for shrink_it."""

from shrink_it.utils.errors import (
    ShrinkItError,
    DecodeError,
    EncodeError,
    CompressionCancelled,
    MissingDependencyError,
    raise_if_cancelled,
)

from shrink_it.utils.image import (
    format_size,
    image_to_bytes,
    get_image_dimensions,
    create_blank_image,
    create_gradient_image,
    create_noise_image,
)

from shrink_it.utils.validation import (
    validate_file_exists,
    validate_quality_range,
    check_target_size,
    validate_target_size,
    ensure_output_dir,
    validate_input_files,
)

# Define what's available when doing "from shrink_it.utils import *"
__all__ = [
    # Errors
    "ShrinkItError",
    "DecodeError",
    "EncodeError",
    "CompressionCancelled",
    "MissingDependencyError",
    "raise_if_cancelled",
    # Image utilities
    "format_size",
    "image_to_bytes",
    "get_image_dimensions",
    "create_blank_image",
    "create_gradient_image",
    "create_noise_image",
    # Validation utilities
    "validate_file_exists",
    "validate_quality_range",
    "check_target_size",
    "validate_target_size",
    "ensure_output_dir",
    "validate_input_files",
]
