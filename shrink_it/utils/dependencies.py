"""Checks that Pillow was built with the codecs shrink_it needs."""

from PIL import features

from shrink_it.core.models import OutputFormat
from shrink_it.utils.errors import MissingDependencyError

# Pillow feature name backing each output format
CODEC_FEATURES = {
    OutputFormat.JPEG: "jpg",
    OutputFormat.WEBP: "webp",
    OutputFormat.PNG: "zlib",
}


def check_codec_exists(output_format):
    """Check if Pillow can encode the given format.

    Args:
        output_format: OutputFormat or format name

    Returns:
        bool: True if the codec is available, False otherwise
    """
    feature = CODEC_FEATURES[OutputFormat.parse(output_format)]
    return bool(features.check(feature))


def check_dependencies(output_formats):
    """Verify the codecs for the requested formats are available.

    Args:
        output_formats: List of OutputFormat or format names

    Raises:
        MissingDependencyError: If any required codec is missing
    """
    missing = []
    for fmt in output_formats:
        if not check_codec_exists(fmt):
            missing.append(OutputFormat.parse(fmt).value)

    if missing:
        raise MissingDependencyError(
            f"Missing required codecs: {', '.join(missing)}. "
            "Please install a Pillow build with support for them."
        )
