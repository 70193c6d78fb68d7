"""Encoders for the supported output formats."""

import io
import functools

from PIL import Image

from shrink_it.core.models import EncodeAttempt, OutputFormat
from shrink_it.settings import INITIAL_QUALITY, JPEG_BACKGROUND, LOSSLESS_QUALITY
from shrink_it.utils.errors import EncodeError
from shrink_it.utils.validation import validate_quality_range

# File extensions for each encoder format
FORMAT_EXTENSIONS = {fmt: fmt.extension for fmt in OutputFormat}


def with_codec_errors(func):
    """Decorator to turn codec failures into EncodeError."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except EncodeError:
            raise
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(f"Failed to execute {func.__name__}: {e}") from e

    return wrapper


# Base decorator composition for all encoders
def encoder_base(func):
    """Apply base decorators to all encoder functions."""
    return validate_quality_range(with_codec_errors(func))


def to_codec_quality(quality):
    """Map a quality in [0.01, 1.0] to the 1-100 scale Pillow expects."""
    return max(1, min(100, int(round(quality * 100))))


def resample(image, width, height):
    """Resize the pixel buffer to width x height.

    Args:
        image: PIL image
        width: Target width in pixels
        height: Target height in pixels

    Returns:
        PIL.Image.Image: The buffer itself when the size already matches

    Raises:
        EncodeError: If the requested area is empty
    """
    if width <= 0 or height <= 0:
        raise EncodeError(f"Cannot encode a zero-area image ({width}x{height})")

    if image.size == (width, height):
        return image

    return image.resize((width, height), Image.Resampling.LANCZOS)


def _save(img, format_name, **options):
    buffer = io.BytesIO()
    img.save(buffer, format=format_name, **options)
    return buffer.getvalue()


@encoder_base
def encode_jpeg(image, width, height, quality):
    """Encode image to JPEG.

    Args:
        image: RGB or RGBA PIL image
        width: Output width in pixels
        height: Output height in pixels
        quality: Compression quality (0.01-1.0)

    Returns:
        bytes: Encoded JPEG
    """
    img = resample(image, width, height)

    # JPEG has no alpha channel
    if img.mode == "RGBA":
        flattened = Image.new("RGB", img.size, JPEG_BACKGROUND)
        flattened.paste(img, mask=img.getchannel("A"))
        img = flattened
    elif img.mode != "RGB":
        img = img.convert("RGB")

    return _save(img, "JPEG", quality=to_codec_quality(quality), optimize=True)


@encoder_base
def encode_webp(image, width, height, quality):
    """Encode image to lossy WebP, keeping transparency.

    Args:
        image: RGB or RGBA PIL image
        width: Output width in pixels
        height: Output height in pixels
        quality: Compression quality (0.01-1.0)

    Returns:
        bytes: Encoded WebP
    """
    img = resample(image, width, height)
    return _save(img, "WEBP", quality=to_codec_quality(quality))


@encoder_base
def encode_png(image, width, height, quality=None):
    """Encode image to PNG.

    Args:
        image: RGB or RGBA PIL image
        width: Output width in pixels
        height: Output height in pixels
        quality: Ignored for PNG

    Returns:
        bytes: Encoded PNG
    """
    img = resample(image, width, height)
    return _save(img, "PNG", optimize=True)


def get_encoder(format_name):
    """Get an encoder function by format name.

    Args:
        format_name: OutputFormat or name of the format (jpeg, webp, png)

    Returns:
        Function: The encoder function

    Raises:
        EncodeError: If the format is not supported
    """
    encoders = {
        OutputFormat.JPEG: encode_jpeg,
        OutputFormat.WEBP: encode_webp,
        OutputFormat.PNG: encode_png,
    }

    try:
        return encoders[OutputFormat.parse(format_name)]
    except ValueError as e:
        raise EncodeError(str(e)) from e


def get_extension(format_name):
    """Get file extension for a format.

    Args:
        format_name: OutputFormat or name of the format

    Returns:
        str: File extension (without dot)

    Raises:
        ValueError: If the format is not supported
    """
    return FORMAT_EXTENSIONS[OutputFormat.parse(format_name)]


def encode_image(image, width, height, output_format, quality=None):
    """Encode a pixel buffer at the given size in the requested format.

    Args:
        image: RGB or RGBA PIL image
        width: Output width in pixels
        height: Output height in pixels
        output_format: OutputFormat or format name
        quality: Compression quality (0.01-1.0), ignored for lossless formats.
            Defaults to the initial quality for lossy formats

    Returns:
        bytes: Encoded image
    """
    encoder = get_encoder(output_format)
    fmt = OutputFormat.parse(output_format)
    if quality is None:
        quality = INITIAL_QUALITY if fmt.is_lossy else LOSSLESS_QUALITY
    return encoder(image, width, height, quality)


class EncodeSession:
    """Encoder bound to one source image and output format.

    A session belongs to a single compression request. It records every
    attempt in order and never runs the codec twice for the same size and
    effective codec quality.
    """

    def __init__(self, source, output_format):
        self.source = source
        self.output_format = OutputFormat.parse(output_format)
        self.attempts = []
        self.encode_count = 0
        self._encoder = get_encoder(self.output_format)
        self._cache = {}

    @property
    def is_lossy(self):
        return self.output_format.is_lossy

    def _cache_key(self, width, height, quality):
        codec_quality = to_codec_quality(quality) if self.is_lossy else None
        return (width, height, codec_quality)

    def encode(self, width, height, quality, stage):
        """Encode the source at width x height.

        Args:
            width: Output width in pixels
            height: Output height in pixels
            quality: Compression quality (0.01-1.0)
            stage: Name of the step requesting the encode

        Returns:
            tuple: (EncodeAttempt, encoded bytes)
        """
        if not self.is_lossy:
            quality = LOSSLESS_QUALITY

        key = self._cache_key(width, height, quality)
        data = self._cache.get(key)
        if data is None:
            data = self._encoder(self.source.image, width, height, quality)
            self._cache[key] = data
            self.encode_count += 1

        attempt = EncodeAttempt(
            quality=quality,
            width=width,
            height=height,
            scale=width / self.source.width,
            size=len(data),
            stage=stage,
        )
        self.attempts.append(attempt)
        return attempt, data
