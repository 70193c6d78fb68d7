"""Decode source bytes into a normalized pixel buffer."""

import io

from PIL import Image, ImageOps, UnidentifiedImageError

from shrink_it.core.models import SourceImage
from shrink_it.utils.errors import DecodeError
from shrink_it.utils.validation import validate_file_exists


def _has_transparency(img):
    if img.mode in ("RGBA", "LA", "PA"):
        return True
    return "transparency" in img.info


def decode_image(source_bytes):
    """Decode encoded image bytes.

    Only the first frame of animated images is kept. The EXIF orientation is
    applied so the buffer is upright, and the mode is normalized to RGBA when
    the image carries transparency, RGB otherwise.

    Args:
        source_bytes: Encoded image bytes

    Returns:
        SourceImage: The decoded image

    Raises:
        DecodeError: If the bytes are not a readable image
    """
    if not source_bytes:
        raise DecodeError("Empty input: no image data")

    try:
        with Image.open(io.BytesIO(source_bytes)) as img:
            source_format = img.format or ""
            img.load()
            img = ImageOps.exif_transpose(img)
            mode = "RGBA" if _has_transparency(img) else "RGB"
            pixels = img.convert(mode)
    except UnidentifiedImageError as e:
        raise DecodeError("Input is not a recognizable image") from e
    except Image.DecompressionBombError as e:
        raise DecodeError(f"Image refused as too large: {e}") from e
    except Exception as e:
        # Truncated or corrupt data, or malformed EXIF metadata
        raise DecodeError(f"Failed to decode image: {e}") from e

    width, height = pixels.size
    if width == 0 or height == 0:
        raise DecodeError(f"Image has no pixels ({width}x{height})")

    return SourceImage(
        image=pixels,
        width=width,
        height=height,
        source_bytes=len(source_bytes),
        source_format=source_format,
    )


@validate_file_exists
def decode_file(input_path):
    """Read an image file and decode it.

    Args:
        input_path: Path to the image file

    Returns:
        SourceImage: The decoded image
    """
    with open(input_path, "rb") as f:
        return decode_image(f.read())
