"""Utilities for image manipulation."""

import io
import math

import numpy as np
from PIL import Image


def format_size(num_bytes):
    """Format a byte count for display.

    Args:
        num_bytes: Size in bytes

    Returns:
        str: Human readable size, e.g. "1.5 MB"
    """
    if num_bytes <= 0:
        return "0 B"

    units = ["B", "KB", "MB"]
    exponent = min(int(math.log(num_bytes, 1024)), len(units) - 1)
    value = round(num_bytes / 1024**exponent, 2)

    # Drop trailing zeros: 200.0 KB -> 200 KB
    return f"{value:g} {units[exponent]}"


def image_to_bytes(img, format_name="PNG", **save_options):
    """Serialize a PIL image to bytes in the given format."""
    buffer = io.BytesIO()
    img.save(buffer, format=format_name, **save_options)
    return buffer.getvalue()


def get_image_dimensions(data):
    """Get the dimensions of an encoded image.

    Args:
        data: Encoded image bytes

    Returns:
        tuple: (width, height)
    """
    with Image.open(io.BytesIO(data)) as img:
        return img.size


def create_blank_image(width, height, color="white", mode="RGB"):
    """Create a blank image with specified dimensions and color.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        color: Background color (default: white)
        mode: PIL mode of the new image

    Returns:
        PIL.Image.Image: The new image
    """
    return Image.new(mode, (width, height), color=color)


def create_gradient_image(width, height):
    """Create a smooth RGB gradient, which compresses well.

    Args:
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        PIL.Image.Image: The gradient image
    """
    x = np.linspace(0, 255, width, dtype=np.float32)[np.newaxis, :]
    y = np.linspace(0, 255, height, dtype=np.float32)[:, np.newaxis]

    r = np.broadcast_to(x, (height, width))
    g = np.broadcast_to(y, (height, width))
    b = (r + g) / 2

    pixels = np.stack([r, g, b], axis=-1).astype(np.uint8)
    return Image.fromarray(pixels)


def create_noise_image(width, height, alpha=False, seed=0):
    """Create a random noise image, which resists compression.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        alpha: Whether to add a random transparency channel
        seed: Seed for the random generator, so images are reproducible

    Returns:
        PIL.Image.Image: The noise image
    """
    rng = np.random.default_rng(seed)
    channels = 4 if alpha else 3
    pixels = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
    return Image.fromarray(pixels)
