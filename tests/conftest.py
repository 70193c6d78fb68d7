import pytest
from types import SimpleNamespace

from shrink_it.core.models import EncodeAttempt, OutputFormat
from shrink_it.utils.image import (
    create_gradient_image,
    create_noise_image,
    image_to_bytes,
)


@pytest.fixture
def noise_jpeg_bytes():
    """256x256 noise saved as a high quality JPEG."""
    return image_to_bytes(create_noise_image(256, 256), "JPEG", quality=98)


@pytest.fixture
def noise_png_rgba_bytes():
    """128x128 noise with random transparency, saved as PNG."""
    return image_to_bytes(create_noise_image(128, 128, alpha=True), "PNG")


@pytest.fixture
def gradient_jpeg_bytes():
    """200x150 gradient saved as JPEG: small and smooth."""
    return image_to_bytes(create_gradient_image(200, 150), "JPEG", quality=90)


@pytest.fixture
def tiny_noise_png_bytes():
    """16x16 noise saved as PNG."""
    return image_to_bytes(create_noise_image(16, 16, seed=3), "PNG")


class FakeSession:
    """Stands in for EncodeSession with sizes computed by a function."""

    def __init__(self, size_func, lossy=True, width=1000, height=800):
        self.size_func = size_func
        self.output_format = OutputFormat.JPEG if lossy else OutputFormat.PNG
        self.source = SimpleNamespace(width=width, height=height)
        self.attempts = []
        self.encode_count = 0

    @property
    def is_lossy(self):
        return self.output_format.is_lossy

    def encode(self, width, height, quality, stage):
        size = self.size_func(width, height, quality)
        attempt = EncodeAttempt(
            quality=quality,
            width=width,
            height=height,
            scale=width / self.source.width,
            size=size,
            stage=stage,
        )
        self.attempts.append(attempt)
        self.encode_count += 1
        return attempt, b"x" * size


@pytest.fixture
def fake_session():
    """Factory for sessions with synthetic encode sizes."""
    return FakeSession
