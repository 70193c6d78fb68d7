import pytest

from shrink_it.core.decoder import decode_image
from shrink_it.core.encoders import (
    EncodeSession,
    encode_image,
    encode_jpeg,
    encode_png,
    encode_webp,
    get_encoder,
    get_extension,
    to_codec_quality,
)
from shrink_it.core.models import OutputFormat
from shrink_it.utils.errors import EncodeError
from shrink_it.utils.image import (
    create_blank_image,
    create_gradient_image,
    create_noise_image,
    get_image_dimensions,
)


@pytest.fixture
def rgb_image():
    return create_gradient_image(120, 80)


@pytest.fixture
def rgba_image():
    return create_noise_image(64, 64, alpha=True)


def test_encode_jpeg_signature(rgb_image):
    encoded = encode_jpeg(rgb_image, 120, 80, 0.8)

    assert encoded[:3] == b"\xff\xd8\xff"


def test_encode_png_signature(rgb_image):
    encoded = encode_png(rgb_image, 120, 80)

    assert encoded[:8] == b"\x89PNG\r\n\x1a\n"


def test_encode_webp_signature(rgb_image):
    encoded = encode_webp(rgb_image, 120, 80, 0.8)

    assert encoded[:4] == b"RIFF"
    assert encoded[8:12] == b"WEBP"


def test_encode_resamples_to_requested_size(rgb_image):
    encoded = encode_image(rgb_image, 60, 40, OutputFormat.PNG)

    assert get_image_dimensions(encoded) == (60, 40)


def test_encode_is_deterministic(rgb_image):
    first = encode_image(rgb_image, 90, 60, "jpeg", 0.7)
    second = encode_image(rgb_image, 90, 60, "jpeg", 0.7)

    assert first == second


def test_lower_quality_gives_smaller_output():
    image = create_noise_image(128, 128)

    low = encode_jpeg(image, 128, 128, 0.2)
    high = encode_jpeg(image, 128, 128, 0.95)

    assert len(low) < len(high)


def test_jpeg_flattens_transparency(rgba_image):
    encoded = encode_jpeg(rgba_image, 64, 64, 0.9)

    assert decode_image(encoded).image.mode == "RGB"


def test_webp_keeps_transparency(rgba_image):
    encoded = encode_webp(rgba_image, 64, 64, 0.9)

    assert decode_image(encoded).has_alpha


def test_png_ignores_quality(rgb_image):
    assert encode_png(rgb_image, 120, 80, 0.1) == encode_png(rgb_image, 120, 80, 1.0)


@pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (-5, 10)])
def test_zero_area_raises(rgb_image, width, height):
    with pytest.raises(EncodeError):
        encode_jpeg(rgb_image, width, height, 0.5)


@pytest.mark.parametrize("quality", [0.0, 1.5, -1])
def test_quality_out_of_range_raises(rgb_image, quality):
    with pytest.raises(ValueError):
        encode_webp(rgb_image, 120, 80, quality)


def test_unsupported_format_raises():
    with pytest.raises(EncodeError):
        get_encoder("gif")


def test_format_registry():
    assert get_encoder("image/jpeg") is encode_jpeg
    assert get_encoder(OutputFormat.WEBP) is encode_webp
    assert get_extension("jpeg") == "jpg"
    assert get_extension("png") == "png"


def test_to_codec_quality():
    assert to_codec_quality(0.01) == 1
    assert to_codec_quality(0.5) == 50
    assert to_codec_quality(0.95) == 95
    assert to_codec_quality(1.0) == 100


def test_session_records_attempts():
    source = decode_image(
        encode_png(create_gradient_image(100, 50), 100, 50)
    )
    session = EncodeSession(source, "jpeg")

    attempt, data = session.encode(50, 25, 0.6, stage="scale")

    assert attempt.size == len(data)
    assert (attempt.width, attempt.height) == (50, 25)
    assert attempt.scale == pytest.approx(0.5)
    assert session.attempts == [attempt]


def test_session_does_not_reencode_same_codec_quality():
    source = decode_image(encode_png(create_noise_image(32, 32), 32, 32))
    session = EncodeSession(source, "jpeg")

    # 0.501 and 0.499 both map to codec quality 50
    _, first = session.encode(32, 32, 0.501, stage="search")
    _, second = session.encode(32, 32, 0.499, stage="search")

    assert first == second
    assert session.encode_count == 1
    assert len(session.attempts) == 2


def test_lossless_session_uses_fixed_quality():
    source = decode_image(encode_png(create_blank_image(20, 20), 20, 20))
    session = EncodeSession(source, OutputFormat.PNG)

    attempt, _ = session.encode(20, 20, 0.3, stage="initial")

    assert attempt.quality == 1.0
    assert not session.is_lossy


def test_encode_image_default_quality_depends_on_format(rgb_image):
    assert encode_image(rgb_image, 120, 80, "jpeg") == encode_jpeg(rgb_image, 120, 80, 0.95)
    assert encode_image(rgb_image, 120, 80, "webp") == encode_webp(rgb_image, 120, 80, 0.95)
    assert encode_image(rgb_image, 120, 80, "png") == encode_png(rgb_image, 120, 80)
