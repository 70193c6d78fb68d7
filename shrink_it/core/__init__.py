"""Core functionality for shrink_it."""

from shrink_it.core.models import (
    OutputFormat,
    SizeUnit,
    CompressionStage,
    CompressionStatus,
    SourceImage,
    CompressionRequest,
    EncodeAttempt,
    CompressionResult,
    FileResult,
    BatchItem,
)

from shrink_it.core.decoder import decode_image, decode_file

from shrink_it.core.encoders import (
    get_encoder,
    get_extension,
    encode_image,
    encode_jpeg,
    encode_webp,
    encode_png,
    EncodeSession,
)

from shrink_it.core.quality import search_quality
from shrink_it.core.scaling import scale_down

from shrink_it.core.compression import (
    compress,
    compress_request,
    compress_file,
    bulk_compress,
)

# Define what's available when doing "from shrink_it.core import *"
__all__ = [
    # Data model
    "OutputFormat",
    "SizeUnit",
    "CompressionStage",
    "CompressionStatus",
    "SourceImage",
    "CompressionRequest",
    "EncodeAttempt",
    "CompressionResult",
    "FileResult",
    "BatchItem",
    # Decoding
    "decode_image",
    "decode_file",
    # Encoders
    "get_encoder",
    "get_extension",
    "encode_image",
    "encode_jpeg",
    "encode_webp",
    "encode_png",
    "EncodeSession",
    # Search and scaling
    "search_quality",
    "scale_down",
    # Compression workflows
    "compress",
    "compress_request",
    "compress_file",
    "bulk_compress",
]
