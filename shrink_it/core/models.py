"""Data model for size-targeted compression."""

import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple

from PIL import Image

from shrink_it.utils.validation import check_target_size


class OutputFormat(enum.Enum):
    """Output kinds supported by the encoders."""

    JPEG = "jpeg"
    WEBP = "webp"
    PNG = "png"

    @property
    def is_lossy(self):
        return self is not OutputFormat.PNG

    @property
    def mime_type(self):
        return f"image/{self.value}"

    @property
    def extension(self):
        return "jpg" if self is OutputFormat.JPEG else self.value

    @classmethod
    def parse(cls, value):
        """Resolve a format name, extension or MIME type.

        Args:
            value: OutputFormat, or a string such as "jpeg", "jpg", "image/webp"

        Returns:
            OutputFormat: The matching format

        Raises:
            ValueError: If the value names no supported format
        """
        if isinstance(value, cls):
            return value

        name = str(value).strip().lower()
        if name.startswith("image/"):
            name = name[len("image/"):]
        if name == "jpg":
            name = "jpeg"

        try:
            return cls(name)
        except ValueError:
            supported = ", ".join(fmt.value for fmt in cls)
            raise ValueError(
                f"Unsupported output format: {value} (expected one of {supported})"
            ) from None


class SizeUnit(enum.Enum):
    """Units a target size may be expressed in."""

    KB = 1024
    MB = 1024 * 1024

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unsupported size unit: {value} (expected KB or MB)") from None


class CompressionStage(enum.Enum):
    """States a single compression request moves through."""

    IDLE = "idle"
    DECODED = "decoded"
    INITIAL_ENCODED = "initial_encoded"
    QUALITY_SEARCHED = "quality_searched"
    SKIPPED_SEARCH = "skipped_search"
    DIMENSION_SCALED = "dimension_scaled"
    SKIPPED_SCALE = "skipped_scale"
    DONE = "done"
    FAILED = "failed"


class CompressionStatus(enum.Enum):
    """Status of one item in a batch."""

    IDLE = "idle"
    COMPRESSING = "compressing"
    COMPLETED = "completed"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SourceImage:
    """A decoded image, normalized to RGB or RGBA."""

    image: Image.Image
    width: int
    height: int
    source_bytes: int = 0
    source_format: str = ""

    @property
    def has_alpha(self):
        return self.image.mode == "RGBA"


@dataclass(frozen=True)
class CompressionRequest:
    """Target size and output format for one compression."""

    target_size: float
    unit: SizeUnit = SizeUnit.KB
    output_format: OutputFormat = OutputFormat.JPEG

    def __post_init__(self):
        object.__setattr__(self, "unit", SizeUnit.parse(self.unit))
        object.__setattr__(self, "output_format", OutputFormat.parse(self.output_format))
        check_target_size(self.target_size)

    @property
    def target_bytes(self):
        return int(self.target_size * self.unit.value)


@dataclass(frozen=True)
class EncodeAttempt:
    """One encode performed while searching for the target size."""

    quality: float
    width: int
    height: int
    scale: float
    size: int
    stage: str


@dataclass(frozen=True)
class CompressionResult:
    """Final encoded bytes of a compression request."""

    data: bytes
    width: int
    height: int
    output_format: OutputFormat
    target_bytes: int
    quality: float
    attempts: Tuple[EncodeAttempt, ...] = field(default_factory=tuple)
    source_bytes: int = 0

    @property
    def size(self):
        return len(self.data)

    @property
    def target_met(self):
        return self.size <= self.target_bytes

    @property
    def unachievable(self):
        """True when the budgets ran out before the target was met."""
        return not self.target_met

    @property
    def savings(self):
        """Percentage of the source size saved, 0 when the source size is unknown."""
        if not self.source_bytes:
            return 0.0
        return round((1 - self.size / self.source_bytes) * 100, 1)

    @property
    def extension(self):
        return self.output_format.extension

    @property
    def mime_type(self):
        return self.output_format.mime_type


@dataclass(frozen=True)
class FileResult:
    """A compression result written to disk."""

    input_path: str
    output_path: str
    original_size: int
    result: CompressionResult


@dataclass
class BatchItem:
    """One input of a batch and what became of it."""

    input_path: str
    status: CompressionStatus = CompressionStatus.IDLE
    file_result: Optional[FileResult] = None
    error: Optional[str] = None
