"""Data models for image conversion."""

from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from imgconv.core.constants import (
    DEFAULT_EFFORT,
    DEFAULT_QUALITY,
    DEFAULT_TILE_SIZE,
    MAX_EFFORT,
    MAX_QUALITY,
    MIN_QUALITY,
    TILE_SIZE_STEP,
)

_FORMAT_ALIASES = {
    "jpg": "jpeg",
    "jpe": "jpeg",
    "jpegxl": "jxl",
    "jpeg_xl": "jxl",
    "heif": "heic",
    "tif": "tiff",
}


class ImageFormat(str, Enum):
    """Output image formats. The value doubles as the file extension."""

    JPEG = "jpeg"
    WEBP = "webp"
    AVIF = "avif"
    JXL = "jxl"
    HEIC = "heic"
    BMP = "bmp"
    PNG = "png"
    GIF = "gif"
    TIFF = "tiff"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "ImageFormat":
        """Parse a format name, value or alias case-insensitively.

        Raises:
            ValueError: If the text names no known format
        """
        key = text.strip().lower()
        key = _FORMAT_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown image format: {text!r}")


class Backend(str, Enum):
    """Codec backends."""

    PILLOW = "pillow"
    VIPS = "vips"


class EncoderOptions(BaseModel):
    """Per-format encoder tuning for the advanced backend."""

    model_config = ConfigDict(frozen=True)

    tile_size: int = Field(default=DEFAULT_TILE_SIZE, gt=0, description="Tile edge in pixels")
    lossless: bool = Field(default=False, description="Use lossless compression")
    effort: int = Field(
        default=DEFAULT_EFFORT, ge=0, le=MAX_EFFORT, description="Encoding effort level"
    )
    auto_filter: bool = Field(default=True, description="Automatic filter strength")
    emulate_source_size: bool = Field(
        default=True, description="Aim for the size of the source file"
    )

    @field_validator("tile_size")
    @classmethod
    def validate_tile_size(cls, v: int) -> int:
        """Tiles are encoded in blocks of 64 pixels."""
        if v % TILE_SIZE_STEP:
            raise ValueError(f"tile_size must be a multiple of {TILE_SIZE_STEP}")
        return v


class Dimensions(NamedTuple):
    width: int
    height: int


class ConversionRequest(BaseModel):
    """One input file to be converted to one output file."""

    model_config = ConfigDict(frozen=True)

    input_path: Path
    output_path: Path
    format: ImageFormat
    quality: int = Field(default=DEFAULT_QUALITY, ge=MIN_QUALITY, le=MAX_QUALITY)
    target_width: Optional[int] = Field(default=None, gt=0)
    target_height: Optional[int] = Field(default=None, gt=0)
    backend: Backend = Backend.PILLOW
    encoder_options: EncoderOptions = Field(default_factory=EncoderOptions)


class ConversionResult(BaseModel):
    """Outcome of a single conversion."""

    model_config = ConfigDict(frozen=True)

    success: bool
    output_path: Path
    elapsed: float = Field(default=0.0, ge=0, description="Seconds spent converting")
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, output_path: Path, elapsed: float) -> "ConversionResult":
        return cls(success=True, output_path=output_path, elapsed=elapsed)

    @classmethod
    def failed(
        cls,
        output_path: Path,
        elapsed: float,
        error: str,
        error_code: Optional[str] = None,
    ) -> "ConversionResult":
        return cls(
            success=False,
            output_path=output_path,
            elapsed=elapsed,
            error=error,
            error_code=error_code,
        )

    def __bool__(self) -> bool:
        return self.success
