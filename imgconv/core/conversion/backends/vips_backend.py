"""Advanced codec backend built on libvips."""

from typing import Any, Callable, Dict, Optional

from imgconv.core.constants import (
    GIF_MAX_EFFORT,
    MAX_EFFORT,
    PNG_MAX_COMPRESSION,
    WEBP_MAX_EFFORT,
)
from imgconv.core.conversion.backends.base import BaseBackend
from imgconv.core.conversion.sizing import compute_target_size
from imgconv.core.exceptions import (
    ConversionFailedError,
    InvalidImageError,
    UnsupportedFormatError,
)
from imgconv.models.conversion import (
    Backend,
    ConversionRequest,
    EncoderOptions,
    ImageFormat,
)
from imgconv.utils.logging import get_logger

try:
    import pyvips

    VIPS_AVAILABLE = True
except (ImportError, OSError):
    # OSError: the binding is installed but libvips itself is missing
    VIPS_AVAILABLE = False
    pyvips = None

logger = get_logger(__name__)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _jpeg_options(quality: int, options: EncoderOptions) -> Dict[str, Any]:
    return {"Q": quality, "optimize_coding": True}


def _webp_options(quality: int, options: EncoderOptions) -> Dict[str, Any]:
    return {
        "Q": quality,
        "lossless": options.lossless,
        "effort": _clamp(options.effort, 0, WEBP_MAX_EFFORT),
    }


def _avif_options(quality: int, options: EncoderOptions) -> Dict[str, Any]:
    return {
        "Q": quality,
        "lossless": options.lossless,
        "effort": _clamp(options.effort, 0, MAX_EFFORT),
        "compression": "av1",
    }


def _heic_options(quality: int, options: EncoderOptions) -> Dict[str, Any]:
    return {
        "Q": quality,
        "lossless": options.lossless,
        "effort": _clamp(options.effort, 0, MAX_EFFORT),
        "compression": "hevc",
    }


def _jxl_options(quality: int, options: EncoderOptions) -> Dict[str, Any]:
    return {
        "Q": quality,
        "lossless": options.lossless,
        "effort": _clamp(options.effort, 1, MAX_EFFORT),
    }


def _bmp_options(quality: int, options: EncoderOptions) -> Dict[str, Any]:
    # libvips has no native BMP saver, it goes through ImageMagick
    return {"quality": quality}


def _png_options(quality: int, options: EncoderOptions) -> Dict[str, Any]:
    return {"compression": _clamp(options.effort, 0, PNG_MAX_COMPRESSION)}


def _gif_options(quality: int, options: EncoderOptions) -> Dict[str, Any]:
    return {"effort": _clamp(options.effort, 1, GIF_MAX_EFFORT)}


def _tiff_options(quality: int, options: EncoderOptions) -> Dict[str, Any]:
    return {
        "Q": quality,
        "tile": True,
        "tile_width": options.tile_size,
        "tile_height": options.tile_size,
    }


# Encoder options each saver has a libvips keyword for
_CONSUMED_OPTIONS = {
    ImageFormat.JPEG: set(),
    ImageFormat.WEBP: {"lossless", "effort"},
    ImageFormat.AVIF: {"lossless", "effort"},
    ImageFormat.HEIC: {"lossless", "effort"},
    ImageFormat.JXL: {"lossless", "effort"},
    ImageFormat.BMP: set(),
    ImageFormat.PNG: {"effort"},
    ImageFormat.GIF: {"effort"},
    ImageFormat.TIFF: {"tile_size"},
}

_OPTION_BUILDERS: Dict[ImageFormat, Callable[[int, EncoderOptions], Dict[str, Any]]] = {
    ImageFormat.JPEG: _jpeg_options,
    ImageFormat.WEBP: _webp_options,
    ImageFormat.AVIF: _avif_options,
    ImageFormat.HEIC: _heic_options,
    ImageFormat.JXL: _jxl_options,
    ImageFormat.BMP: _bmp_options,
    ImageFormat.PNG: _png_options,
    ImageFormat.GIF: _gif_options,
    ImageFormat.TIFF: _tiff_options,
}


class VipsBackend(BaseBackend):
    """Advanced codec path with per-format encoder options."""

    kind = Backend.VIPS
    capabilities: Dict[ImageFormat, Optional[str]] = {
        ImageFormat.JPEG: ".jpg",
        ImageFormat.WEBP: ".webp",
        ImageFormat.AVIF: ".avif",
        ImageFormat.JXL: ".jxl",
        ImageFormat.HEIC: ".heic",
        ImageFormat.BMP: ".bmp",
        ImageFormat.PNG: ".png",
        ImageFormat.GIF: ".gif",
        ImageFormat.TIFF: ".tif",
    }

    def convert(self, request: ConversionRequest) -> None:
        suffix = self.resolve(request.format)
        if not VIPS_AVAILABLE:
            raise UnsupportedFormatError(
                "libvips support not available. Install pyvips and libvips.",
                details={
                    "requested_format": request.format.value,
                    "backend": self.name,
                    "required_package": "pyvips",
                },
            )

        data = self.read_input(request.input_path)
        try:
            image = pyvips.Image.new_from_buffer(data, "")
        except pyvips.Error as e:
            raise InvalidImageError(
                f"Failed to decode input image: {e}",
                details={"backend": self.name, "error": str(e)},
            )

        image = self.resize(image, request.target_width, request.target_height)
        save_options = self.save_options(
            request.format, request.quality, request.encoder_options
        )

        try:
            output = image.write_to_buffer(suffix, **save_options)
        except pyvips.Error as e:
            raise ConversionFailedError(
                f"Failed to save image as {request.format.name}: {e}",
                details={
                    "output_format": request.format.value,
                    "backend": self.name,
                    "error": str(e),
                },
            )

        request.output_path.write_bytes(output)
        logger.debug(
            "Encoded with libvips",
            format=request.format.value,
            size=(image.width, image.height),
            options=save_options,
            output_bytes=len(output),
        )

    def resize(self, image: "pyvips.Image", width: Optional[int], height: Optional[int]):
        """Scale to the contain-fit size; returns the input when nothing changes."""
        new_width, new_height = compute_target_size(image.width, image.height, width, height)
        if (new_width, new_height) == (image.width, image.height):
            return image
        return image.resize(
            new_width / image.width,
            vscale=new_height / image.height,
        )

    def save_options(
        self,
        image_format: ImageFormat,
        quality: int,
        options: EncoderOptions,
    ) -> Dict[str, Any]:
        """Translate quality and encoder options into saver keywords."""
        self.resolve(image_format)
        save_options = _OPTION_BUILDERS[image_format](quality, options)

        ignored = self._ignored_options(image_format, options)
        if ignored:
            logger.debug(
                "Encoder options have no libvips counterpart",
                format=image_format.value,
                ignored=sorted(ignored),
            )
        return save_options

    def _ignored_options(self, image_format: ImageFormat, options: EncoderOptions) -> set:
        # Only options that differ from "off" can be lost
        requested = {
            name
            for name, value in options.model_dump().items()
            if value not in (False, None)
        }
        return requested - _CONSUMED_OPTIONS[image_format]
