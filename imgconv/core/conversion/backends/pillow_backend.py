"""Bitmap codec backend built on Pillow."""

from io import BytesIO
from typing import Dict, Optional

import structlog
from PIL import Image

from imgconv.core.conversion.backends.base import BaseBackend
from imgconv.core.conversion.sizing import compute_target_size
from imgconv.core.exceptions import (
    ConversionFailedError,
    InvalidImageError,
    UnsupportedFormatError,
)
from imgconv.models.conversion import Backend, ConversionRequest, ImageFormat

logger = structlog.get_logger()

try:
    import pillow_avif  # noqa: F401

    AVIF_PLUGIN_AVAILABLE = True
except ImportError:
    AVIF_PLUGIN_AVAILABLE = False
    logger.debug("pillow-avif-plugin not available, relying on Pillow's own AVIF support")

try:
    import pillow_jxl  # noqa: F401

    JXL_PLUGIN_AVAILABLE = True
except ImportError:
    JXL_PLUGIN_AVAILABLE = False
    logger.debug("pillow-jxl-plugin not available, JPEG XL encoding disabled")

try:
    import pillow_heif

    # HEIC inputs can still be decoded even though this backend cannot write them
    pillow_heif.register_heif_opener()
    HEIF_AVAILABLE = True
except ImportError:
    HEIF_AVAILABLE = False

_REQUIRED_PACKAGES = {
    "AVIF": "pillow-avif-plugin",
    "JXL": "pillow-jxl-plugin",
}


class PillowBackend(BaseBackend):
    """General-purpose bitmap codec path with quality-only tuning."""

    kind = Backend.PILLOW
    capabilities: Dict[ImageFormat, Optional[str]] = {
        ImageFormat.JPEG: "JPEG",
        ImageFormat.WEBP: "WEBP",
        ImageFormat.AVIF: "AVIF",
        ImageFormat.JXL: "JXL",
        ImageFormat.HEIC: None,
        ImageFormat.BMP: None,
        ImageFormat.PNG: None,
        ImageFormat.GIF: None,
        ImageFormat.TIFF: None,
    }

    def convert(self, request: ConversionRequest) -> None:
        codec = self.resolve(request.format)
        self._ensure_encoder(codec)

        image = self.load_bitmap(
            self.read_input(request.input_path),
            request.target_width,
            request.target_height,
        )
        size = image.size
        try:
            data = self.encode(image, codec, request.quality)
        finally:
            image.close()

        request.output_path.write_bytes(data)
        logger.debug(
            "Encoded with Pillow",
            format=codec,
            quality=request.quality,
            size=size,
            output_bytes=len(data),
        )

    def decode(self, data: bytes) -> Optional[Image.Image]:
        """Decode image bytes, returning None when the data is not an image."""
        try:
            img = Image.open(BytesIO(data))
            # Load image data to ensure it's fully read
            img.load()
            return img
        except Exception as e:
            logger.debug("Pillow could not decode input", error=str(e))
            return None

    def load_bitmap(
        self,
        data: bytes,
        width: Optional[int],
        height: Optional[int],
    ) -> Image.Image:
        """Decode and, when a full bounding box is given, resize."""
        original = self.decode(data)
        if original is None:
            raise InvalidImageError(
                "Failed to decode input image", details={"backend": self.name}
            )

        if width is None or height is None:
            return original

        new_size = compute_target_size(original.width, original.height, width, height)
        if new_size == original.size:
            return original

        resized = original.resize(new_size, Image.Resampling.BILINEAR)
        original.close()
        return resized

    def encode(self, image: Image.Image, codec: str, quality: int) -> bytes:
        """Encode an image into the codec's bitstream."""
        image = self._prepare_mode(image, codec)
        buffer = BytesIO()
        try:
            image.save(buffer, format=codec, quality=quality)
        except Exception as e:
            raise ConversionFailedError(
                f"Failed to save image as {codec}: {str(e)}",
                details={"output_format": codec, "backend": self.name, "error": str(e)},
            )
        return buffer.getvalue()

    def _ensure_encoder(self, codec: str) -> None:
        Image.init()
        if codec not in Image.SAVE:
            package = _REQUIRED_PACKAGES.get(codec, "Pillow")
            raise UnsupportedFormatError(
                f"{codec} encoding not available. Install {package}.",
                details={
                    "requested_format": codec.lower(),
                    "backend": self.name,
                    "required_package": package,
                },
            )

    def _prepare_mode(self, image: Image.Image, codec: str) -> Image.Image:
        # JPEG has no alpha channel
        if codec == "JPEG":
            if image.mode in ("RGB", "L"):
                return image
            if image.mode in ("RGBA", "LA") or "transparency" in image.info:
                background = Image.new("RGB", image.size, (255, 255, 255))
                rgba = image.convert("RGBA")
                background.paste(rgba, mask=rgba.split()[3])
                return background
            return image.convert("RGB")

        if image.mode in ("RGB", "RGBA"):
            return image
        if "transparency" in image.info or image.mode in ("LA", "P", "PA"):
            return image.convert("RGBA")
        return image.convert("RGB")
