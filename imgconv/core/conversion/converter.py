"""Single-file conversion entry point."""

import asyncio
import time
from typing import Callable, Optional

from imgconv.config import Settings, settings as default_settings
from imgconv.core.conversion.backends import BaseBackend, get_backend
from imgconv.core.exceptions import ImageConverterError
from imgconv.models.conversion import (
    Backend,
    ConversionRequest,
    ConversionResult,
    EncoderOptions,
)
from imgconv.utils.logging import get_logger

logger = get_logger(__name__)


def encoder_options_from_settings(config: Settings) -> EncoderOptions:
    """Build advanced encoder options from configuration."""
    return EncoderOptions(
        tile_size=config.avif_tile_size,
        lossless=config.encoder_lossless,
        effort=config.encoder_effort,
        auto_filter=config.encoder_auto_filter,
        emulate_source_size=config.encoder_emulate_source_size,
    )


class ImageConverter:
    """Runs one ConversionRequest through its backend.

    ``convert`` and ``convert_sync`` never raise: every failure mode is
    normalized into a failed ConversionResult carrying the reason. Reporting
    failures to the user is left to the caller.
    """

    def __init__(
        self,
        backend_factory: Callable[[Backend], BaseBackend] = get_backend,
        config: Optional[Settings] = None,
    ):
        self._backend_factory = backend_factory
        self.settings = config or default_settings

    def build_request(self, input_path, output_path, image_format, **kwargs) -> ConversionRequest:
        """Create a request, filling unset fields from configuration."""
        kwargs.setdefault("quality", self.settings.default_quality)
        kwargs.setdefault("backend", Backend(self.settings.default_backend))
        kwargs.setdefault("encoder_options", encoder_options_from_settings(self.settings))
        return ConversionRequest(
            input_path=input_path,
            output_path=output_path,
            format=image_format,
            **kwargs,
        )

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        """Convert in a worker thread so several files can run at once."""
        return await asyncio.to_thread(self.convert_sync, request)

    def convert_sync(self, request: ConversionRequest) -> ConversionResult:
        start = time.perf_counter()
        try:
            backend = self._backend_factory(request.backend)
            backend.convert(request)
        except ImageConverterError as e:
            logger.debug(
                "Conversion failed",
                error_code=e.error_code,
                error=e.message,
                backend=request.backend.value,
                format=request.format.value,
            )
            return ConversionResult.failed(
                request.output_path,
                time.perf_counter() - start,
                e.message,
                e.error_code,
            )
        except OSError as e:
            logger.debug("Conversion I/O failed", error=str(e))
            return ConversionResult.failed(
                request.output_path, time.perf_counter() - start, str(e), "IO"
            )
        except Exception as e:
            logger.debug("Unexpected conversion error", error=str(e), exc_info=True)
            return ConversionResult.failed(
                request.output_path,
                time.perf_counter() - start,
                f"Unexpected error: {e}",
            )

        return ConversionResult.ok(request.output_path, time.perf_counter() - start)
