from .conversion import (
    Backend,
    ConversionRequest,
    ConversionResult,
    Dimensions,
    EncoderOptions,
    ImageFormat,
)

__all__ = [
    "Backend",
    "ConversionRequest",
    "ConversionResult",
    "Dimensions",
    "EncoderOptions",
    "ImageFormat",
]
