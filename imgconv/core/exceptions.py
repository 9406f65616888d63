from typing import Dict, List, Optional, TypedDict, Union


class ConversionDetails(TypedDict, total=False):
    """Type-safe details for conversion errors."""

    input_path: str
    output_format: str
    backend: str
    dimensions: tuple[int, int]
    quality: int
    error: str


class ValidationDetails(TypedDict, total=False):
    """Type-safe details for validation errors."""

    field_name: str
    field_value: Union[str, int, float, bool, None]
    expected_values: List[Union[str, int]]
    constraints: str


class FormatDetails(TypedDict, total=False):
    """Type-safe details for format errors."""

    requested_format: str
    backend: str
    supported_formats: List[str]
    required_package: str


class ProcessingDetails(TypedDict, total=False):
    """Type-safe details for processing timeout errors."""

    timeout_seconds: float
    operation: str


class ConfigDetails(TypedDict, total=False):
    """Type-safe details for configuration errors."""

    config_key: str
    config_value: Union[str, int, float, bool]
    valid_options: List[Union[str, int]]


ErrorDetails = Union[
    ConversionDetails,
    ValidationDetails,
    FormatDetails,
    ProcessingDetails,
    ConfigDetails,
    Dict[str, Union[str, int, float, bool, List[str]]],
]


class ImageConverterError(Exception):
    """Base exception for all imgconv errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[ErrorDetails] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(ImageConverterError):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: Optional[ValidationDetails] = None):
        super().__init__(message=message, error_code="CONV002", details=details)


class ProcessingTimeoutError(ImageConverterError):
    """Raised when a conversion exceeds its timeout."""

    def __init__(self, message: str, details: Optional[ProcessingDetails] = None):
        super().__init__(message=message, error_code="CONV006", details=details)


class ConfigurationError(ImageConverterError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, details: Optional[ConfigDetails] = None):
        super().__init__(message=message, error_code="CONV007", details=details)


class InputNotFoundError(ImageConverterError):
    """Raised when an input file or directory does not exist."""

    def __init__(self, message: str, details: Optional[ConversionDetails] = None):
        super().__init__(message=message, error_code="CONV100", details=details)


class InvalidImageError(ImageConverterError):
    """Raised when image data is invalid or corrupted."""

    def __init__(self, message: str, details: Optional[ConversionDetails] = None):
        super().__init__(message=message, error_code="CONV101", details=details)


class UnsupportedFormatError(ImageConverterError):
    """Raised when the selected backend has no mapping for a format."""

    def __init__(self, message: str, details: Optional[FormatDetails] = None):
        super().__init__(message=message, error_code="CONV102", details=details)


class ConversionFailedError(ImageConverterError):
    """Raised when a codec fails to decode, resize or encode."""

    def __init__(self, message: str, details: Optional[ConversionDetails] = None):
        super().__init__(message=message, error_code="CONV103", details=details)
