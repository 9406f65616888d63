"""Base codec backend interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Mapping, Optional

from imgconv.core.exceptions import InputNotFoundError, UnsupportedFormatError
from imgconv.models.conversion import Backend, ConversionRequest, ImageFormat


class BaseBackend(ABC):
    """Abstract base class for codec backends.

    Subclasses declare ``capabilities``: a table with one entry for every
    ImageFormat member. A string entry is the codec-specific identifier the
    backend encodes with, ``None`` marks the format as unsupported.
    """

    kind: Backend
    capabilities: Mapping[ImageFormat, Optional[str]] = {}

    @property
    def name(self) -> str:
        return self.kind.value

    def supports(self, image_format: ImageFormat) -> bool:
        """Check if this backend can encode the given format."""
        return self.capabilities.get(image_format) is not None

    def supported_formats(self) -> List[ImageFormat]:
        return [fmt for fmt in ImageFormat if self.supports(fmt)]

    def resolve(self, image_format: ImageFormat) -> str:
        """Map a format to the backend's codec identifier."""
        codec = self.capabilities.get(image_format)
        if codec is None:
            raise UnsupportedFormatError(
                f"The specified image format {image_format.name} is not supported "
                f"by the {self.name} backend.",
                details={
                    "requested_format": image_format.value,
                    "backend": self.name,
                    "supported_formats": [f.value for f in self.supported_formats()],
                },
            )
        return codec

    def read_input(self, input_path: Path) -> bytes:
        """Read the whole input file."""
        if not input_path.is_file():
            raise InputNotFoundError(
                f"Input file {input_path} does not exist",
                details={"input_path": str(input_path)},
            )
        return input_path.read_bytes()

    @abstractmethod
    def convert(self, request: ConversionRequest) -> None:
        """Decode, resize and encode ``request.input_path`` to ``request.output_path``.

        Blocking. Raises an ImageConverterError subclass on failure.
        """
