"""
Unit tests for conversion models
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from imgconv.models.conversion import (
    Backend,
    ConversionRequest,
    ConversionResult,
    EncoderOptions,
    ImageFormat,
)


class TestImageFormat:
    """Test ImageFormat parsing"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("jpeg", ImageFormat.JPEG),
            ("JPEG", ImageFormat.JPEG),
            ("jpg", ImageFormat.JPEG),
            ("Jpe", ImageFormat.JPEG),
            ("webp", ImageFormat.WEBP),
            ("AVIF", ImageFormat.AVIF),
            ("jxl", ImageFormat.JXL),
            ("jpegxl", ImageFormat.JXL),
            ("heif", ImageFormat.HEIC),
            ("Bmp", ImageFormat.BMP),
            ("tif", ImageFormat.TIFF),
            ("  png  ", ImageFormat.PNG),
        ],
    )
    def test_parse(self, text, expected):
        """Test names, values and aliases parse case-insensitively"""
        assert ImageFormat.parse(text) is expected

    @pytest.mark.parametrize("text", ["", "jpeg2000", "svg", "7"])
    def test_parse_unknown(self, text):
        """Test unknown names raise ValueError"""
        with pytest.raises(ValueError):
            ImageFormat.parse(text)

    def test_extension(self):
        """Test the extension is the lowercase value"""
        assert ImageFormat.JPEG.extension == "jpeg"
        assert ImageFormat.HEIC.extension == "heic"


class TestEncoderOptions:
    """Test EncoderOptions validation"""

    def test_defaults(self):
        options = EncoderOptions()
        assert options.tile_size == 256
        assert options.lossless is False
        assert options.effort == 6
        assert options.auto_filter is True
        assert options.emulate_source_size is True

    @pytest.mark.parametrize("tile_size", [100, 0, -64])
    def test_invalid_tile_size(self, tile_size):
        with pytest.raises(ValidationError):
            EncoderOptions(tile_size=tile_size)

    @pytest.mark.parametrize("effort", [-1, 10])
    def test_invalid_effort(self, effort):
        with pytest.raises(ValidationError):
            EncoderOptions(effort=effort)


class TestConversionRequest:
    """Test ConversionRequest validation"""

    def _request(self, **kwargs):
        return ConversionRequest(
            input_path=Path("in.jpg"),
            output_path=Path("out.webp"),
            format=ImageFormat.WEBP,
            **kwargs,
        )

    def test_defaults(self):
        request = self._request()
        assert request.quality == 75
        assert request.backend is Backend.PILLOW
        assert request.target_width is None
        assert request.target_height is None

    @pytest.mark.parametrize("quality", [-1, 101])
    def test_quality_range(self, quality):
        with pytest.raises(ValidationError):
            self._request(quality=quality)

    def test_quality_bounds_accepted(self):
        assert self._request(quality=0).quality == 0
        assert self._request(quality=100).quality == 100

    def test_non_positive_size_rejected(self):
        with pytest.raises(ValidationError):
            self._request(target_width=0, target_height=10)

    def test_frozen(self):
        request = self._request()
        with pytest.raises(ValidationError):
            request.quality = 10


class TestConversionResult:
    """Test ConversionResult constructors"""

    def test_ok(self):
        result = ConversionResult.ok(Path("out.webp"), 0.5)
        assert result.success
        assert bool(result)
        assert result.error is None

    def test_failed(self):
        result = ConversionResult.failed(Path("out.bmp"), 0.1, "nope", "CONV102")
        assert not result
        assert result.error == "nope"
        assert result.error_code == "CONV102"
