"""
Unit tests for ImageConverter
"""

from pathlib import Path

import pytest
from PIL import Image

from imgconv.core.conversion.backends.base import BaseBackend
from imgconv.core.conversion.converter import ImageConverter, encoder_options_from_settings
from imgconv.core.exceptions import ConversionFailedError
from imgconv.models.conversion import Backend, ImageFormat


class RaisingBackend(BaseBackend):
    kind = Backend.PILLOW
    capabilities = {fmt: fmt.value for fmt in ImageFormat}

    def __init__(self, error: Exception):
        self.error = error

    def convert(self, request):
        raise self.error


@pytest.fixture
def converter(test_settings):
    return ImageConverter(config=test_settings)


class TestBuildRequest:
    """Test request defaults"""

    def test_defaults_from_settings(self, test_settings):
        config = test_settings.model_copy(
            update={"default_quality": 42, "default_backend": "vips", "encoder_effort": 3}
        )
        converter = ImageConverter(config=config)

        request = converter.build_request(Path("a.jpg"), Path("a.webp"), ImageFormat.WEBP)

        assert request.quality == 42
        assert request.backend is Backend.VIPS
        assert request.encoder_options.effort == 3

    def test_explicit_values_win(self, converter):
        request = converter.build_request(
            Path("a.jpg"),
            Path("a.webp"),
            ImageFormat.WEBP,
            quality=10,
            backend=Backend.PILLOW,
        )
        assert request.quality == 10
        assert request.backend is Backend.PILLOW

    def test_encoder_options_from_settings(self, test_settings):
        options = encoder_options_from_settings(test_settings)
        assert options.tile_size == test_settings.avif_tile_size
        assert options.lossless == test_settings.encoder_lossless


class TestConvertSync:
    """Test that every failure becomes a failed result"""

    def test_success(self, converter, tmp_path, make_image):
        source = make_image(tmp_path / "photo.jpg")
        request = converter.build_request(source, tmp_path / "photo.webp", ImageFormat.WEBP)

        result = converter.convert_sync(request)

        assert result.success
        assert result.error is None
        assert result.elapsed >= 0
        assert result.output_path.exists()

    def test_unsupported_format(self, converter, tmp_path, make_image):
        source = make_image(tmp_path / "photo.jpg")
        request = converter.build_request(source, tmp_path / "photo.bmp", ImageFormat.BMP)

        result = converter.convert_sync(request)

        assert not result.success
        assert result.error_code == "CONV102"
        assert "BMP is not supported" in result.error
        assert not request.output_path.exists()

    def test_missing_input(self, converter, tmp_path):
        request = converter.build_request(
            tmp_path / "nope.jpg", tmp_path / "nope.jpeg", ImageFormat.JPEG
        )

        result = converter.convert_sync(request)

        assert not result.success
        assert result.error_code == "CONV100"

    def test_corrupt_input(self, converter, tmp_path):
        source = tmp_path / "broken.jpg"
        source.write_bytes(b"\xff\xd8 not really a jpeg")
        request = converter.build_request(source, tmp_path / "broken.jpeg", ImageFormat.JPEG)

        result = converter.convert_sync(request)

        assert not result.success
        assert result.error_code == "CONV101"

    def test_codec_error(self, tmp_path):
        converter = ImageConverter(
            backend_factory=lambda kind: RaisingBackend(ConversionFailedError("codec broke"))
        )
        request = converter.build_request(tmp_path / "a.jpg", tmp_path / "a.jpeg", ImageFormat.JPEG)

        result = converter.convert_sync(request)

        assert result.error == "codec broke"
        assert result.error_code == "CONV103"

    def test_os_error(self, tmp_path):
        converter = ImageConverter(
            backend_factory=lambda kind: RaisingBackend(PermissionError("read-only"))
        )
        request = converter.build_request(tmp_path / "a.jpg", tmp_path / "a.jpeg", ImageFormat.JPEG)

        result = converter.convert_sync(request)

        assert result.error == "read-only"
        assert result.error_code == "IO"

    def test_unexpected_error(self, tmp_path):
        converter = ImageConverter(
            backend_factory=lambda kind: RaisingBackend(RuntimeError("boom"))
        )
        request = converter.build_request(tmp_path / "a.jpg", tmp_path / "a.jpeg", ImageFormat.JPEG)

        result = converter.convert_sync(request)

        assert not result.success
        assert result.error == "Unexpected error: boom"
        assert result.error_code is None


class TestConvertAsync:
    """Test the thread-offloaded entry point"""

    async def test_convert(self, converter, tmp_path, make_image):
        source = make_image(tmp_path / "photo.jpg", size=(64, 64))
        request = converter.build_request(
            source,
            tmp_path / "photo.jpeg",
            ImageFormat.JPEG,
            target_width=32,
            target_height=32,
        )

        result = await converter.convert(request)

        assert result.success
        with Image.open(result.output_path) as output:
            assert output.size == (32, 32)
