"""Unit tests for settings."""

import pytest
from pydantic import ValidationError

from imgconv import config
from imgconv.config import Settings, default_worker_count


class TestSettings:
    """Test environment-driven configuration"""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.default_quality == 75
        assert settings.default_format == "bmp"
        assert settings.default_backend == "pillow"
        assert settings.input_pattern == "*.jpg"
        assert settings.single_output_dir_name == "_output"
        assert settings.batch_output_dir_prefix == "ConvertedImages_"
        assert settings.conversion_timeout is None
        assert settings.log_level == "WARNING"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("IMGCONV_DEFAULT_QUALITY", "90")
        monkeypatch.setenv("IMGCONV_DEFAULT_BACKEND", "VIPS")
        monkeypatch.setenv("IMGCONV_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.default_quality == 90
        assert settings.default_backend == "vips"
        assert settings.log_level == "DEBUG"

    def test_format_alias_normalized(self):
        assert Settings(_env_file=None, default_format="JPG").default_format == "jpeg"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("IMGCONV_INPUT_PATTERN=*.png\nIMGCONV_ENCODER_EFFORT=2\n")

        settings = Settings(_env_file=env_file)

        assert settings.input_pattern == "*.png"
        assert settings.encoder_effort == 2

    @pytest.mark.parametrize(
        "field, value",
        [
            ("log_level", "LOUD"),
            ("default_quality", 101),
            ("default_backend", "skia"),
            ("default_format", "svg"),
            ("max_concurrent_conversions", -1),
            ("conversion_timeout", 0),
            ("avif_tile_size", 100),
            ("encoder_effort", 10),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_unbounded_concurrency_allowed(self):
        assert Settings(_env_file=None, max_concurrent_conversions=0).max_concurrent_conversions == 0


class TestDefaultWorkerCount:
    """Test the worker count heuristic"""

    @pytest.mark.parametrize(
        "cpus, expected",
        [(1, 2), (2, 2), (4, 3), (8, 6), (16, 10), (64, 10)],
    )
    def test_bounds(self, monkeypatch, cpus, expected):
        monkeypatch.setattr(config.multiprocessing, "cpu_count", lambda: cpus)
        assert default_worker_count() == expected
