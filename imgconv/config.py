import multiprocessing
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from imgconv.core.constants import (
    BATCH_OUTPUT_DIR_PREFIX,
    DEFAULT_EFFORT,
    DEFAULT_INPUT_PATTERN,
    DEFAULT_QUALITY,
    DEFAULT_TILE_SIZE,
    MAX_BATCH_WORKERS,
    MAX_EFFORT,
    MIN_BATCH_WORKERS,
    SINGLE_OUTPUT_DIR_NAME,
    TILE_SIZE_STEP,
    WORKER_CPU_RATIO,
)
from imgconv.models.conversion import ImageFormat


def default_worker_count() -> int:
    """Use 80% of CPU cores, minimum MIN_BATCH_WORKERS, maximum MAX_BATCH_WORKERS."""
    cpu_count = multiprocessing.cpu_count()
    worker_count = max(MIN_BATCH_WORKERS, int(cpu_count * WORKER_CPU_RATIO))
    return min(worker_count, MAX_BATCH_WORKERS)


class Settings(BaseSettings):
    # Application
    app_name: str = Field(default="imgconv", description="Application name")
    log_level: str = Field(default="WARNING", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    # Conversion defaults
    default_quality: int = Field(
        default=DEFAULT_QUALITY, description="Default output quality (0-100)"
    )
    default_format: str = Field(
        default="bmp", description="Output format used when none is given"
    )
    default_backend: str = Field(
        default="pillow", description="Codec backend: pillow or vips"
    )

    # File discovery and naming
    input_pattern: str = Field(
        default=DEFAULT_INPUT_PATTERN,
        description="Glob pattern for files picked up in directory mode",
    )
    single_output_dir_name: str = Field(
        default=SINGLE_OUTPUT_DIR_NAME,
        description="Sibling directory for single-file output without a path",
    )
    batch_output_dir_prefix: str = Field(
        default=BATCH_OUTPUT_DIR_PREFIX,
        description="Prefix of the output directory created in directory mode",
    )

    # Performance
    max_concurrent_conversions: int = Field(
        default_factory=default_worker_count,
        description="Max concurrent conversions in a batch (0 = unbounded)",
    )
    conversion_timeout: Optional[float] = Field(
        default=None, description="Per-file conversion timeout in seconds"
    )

    # Advanced encoder (vips backend)
    avif_tile_size: int = Field(
        default=DEFAULT_TILE_SIZE, description="Tile size hint in pixels"
    )
    encoder_lossless: bool = Field(default=False, description="Lossless encoding")
    encoder_effort: int = Field(
        default=DEFAULT_EFFORT, description="Encoder effort level (0-9)"
    )
    encoder_auto_filter: bool = Field(
        default=True, description="Let the encoder pick filter strength"
    )
    encoder_emulate_source_size: bool = Field(
        default=True, description="Target the size of the source file"
    )

    # Logging
    logging_enabled: bool = Field(
        default=False, description="Enable rotating file logging"
    )
    log_dir: str = Field(default="./logs", description="Directory for log files")
    max_log_size_mb: int = Field(
        default=10, description="Maximum size of each log file in MB"
    )
    log_backup_count: int = Field(
        default=3, description="Number of backup log files to keep"
    )
    anonymize_logs: bool = Field(
        default=False, description="Redact file paths in logs"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @field_validator("default_quality")
    @classmethod
    def validate_quality(cls, v):
        if not 0 <= v <= 100:
            raise ValueError("default_quality must be between 0 and 100")
        return v

    @field_validator("default_format")
    @classmethod
    def validate_format(cls, v):
        try:
            return ImageFormat.parse(v).value
        except ValueError:
            raise ValueError(f"default_format must be one of {[f.value for f in ImageFormat]}")

    @field_validator("default_backend")
    @classmethod
    def validate_backend(cls, v):
        allowed = ["pillow", "vips"]
        if v.lower() not in allowed:
            raise ValueError(f"default_backend must be one of {allowed}")
        return v.lower()

    @field_validator("max_concurrent_conversions")
    @classmethod
    def validate_concurrency(cls, v):
        if v < 0:
            raise ValueError("max_concurrent_conversions must be >= 0")
        return v

    @field_validator("conversion_timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("conversion_timeout must be positive")
        return v

    @field_validator("avif_tile_size")
    @classmethod
    def validate_tile_size(cls, v):
        if v <= 0 or v % TILE_SIZE_STEP:
            raise ValueError(f"avif_tile_size must be a multiple of {TILE_SIZE_STEP}")
        return v

    @field_validator("encoder_effort")
    @classmethod
    def validate_effort(cls, v):
        if not 0 <= v <= MAX_EFFORT:
            raise ValueError(f"encoder_effort must be between 0 and {MAX_EFFORT}")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="IMGCONV_",
        extra="ignore",
    )


settings = Settings()
