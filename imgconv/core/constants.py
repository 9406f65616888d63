"""Constants and configuration values for the image converter."""

# Resize calculation
SCALE_TOLERANCE = 1.0e-6  # Minimum scale difference before pinning height
ROUND_OFF_EPSILON = 0.5000004  # Added before truncation, keeps .5 rounding away from zero

# Conversion defaults
DEFAULT_QUALITY = 75
MIN_QUALITY = 0
MAX_QUALITY = 100

# Batch processing
DEFAULT_INPUT_PATTERN = "*.jpg"
MAX_BATCH_WORKERS = 10  # Upper bound for the computed default worker count
MIN_BATCH_WORKERS = 2
WORKER_CPU_RATIO = 0.8

# Output naming
SINGLE_OUTPUT_DIR_NAME = "_output"
BATCH_OUTPUT_DIR_PREFIX = "ConvertedImages_"
BENCH_OUTPUT_DIR_PREFIX = "_output_"
BENCH_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# Advanced encoder defaults
DEFAULT_TILE_SIZE = 256  # Must be a multiple of TILE_SIZE_STEP
TILE_SIZE_STEP = 64
DEFAULT_EFFORT = 6
MAX_EFFORT = 9
WEBP_MAX_EFFORT = 6
GIF_MAX_EFFORT = 10
PNG_MAX_COMPRESSION = 9

# Benchmark matrix
BENCH_SIZES = [
    (1280, 720),
    (640, 480),
    (320, 240),
    (160, 120),
]
BENCH_FORMATS = ["jpeg", "webp", "avif", "jxl", "heic"]
