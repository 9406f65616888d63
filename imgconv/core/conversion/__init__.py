"""Single-image conversion: sizing, backends and the conversion entry point."""

from .converter import ImageConverter
from .sizing import compute_target_size, round_off

__all__ = ["ImageConverter", "compute_target_size", "round_off"]
