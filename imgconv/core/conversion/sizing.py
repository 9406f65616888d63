"""Aspect-ratio preserving target size calculation."""

import math
from typing import Optional

from imgconv.core.constants import ROUND_OFF_EPSILON, SCALE_TOLERANCE
from imgconv.core.exceptions import ValidationError
from imgconv.models.conversion import Dimensions


def round_off(value: float) -> int:
    """Round half away from zero.

    The epsilon is slightly above 0.5 so values that land a hair below .5
    through floating point error still round up in magnitude.
    """
    if value >= 0:
        return int(math.trunc(value + ROUND_OFF_EPSILON))
    return int(math.trunc(value - ROUND_OFF_EPSILON))


def compute_target_size(
    source_width: int,
    source_height: int,
    requested_width: Optional[int] = None,
    requested_height: Optional[int] = None,
) -> Dimensions:
    """Fit the source into the requested box, keeping the aspect ratio.

    When either requested dimension is missing the source size is returned
    unchanged. Otherwise the axis with the smaller scale factor is honored
    exactly and the other one is derived from it. Equal scale factors pin
    the width.

    Args:
        source_width: Width of the decoded image
        source_height: Height of the decoded image
        requested_width: Width of the bounding box
        requested_height: Height of the bounding box

    Returns:
        Dimensions of the resized image
    """
    if source_width <= 0 or source_height <= 0:
        raise ValidationError(
            f"Source dimensions must be positive, got {source_width}x{source_height}",
            details={"field_name": "source_size", "constraints": "> 0"},
        )
    for name, value in (("width", requested_width), ("height", requested_height)):
        if value is not None and value <= 0:
            raise ValidationError(
                f"Requested {name} must be positive, got {value}",
                details={"field_name": name, "field_value": value, "constraints": "> 0"},
            )

    if requested_width is None or requested_height is None:
        return Dimensions(source_width, source_height)

    scale_x = requested_width / source_width
    scale_y = requested_height / source_height

    if scale_x - scale_y > SCALE_TOLERANCE:
        new_height = requested_height
        new_width = round_off(scale_y * source_width)
    else:
        new_width = requested_width
        new_height = round_off(scale_x * source_height)

    # Extreme aspect ratios can round the derived side down to nothing
    return Dimensions(max(new_width, 1), max(new_height, 1))
