"""Unit tests for the target size calculation."""

import pytest

from imgconv.core.conversion.sizing import compute_target_size, round_off
from imgconv.core.exceptions import ValidationError
from imgconv.models.conversion import Dimensions


class TestRoundOff:
    """Test suite for half-away-from-zero rounding."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (2.5, 3),
            (-2.5, -3),
            (0.5, 1),
            (-0.5, -1),
            (2.4, 2),
            (-2.4, -2),
            (3.5, 4),
            (0.0, 0),
        ],
    )
    def test_rounds_half_away_from_zero(self, value, expected):
        assert round_off(value) == expected

    def test_differs_from_bankers_rounding(self):
        """Python's round() goes to even, round_off does not."""
        assert round(2.5) == 2
        assert round_off(2.5) == 3

    def test_value_just_below_half_rounds_up(self):
        # 0.4999997 + 0.5000004 crosses 1.0
        assert round_off(0.4999997) == 1
        assert round_off(0.4999990) == 0


class TestComputeTargetSize:
    """Test suite for compute_target_size."""

    @pytest.mark.parametrize(
        "width, height",
        [(1, 1), (640, 480), (1920, 1080), (7, 9999)],
    )
    def test_no_request_returns_source(self, width, height):
        assert compute_target_size(width, height) == (width, height)

    def test_partial_request_returns_source(self):
        assert compute_target_size(640, 480, 100, None) == (640, 480)
        assert compute_target_size(640, 480, None, 100) == (640, 480)

    def test_square_into_square(self):
        assert compute_target_size(100, 100, 50, 50) == (50, 50)

    def test_landscape_pins_width(self):
        # scale_x=0.5, scale_y=1.0 -> else branch
        assert compute_target_size(200, 100, 100, 100) == (100, 50)

    def test_portrait_pins_height(self):
        # scale_x=1.0, scale_y=0.5 -> height pinned
        assert compute_target_size(100, 200, 100, 100) == (50, 100)

    def test_equal_scales_pin_width(self):
        assert compute_target_size(400, 300, 200, 150) == (200, 150)

    def test_derived_side_is_rounded(self):
        # 1920x1080 into 1280x720 is exact; 1000x333 into 500x500 derives 166.5
        assert compute_target_size(1920, 1080, 1280, 720) == (1280, 720)
        assert compute_target_size(1000, 333, 500, 500) == (500, 167)

    def test_upscaling_is_allowed(self):
        assert compute_target_size(100, 50, 400, 400) == (400, 200)

    def test_derived_side_never_zero(self):
        assert compute_target_size(10000, 1, 10, 10) == (10, 1)

    def test_returns_dimensions(self):
        result = compute_target_size(200, 100, 100, 100)
        assert isinstance(result, Dimensions)
        assert result.width == 100
        assert result.height == 50

    @pytest.mark.parametrize(
        "args",
        [
            (0, 100, None, None),
            (100, -1, None, None),
            (100, 100, 0, 50),
            (100, 100, 50, -5),
        ],
    )
    def test_rejects_non_positive_values(self, args):
        with pytest.raises(ValidationError):
            compute_target_size(*args)
