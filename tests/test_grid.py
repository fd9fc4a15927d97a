"""Tests for grid quantization."""

import pytest

from snapline.grid import SPACING, quantize, round_half_up


class TestRoundHalfUp:
    def test_rounds_positive_half_up(self) -> None:
        assert round_half_up(2.5) == 3

    def test_rounds_negative_half_towards_zero(self) -> None:
        assert round_half_up(-2.5) == -2

    def test_rounds_below_half_down(self) -> None:
        assert round_half_up(2.49) == 2


class TestQuantize:
    """Tests for quantize()."""

    def test_default_spacing(self) -> None:
        assert SPACING == 10

    def test_rounds_up(self) -> None:
        assert quantize(17) == 20

    def test_rounds_down(self) -> None:
        assert quantize(14) == 10

    def test_half_rounds_up(self) -> None:
        assert quantize(15) == 20
        assert quantize(-15) == -10

    def test_negative_values(self) -> None:
        assert quantize(-16) == -20

    def test_ceil_mode(self) -> None:
        assert quantize(11, 10, "ceil") == 20

    def test_floor_mode(self) -> None:
        assert quantize(19, 10, "floor") == 10

    def test_custom_quantum(self) -> None:
        assert quantize(7, 5) == 5
        assert quantize(8, 5) == 10

    def test_idempotent(self) -> None:
        """Quantizing an already quantized value returns it unchanged."""
        for value in (-123.4, -5, 0, 4.9, 5, 17, 999.5):
            once = quantize(value)
            assert quantize(once) == once

    def test_invalid_mode(self) -> None:
        with pytest.raises(ValueError, match="Invalid quantize mode"):
            quantize(10, 10, "nearest")  # type: ignore[arg-type]

    @pytest.mark.parametrize("quantum", [0, -10])
    def test_non_positive_quantum(self, quantum: float) -> None:
        with pytest.raises(ValueError, match="quantum must be positive"):
            quantize(10, quantum)
