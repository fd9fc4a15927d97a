"""Grid spacing and quantization."""

import math
from collections.abc import Callable
from typing import Literal

QuantizeMode = Literal["round", "ceil", "floor"]

SPACING = 10


def round_half_up(value: float) -> float:
    """Round halves towards positive infinity."""
    return float(math.floor(value + 0.5))


_QUANTIZERS: dict[str, Callable[[float], float]] = {
    "round": round_half_up,
    "ceil": math.ceil,
    "floor": math.floor,
}


def quantize(value: float, quantum: float = SPACING, fn: QuantizeMode = "round") -> float:
    """Snap value to a multiple of quantum.

    Halves round up (towards positive infinity), so quantize(15, 10) == 20
    and quantize(-15, 10) == -10.
    """
    if quantum <= 0:
        raise ValueError(f"quantum must be positive, got {quantum}")
    try:
        quantizer = _QUANTIZERS[fn]
    except KeyError:
        raise ValueError(f"Invalid quantize mode: {fn!r}") from None

    return float(quantizer(value / quantum) * quantum)
