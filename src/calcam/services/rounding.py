"""Round-half-up helpers shared by the nutrition and energy math."""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to ``ndigits`` decimals with ties going up, unlike ``round``."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Round to the nearest integer with ties going up."""
    return math.floor(value + 0.5)
