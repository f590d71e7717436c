"""Rounding that matches what users expect from percentages and averages."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounding up.

    The builtin ``round`` rounds halves to even, which would report 12% for
    one of eight steps completed.
    """
    return math.floor(value + 0.5)
