"""
Pure metric computation functions.

All functions are pure and typed for testability.
"""

import math
from typing import Sequence

from .config import EPLEY_FACTOR, MAX_REPS_FOR_1RM


def epley_1rm(weight_kg: float, reps: float) -> float:
    """
    Estimate 1RM using the Epley formula.

    1RM = weight * (1 + min(reps, 12)/30)

    Reps are capped because the formula overestimates for high-rep sets.

    Args:
        weight_kg: Load lifted
        reps: Reps performed

    Returns:
        Estimated 1RM in kg, rounded to 2 decimals (0 for empty sets)
    """
    if reps <= 0 or weight_kg <= 0:
        return 0.0
    effective_reps = min(reps, MAX_REPS_FOR_1RM)
    return round(weight_kg * (1 + effective_reps / EPLEY_FACTOR), 2)


def predict_reps(one_rep_max: float, weight_kg: float) -> float:
    """
    Predict reps achievable at a weight from a 1RM (inverse Epley).

    expected = 30 * (1RM/weight - 1), floored at 1.

    Args:
        one_rep_max: Estimated 1RM in kg
        weight_kg: Target load

    Returns:
        Expected reps rounded to 1 decimal; 0 if either input is non-positive
    """
    if weight_kg <= 0 or one_rep_max <= 0:
        return 0.0
    if weight_kg >= one_rep_max:
        return 1.0
    predicted = EPLEY_FACTOR * (one_rep_max / weight_kg - 1)
    return max(1.0, round(predicted, 1))


def percent_change(old: float, new: float) -> float:
    """
    Percentage change from ``old`` to ``new``, rounded to 1 decimal.

    A non-positive baseline yields 100 when the new value is positive, else 0.
    """
    if old <= 0:
        return 100.0 if new > 0 else 0.0
    return round((new - old) / old * 100, 1)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0 for an empty sequence."""
    return sum(values) / len(values) if values else 0.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return math.floor(value + 0.5)
