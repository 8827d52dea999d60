"""Hammersley quasi-random sequence.

Reference: Holger Dammertz, "Hammersley Points on the Hemisphere".
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from ibllut.validation import validate_count, validate_index

# 1 / 2^32
RADICAL_INVERSE_SCALE = 2.3283064365386963e-10


def radical_inverse_vdc(bits: int) -> float:
    """Van der Corput radical inverse (bit reversal) of a 32-bit integer."""
    bits &= 0xFFFFFFFF
    bits = ((bits << 16) | (bits >> 16)) & 0xFFFFFFFF
    bits = (((bits & 0x55555555) << 1) | ((bits & 0xAAAAAAAA) >> 1)) & 0xFFFFFFFF
    bits = (((bits & 0x33333333) << 2) | ((bits & 0xCCCCCCCC) >> 2)) & 0xFFFFFFFF
    bits = (((bits & 0x0F0F0F0F) << 4) | ((bits & 0xF0F0F0F0) >> 4)) & 0xFFFFFFFF
    bits = (((bits & 0x00FF00FF) << 8) | ((bits & 0xFF00FF00) >> 8)) & 0xFFFFFFFF
    return bits * RADICAL_INVERSE_SCALE


def hammersley(index: int, sample_count: int) -> Tuple[float, float]:
    """Return the Hammersley point ``(index / sample_count, radical_inverse(index))``.

    Raises RangeValidationError if ``sample_count < 1`` or ``index`` is not in
    ``[0, sample_count)``.
    """
    sample_count = validate_count(sample_count, "sample_count")
    index = validate_index(index, sample_count, "index")
    return index / sample_count, radical_inverse_vdc(index)


def hammersley_sequence(n: int) -> np.ndarray:
    """Generate n Hammersley 2D points in index order. Returns (n, 2) array."""
    n = validate_count(n, "sample_count")
    points = np.empty((n, 2), dtype=np.float64)
    for i in range(n):
        points[i, 0] = i / n
        points[i, 1] = radical_inverse_vdc(i)
    return points
