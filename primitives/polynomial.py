"""Dense polynomial helpers over GF(p).

Coefficients are stored in ascending order [c0, c1, ..., c_{n-1}], matching
the rest of the code base. These routines are the O(n^2) reference
implementations; the fast paths live in ecfft.transform and ecfft.multiply.
"""

import galois
import numpy as np


def degree(coeffs: galois.FieldArray) -> int:
    """Index of the highest non-zero coefficient, or -1 for the zero polynomial."""
    nonzero = np.flatnonzero(coeffs.view(np.ndarray) != 0)
    return int(nonzero[-1]) if nonzero.size else -1


def trim(coeffs: galois.FieldArray) -> galois.FieldArray:
    """Drop trailing zero coefficients."""
    return coeffs[: degree(coeffs) + 1]


def pad(coeffs: galois.FieldArray, length: int) -> galois.FieldArray:
    """Zero-pad (never truncate) to `length` coefficients."""
    field = type(coeffs)
    out = field.Zeros(max(length, len(coeffs)))
    out[: len(coeffs)] = coeffs
    return out


def evaluate_at(coeffs: galois.FieldArray, x: galois.FieldArray) -> galois.FieldArray:
    """Horner evaluation at a field element or at every element of an array."""
    field = type(coeffs)
    acc = field.Zeros(np.shape(x))
    for c in coeffs[::-1]:
        acc = acc * x + c
    return acc


def naive_multiply(a: galois.FieldArray, b: galois.FieldArray) -> galois.FieldArray:
    """Schoolbook product; result has len(a) + len(b) - 1 coefficients."""
    field = type(a)
    if len(a) == 0 or len(b) == 0:
        return field.Zeros(0)
    out = field.Zeros(len(a) + len(b) - 1)
    for i, ai in enumerate(a):
        out[i: i + len(b)] = out[i: i + len(b)] + ai * b
    return out
