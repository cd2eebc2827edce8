"""Prime field GF(p) helpers.

Uses galois library for all field arithmetic. Field classes are built on demand
per modulus and cached, so every tree over the same prime shares one
FieldArray type.
"""

import functools
from typing import Iterable, Optional, Union

import galois
import numpy as np

# --- Constants ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001
"""p = 2^64 - 2^32 + 1, two-adicity 32."""

FieldLike = Union[galois.FieldArray, np.ndarray, Iterable[int], int]


# --- Field Construction ---

@functools.lru_cache(maxsize=None)
def prime_field(modulus: int) -> type:
    """Return the galois FieldArray class for GF(modulus).

    Raises:
        ValueError: If modulus is not prime; galois would accept prime powers
    """
    modulus = int(modulus)
    if not galois.is_prime(modulus):
        raise ValueError(f"{modulus} is not prime")
    return galois.GF(modulus)


def to_field(field: type, values: FieldLike) -> galois.FieldArray:
    """Convert ints, int sequences or FieldArrays to a 1-D array of `field`.

    Integers are reduced modulo p first, so negative inputs are accepted.
    Floats are accepted only when integral.

    Raises:
        ValueError: On a non-integral value
    """
    if isinstance(values, field):
        return values.reshape(-1)
    if isinstance(values, (int, float, np.integer, np.floating)):
        values = [values]
    values = [_integral(v) for v in values]
    if not values:
        return field.Zeros(0)
    p = field.order
    return field([v % p for v in values])


def _integral(v) -> int:
    if isinstance(v, (float, np.floating)):
        if not float(v).is_integer():
            raise ValueError(f"Field input {v!r} is not an integer")
    return int(v)


def two_adicity(modulus: int) -> int:
    """Largest s with 2^s | (modulus - 1)."""
    m = modulus - 1
    s = 0
    while m > 0 and m % 2 == 0:
        m //= 2
        s += 1
    return s


def root_of_unity(
    field: type, n: int, primitive_root: Optional[int] = None
) -> Optional[galois.FieldArray]:
    """Return an element of multiplicative order exactly n.

    The element is r^((p-1)/n) for the supplied primitive root r, or for
    galois' primitive element when none is given. Returns None if n does not
    divide p - 1 or the supplied root does not reach order n.
    """
    p = field.order
    if n <= 0 or (p - 1) % n != 0:
        return None
    base = field.primitive_element if primitive_root is None else field(int(primitive_root) % p)
    g = base ** ((p - 1) // n)
    if n > 1 and g ** (n // 2) == 1:
        return None
    if g ** n != 1:
        return None
    return g


def powers(base: galois.FieldArray, n: int) -> galois.FieldArray:
    """Return [base^0, base^1, ..., base^(n-1)].

    Built by doubling so each step is one vectorized multiplication.
    """
    field = type(base)
    result = field.Ones(1)
    step = base
    while len(result) < n:
        nxt = field.Zeros(2 * len(result))
        nxt[: len(result)] = result
        nxt[len(result):] = result * step
        result = nxt
        step = step * step
    return result[:n]


# --- Batch Inversion ---

def batch_inverse(values: galois.FieldArray) -> galois.FieldArray:
    """Invert a whole layer at once with a single field inversion.

    The tree inverts arrays, never scalars: the pair differences x_i - x_i' of
    every layer, x^h on the pivot moiety and Z_A on the opposite moiety. Each
    of those is one call here.

    1/v_i = (v_0 ... v_{i-1}) * (v_{i+1} ... v_{n-1}) / (v_0 ... v_{n-1}),
    with the exclusive prefix and suffix products taken by two cumulative
    multiplications.

    Raises:
        ZeroDivisionError: If any element is zero
    """
    n = len(values)
    if n == 0:
        return values
    if np.any(values == 0):
        raise ZeroDivisionError("batch_inverse: cannot invert zero")

    field = type(values)
    before = field.Ones(n)
    before[1:] = np.multiply.accumulate(values)[:-1]
    after = field.Ones(n)
    after[:-1] = np.multiply.accumulate(values[::-1])[::-1][1:]
    total_inv = (before[-1] * values[-1]) ** -1
    return before * after * total_inv
