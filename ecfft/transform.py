"""Evaluation and interpolation over an FFTree.

Every step rests on one decomposition. For a view of size m = 2h and a layer
map psi = u/v of degree 2, each P with deg P < m splits uniquely as

    P(x) = v(x)^(h-1) * (P0(psi(x)) + x * P1(psi(x))),   deg P0, P1 < h

so the values of P on a partner pair (x, x') determine, and are determined by,
the values of P0 and P1 at psi(x) = psi(x'). `_unfold` is the merge and
`_fold` solves the 2x2 system the other way.

When psi(x) = x^2 (v = 1), P0 and P1 are the even and odd coefficients of P,
and evaluate/interpolate are the radix-2 Cooley-Tukey recursion. For general
maps the coefficient split is no longer even/odd, so coefficients enter and
leave the tree through ENTER/EXIT, which are built from EXTEND (moiety to
moiety) and REDC/MOD (reduction modulo x^h using the other moiety's vanishing
polynomial).

All arithmetic is exact in GF(p). The two halves of every recursion are
independent and are handed to a ForkJoinPool.
"""

from functools import partial
from typing import Optional, Tuple

import galois

from ecfft.errors import InsufficientDomainSize
from ecfft.parallel import SERIAL, ForkJoinPool
from ecfft.tree import FFTree, ReductionLevel
from primitives.field import FieldLike, to_field
from primitives.polynomial import degree, pad

# --- Butterflies ---


def _weights(tree: FFTree, layer: int, offset: int, stride: int, half: int):
    """v(x)^(half-1) on the view, or None when it is identically 1."""
    den = tree.denominators[layer]
    if den is None or half == 1:
        return None
    return den[offset::stride] ** (half - 1)


def _fold(
    tree: FFTree, layer: int, offset: int, stride: int, values: galois.FieldArray
) -> Tuple[galois.FieldArray, galois.FieldArray]:
    """Values of P on layers[layer][offset::stride] -> values of P0, P1 one layer down."""
    half = len(values) // 2
    xs = tree.layers[layer][offset::stride]
    w = _weights(tree, layer, offset, stride, half)
    y = values if w is None else values * w ** -1
    y0, y1 = y[:half], y[half:]
    v1 = (y0 - y1) * tree.pair_inverses[layer][offset::stride]
    v0 = y0 - xs[:half] * v1
    return v0, v1


def _unfold(
    tree: FFTree, layer: int, offset: int, stride: int,
    v0: galois.FieldArray, v1: galois.FieldArray,
) -> galois.FieldArray:
    """Values of P0, P1 one layer down -> values of P on layers[layer][offset::stride]."""
    half = len(v0)
    xs = tree.layers[layer][offset::stride]
    out = tree.field.Zeros(2 * half)
    out[:half] = v0 + xs[:half] * v1
    out[half:] = v0 + xs[half:] * v1
    w = _weights(tree, layer, offset, stride, half)
    return out if w is None else out * w


def _interleave(field: type, even: galois.FieldArray, odd: galois.FieldArray) -> galois.FieldArray:
    out = field.Zeros(len(even) + len(odd))
    out[0::2] = even
    out[1::2] = odd
    return out


# --- Radix-2 (squaring maps) ---

def _evaluate_radix2(tree: FFTree, layer: int, coeffs: galois.FieldArray, pool: ForkJoinPool):
    if len(coeffs) == 1:
        return coeffs.copy()
    v0, v1 = pool.fork_join(
        len(coeffs),
        partial(_evaluate_radix2, tree, layer + 1, coeffs[0::2], pool),
        partial(_evaluate_radix2, tree, layer + 1, coeffs[1::2], pool),
    )
    return _unfold(tree, layer, 0, 1, v0, v1)


def _interpolate_radix2(tree: FFTree, layer: int, values: galois.FieldArray, pool: ForkJoinPool):
    if len(values) == 1:
        return values.copy()
    v0, v1 = _fold(tree, layer, 0, 1, values)
    c0, c1 = pool.fork_join(
        len(values),
        partial(_interpolate_radix2, tree, layer + 1, v0, pool),
        partial(_interpolate_radix2, tree, layer + 1, v1, pool),
    )
    return _interleave(tree.field, c0, c1)


# --- ECFFT (general degree-2 maps) ---

def _extend(
    tree: FFTree, layer: int, src: int, dst: int, stride: int,
    values: galois.FieldArray, pool: ForkJoinPool,
) -> galois.FieldArray:
    """EXTEND: values of P (deg < len) on layers[layer][src::stride] -> on [dst::stride]."""
    if len(values) == 1:
        return values.copy()
    v0, v1 = _fold(tree, layer, src, stride, values)
    e0, e1 = pool.fork_join(
        len(values),
        partial(_extend, tree, layer + 1, src, dst, stride, v0, pool),
        partial(_extend, tree, layer + 1, src, dst, stride, v1, pool),
    )
    return _unfold(tree, layer, dst, stride, e0, e1)


def _enter(
    tree: FFTree, offset: int, stride: int, coeffs: galois.FieldArray, pool: ForkJoinPool
) -> galois.FieldArray:
    """ENTER: coefficients -> values on layers[0][offset::stride].

    Splits P = L + x^h * H, enters L and H on the even moiety, extends both
    to the odd moiety and recombines pointwise.
    """
    m = len(coeffs)
    if m == 1:
        return coeffs.copy()
    half = m // 2
    even, odd, sub = offset, offset + stride, 2 * stride

    lo_even, hi_even = pool.fork_join(
        m,
        partial(_enter, tree, even, sub, coeffs[:half], pool),
        partial(_enter, tree, even, sub, coeffs[half:], pool),
    )
    lo_odd, hi_odd = pool.fork_join(
        m,
        partial(_extend, tree, 0, even, odd, sub, lo_even, pool),
        partial(_extend, tree, 0, even, odd, sub, hi_even, pool),
    )
    lo = _interleave(tree.field, lo_even, lo_odd)
    hi = _interleave(tree.field, hi_even, hi_odd)
    xs = tree.layers[0][offset::stride]
    return lo + xs ** half * hi


def _redc(
    tree: FFTree, level: ReductionLevel, values: galois.FieldArray, pool: ForkJoinPool
) -> galois.FieldArray:
    """REDC: values of H where P = G * x^h + H * Z_A with deg G, H < h.

    Z_A vanishes on A, so G = P / x^h there; extending G to B leaves H.
    """
    pivot, sub = level.pivot, 2 * level.stride
    a, b = level.a_offset, level.b_offset

    g_a = values[pivot::2] * level.x_pow_inv
    g_b = _extend(tree, 0, a, b, sub, g_a, pool)
    h_b = (values[1 - pivot::2] - g_b * level.x_pow[1 - pivot::2]) * level.z_inv
    h_a = _extend(tree, 0, b, a, sub, h_b, pool)

    out = tree.field.Zeros(len(values))
    out[pivot::2] = h_a
    out[1 - pivot::2] = h_b
    return out


def _exit(
    tree: FFTree, depth: int, values: galois.FieldArray, pool: ForkJoinPool
) -> galois.FieldArray:
    """EXIT: values on the depth-th reduction view -> coefficients."""
    m = len(values)
    if m == 1:
        return values.copy()
    level = tree.reduction_plan[depth]
    pivot = level.pivot

    # MOD: P mod x^h = REDC(REDC(P) * (Z_A^2 mod x^h))
    lo = _redc(tree, level, _redc(tree, level, values, pool) * level.c, pool)
    lo_a = lo[pivot::2]
    hi_a = (values[pivot::2] - lo_a) * level.x_pow_inv

    lo_coeffs, hi_coeffs = pool.fork_join(
        m,
        partial(_exit, tree, depth + 1, lo_a, pool),
        partial(_exit, tree, depth + 1, hi_a, pool),
    )
    out = tree.field.Zeros(m)
    out[: m // 2] = lo_coeffs
    out[m // 2:] = hi_coeffs
    return out


# --- Public API ---

def coefficients_for(tree: FFTree, poly: FieldLike) -> galois.FieldArray:
    """Convert `poly` to tree.size coefficients, rejecting degrees >= tree.size."""
    coeffs = to_field(tree.field, poly)
    deg = degree(coeffs)
    if deg >= tree.size:
        raise InsufficientDomainSize(
            f"Polynomial of degree {deg} does not fit a tree of size {tree.size}"
        )
    return pad(coeffs[: deg + 1], tree.size)


def evaluate(
    poly: FieldLike, tree: FFTree, pool: Optional[ForkJoinPool] = None
) -> galois.FieldArray:
    """Evaluate a polynomial of degree < n on every point of Domain_0.

    Args:
        poly: Ascending coefficients; shorter inputs are zero-padded
        tree: Domain to evaluate on
        pool: Fork-join pool; None runs serially

    Returns:
        values[i] = P(tree.layers[0][i])

    Raises:
        InsufficientDomainSize: If deg P >= n
    """
    pool = pool if pool is not None else SERIAL
    coeffs = coefficients_for(tree, poly)
    if tree.monomial_basis:
        return _evaluate_radix2(tree, 0, coeffs, pool)
    return _enter(tree, 0, 1, coeffs, pool)


def interpolate(
    values: FieldLike, tree: FFTree, pool: Optional[ForkJoinPool] = None
) -> galois.FieldArray:
    """Recover the n coefficients of the unique P with deg P < n taking `values` on Domain_0.

    Raises:
        ValueError: If len(values) != n
        SingularSystem: If the tree has coinciding partner points
    """
    pool = pool if pool is not None else SERIAL
    values = to_field(tree.field, values)
    if len(values) != tree.size:
        raise ValueError(f"Expected {tree.size} values, got {len(values)}")
    if tree.monomial_basis:
        return _interpolate_radix2(tree, 0, values, pool)
    return _exit(tree, 0, values, pool)


def extend(
    values: FieldLike, tree: FFTree, pool: Optional[ForkJoinPool] = None
) -> galois.FieldArray:
    """Low-degree extension from the even half of Domain_0 to the odd half.

    Given the values of some P with deg P < n/2 on Domain_0[0::2], return its
    values on Domain_0[1::2] without going through coefficients.
    """
    pool = pool if pool is not None else SERIAL
    values = to_field(tree.field, values)
    if tree.size < 2 or len(values) != tree.size // 2:
        raise ValueError(f"Expected {tree.size // 2} values, got {len(values)}")
    return _extend(tree, 0, 0, 1, 2, values, pool)
