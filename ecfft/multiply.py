"""Fast polynomial multiplication: evaluate, multiply pointwise, interpolate."""

from functools import partial
from typing import Optional

import galois

from ecfft.errors import InsufficientDomainSize
from ecfft.parallel import SERIAL, ForkJoinPool
from ecfft.transform import evaluate, interpolate
from ecfft.tree import FFTree
from primitives.field import FieldLike, to_field
from primitives.polynomial import degree


def multiply(
    p: FieldLike, q: FieldLike, tree: FFTree, pool: Optional[ForkJoinPool] = None
) -> galois.FieldArray:
    """Exact product of two polynomials over the tree's field.

    Args:
        p, q: Ascending coefficients
        tree: Domain of size n with deg p + deg q < n
        pool: Fork-join pool; None runs serially

    Returns:
        len(p) + len(q) - 1 coefficients, trailing zeros included

    Raises:
        InsufficientDomainSize: If deg p + deg q >= n
    """
    pool = pool if pool is not None else SERIAL
    F = tree.field
    a, b = to_field(F, p), to_field(F, q)
    out_len = len(a) + len(b) - 1 if len(a) and len(b) else 0

    deg_a, deg_b = degree(a), degree(b)
    if deg_a < 0 or deg_b < 0:
        return F.Zeros(out_len)
    if deg_a + deg_b >= tree.size:
        raise InsufficientDomainSize(
            f"Product degree {deg_a + deg_b} does not fit a tree of size {tree.size}"
        )

    va, vb = pool.fork_join(
        tree.size,
        partial(evaluate, a[: deg_a + 1], tree, pool),
        partial(evaluate, b[: deg_b + 1], tree, pool),
    )
    coeffs = interpolate(va * vb, tree, pool)

    out = F.Zeros(out_len)
    keep = min(out_len, tree.size)
    out[:keep] = coeffs[:keep]
    return out
