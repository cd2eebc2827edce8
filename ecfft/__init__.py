"""
ECFFT: fast exact polynomial multiplication over any prime field

Polynomials are evaluated on an FFTree, a layered domain whose layers are
halved by degree-2 maps, multiplied pointwise and interpolated back. When
2^k divides p - 1 the maps are x -> x^2 on a subgroup of roots of unity. For
any other prime the domain is a coset of a 2-power subgroup of an elliptic
curve, halved by a chain of 2-isogenies.

Usage:
    from ecfft import CurveSpec, DomainSpec, build_tree, multiply
    from primitives.curve import AffinePoint, WeierstrassCurve

    curve = WeierstrassCurve(1019, 1, 11)
    spec = DomainSpec(
        modulus=1019,
        log_size=4,
        mode="elliptic-curve",
        curve=CurveSpec(curve, AffinePoint(275, 566), AffinePoint(410, 129)),
    )
    tree = build_tree(spec)
    product = multiply([1, 2, 3], [4, 5], tree)
"""

# Errors
from ecfft.errors import (
    ComputeError,
    DomainError,
    InsufficientDomainSize,
    InvalidIsogenyChain,
    OrderNotDivisible,
    SingularSystem,
)

# Domains
from ecfft.isogeny import Isogeny, TwoIsogeny, derive_isogeny_chain, squaring_map
from ecfft.tree import CLASSIC, ELLIPTIC_CURVE, FFTree
from ecfft.domain import CurveSpec, DomainSpec, build_classic, build_ec, build_tree

# Transforms
from ecfft.parallel import ForkJoinPool, ParallelConfig
from ecfft.transform import evaluate, extend, interpolate
from ecfft.multiply import multiply

__all__ = [
    "ComputeError",
    "DomainError",
    "InsufficientDomainSize",
    "InvalidIsogenyChain",
    "OrderNotDivisible",
    "SingularSystem",
    "Isogeny",
    "TwoIsogeny",
    "derive_isogeny_chain",
    "squaring_map",
    "CLASSIC",
    "ELLIPTIC_CURVE",
    "FFTree",
    "CurveSpec",
    "DomainSpec",
    "build_classic",
    "build_ec",
    "build_tree",
    "ForkJoinPool",
    "ParallelConfig",
    "evaluate",
    "extend",
    "interpolate",
    "multiply",
]
