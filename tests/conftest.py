"""
Shared fixtures: small classic and elliptic-curve trees.

The curve parameters were found offline. Each generator G has order exactly
2^k, and each offset Q puts 2^k distinct x-coordinates in Q + <G>.
GF(1019) has no classic tree beyond k = 1. GF(1009) has both, so the two
modes can be compared on one field.
"""

import functools
from typing import NamedTuple

import pytest

from ecfft.domain import CurveSpec, build_classic, build_ec
from ecfft.isogeny import derive_isogeny_chain
from primitives.curve import AffinePoint, WeierstrassCurve
from primitives.field import GOLDILOCKS_PRIME


class EcCase(NamedTuple):
    spec: CurveSpec
    log_size: int


# name -> (p, a, b, G, Q, k)
EC_CASES = {
    "p1019_k4": (1019, 1, 11, (275, 566), (410, 129), 4),
    "p1019_k4_zero": (1019, 1, 11, (46, 155), (399, 35), 4),  # 0 lies in Domain_0
    "p1019_k5": (1019, 1, 11, (979, 455), (59, 99), 5),
    "p1009_k4": (1009, 1, 26, (617, 842), (935, 80), 4),
}

# name -> (p, k, primitive root)
CLASSIC_CASES = {
    "p17_k2": (17, 2, 6),
    "p1009_k4": (1009, 4, None),
    "goldilocks_k6": (GOLDILOCKS_PRIME, 6, None),
}


def ec_case(name: str) -> EcCase:
    p, a, b, g, q, k = EC_CASES[name]
    curve = WeierstrassCurve(p, a, b)
    return EcCase(CurveSpec(curve, AffinePoint(*g), AffinePoint(*q)), k)


@functools.lru_cache(maxsize=None)
def ec_tree_for(name: str):
    case = ec_case(name)
    chain = derive_isogeny_chain(case.spec.curve, case.spec.generator, case.log_size)
    return build_ec(case.spec, case.log_size, chain)


@functools.lru_cache(maxsize=None)
def classic_tree_for(name: str):
    return build_classic(*CLASSIC_CASES[name])


@pytest.fixture(params=sorted(EC_CASES))
def ec_params(request) -> EcCase:
    return ec_case(request.param)


@pytest.fixture(params=sorted(EC_CASES))
def ec_tree(request):
    return ec_tree_for(request.param)


@pytest.fixture(params=sorted(CLASSIC_CASES))
def classic_tree(request):
    return classic_tree_for(request.param)


@pytest.fixture(params=[f"ec:{n}" for n in sorted(EC_CASES)] + [f"classic:{n}" for n in sorted(CLASSIC_CASES)])
def tree(request):
    mode, name = request.param.split(":")
    return ec_tree_for(name) if mode == "ec" else classic_tree_for(name)


@pytest.fixture
def curve_1019() -> WeierstrassCurve:
    return WeierstrassCurve(1019, 1, 11)
