"""Domain precomputation: build an FFTree from classic or elliptic-curve parameters.

Classic mode:   Domain_0 = <g>, g of order 2^k in GF(p)*, every map x -> x^2
EC mode:        Domain_0 = x(Q + <G>), G of order 2^k on E(GF(p)), maps from
                a chain of 2-isogenies whose kernels are 2^(k-d-1) * G_d

Either way the result has the same shape and the transforms never look at
which builder produced it.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import galois
import numpy as np

from ecfft.errors import DomainError, InvalidIsogenyChain, OrderNotDivisible
from ecfft.isogeny import Isogeny, derive_isogeny_chain, squaring_map
from ecfft.tree import CLASSIC, ELLIPTIC_CURVE, FFTree
from primitives.curve import AffinePoint, Point, WeierstrassCurve
from primitives.field import powers, prime_field, root_of_unity

_logger = logging.getLogger(__name__)


# --- Configuration ---

@dataclass(frozen=True)
class CurveSpec:
    """Curve descriptor for EC mode.

    Attributes:
        curve: y^2 = x^3 + ax + b over GF(p)
        generator: G, of order exactly 2^k
        offset: Q, chosen so that Q + <G> has 2^k distinct x-coordinates
    """
    curve: WeierstrassCurve
    generator: Point
    offset: AffinePoint


@dataclass(frozen=True)
class DomainSpec:
    """Build-time parameters for an FFTree.

    Attributes:
        modulus: Prime p
        log_size: k, so the tree evaluates polynomials of degree < 2^k
        mode: "classic" or "elliptic-curve"
        primitive_root: Classic mode only; None selects galois' primitive element
        curve: EC mode only
        isogenies: EC mode only; None derives the chain from the curve
    """
    modulus: int
    log_size: int
    mode: str = CLASSIC
    primitive_root: Optional[int] = None
    curve: Optional[CurveSpec] = None
    isogenies: Optional[Sequence[Isogeny]] = None


def _check_log_size(k: int) -> None:
    if k < 0:
        raise ValueError(f"log_size must be non-negative, got {k}")


def _field(p: int) -> type:
    try:
        return prime_field(p)
    except ValueError as e:
        raise DomainError(f"GF({p}) is not a prime field: {e}") from e


# --- Classic ---

def build_classic(p: int, k: int, primitive_root: Optional[int] = None) -> FFTree:
    """Build the radix-2 tree over the order-2^k subgroup of GF(p)*.

    Raises:
        OrderNotDivisible: If 2^k does not divide p - 1
        DomainError: If p is not prime, or primitive_root^((p-1)/2^k) does not
            have order 2^k
    """
    _check_log_size(k)
    n = 1 << k
    if (p - 1) % n != 0:
        raise OrderNotDivisible(f"2^{k} does not divide p - 1 = {p - 1}")

    F = _field(p)
    g = root_of_unity(F, n, primitive_root)
    if g is None:
        raise DomainError(f"{primitive_root} does not generate a subgroup of order 2^{k} in GF({p})")

    layers = [powers(g, n)]
    for _ in range(k):
        prev = layers[-1]
        layers.append(prev[: len(prev) // 2] ** 2)

    tree = FFTree(F, tuple(layers), tuple(squaring_map() for _ in range(k)), CLASSIC)
    _logger.debug("Built classic tree over GF(%d): n=%d, generator=%d", p, n, int(g))
    return tree.warm()


# --- Elliptic Curve ---

def _coset_x(spec: CurveSpec, k: int) -> galois.FieldArray:
    """x(Q + i*G) for i in [0, 2^k), validating the descriptor along the way."""
    curve, gen, offset = spec.curve, spec.generator, spec.offset
    if offset is None or not curve.contains(gen) or not curve.contains(offset):
        raise DomainError(f"Generator or offset is not a point on {curve}")
    if not curve.order_is(gen, 1 << k):
        raise DomainError(f"Generator {gen} does not have order 2^{k}")

    p = curve.modulus
    xs = []
    pt: Point = AffinePoint(offset.x % p, offset.y % p)
    for i in range(1 << k):
        if pt is None:
            raise DomainError(f"Q + {i}*G is the point at infinity; Q lies in <G>")
        xs.append(pt.x)
        pt = curve.add(pt, gen)

    if len(set(xs)) != len(xs):
        raise DomainError("Coset Q + <G> has repeated x-coordinates")
    return curve.field(xs)


def _apply_layer_map(psi: Isogeny, layer: galois.FieldArray, d: int) -> galois.FieldArray:
    """Check psi is exactly 2-to-1 on `layer` with partners at i, i + half; return the image."""
    if psi.degree > 2:
        raise InvalidIsogenyChain(f"Map {d} has degree {psi.degree}, expected at most 2")
    if np.any(psi.denominator_at(layer) == 0):
        raise InvalidIsogenyChain(f"Map {d} has a pole on Domain_{d}")

    image = psi(layer)
    half = len(layer) // 2
    if not np.array_equal(image[:half], image[half:]):
        raise InvalidIsogenyChain(f"Map {d} does not send positions i and i + {half} to the same point")
    if len(np.unique(image[:half].view(np.ndarray))) != half:
        raise InvalidIsogenyChain(f"Map {d} is not 2-to-1 on Domain_{d}")
    return image[:half]


def build_ec(spec: CurveSpec, k: int, isogeny_chain: Sequence[Isogeny]) -> FFTree:
    """Build the ECFFT tree for the coset Q + <G> and a chain of k degree-2 maps.

    Raises:
        InvalidIsogenyChain: If len(isogeny_chain) != k or a map is not 2-to-1
        DomainError: If the curve descriptor is malformed
    """
    _check_log_size(k)
    if len(isogeny_chain) != k:
        raise InvalidIsogenyChain(f"Expected {k} isogenies, got {len(isogeny_chain)}")

    p = spec.curve.modulus
    F = _field(p)
    maps = []
    for d, psi in enumerate(isogeny_chain):
        try:
            maps.append(psi.reduced(p))
        except ValueError as e:
            raise InvalidIsogenyChain(f"Map {d}: {e}") from e

    layers = [_coset_x(spec, k)]
    for d, psi in enumerate(maps):
        layers.append(_apply_layer_map(psi, layers[-1], d))

    tree = FFTree(F, tuple(layers), tuple(maps), ELLIPTIC_CURVE)
    _logger.debug("Built elliptic-curve tree over GF(%d): n=%d, curve=%s", p, 1 << k, spec.curve)
    return tree.warm()


# --- Dispatch ---

def build_tree(spec: DomainSpec) -> FFTree:
    """Build an FFTree from a DomainSpec.

    In EC mode the isogeny chain is derived from the generator when
    spec.isogenies is None.
    """
    if spec.mode == CLASSIC:
        return build_classic(spec.modulus, spec.log_size, spec.primitive_root)

    if spec.mode == ELLIPTIC_CURVE:
        if spec.curve is None:
            raise DomainError("Elliptic-curve mode requires a curve descriptor")
        if spec.curve.curve.modulus != spec.modulus:
            raise DomainError(
                f"Curve is over GF({spec.curve.curve.modulus}), modulus is {spec.modulus}"
            )
        chain = spec.isogenies
        if chain is None:
            _check_log_size(spec.log_size)
            try:
                chain = derive_isogeny_chain(spec.curve.curve, spec.curve.generator, spec.log_size)
            except ValueError as e:
                raise DomainError(str(e)) from e
        return build_ec(spec.curve, spec.log_size, chain)

    raise DomainError(f"Unknown mode {spec.mode!r}")
