"""FFTree: layered evaluation domains and the degree-2 maps between them.

Layout (flat, one array per depth):

    layers[0]   size n = 2^k       Domain_0
    layers[d]   size n / 2^d       Domain_d
    layers[k]   size 1

    maps[d]: Domain_d -> Domain_{d+1}, exactly 2-to-1. The two preimages of
    layers[d+1][i] sit at positions i and i + n/2^(d+1) of layers[d].

For any offset o < s with s a power of two, the slices layers[d][o::s] form
a tree of their own under the same maps. The even and odd halves (o = 0, 1
with s = 2) are the two moieties that the EC-mode transforms move between.

A tree is immutable. Its layers and every derived array are flagged
read-only, so writing through `domain(d)` raises instead of corrupting a tree
other threads share. Derived per-layer data is computed once on first use,
and the builders compute it before handing the tree out.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Optional, Tuple

import galois
import numpy as np

from ecfft.errors import SingularSystem
from ecfft.isogeny import Isogeny
from primitives.field import batch_inverse

CLASSIC = "classic"
ELLIPTIC_CURVE = "elliptic-curve"


def _frozen(arr: galois.FieldArray) -> galois.FieldArray:
    arr.setflags(write=False)
    return arr


# --- Interpolation Plan ---

@dataclass(frozen=True, eq=False)
class ReductionLevel:
    """Precomputed data for one EXIT step on the view layers[0][offset::stride].

    With m the view size and h = m/2, A = view[pivot::2] is the moiety that
    avoids 0 and B is the other one. Z_A is the monic vanishing polynomial
    of A.

    Attributes:
        offset, stride: Position of the view inside layers[0]
        pivot: 0 if A is the even moiety, 1 if odd
        x_pow: x^h on the view
        x_pow_inv: x^-h on A
        z_inv: 1 / Z_A on B
        c: (Z_A^2 mod x^h) on the view
    """

    offset: int
    stride: int
    pivot: int
    x_pow: galois.FieldArray
    x_pow_inv: galois.FieldArray
    z_inv: galois.FieldArray
    c: galois.FieldArray

    @property
    def a_offset(self) -> int:
        return self.offset + self.pivot * self.stride

    @property
    def b_offset(self) -> int:
        return self.offset + (1 - self.pivot) * self.stride


def _reduction_level(field: type, root: galois.FieldArray, offset: int, stride: int) -> ReductionLevel:
    view = root[offset::stride]
    h = len(view) // 2
    pivot = 1 if np.any(view[0::2].view(np.ndarray) == 0) else 0
    a_pts, b_pts = view[pivot::2], view[1 - pivot::2]

    z = galois.Poly.Roots(a_pts, field=field)
    c = (z * z) % galois.Poly.Degrees([h], field=field)
    x_pow = view ** h

    return ReductionLevel(
        offset=offset,
        stride=stride,
        pivot=pivot,
        x_pow=_frozen(x_pow),
        x_pow_inv=_frozen(batch_inverse(x_pow[pivot::2])),
        z_inv=_frozen(batch_inverse(z(b_pts))),
        c=_frozen(c(view)),
    )


# --- FFTree ---

@dataclass(frozen=True, eq=False)
class FFTree:
    """Immutable layered domain of depth k.

    Attributes:
        field: galois FieldArray class of GF(p)
        layers: Domain_0..Domain_k
        maps: psi_0..psi_{k-1}
        mode: "classic" or "elliptic-curve" (informational only)
    """

    field: type
    layers: Tuple[galois.FieldArray, ...]
    maps: Tuple[Isogeny, ...]
    mode: str = CLASSIC

    def __post_init__(self) -> None:
        k = len(self.maps)
        if len(self.layers) != k + 1:
            raise ValueError(f"Expected {k + 1} layers for {k} maps, got {len(self.layers)}")
        for d, layer in enumerate(self.layers):
            if len(layer) != 1 << (k - d):
                raise ValueError(f"Layer {d} has size {len(layer)}, expected {1 << (k - d)}")
        # Private read-only copies; the caller keeps write access to its own arrays
        object.__setattr__(self, "layers", tuple(_frozen(layer.copy()) for layer in self.layers))
        object.__setattr__(self, "maps", tuple(self.maps))

    def __repr__(self) -> str:
        return f"FFTree(mode={self.mode!r}, modulus={self.modulus}, log_size={self.log_size})"

    @property
    def log_size(self) -> int:
        return len(self.maps)

    @property
    def size(self) -> int:
        return len(self.layers[0])

    @property
    def modulus(self) -> int:
        return self.field.order

    def domain(self, depth: int) -> galois.FieldArray:
        return self.layers[depth]

    def psi(self, depth: int) -> Isogeny:
        return self.maps[depth]

    # --- Derived Data ---

    @cached_property
    def monomial_basis(self) -> bool:
        """True when every map is x -> x^2, so halves are even/odd coefficients."""
        return all(m.is_squaring for m in self.maps)

    @cached_property
    def denominators(self) -> Tuple[Optional[galois.FieldArray], ...]:
        """den_d evaluated on layers[d]; None where the denominator is 1."""
        return tuple(
            None if m.denominator == (1,) else _frozen(m.denominator_at(layer))
            for m, layer in zip(self.maps, self.layers)
        )

    @cached_property
    def pair_inverses(self) -> Tuple[galois.FieldArray, ...]:
        """1 / (x_i - x_i') for every partner pair of every layer but the last."""
        inverses = []
        for d in range(self.log_size):
            layer = self.layers[d]
            half = len(layer) // 2
            diff = layer[:half] - layer[half:]
            zeros = np.flatnonzero(diff.view(np.ndarray) == 0)
            if zeros.size:
                i = int(zeros[0])
                raise SingularSystem(f"Layer {d}: partner points {i} and {i + half} coincide")
            inverses.append(_frozen(batch_inverse(diff)))
        return tuple(inverses)

    @cached_property
    def reduction_plan(self) -> Tuple[ReductionLevel, ...]:
        """EXIT data for the chain of views visited when interpolating."""
        levels = []
        offset, stride = 0, 1
        while stride < self.size:
            level = _reduction_level(self.field, self.layers[0], offset, stride)
            levels.append(level)
            offset, stride = level.a_offset, 2 * stride
        return tuple(levels)

    def warm(self) -> "FFTree":
        """Compute every derived cache the transforms will read."""
        self.denominators
        self.pair_inverses
        if not self.monomial_basis:
            self.reduction_plan
        return self
