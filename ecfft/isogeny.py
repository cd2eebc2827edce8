"""Degree-2 rational maps on x-coordinates and the 2-isogenies behind them.

An FFTree layer is halved by a map psi(x) = num(x) / den(x) of degree 2. In
classic mode this is x -> x^2. In elliptic-curve mode it is the x-coordinate
map of a 2-isogeny, obtained from Velu's formulas: for a kernel point
T = (x0, 0) on y^2 = x^3 + ax + b, with t = 3*x0^2 + a,

    psi(x) = x + t / (x - x0) = (x^2 - x0*x + t) / (x - x0)
    y     -> y * (1 - t / (x - x0)^2)

and the codomain is y^2 = x^3 + (a - 5t) x + (b - 7*x0*t).
"""

from dataclasses import dataclass
from typing import List, Tuple

import galois

from primitives.curve import AffinePoint, Point, WeierstrassCurve


def _trim(coeffs: Tuple[int, ...]) -> Tuple[int, ...]:
    coeffs = tuple(int(c) for c in coeffs)
    end = len(coeffs)
    while end > 1 and coeffs[end - 1] == 0:
        end -= 1
    return coeffs[:end]


# --- Rational Maps ---

@dataclass(frozen=True)
class Isogeny:
    """Rational map psi = numerator / denominator on x-coordinates.

    Coefficients are stored in ascending order as plain ints, so one map can
    be applied over any field it is reduced into.
    """

    numerator: Tuple[int, ...]
    denominator: Tuple[int, ...] = (1,)

    def __post_init__(self) -> None:
        object.__setattr__(self, "numerator", _trim(self.numerator))
        object.__setattr__(self, "denominator", _trim(self.denominator))
        if self.denominator == (0,):
            raise ValueError("Isogeny denominator must be non-zero")

    @property
    def degree(self) -> int:
        """max(deg num, deg den); equals the map's degree when they are coprime."""
        return max(len(self.numerator), len(self.denominator)) - 1

    @property
    def is_squaring(self) -> bool:
        return self.numerator == (0, 0, 1) and self.denominator == (1,)

    def reduced(self, modulus: int) -> "Isogeny":
        return Isogeny(
            tuple(c % modulus for c in self.numerator),
            tuple(c % modulus for c in self.denominator),
        )

    def numerator_at(self, xs: galois.FieldArray) -> galois.FieldArray:
        return _poly(type(xs), self.numerator)(xs)

    def denominator_at(self, xs: galois.FieldArray) -> galois.FieldArray:
        return _poly(type(xs), self.denominator)(xs)

    def __call__(self, xs: galois.FieldArray) -> galois.FieldArray:
        """Apply psi elementwise. Raises ZeroDivisionError at a pole."""
        if self.denominator == (1,):
            return self.numerator_at(xs)
        return self.numerator_at(xs) * self.denominator_at(xs) ** -1


def _poly(field: type, coeffs: Tuple[int, ...]) -> galois.Poly:
    p = field.order
    return galois.Poly([c % p for c in coeffs], field=field, order="asc")


def squaring_map() -> Isogeny:
    """psi(x) = x^2, the classic radix-2 halving map."""
    return Isogeny((0, 0, 1), (1,))


# --- Velu 2-Isogenies ---

@dataclass(frozen=True)
class TwoIsogeny:
    """2-isogeny with kernel {O, kernel} on `domain`.

    Attributes:
        domain: Source curve
        kernel: Point of order 2, i.e. with y == 0
    """

    domain: WeierstrassCurve
    kernel: AffinePoint

    def __post_init__(self) -> None:
        if self.kernel is None or self.kernel.y % self.domain.modulus != 0:
            raise ValueError(f"Kernel {self.kernel} is not a point of order 2")
        if not self.domain.contains(self.kernel):
            raise ValueError(f"Kernel {self.kernel} is not on {self.domain}")

    @property
    def t(self) -> int:
        x0 = self.kernel.x
        return (3 * x0 * x0 + self.domain.a) % self.domain.modulus

    @property
    def codomain(self) -> WeierstrassCurve:
        x0, t, p = self.kernel.x, self.t, self.domain.modulus
        return WeierstrassCurve(p, self.domain.a - 5 * t, self.domain.b - 7 * x0 * t)

    @property
    def x_map(self) -> Isogeny:
        x0, t, p = self.kernel.x, self.t, self.domain.modulus
        return Isogeny((t, -x0 % p, 1), (-x0 % p, 1))

    def __call__(self, pt: Point) -> Point:
        """Image of a point; the kernel and infinity map to infinity."""
        if pt is None or pt.x == self.kernel.x:
            return None
        F = self.domain.field
        x, y = F(pt.x), F(pt.y)
        t = F(self.t)
        inv = (x - F(self.kernel.x)) ** -1
        new_x = x + t * inv
        new_y = y * (F(1) - t * inv * inv)
        return AffinePoint(int(new_x), int(new_y))


def derive_isogeny_chain(
    curve: WeierstrassCurve, generator: AffinePoint, log_size: int
) -> List[Isogeny]:
    """Derive the x-maps psi_0..psi_{k-1} that halve <generator> step by step.

    The kernel of the d-th isogeny is 2^(k-d-1) * G_d, where G_0 = generator
    and G_{d+1} is the image of G_d.

    Raises:
        ValueError: If generator does not have order exactly 2^log_size
    """
    if not curve.order_is(generator, 1 << log_size):
        raise ValueError(f"Generator {generator} does not have order 2^{log_size}")
    chain = []
    g: Point = generator
    for d in range(log_size):
        kernel = curve.multiply(g, 1 << (log_size - d - 1))
        phi = TwoIsogeny(curve, kernel)
        chain.append(phi.x_map)
        g = phi(g)
        curve = phi.codomain
    return chain
