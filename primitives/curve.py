"""Short Weierstrass curves y^2 = x^3 + ax + b over GF(p).

Affine point arithmetic used only while precomputing evaluation domains.
The point at infinity is represented by None.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional

from primitives.field import prime_field


class AffinePoint(NamedTuple):
    """Affine point with canonical integer coordinates."""
    x: int
    y: int


Point = Optional[AffinePoint]

INFINITY: Point = None


@dataclass(frozen=True)
class WeierstrassCurve:
    """Elliptic curve y^2 = x^3 + a*x + b over GF(modulus)."""

    modulus: int
    a: int
    b: int

    def __post_init__(self) -> None:
        p = self.modulus
        object.__setattr__(self, "a", self.a % p)
        object.__setattr__(self, "b", self.b % p)
        if (4 * self.a ** 3 + 27 * self.b ** 2) % p == 0:
            raise ValueError(f"Singular curve: a={self.a}, b={self.b} over GF({p})")

    @property
    def field(self) -> type:
        return prime_field(self.modulus)

    def point(self, x: int, y: int) -> AffinePoint:
        """Build a point, checking that it lies on the curve."""
        pt = AffinePoint(x % self.modulus, y % self.modulus)
        if not self.contains(pt):
            raise ValueError(f"Point {tuple(pt)} is not on {self}")
        return pt

    def contains(self, pt: Point) -> bool:
        if pt is None:
            return True
        F = self.field
        x, y = F(pt.x % self.modulus), F(pt.y % self.modulus)
        return bool(y * y == x * x * x + F(self.a) * x + F(self.b))

    def negate(self, pt: Point) -> Point:
        if pt is None:
            return None
        return AffinePoint(pt.x, (-pt.y) % self.modulus)

    def add(self, p1: Point, p2: Point) -> Point:
        """Chord-and-tangent addition."""
        if p1 is None:
            return p2
        if p2 is None:
            return p1
        F = self.field
        x1, y1 = F(p1.x), F(p1.y)
        x2, y2 = F(p2.x), F(p2.y)
        if x1 == x2:
            if y1 + y2 == 0:
                return None
            return self.double(p1)
        slope = (y2 - y1) / (x2 - x1)
        x3 = slope * slope - x1 - x2
        y3 = slope * (x1 - x3) - y1
        return AffinePoint(int(x3), int(y3))

    def double(self, pt: Point) -> Point:
        if pt is None:
            return None
        F = self.field
        x, y = F(pt.x), F(pt.y)
        if y == 0:
            return None
        slope = (F(3) * x * x + F(self.a)) / (F(2) * y)
        x3 = slope * slope - F(2) * x
        y3 = slope * (x - x3) - y
        return AffinePoint(int(x3), int(y3))

    def multiply(self, pt: Point, scalar: int) -> Point:
        """Double-and-add scalar multiplication."""
        if scalar < 0:
            return self.multiply(self.negate(pt), -scalar)
        result: Point = None
        addend = pt
        while scalar:
            if scalar & 1:
                result = self.add(result, addend)
            addend = self.double(addend)
            scalar >>= 1
        return result

    def order_is(self, pt: Point, order: int) -> bool:
        """True if `pt` has multiplicative order exactly `order` (a power of two)."""
        if self.multiply(pt, order) is not None:
            return False
        return order == 1 or self.multiply(pt, order // 2) is not None
