"""Tests for degree-2 rational maps and Velu 2-isogenies."""

import numpy as np
import pytest

from ecfft.isogeny import Isogeny, TwoIsogeny, derive_isogeny_chain, squaring_map
from primitives.curve import AffinePoint
from primitives.field import prime_field

G = AffinePoint(275, 566)
Q = AffinePoint(410, 129)


class TestIsogeny:

    def test_trailing_zeros_trimmed(self) -> None:
        psi = Isogeny((1, 2, 0, 0), (3, 0))
        assert psi.numerator == (1, 2)
        assert psi.denominator == (3,)
        assert psi.degree == 1

    def test_zero_denominator_rejected(self) -> None:
        with pytest.raises(ValueError):
            Isogeny((1,), (0, 0))

    def test_squaring(self) -> None:
        F = prime_field(17)
        psi = squaring_map()
        assert psi.is_squaring
        assert psi.degree == 2
        assert np.array_equal(psi(F([1, 4, 16, 13])), F([1, 16, 1, 16]))

    def test_reduced(self) -> None:
        psi = Isogeny((-1, 1020, 1), (-5, 1)).reduced(1019)
        assert psi == Isogeny((1018, 1, 1), (1014, 1))

    def test_rational_evaluation(self) -> None:
        F = prime_field(1019)
        psi = Isogeny((3, 0, 1), (2, 1))
        xs = F([0, 1, 5])
        expected = (xs * xs + F(3)) / (xs + F(2))
        assert np.array_equal(psi(xs), expected)


class TestTwoIsogeny:

    def test_kernel_must_have_order_two(self, curve_1019) -> None:
        with pytest.raises(ValueError):
            TwoIsogeny(curve_1019, G)

    def test_first_step_of_chain(self, curve_1019) -> None:
        kernel = curve_1019.multiply(G, 8)
        phi = TwoIsogeny(curve_1019, kernel)
        assert kernel.y == 0
        assert phi.x_map == Isogeny((phi.t, (-kernel.x) % 1019, 1), ((-kernel.x) % 1019, 1))

    def test_points_land_on_codomain(self, curve_1019) -> None:
        phi = TwoIsogeny(curve_1019, curve_1019.multiply(G, 8))
        codomain = phi.codomain
        pt = Q
        for _ in range(16):
            image = phi(pt)
            assert codomain.contains(image)
            pt = curve_1019.add(pt, G)

    def test_x_map_agrees_with_point_map(self, curve_1019) -> None:
        phi = TwoIsogeny(curve_1019, curve_1019.multiply(G, 8))
        F = curve_1019.field
        pt = Q
        for _ in range(16):
            assert phi(pt).x == int(phi.x_map(F([pt.x]))[0])
            pt = curve_1019.add(pt, G)

    def test_kernel_maps_to_infinity(self, curve_1019) -> None:
        kernel = curve_1019.multiply(G, 8)
        phi = TwoIsogeny(curve_1019, kernel)
        assert phi(kernel) is None
        assert phi(None) is None

    def test_is_a_homomorphism(self, curve_1019) -> None:
        phi = TwoIsogeny(curve_1019, curve_1019.multiply(G, 8))
        lhs = phi(curve_1019.add(G, Q))
        rhs = phi.codomain.add(phi(G), phi(Q))
        assert lhs == rhs


class TestDeriveChain:

    def test_known_first_map(self, curve_1019) -> None:
        """Kernel of the first step is 8G = (109, 0), so t = 3*109^2 + 1 = 998."""
        chain = derive_isogeny_chain(curve_1019, G, 4)
        assert len(chain) == 4
        assert chain[0] == Isogeny((998, 910, 1), (910, 1))

    def test_every_map_has_degree_two(self, ec_params) -> None:
        spec = ec_params.spec
        chain = derive_isogeny_chain(spec.curve, spec.generator, ec_params.log_size)
        assert len(chain) == ec_params.log_size
        assert all(psi.degree == 2 for psi in chain)

    def test_wrong_generator_order(self, curve_1019) -> None:
        with pytest.raises(ValueError, match="order"):
            derive_isogeny_chain(curve_1019, G, 3)
        with pytest.raises(ValueError, match="order"):
            derive_isogeny_chain(curve_1019, curve_1019.double(G), 4)

    def test_empty_chain(self, curve_1019) -> None:
        assert derive_isogeny_chain(curve_1019, None, 0) == []
