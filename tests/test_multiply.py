"""Tests for fast polynomial multiplication against the schoolbook reference."""

import numpy as np
import pytest

from ecfft.domain import build_classic
from ecfft.errors import ComputeError, InsufficientDomainSize
from ecfft.multiply import multiply
from primitives.polynomial import naive_multiply
from tests.conftest import classic_tree_for, ec_tree_for


class TestMultiply:

    def test_difference_of_squares(self) -> None:
        """(1 + x)(1 - x) = 1 - x^2 over GF(17), n = 4."""
        tree = build_classic(17, 2, primitive_root=6)
        assert np.array_equal(multiply([1, 1], [1, 16], tree), tree.field([1, 0, 16]))

    def test_balanced(self, tree) -> None:
        F = tree.field
        a = F.Random(tree.size // 2, seed=51)
        b = F.Random(tree.size // 2, seed=52)
        assert np.array_equal(multiply(a, b, tree), naive_multiply(a, b))

    @pytest.mark.parametrize("len_b", [1, 2, 3])
    def test_unbalanced(self, tree, len_b: int) -> None:
        F = tree.field
        a = F.Random(tree.size - len_b + 1, seed=53)
        b = F.Random(len_b, seed=54)
        assert np.array_equal(multiply(a, b, tree), naive_multiply(a, b))

    def test_largest_product_that_fits(self, tree) -> None:
        F = tree.field
        a = F.Random(tree.size - 1, seed=55)
        b = F([1, 1])
        a[-1] = 1
        assert np.array_equal(multiply(a, b, tree), naive_multiply(a, b))

    def test_insufficient_domain_size(self, tree) -> None:
        F = tree.field
        a = F.Random(tree.size, seed=56)
        b = F.Random(tree.size, seed=57)
        a[-1], b[-1] = 1, 1
        with pytest.raises(InsufficientDomainSize):
            multiply(a, b, tree)

    def test_insufficient_is_compute_error(self, ec_tree) -> None:
        with pytest.raises(ComputeError):
            multiply([0] * (ec_tree.size - 1) + [1], [0, 1], ec_tree)

    def test_zero_polynomial(self, ec_tree) -> None:
        out = multiply([0, 0, 0], [1, 2], ec_tree)
        assert np.array_equal(out, ec_tree.field.Zeros(4))
        assert len(multiply([], [1, 2], ec_tree)) == 0

    def test_trailing_zeros_kept(self, ec_tree) -> None:
        out = multiply([1, 2, 0, 0], [3], ec_tree)
        assert np.array_equal(out, ec_tree.field([3, 6, 0, 0]))

    def test_negative_coefficients(self, ec_tree) -> None:
        F = ec_tree.field
        out = multiply([1, -1], [1, 1], ec_tree)
        assert np.array_equal(out, F([1, 0, -1 % F.order]))

    def test_classic_and_curve_trees_agree(self) -> None:
        """GF(1009) admits both kinds of tree."""
        classic = classic_tree_for("p1009_k4")
        curve = ec_tree_for("p1009_k4")
        F = classic.field
        a, b = F.Random(8, seed=58), F.Random(7, seed=59)
        assert np.array_equal(multiply(a, b, classic), multiply(a, b, curve))
