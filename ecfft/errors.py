"""Exceptions raised by tree construction and by the transforms."""


# --- Construction ---

class DomainError(ValueError):
    """The parameters do not describe a valid FFTree."""


class OrderNotDivisible(DomainError):
    """Classic mode: 2^k does not divide p - 1."""


class InvalidIsogenyChain(DomainError):
    """EC mode: wrong chain length, or a map is not exactly 2-to-1 on its layer."""


# --- Computation ---

class ComputeError(ArithmeticError):
    """An evaluate/interpolate/multiply call cannot be carried out."""


class InsufficientDomainSize(ComputeError):
    """The requested degree does not fit in the tree; rebuild with a larger k."""


class SingularSystem(ComputeError):
    """Two partner points coincide; the tree is internally inconsistent."""
