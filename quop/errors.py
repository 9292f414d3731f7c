"""Exceptions raised by quop. Each derives from ``QuopError`` and from the
builtin exception a caller would naturally catch.
"""

__all__ = (
    "QuopError",
    "InvalidIndexError",
    "ParseMismatchError",
    "DuplicateFermionIndexError",
    "CapacityExceededError",
    "MismatchedSubsystemsError",
    "NonHermitianError",
    "CoefficientError",
    "DecodeError",
    "LegacyImportError",
)


class QuopError(Exception):
    """Base exception for quop."""


class InvalidIndexError(QuopError, ValueError):
    """A raw product description is malformed: negative or non-integer
    index, unknown operator symbol or wrong type tag.
    """


class ParseMismatchError(InvalidIndexError):
    """Text does not match the grammar of the requested product type."""


class DuplicateFermionIndexError(InvalidIndexError):
    """A fermionic product was constructed directly with a repeated index in
    its creator or annihilator group. Note ``FermionProduct.create`` does not
    raise this, it returns the vanishing term instead.
    """


class CapacityExceededError(QuopError, ValueError):
    """A term references an index beyond the declared capacity of a
    system.
    """


class MismatchedSubsystemsError(QuopError, ValueError):
    """Mixed products or containers disagree on the number of spin, boson
    or fermion subsystems.
    """


class NonHermitianError(QuopError, ValueError):
    """A Hermitian container would stop representing a self-adjoint
    operator.
    """


class CoefficientError(QuopError, TypeError):
    """A value cannot be interpreted as an operator coefficient."""


class DecodeError(QuopError, ValueError):
    """A structured or binary payload could not be decoded."""


class LegacyImportError(QuopError, ValueError):
    """A newer-generation document could not be imported."""
