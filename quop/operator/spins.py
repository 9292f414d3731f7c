"""Spin flavored operators, systems and open systems.
"""

from .. import coefficients as cf
from ..products import DecoherenceProduct, PauliProduct, PlusMinusProduct
from .base import HermitianOperator, NoiseOperator, Operator
from .open_system import OpenSystem
from .system import HermitianSystem, NoiseSystem, SpinNumbers, System


def change_basis(op, target_type):
    """Rewrite the spin operator ``op`` as the operator class
    ``target_type``, changing the single site basis of every key.
    """
    op = op.to_operator()
    new = target_type()
    for key, value in op.items():
        for product, coeff in key.to_basis(target_type.key_type):
            new.add_operator_product(product, cf.multiply(value, coeff))
    return new


def change_noise_basis(op, target_type):
    """Rewrite the spin noise operator ``op`` as the noise class
    ``target_type``. The right product enters conjugated, as ``L_j^dagger``
    does in the dissipator.
    """
    new = target_type()
    kind = target_type.key_type
    for (left, right), value in op.items():
        for pl, cl in left.to_basis(kind):
            for pr, cr in right.to_basis(kind):
                coeff = cl * cr.conjugate()
                new.add_operator_product((pl, pr), cf.multiply(value, coeff))
    return new


class SpinOperator(Operator):
    """Sum of Pauli products, e.g. ``{"0Z1Z": 0.5, "0X": 1.0}``."""

    key_type = PauliProduct


class SpinHamiltonian(HermitianOperator):
    """Hermitian sum of Pauli products, every coefficient is real."""

    key_type = PauliProduct
    general_type = SpinOperator


class PlusMinusOperator(Operator):
    """Sum of products of ``+``, ``-`` and ``Z`` operators."""

    key_type = PlusMinusProduct

    @classmethod
    def from_spin_operator(cls, op):
        """Convert a :class:`SpinOperator` or :class:`SpinHamiltonian` using
        ``X = + + -``, ``Y = -i + + i -``.
        """
        return change_basis(op, cls)

    def to_spin_operator(self):
        """Convert into a :class:`SpinOperator` using
        ``+ = (X + iY) / 2``, ``- = (X - iY) / 2``.
        """
        return change_basis(self, SpinOperator)


class DecoherenceOperator(Operator):
    """Sum of products of the real operators ``X``, ``iY`` and ``Z``."""

    key_type = DecoherenceProduct

    @classmethod
    def from_spin_operator(cls, op):
        return change_basis(op, cls)

    def to_spin_operator(self):
        return change_basis(self, SpinOperator)


class SpinLindbladNoiseOperator(NoiseOperator):
    """Spin Lindblad noise keyed by pairs of decoherence products."""

    key_type = DecoherenceProduct


class PlusMinusLindbladNoiseOperator(NoiseOperator):
    """Spin Lindblad noise keyed by pairs of plus-minus products."""

    key_type = PlusMinusProduct

    @classmethod
    def from_spin_noise_operator(cls, op):
        return change_noise_basis(op, cls)

    def to_spin_noise_operator(self):
        return change_noise_basis(self, SpinLindbladNoiseOperator)


class SpinSystem(SpinNumbers, System):
    operator_type = SpinOperator


class SpinHamiltonianSystem(SpinNumbers, HermitianSystem):
    operator_type = SpinHamiltonian
    general_type = SpinSystem


class SpinLindbladNoiseSystem(SpinNumbers, NoiseSystem):
    operator_type = SpinLindbladNoiseOperator


class SpinLindbladOpenSystem(SpinNumbers, OpenSystem):
    """Spin Hamiltonian with spin Lindblad noise, e.g.

        >>> osys = SpinLindbladOpenSystem(2)
        >>> osys.system_add_operator_product("0Z", 1.0)
        >>> osys.noise_add_operator_product(("0X", "0X"), 0.1)
    """

    system_type = SpinHamiltonianSystem
    noise_type = SpinLindbladNoiseSystem
