"""Operators, systems and open systems over mixed spin, bosonic and
fermionic subsystems.
"""

from ..products import HermitianMixedProduct, MixedProduct
from .base import HermitianOperator, MixedLayout, NoiseOperator, Operator
from .open_system import OpenSystem
from .system import (
    HermitianSystem,
    MixedCapacity,
    MixedNumbers,
    NoiseSystem,
    System,
)


class MixedOperator(MixedLayout, Operator):
    """Sum of mixed products with a fixed number of spin, bosonic and
    fermionic subsystems, e.g. ``MixedOperator(1, 1, 1)`` with keys such as
    ``"S0Z:Bc0a1:Fc0a0:"``.
    """

    key_type = MixedProduct


class MixedHamiltonian(MixedLayout, HermitianOperator):
    key_type = HermitianMixedProduct
    general_type = MixedOperator


class MixedLindbladNoiseOperator(MixedLayout, NoiseOperator):
    key_type = MixedProduct


class MixedSystem(MixedCapacity, System):
    """Mixed operator with one optional capacity per subsystem, e.g.
    ``MixedSystem([2], [None], [3])``.
    """

    operator_type = MixedOperator


class MixedHamiltonianSystem(MixedCapacity, HermitianSystem):
    operator_type = MixedHamiltonian
    general_type = MixedSystem


class MixedLindbladNoiseSystem(MixedCapacity, NoiseSystem):
    operator_type = MixedLindbladNoiseOperator


class MixedLindbladOpenSystem(MixedNumbers, OpenSystem):
    """Open system over mixed subsystems, constructed with one capacity list
    per kind of subsystem like :class:`MixedSystem`.
    """

    system_type = MixedHamiltonianSystem
    noise_type = MixedLindbladNoiseSystem
