"""Bosonic operators, systems and open systems.
"""

from ..products import BosonProduct, HermitianBosonProduct
from .base import HermitianOperator, NoiseOperator, Operator
from .open_system import OpenSystem
from .system import HermitianSystem, ModeNumbers, NoiseSystem, System


class BosonOperator(Operator):
    key_type = BosonProduct


class BosonHamiltonian(HermitianOperator):
    """Hermitian bosonic operator, each key ``O`` standing for
    ``c O + conj(c) O^dagger``.
    """

    key_type = HermitianBosonProduct
    general_type = BosonOperator


class BosonLindbladNoiseOperator(NoiseOperator):
    key_type = BosonProduct


class BosonSystem(ModeNumbers, System):
    """Bosonic operator on at most ``capacity`` modes, e.g.

        >>> sys = BosonSystem(2)
        >>> sys.add_operator_product("c0a1", 1.0)
        >>> sys.add_operator_product("c0a2", 1.0)
        Traceback (most recent call last):
        ...
        quop.errors.CapacityExceededError: ...
    """

    operator_type = BosonOperator


class BosonHamiltonianSystem(ModeNumbers, HermitianSystem):
    operator_type = BosonHamiltonian
    general_type = BosonSystem


class BosonLindbladNoiseSystem(ModeNumbers, NoiseSystem):
    operator_type = BosonLindbladNoiseOperator


class BosonLindbladOpenSystem(ModeNumbers, OpenSystem):
    system_type = BosonHamiltonianSystem
    noise_type = BosonLindbladNoiseSystem
