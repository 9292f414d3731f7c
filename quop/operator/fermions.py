"""Fermionic operators, systems and open systems.
"""

from ..products import FermionProduct, HermitianFermionProduct
from .base import HermitianOperator, NoiseOperator, Operator
from .open_system import OpenSystem
from .system import HermitianSystem, ModeNumbers, NoiseSystem, System


class FermionOperator(Operator):
    """Sum of normal ordered fermionic products. Products of operators pick
    up the exchange signs of normal ordering:

        >>> a = FermionOperator()
        >>> a.add_operator_product("a0", 1.0)
        >>> c = FermionOperator()
        >>> c.add_operator_product("c0", 1.0)
        >>> (a * c).get("c0a0")
        (-1+0j)
    """

    key_type = FermionProduct


class FermionHamiltonian(HermitianOperator):
    key_type = HermitianFermionProduct
    general_type = FermionOperator


class FermionLindbladNoiseOperator(NoiseOperator):
    key_type = FermionProduct


class FermionSystem(ModeNumbers, System):
    operator_type = FermionOperator


class FermionHamiltonianSystem(ModeNumbers, HermitianSystem):
    operator_type = FermionHamiltonian
    general_type = FermionSystem


class FermionLindbladNoiseSystem(ModeNumbers, NoiseSystem):
    operator_type = FermionLindbladNoiseOperator


class FermionLindbladOpenSystem(ModeNumbers, OpenSystem):
    system_type = FermionHamiltonianSystem
    noise_type = FermionLindbladNoiseSystem
