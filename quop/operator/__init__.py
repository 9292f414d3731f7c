"""Operator containers: general and hermitian operators, Lindblad noise,
and the system and open system layers adding a capacity.
"""

from .base import (
    HermitianOperator,
    NoiseOperator,
    Operator,
)
from .bosons import (
    BosonHamiltonian,
    BosonHamiltonianSystem,
    BosonLindbladNoiseOperator,
    BosonLindbladNoiseSystem,
    BosonLindbladOpenSystem,
    BosonOperator,
    BosonSystem,
)
from .fermions import (
    FermionHamiltonian,
    FermionHamiltonianSystem,
    FermionLindbladNoiseOperator,
    FermionLindbladNoiseSystem,
    FermionLindbladOpenSystem,
    FermionOperator,
    FermionSystem,
)
from .mixed import (
    MixedHamiltonian,
    MixedHamiltonianSystem,
    MixedLindbladNoiseOperator,
    MixedLindbladNoiseSystem,
    MixedLindbladOpenSystem,
    MixedOperator,
    MixedSystem,
)
from .open_system import (
    OpenSystem,
)
from .spins import (
    DecoherenceOperator,
    PlusMinusLindbladNoiseOperator,
    PlusMinusOperator,
    SpinHamiltonian,
    SpinHamiltonianSystem,
    SpinLindbladNoiseOperator,
    SpinLindbladNoiseSystem,
    SpinLindbladOpenSystem,
    SpinOperator,
    SpinSystem,
)
from .system import (
    HermitianSystem,
    NoiseSystem,
    System,
)

__all__ = (
    "BosonHamiltonian",
    "BosonHamiltonianSystem",
    "BosonLindbladNoiseOperator",
    "BosonLindbladNoiseSystem",
    "BosonLindbladOpenSystem",
    "BosonOperator",
    "BosonSystem",
    "DecoherenceOperator",
    "FermionHamiltonian",
    "FermionHamiltonianSystem",
    "FermionLindbladNoiseOperator",
    "FermionLindbladNoiseSystem",
    "FermionLindbladOpenSystem",
    "FermionOperator",
    "FermionSystem",
    "HermitianOperator",
    "HermitianSystem",
    "MixedHamiltonian",
    "MixedHamiltonianSystem",
    "MixedLindbladNoiseOperator",
    "MixedLindbladNoiseSystem",
    "MixedLindbladOpenSystem",
    "MixedOperator",
    "MixedSystem",
    "NoiseOperator",
    "NoiseSystem",
    "OpenSystem",
    "Operator",
    "PlusMinusLindbladNoiseOperator",
    "PlusMinusOperator",
    "SpinHamiltonian",
    "SpinHamiltonianSystem",
    "SpinLindbladNoiseOperator",
    "SpinLindbladNoiseSystem",
    "SpinLindbladOpenSystem",
    "SpinOperator",
    "SpinSystem",
    "System",
)
