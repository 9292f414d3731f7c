"""
Symbolic algebra of spin, boson and fermion operators.
"""

# Configuration
from .core import (
    CURRENT_SCHEMA_VERSION, MINIMUM_SCHEMA_VERSION, SchemaVersion,
    get_thread_pool,
)

# Errors
from .errors import (
    QuopError, InvalidIndexError, ParseMismatchError,
    DuplicateFermionIndexError, CapacityExceededError,
    MismatchedSubsystemsError, NonHermitianError, CoefficientError,
    DecodeError, LegacyImportError,
)

# Products
from .products import (
    PauliProduct, DecoherenceProduct, PlusMinusProduct, BosonProduct,
    HermitianBosonProduct, FermionProduct, HermitianFermionProduct,
    MixedProduct, HermitianMixedProduct,
)

# Operators, systems and open systems
from .operator import (
    SpinOperator, SpinHamiltonian, PlusMinusOperator, DecoherenceOperator,
    SpinLindbladNoiseOperator, PlusMinusLindbladNoiseOperator, SpinSystem,
    SpinHamiltonianSystem, SpinLindbladNoiseSystem, SpinLindbladOpenSystem,
    BosonOperator, BosonHamiltonian, BosonLindbladNoiseOperator, BosonSystem,
    BosonHamiltonianSystem, BosonLindbladNoiseSystem, BosonLindbladOpenSystem,
    FermionOperator, FermionHamiltonian, FermionLindbladNoiseOperator,
    FermionSystem, FermionHamiltonianSystem, FermionLindbladNoiseSystem,
    FermionLindbladOpenSystem, MixedOperator, MixedHamiltonian,
    MixedLindbladNoiseOperator, MixedSystem, MixedHamiltonianSystem,
    MixedLindbladNoiseSystem, MixedLindbladOpenSystem,
)

# Mappings
from .mappings import (
    jordan_wigner_spin_to_fermion, jordan_wigner_fermion_to_spin,
)

# Serialization
from .serialize import (
    to_dict, from_dict, to_json, from_json, to_bytes, from_bytes,
)
from .legacy import from_json_generation_2

__all__ = [
    # Core ------------------------------------------------------------------ #
    'CURRENT_SCHEMA_VERSION', 'MINIMUM_SCHEMA_VERSION', 'SchemaVersion',
    'get_thread_pool',
    # Errors ---------------------------------------------------------------- #
    'QuopError', 'InvalidIndexError', 'ParseMismatchError',
    'DuplicateFermionIndexError', 'CapacityExceededError',
    'MismatchedSubsystemsError', 'NonHermitianError', 'CoefficientError',
    'DecodeError', 'LegacyImportError',
    # Products -------------------------------------------------------------- #
    'PauliProduct', 'DecoherenceProduct', 'PlusMinusProduct', 'BosonProduct',
    'HermitianBosonProduct', 'FermionProduct', 'HermitianFermionProduct',
    'MixedProduct', 'HermitianMixedProduct',
    # Spins ----------------------------------------------------------------- #
    'SpinOperator', 'SpinHamiltonian', 'PlusMinusOperator',
    'DecoherenceOperator', 'SpinLindbladNoiseOperator',
    'PlusMinusLindbladNoiseOperator', 'SpinSystem', 'SpinHamiltonianSystem',
    'SpinLindbladNoiseSystem', 'SpinLindbladOpenSystem',
    # Bosons ---------------------------------------------------------------- #
    'BosonOperator', 'BosonHamiltonian', 'BosonLindbladNoiseOperator',
    'BosonSystem', 'BosonHamiltonianSystem', 'BosonLindbladNoiseSystem',
    'BosonLindbladOpenSystem',
    # Fermions -------------------------------------------------------------- #
    'FermionOperator', 'FermionHamiltonian', 'FermionLindbladNoiseOperator',
    'FermionSystem', 'FermionHamiltonianSystem', 'FermionLindbladNoiseSystem',
    'FermionLindbladOpenSystem',
    # Mixed ----------------------------------------------------------------- #
    'MixedOperator', 'MixedHamiltonian', 'MixedLindbladNoiseOperator',
    'MixedSystem', 'MixedHamiltonianSystem', 'MixedLindbladNoiseSystem',
    'MixedLindbladOpenSystem',
    # Mappings -------------------------------------------------------------- #
    'jordan_wigner_spin_to_fermion', 'jordan_wigner_fermion_to_spin',
    # Serialization --------------------------------------------------------- #
    'to_dict', 'from_dict', 'to_json', 'from_json', 'to_bytes', 'from_bytes',
    'from_json_generation_2',
]

__version__ = "0.1.0"
