"""Canonical products of spin, bosonic and fermionic operators, the keys of
every operator container.
"""

from .base import (
    ModeProduct,
    Product,
    normal_order,
)
from .bosons import (
    BosonProduct,
    HermitianBosonProduct,
)
from .fermions import (
    FermionProduct,
    HermitianFermionProduct,
)
from .mixed import (
    HermitianMixedProduct,
    MixedProduct,
)
from .spins import (
    DecoherenceProduct,
    PauliProduct,
    PlusMinusProduct,
    SpinProduct,
    get_mat,
)

__all__ = (
    "BosonProduct",
    "DecoherenceProduct",
    "FermionProduct",
    "get_mat",
    "HermitianBosonProduct",
    "HermitianFermionProduct",
    "HermitianMixedProduct",
    "MixedProduct",
    "ModeProduct",
    "normal_order",
    "PauliProduct",
    "PlusMinusProduct",
    "Product",
    "SpinProduct",
)
