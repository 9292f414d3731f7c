"""Products of fermionic creation and annihilation operators.
"""

from ..errors import DuplicateFermionIndexError, InvalidIndexError
from .base import HermitianModeProduct, ModeProduct


class _StrictGroups:
    """Direct construction of fermionic products only accepts already
    canonical, strictly increasing index groups.
    """

    __slots__ = ()

    @classmethod
    def _canonical_group(cls, indices):
        if len(set(indices)) != len(indices):
            raise DuplicateFermionIndexError(
                f"Repeated index in fermionic operators {indices}, use "
                "`create` to obtain the vanishing term."
            )
        if list(indices) != sorted(indices):
            raise InvalidIndexError(
                f"Indices {indices} are not sorted, use `create` to sort them "
                "with the fermionic exchange sign."
            )
        return tuple(indices)


class FermionProduct(_StrictGroups, ModeProduct):
    """Normal ordered product of fermionic operators, e.g.
    ``FermionProduct([0, 1], [2])`` for ``c0 c1 a2``.

    The constructor requires strictly increasing groups, use
    :meth:`create` for raw input:

        >>> FermionProduct.create([1, 0], [2])
        (FermionProduct('c0c1a2'), -1)

        >>> FermionProduct.create([0, 0], [])
        (None, 0)
    """

    __slots__ = ()

    fermionic = True


class HermitianFermionProduct(_StrictGroups, HermitianModeProduct):
    """Fermionic product ``O`` standing for ``O + O^dagger`` in a
    Hamiltonian, only valid with ``creators <= annihilators``.
    """

    __slots__ = ()

    fermionic = True

    @classmethod
    def _plain_type(cls):
        return FermionProduct
